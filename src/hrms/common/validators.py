from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_enum(value: Any, enum_cls: Type[E], field_name: str) -> E:
    try:
        return enum_cls(value)  # type: ignore[call-arg]
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)  # type: ignore[attr-defined]
        raise ValidationError(f"{field_name} must be one of: {allowed}") from None


def require_choice(value: Any, choices: Iterable[str], field_name: str) -> str:
    choices = tuple(choices)
    if value not in choices:
        raise ValidationError(f"{field_name} must be one of: {', '.join(choices)}")
    return value


def parse_flag(value: Any) -> bool:
    """Checkbox-style flag: form strings like "false" or "0" are False."""
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def parse_money(value: Any, field_name: str, *, allow_zero: bool = True) -> Decimal:
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
    if not amount.is_finite() or amount < 0 or (not allow_zero and amount == 0):
        qualifier = "non-negative" if allow_zero else "positive"
        raise ValidationError(f"{field_name} must be a {qualifier} number")
    return amount


def require_range(value: Any, field_name: str, low: float, high: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number")
    if number < low or number > high:
        raise ValidationError(f"{field_name} must be between {low:g} and {high:g}")
    return number


def page_params(page: Any, limit: Any, *, default_limit: int, max_limit: int) -> tuple[int, int]:
    try:
        page_i = max(int(page or 1), 1)
        limit_i = int(limit or default_limit)
    except (TypeError, ValueError):
        raise ValidationError("page and limit must be integers") from None
    return page_i, min(max(limit_i, 1), max_limit)
