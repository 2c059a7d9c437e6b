from __future__ import annotations

import pytest

from hrms.common.validators import parse_flag, require_range
from hrms.core.exceptions import ValidationError


def test_require_range_bounds():
    assert require_range("7.5", "score", 0, 10) == 7.5
    assert require_range(0, "score", 0, 10) == 0.0
    with pytest.raises(ValidationError, match="score must be between 0 and 10"):
        require_range(10.01, "score", 0, 10)
    with pytest.raises(ValidationError, match="score must be a number"):
        require_range("ten", "score", 0, 10)
    with pytest.raises(ValidationError, match="score must be a number"):
        require_range(None, "score", 0, 10)


@pytest.mark.parametrize("value", ["nan", "NaN", "inf", "-inf", float("nan"), float("inf")])
def test_require_range_rejects_non_finite(value):
    with pytest.raises(ValidationError, match="score must be a finite number"):
        require_range(value, "score", 0, 10)


@pytest.mark.parametrize(
    "value, expected",
    [(True, True), ("true", True), (" Yes ", True), ("1", True), ("on", True), (1, True),
     (False, False), ("false", False), ("0", False), ("no", False), ("", False), (None, False), (0, False)],
)
def test_parse_flag(value, expected):
    assert parse_flag(value) is expected
