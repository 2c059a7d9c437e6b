from __future__ import annotations

from typing import TYPE_CHECKING

from .enums import RequestStatus, Role
from .exceptions import AuthorizationError, ValidationError

if TYPE_CHECKING:
    from ..auth.model import CurrentUser


def ensure_can_decide(actor: "CurrentUser", *, owner_employee_id: str, recipient: str) -> None:
    """Only the recipient role (or any super admin) may decide, never on one's own request."""
    if actor.employee_id == owner_employee_id:
        raise AuthorizationError("You cannot approve or reject your own request")
    if actor.role is Role.SUPER_ADMIN:
        return
    if actor.role.value != recipient:
        raise AuthorizationError("You are not the approver for this request")


def parse_decision(value) -> RequestStatus:
    try:
        status = RequestStatus(value)
    except ValueError:
        raise ValidationError("status must be Approved or Rejected") from None
    if status is RequestStatus.PENDING:
        raise ValidationError("status must be Approved or Rejected")
    return status
