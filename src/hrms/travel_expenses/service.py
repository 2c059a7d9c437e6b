from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from werkzeug.datastructures import FileStorage

from ..auth.model import CurrentUser
from ..common.datetime_utils import require_iso_date, today_local
from ..common.logging import get_logger
from ..common.uploads import UploadStore
from ..common.validators import page_params, parse_money, require_non_empty
from ..core.approvals import ensure_can_decide, parse_decision
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, RECEIPT_EXTENSIONS
from ..core.enums import RequestStatus, Role, recipient_for
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import ExpenseItem, NewTravelExpense, TravelExpense
from .repository import TravelExpenseRepository

logger = get_logger(__name__)

TOLERANCE = Decimal("0.01")
HISTORY_STATUSES = (RequestStatus.APPROVED, RequestStatus.REJECTED)


def parse_items(raw: Any) -> Tuple[ExpenseItem, ...]:
    """Expense lines from a JSON body list or a JSON-encoded multipart field."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            raise ValidationError("Invalid expenses format") from None
    if not isinstance(raw, list) or not raw:
        raise ValidationError("Expenses must be a non-empty array")

    items = []
    for idx, entry in enumerate(raw, start=1):
        if not isinstance(entry, Mapping):
            raise ValidationError(f"Expense item {idx} is invalid")
        items.append(
            ExpenseItem(
                expense_date=require_iso_date(entry.get("expense_date"), f"expenses[{idx}].expense_date"),
                purpose=require_non_empty(entry.get("purpose"), f"expenses[{idx}].purpose"),
                amount=parse_money(entry.get("amount"), f"expenses[{idx}].amount", allow_zero=False),
            )
        )
    return tuple(items)


def _check_total(total: Decimal, items: Sequence[ExpenseItem]) -> None:
    if abs(total - sum((i.amount for i in items), Decimal("0"))) > TOLERANCE:
        raise ValidationError("total_amount must equal the sum of expense amounts")


class TravelExpenseService:
    def __init__(
        self,
        expenses: TravelExpenseRepository,
        employees: EmployeeRepository,
        uploads: UploadStore,
        *,
        today: Callable[[], date] = today_local,
    ):
        self._expenses = expenses
        self._employees = employees
        self._uploads = uploads
        self._today = today

    def _get(self, expense_id: int) -> TravelExpense:
        expense = self._expenses.get(int(expense_id))
        if not expense:
            raise NotFoundError("Travel expense not found")
        return expense

    def _save_receipt(self, receipt: Optional[FileStorage]) -> Optional[str]:
        if receipt is None or not receipt.filename:
            return None
        return self._uploads.save(receipt, subdir="receipts", allowed=RECEIPT_EXTENSIONS).path

    def _ensure_can_view(self, actor: CurrentUser, expense: TravelExpense) -> None:
        if actor.is_approver or expense.employee_id == actor.employee_id:
            return
        if actor.role is Role.DEPT_HEAD and actor.department_id and actor.department_id == expense.department_id:
            return
        raise AuthorizationError("Unauthorized access")

    def submit(
        self,
        *,
        actor: CurrentUser,
        payload: Mapping[str, Any],
        receipt: Optional[FileStorage] = None,
    ) -> TravelExpense:
        employee_id = (payload.get("employee_id") or "").strip() or actor.employee_id
        if employee_id != actor.employee_id:
            if actor.role is Role.DEPT_HEAD:
                raise AuthorizationError("Department heads can only submit travel expenses for themselves")
            if not actor.is_approver:
                raise AuthorizationError("Unauthorized to submit for this employee")
        if not self._employees.get_by_employee_id(employee_id):
            raise NotFoundError("Employee not found")

        travel_date = require_iso_date(payload.get("travel_date"), "travel_date")
        if travel_date > self._today():
            raise ValidationError("travel_date cannot be in the future")
        destination = require_non_empty(payload.get("destination"), "destination")
        purpose = require_non_empty(payload.get("travel_purpose"), "travel_purpose")
        total = parse_money(payload.get("total_amount"), "total_amount", allow_zero=False)
        items = parse_items(payload.get("expenses"))
        _check_total(total, items)

        auto_approved = actor.is_approver
        receipt_path = self._save_receipt(receipt)
        try:
            expense_id = self._expenses.create(
                NewTravelExpense(
                    employee_id=employee_id,
                    travel_date=travel_date,
                    destination=destination,
                    travel_purpose=purpose,
                    total_amount=total,
                    status=RequestStatus.APPROVED if auto_approved else RequestStatus.PENDING,
                    submitted_to=recipient_for(actor.role).value,
                    submitted_by=actor.employee_id,
                    approved_by=actor.employee_id if auto_approved else None,
                    receipt_path=receipt_path,
                    items=items,
                )
            )
        except Exception:
            self._uploads.discard(receipt_path)
            raise
        logger.info(
            "travel expense %s submitted by %s for %s%s",
            expense_id,
            actor.employee_id,
            employee_id,
            " (auto-approved)" if auto_approved else "",
        )
        return self._get(expense_id)

    def list_pending(
        self,
        *,
        actor: CurrentUser,
        page: Any = 1,
        limit: Any = DEFAULT_PAGE_SIZE,
    ) -> Tuple[Sequence[TravelExpense], int, int, int]:
        return self._list(actor=actor, statuses=(RequestStatus.PENDING,), page=page, limit=limit, queue=True)

    def history(
        self,
        *,
        actor: CurrentUser,
        page: Any = 1,
        limit: Any = DEFAULT_PAGE_SIZE,
    ) -> Tuple[Sequence[TravelExpense], int, int, int]:
        return self._list(actor=actor, statuses=HISTORY_STATUSES, page=page, limit=limit, queue=False)

    def _list(self, *, actor: CurrentUser, statuses, page, limit, queue: bool):
        page_i, limit_i = page_params(page, limit, default_limit=DEFAULT_PAGE_SIZE, max_limit=MAX_PAGE_SIZE)
        scope: dict = {}
        if actor.role is Role.HR and queue:
            scope["submitted_to"] = Role.HR.value
        elif actor.role is Role.DEPT_HEAD and queue:
            if not actor.department_id:
                scope["employee_id"] = actor.employee_id
            else:
                scope["department_id"] = actor.department_id
        elif not actor.is_approver:
            scope["employee_id"] = actor.employee_id
        rows, total = self._expenses.list_expenses(statuses=statuses, page=page_i, limit=limit_i, **scope)
        return rows, total, page_i, limit_i

    def get(self, *, actor: CurrentUser, expense_id: int) -> TravelExpense:
        expense = self._get(expense_id)
        self._ensure_can_view(actor, expense)
        return expense

    def update(
        self,
        *,
        actor: CurrentUser,
        expense_id: int,
        payload: Mapping[str, Any],
        receipt: Optional[FileStorage] = None,
    ) -> TravelExpense:
        expense = self._get(expense_id)
        if expense.submitted_by != actor.employee_id:
            raise AuthorizationError("You can only edit your own submissions")
        if expense.status is not RequestStatus.PENDING:
            raise ValidationError("Only pending submissions can be edited")

        fields: dict = {}
        if "travel_date" in payload:
            fields["travel_date"] = require_iso_date(payload.get("travel_date"), "travel_date")
            if fields["travel_date"] > self._today():
                raise ValidationError("travel_date cannot be in the future")
        for key in ("destination", "travel_purpose"):
            if key in payload:
                fields[key] = require_non_empty(payload.get(key), key)
        items = parse_items(payload["expenses"]) if "expenses" in payload else None
        total = (
            parse_money(payload.get("total_amount"), "total_amount", allow_zero=False)
            if "total_amount" in payload
            else expense.total_amount
        )
        _check_total(total, items if items is not None else expense.items)
        fields["total_amount"] = total
        new_receipt = self._save_receipt(receipt)
        if new_receipt:
            fields["receipt_path"] = new_receipt
        try:
            updated = self._expenses.update_pending(expense_id=expense.id, fields=fields, items=items)
        except Exception:
            self._uploads.discard(new_receipt)
            raise
        if not updated:
            self._uploads.discard(new_receipt)
            raise ValidationError("Only pending submissions can be edited")
        if new_receipt and expense.receipt_path:
            self._uploads.discard(expense.receipt_path)
        return self._get(expense.id)

    def delete(self, *, actor: CurrentUser, expense_id: int) -> None:
        expense = self._get(expense_id)
        if expense.submitted_by != actor.employee_id:
            raise AuthorizationError("You can only delete your own submissions")
        if expense.status is not RequestStatus.PENDING or not self._expenses.delete_pending(expense.id):
            raise ValidationError("Only pending submissions can be deleted")
        self._uploads.discard(expense.receipt_path)
        logger.info("travel expense %s deleted by %s", expense.id, actor.employee_id)

    def decide(self, *, actor: CurrentUser, expense_id: int, status: str, comment: str = "") -> TravelExpense:
        decision = parse_decision(status)
        expense = self._get(expense_id)
        if actor.role is Role.DEPT_HEAD:
            if expense.employee_id == actor.employee_id:
                raise AuthorizationError("You cannot approve or reject your own request")
            if not actor.department_id or actor.department_id != expense.department_id:
                raise AuthorizationError("Access denied: Submission not in your department")
        else:
            ensure_can_decide(actor, owner_employee_id=expense.employee_id, recipient=expense.submitted_to)
        if expense.status is not RequestStatus.PENDING:
            raise ValidationError("Submission is not in Pending status")
        note = (comment or "").strip() or None
        if not self._expenses.decide(expense_id=expense.id, status=decision, approved_by=actor.employee_id, comment=note):
            raise ValidationError("Submission is not in Pending status")
        logger.info("travel expense %s %s by %s", expense.id, decision.value.lower(), actor.employee_id)
        return self._get(expense.id)

    def receipt_path(self, *, actor: CurrentUser, expense_id: int) -> Path:
        expense = self._get(expense_id)
        self._ensure_can_view(actor, expense)
        if not expense.receipt_path:
            raise NotFoundError("No receipt uploaded for this travel expense")
        path = self._uploads.resolve(expense.receipt_path)
        if not path.is_file():
            raise NotFoundError("Receipt file not found on server")
        return path
