from __future__ import annotations

import io
import json
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest
from werkzeug.datastructures import FileStorage

from hrms.auth.model import CurrentUser
from hrms.common.uploads import UploadStore
from hrms.core.enums import RequestStatus, Role
from hrms.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from hrms.travel_expenses.model import TravelExpense
from hrms.travel_expenses.service import TravelExpenseService, parse_items

ADMIN = CurrentUser(id=1, employee_id="EMP0001", role=Role.SUPER_ADMIN, mobile="9000000001")
HR = CurrentUser(id=2, employee_id="EMP0002", role=Role.HR, mobile="9000000002")
HEAD = CurrentUser(id=3, employee_id="EMP0003", role=Role.DEPT_HEAD, mobile="9000000003", department_id=10)
EMPLOYEE = CurrentUser(id=4, employee_id="EMP0004", role=Role.EMPLOYEE, mobile="9000000004", department_id=10)
OUTSIDER = CurrentUser(id=5, employee_id="EMP0005", role=Role.EMPLOYEE, mobile="9000000005", department_id=20)

DEPARTMENTS = {"EMP0001": None, "EMP0002": None, "EMP0003": 10, "EMP0004": 10, "EMP0005": 20}


class FakeEmployees:
    def get_by_employee_id(self, employee_id):
        return object() if employee_id in DEPARTMENTS else None


class FakeExpenses:
    def __init__(self):
        self.rows = {}
        self.last_scope = None

    def create(self, expense):
        expense_id = len(self.rows) + 1
        self.rows[expense_id] = TravelExpense(
            id=expense_id,
            employee_id=expense.employee_id,
            travel_date=expense.travel_date,
            destination=expense.destination,
            travel_purpose=expense.travel_purpose,
            total_amount=expense.total_amount,
            status=expense.status,
            submitted_to=expense.submitted_to,
            submitted_by=expense.submitted_by,
            department_id=DEPARTMENTS.get(expense.employee_id),
            approved_by=expense.approved_by,
            receipt_path=expense.receipt_path,
            items=expense.items,
        )
        return expense_id

    def get(self, expense_id):
        return self.rows.get(expense_id)

    def list_expenses(self, *, statuses, employee_id=None, department_id=None, submitted_to=None, page=1, limit=10):
        self.last_scope = {"employee_id": employee_id, "department_id": department_id, "submitted_to": submitted_to}
        rows = [r for r in self.rows.values() if r.status in statuses]
        return rows, len(rows)

    def update_pending(self, *, expense_id, fields, items=None):
        row = self.rows[expense_id]
        if row.status is not RequestStatus.PENDING:
            return False
        if items is not None:
            fields = dict(fields, items=tuple(items))
        self.rows[expense_id] = replace(row, **fields)
        return True

    def delete_pending(self, expense_id):
        row = self.rows.get(expense_id)
        if not row or row.status is not RequestStatus.PENDING:
            return False
        del self.rows[expense_id]
        return True

    def decide(self, *, expense_id, status, approved_by, comment):
        row = self.rows[expense_id]
        if row.status is not RequestStatus.PENDING:
            return False
        self.rows[expense_id] = replace(row, status=status, approved_by=approved_by, comment=comment)
        return True


def _payload(**overrides):
    payload = {
        "travel_date": "2026-03-10",
        "destination": "Pune",
        "travel_purpose": "Client visit",
        "total_amount": "1500.50",
        "expenses": [
            {"expense_date": "2026-03-10", "purpose": "Train", "amount": "1200"},
            {"expense_date": "2026-03-10", "purpose": "Meals", "amount": 300.5},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def repo():
    return FakeExpenses()


@pytest.fixture()
def service(repo, tmp_path):
    uploads = UploadStore(tmp_path, max_bytes=5 * 1024 * 1024)
    return TravelExpenseService(repo, FakeEmployees(), uploads, today=lambda: date(2026, 3, 16))


def test_parse_items_accepts_json_encoded_field():
    items = parse_items(json.dumps([{"expense_date": "2026-03-01", "purpose": "Taxi", "amount": "250"}]))
    assert items[0].amount == Decimal("250")
    with pytest.raises(ValidationError, match="non-empty"):
        parse_items([])
    with pytest.raises(ValidationError, match="Invalid expenses format"):
        parse_items("not json")
    with pytest.raises(ValidationError, match="positive"):
        parse_items([{"expense_date": "2026-03-01", "purpose": "Taxi", "amount": "0"}])


def test_employee_submission_is_pending_for_hr(service):
    expense = service.submit(actor=EMPLOYEE, payload=_payload())
    assert expense.status is RequestStatus.PENDING
    assert expense.submitted_to == "hr"
    assert expense.employee_id == "EMP0004"
    assert len(expense.items) == 2


def test_total_must_match_items(service):
    with pytest.raises(ValidationError, match="total_amount"):
        service.submit(actor=EMPLOYEE, payload=_payload(total_amount="1000"))


def test_future_travel_date_rejected(service):
    with pytest.raises(ValidationError, match="future"):
        service.submit(actor=EMPLOYEE, payload=_payload(travel_date="2026-04-01"))


def test_submitting_for_others(service):
    with pytest.raises(AuthorizationError, match="Department heads"):
        service.submit(actor=HEAD, payload=_payload(employee_id="EMP0004"))
    with pytest.raises(AuthorizationError):
        service.submit(actor=EMPLOYEE, payload=_payload(employee_id="EMP0005"))
    with pytest.raises(NotFoundError):
        service.submit(actor=HR, payload=_payload(employee_id="EMP9999"))

    expense = service.submit(actor=HR, payload=_payload(employee_id="EMP0004"))
    assert expense.status is RequestStatus.APPROVED
    assert expense.approved_by == "EMP0002"
    assert expense.submitted_by == "EMP0002"


def test_receipt_is_stored_and_resolved(service):
    receipt = FileStorage(stream=io.BytesIO(b"%PDF-1.4 receipt"), filename="ticket.pdf")
    expense = service.submit(actor=EMPLOYEE, payload=_payload(), receipt=receipt)
    path = service.receipt_path(actor=EMPLOYEE, expense_id=expense.id)
    assert path.read_bytes() == b"%PDF-1.4 receipt"


def test_receipt_extension_is_checked(service):
    receipt = FileStorage(stream=io.BytesIO(b"MZ"), filename="ticket.exe")
    with pytest.raises(ValidationError, match="Invalid file type"):
        service.submit(actor=EMPLOYEE, payload=_payload(), receipt=receipt)


def test_missing_receipt(service):
    expense = service.submit(actor=EMPLOYEE, payload=_payload())
    with pytest.raises(NotFoundError, match="No receipt"):
        service.receipt_path(actor=EMPLOYEE, expense_id=expense.id)


def test_visibility(service):
    expense = service.submit(actor=EMPLOYEE, payload=_payload())
    assert service.get(actor=HEAD, expense_id=expense.id).id == expense.id
    with pytest.raises(AuthorizationError):
        service.get(actor=OUTSIDER, expense_id=expense.id)


def test_owner_updates_pending_submission(service):
    expense = service.submit(actor=EMPLOYEE, payload=_payload())
    updated = service.update(
        actor=EMPLOYEE,
        expense_id=expense.id,
        payload={"destination": "Mumbai", "total_amount": "400", "expenses": [{"expense_date": "2026-03-10", "purpose": "Cab", "amount": "400"}]},
    )
    assert updated.destination == "Mumbai"
    assert updated.total_amount == Decimal("400")
    assert len(updated.items) == 1

    with pytest.raises(ValidationError, match="total_amount"):
        service.update(actor=EMPLOYEE, expense_id=expense.id, payload={"total_amount": "999"})
    with pytest.raises(AuthorizationError):
        service.update(actor=OUTSIDER, expense_id=expense.id, payload={"destination": "Goa"})


def test_update_rejects_future_travel_date(service, repo):
    expense = service.submit(actor=EMPLOYEE, payload=_payload())
    with pytest.raises(ValidationError, match="cannot be in the future"):
        service.update(actor=EMPLOYEE, expense_id=expense.id, payload={"travel_date": "2026-03-17"})
    assert repo.rows[expense.id].travel_date == date(2026, 3, 10)


def _receipt(name="ticket.pdf", body=b"%PDF-1.4 receipt"):
    return FileStorage(stream=io.BytesIO(body), filename=name)


def _stored_receipts(tmp_path):
    folder = tmp_path / "receipts"
    return sorted(p.name for p in folder.iterdir()) if folder.exists() else []


class FailingExpenses(FakeExpenses):
    def create(self, expense):
        raise RuntimeError("connection lost")


class RacedExpenses(FakeExpenses):
    """A decision lands between the pending check and the write."""

    def update_pending(self, *, expense_id, fields, items=None):
        return False


def test_failed_submit_leaves_no_orphan_receipt(tmp_path):
    uploads = UploadStore(tmp_path, max_bytes=1024)
    service = TravelExpenseService(FailingExpenses(), FakeEmployees(), uploads, today=lambda: date(2026, 3, 16))
    with pytest.raises(RuntimeError):
        service.submit(actor=EMPLOYEE, payload=_payload(), receipt=_receipt())
    assert _stored_receipts(tmp_path) == []


def test_invalid_submit_never_writes_receipt(service, tmp_path):
    with pytest.raises(ValidationError, match="total_amount"):
        service.submit(actor=EMPLOYEE, payload=_payload(total_amount="10"), receipt=_receipt())
    assert _stored_receipts(tmp_path) == []


def test_failed_update_discards_new_receipt(tmp_path):
    uploads = UploadStore(tmp_path, max_bytes=1024)
    service = TravelExpenseService(RacedExpenses(), FakeEmployees(), uploads, today=lambda: date(2026, 3, 16))
    expense = service.submit(actor=EMPLOYEE, payload=_payload(), receipt=_receipt())
    original = _stored_receipts(tmp_path)

    with pytest.raises(ValidationError, match="Only pending"):
        service.update(actor=EMPLOYEE, expense_id=expense.id, payload={}, receipt=_receipt("new.pdf"))
    assert _stored_receipts(tmp_path) == original


def test_replacing_and_deleting_clean_up_receipts(service, tmp_path):
    expense = service.submit(actor=EMPLOYEE, payload=_payload(), receipt=_receipt())
    updated = service.update(actor=EMPLOYEE, expense_id=expense.id, payload={}, receipt=_receipt("new.png", b"png"))
    assert _stored_receipts(tmp_path) == [updated.receipt_path.rsplit("/", 1)[-1]]
    assert updated.receipt_path.endswith(".png")

    service.delete(actor=EMPLOYEE, expense_id=expense.id)
    assert _stored_receipts(tmp_path) == []


def test_only_pending_can_be_deleted(service):
    expense = service.submit(actor=EMPLOYEE, payload=_payload())
    service.decide(actor=HR, expense_id=expense.id, status="Rejected", comment="  missing bills ")
    with pytest.raises(ValidationError, match="pending"):
        service.delete(actor=EMPLOYEE, expense_id=expense.id)

    other = service.submit(actor=EMPLOYEE, payload=_payload())
    service.delete(actor=EMPLOYEE, expense_id=other.id)
    with pytest.raises(NotFoundError):
        service.get(actor=EMPLOYEE, expense_id=other.id)


def test_decisions(service):
    expense = service.submit(actor=EMPLOYEE, payload=_payload())
    with pytest.raises(AuthorizationError, match="not in your department"):
        service.decide(actor=CurrentUser(id=6, employee_id="EMP0006", role=Role.DEPT_HEAD, mobile="1", department_id=20), expense_id=expense.id, status="Approved")

    decided = service.decide(actor=HEAD, expense_id=expense.id, status="Approved", comment="ok")
    assert decided.status is RequestStatus.APPROVED
    assert decided.comment == "ok"

    with pytest.raises(ValidationError, match="not in Pending"):
        service.decide(actor=ADMIN, expense_id=expense.id, status="Rejected")


def test_dept_head_cannot_decide_own(service):
    expense = service.submit(actor=HEAD, payload=_payload())
    with pytest.raises(AuthorizationError, match="your own request"):
        service.decide(actor=HEAD, expense_id=expense.id, status="Approved")


def test_listing_scopes(service, repo):
    service.list_pending(actor=HR)
    assert repo.last_scope["submitted_to"] == "hr"
    service.list_pending(actor=HEAD)
    assert repo.last_scope["department_id"] == 10
    service.list_pending(actor=EMPLOYEE)
    assert repo.last_scope["employee_id"] == "EMP0004"
    service.history(actor=HR)
    assert repo.last_scope == {"employee_id": None, "department_id": None, "submitted_to": None}
