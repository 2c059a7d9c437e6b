from __future__ import annotations

from flask import Flask

from ..container import Container
from ..core.enums import Role
from ..web.responses import json_body, ok, query
from ..web.security import current_user, roles_required, token_required


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    @token_required
    def mark_attendance():
        body = json_body()
        record = service.mark_attendance(
            actor=current_user(),
            day=body.get("date"),
            login_time=body.get("login_time"),
            logout_time=body.get("logout_time"),
            status=body.get("status"),
        )
        return ok(record.to_dict(), "Attendance marked successfully", 201)

    @app.route("/api/attendance/me", methods=["GET"], endpoint="my_attendance")
    @token_required
    def my_attendance():
        rows = service.list_my_attendance(actor=current_user(), month=query("month"))
        return ok([r.to_dict() for r in rows])

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def list_attendance():
        rows = service.list_attendance(
            actor=current_user(),
            day=query("date"),
            employee_id=query("employee_id"),
            approval_status=query("approval_status"),
        )
        return ok([r.to_dict() for r in rows])

    @app.route("/api/attendance/<int:record_id>/status", methods=["PUT"], endpoint="decide_attendance")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def decide_attendance(record_id: int):
        record = service.decide_attendance(actor=current_user(), record_id=record_id, status=json_body().get("status"))
        return ok(record.to_dict(), f"Attendance {record.approval_status.value.lower()}")
