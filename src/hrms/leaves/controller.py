from __future__ import annotations

from flask import Flask

from ..container import Container
from ..core.enums import Role
from ..web.responses import json_body, ok, query
from ..web.security import current_user, roles_required, token_required


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="apply_leave")
    @token_required
    def apply_leave():
        body = json_body()
        leave = service.apply_leave(
            actor=current_user(),
            leave_type=body.get("leave_type"),
            start_date=body.get("start_date"),
            end_date=body.get("end_date"),
            reason=body.get("reason"),
            half_day=body.get("half_day", body.get("is_half_day")),
        )
        return ok(leave.to_dict(), "Leave applied successfully", 201)

    @app.route("/api/leaves", methods=["GET"], endpoint="list_leaves")
    @token_required
    def list_leaves():
        rows = service.list_leaves(
            actor=current_user(),
            status=query("status"),
            employee_id=query("employee_id"),
            start_date=query("start_date"),
            end_date=query("end_date"),
            mine=query("mine") in ("1", "true"),
        )
        return ok([r.to_dict() for r in rows])

    @app.route("/api/leaves/<int:leave_id>/status", methods=["PUT"], endpoint="decide_leave")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def decide_leave(leave_id: int):
        body = json_body()
        leave = service.decide_leave(
            actor=current_user(),
            leave_id=leave_id,
            status=body.get("status"),
            comment=body.get("comment") or "",
        )
        return ok(leave.to_dict(), f"Leave {leave.status.value.lower()}")

    @app.route("/api/leaves/<int:leave_id>", methods=["DELETE"], endpoint="cancel_leave")
    @token_required
    def cancel_leave(leave_id: int):
        service.cancel_leave(actor=current_user(), leave_id=leave_id)
        return ok(message="Leave cancelled successfully")

    @app.route("/api/leaves/balances", methods=["GET"], endpoint="leave_balances")
    @token_required
    def leave_balances():
        year = query("year")
        rows = service.get_balances(
            actor=current_user(),
            employee_id=query("employee_id"),
            year=int(year) if year and year.isdigit() else None,
        )
        return ok([b.to_dict() for b in rows])

    @app.route("/api/leaves/allocate", methods=["POST"], endpoint="allocate_leaves")
    @roles_required(Role.SUPER_ADMIN)
    def allocate_leaves():
        result = container.job_service.trigger_allocation(actor=current_user(), period=json_body().get("month"))
        message = "Monthly leave allocation completed" if result.ran else "Leave allocation already done for this month"
        return ok(result.to_dict(), message)
