from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import today_local
from ..container import Container
from ..core.enums import Role
from ..web.responses import json_body, ok, query
from ..web.security import current_user, roles_required, token_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/departments", methods=["GET"], endpoint="list_departments")
    @token_required
    def list_departments():
        return ok([d.to_dict() for d in container.department_service.list_departments()])

    @app.route("/api/departments", methods=["POST"], endpoint="create_department")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def create_department():
        department = container.department_service.create_department(
            actor=current_user(), name=json_body().get("department_name")
        )
        return ok(department.to_dict(), "Department created successfully", 201)

    @app.route("/api/holidays", methods=["GET"], endpoint="list_holidays")
    @token_required
    def list_holidays():
        year = query("year") or str(today_local().year)
        if not year.isdigit():
            year = str(today_local().year)
        return ok([h.to_dict() for h in container.holiday_service.list_holidays(year=int(year))])

    @app.route("/api/holidays", methods=["POST"], endpoint="create_holiday")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def create_holiday():
        body = json_body()
        holiday = container.holiday_service.create_holiday(
            actor=current_user(),
            holiday_date=body.get("holiday_date"),
            description=body.get("description"),
            type=body.get("type") or "Public",
        )
        return ok(holiday.to_dict(), "Holiday created successfully", 201)

    @app.route("/api/holidays/<int:holiday_id>", methods=["PUT"], endpoint="update_holiday")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def update_holiday(holiday_id: int):
        body = json_body()
        holiday = container.holiday_service.update_holiday(
            actor=current_user(),
            holiday_id=holiday_id,
            holiday_date=body.get("holiday_date"),
            description=body.get("description"),
            type=body.get("type"),
        )
        return ok(holiday.to_dict(), "Holiday updated successfully")

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="delete_holiday")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def delete_holiday(holiday_id: int):
        container.holiday_service.delete_holiday(actor=current_user(), holiday_id=holiday_id)
        return ok(message="Holiday deleted successfully")

    @app.route("/api/company", methods=["GET"], endpoint="company")
    @token_required
    def company():
        return ok(container.company_service.get_company().to_dict())
