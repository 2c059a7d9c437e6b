from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..web.responses import json_body, ok, paged, query
from ..web.security import current_user, roles_required, token_required


def register(app: Flask, container: Container) -> None:
    employees = container.employee_service
    details = container.details_service

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def create_employee():
        created = employees.create_employee(actor=current_user(), payload=json_body())
        data = created.employee.to_dict()
        data["temporary_password"] = created.temporary_password
        return ok(data, "Employee created successfully", 201)

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @roles_required(Role.SUPER_ADMIN, Role.HR, Role.DEPT_HEAD)
    def list_employees():
        rows, total, page, limit = employees.list_employees(
            actor=current_user(),
            role=query("role"),
            department_id=query("department_id"),
            status=query("status"),
            page=query("page", "1"),
            limit=query("limit"),
        )
        return paged(rows, total, page, limit, "Employees fetched successfully")

    @app.route("/api/employees/<employee_id>", methods=["GET"], endpoint="get_employee")
    @token_required
    def get_employee(employee_id: str):
        return ok(employees.get_employee(actor=current_user(), employee_id=employee_id).to_dict())

    @app.route("/api/employees/<employee_id>", methods=["PUT"], endpoint="update_employee")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def update_employee(employee_id: str):
        employee = employees.update_employee(actor=current_user(), employee_id=employee_id, payload=json_body())
        return ok(employee.to_dict(), "Employee updated successfully")

    @app.route("/api/employees/<employee_id>/terminate", methods=["POST"], endpoint="terminate_employee")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def terminate_employee(employee_id: str):
        body = json_body()
        employee = employees.terminate_employee(
            actor=current_user(),
            employee_id=employee_id,
            reason=body.get("reason"),
            termination_date=body.get("termination_date"),
        )
        return ok(employee.to_dict(), "Employee terminated successfully")

    @app.route("/api/profile", methods=["GET"], endpoint="profile")
    @token_required
    def profile():
        return ok(employees.get_profile(actor=current_user()).to_dict())

    # Onboarding details
    sections = {
        "personal-details": (details.create_personal, details.get_personal, details.update_personal),
        "bank-details": (details.create_bank, details.get_bank, details.update_bank),
        "education-details": (details.create_education, details.get_education, details.update_education),
    }

    @app.route("/api/employee-details/<section>", methods=["POST"], endpoint="create_details")
    @token_required
    def create_details(section: str):
        create, _, _ = _section(sections, section)
        return ok(create(actor=current_user(), data=json_body()).to_dict(), "Details saved successfully", 201)

    @app.route("/api/employee-details/<section>", methods=["GET"], endpoint="get_details")
    @app.route("/api/employee-details/<section>/<employee_id>", methods=["GET"], endpoint="get_details_for")
    @token_required
    def get_details(section: str, employee_id: Optional[str] = None):
        _, get, _ = _section(sections, section)
        return ok(get(actor=current_user(), employee_id=employee_id).to_dict())

    @app.route("/api/employee-details/<section>", methods=["PUT"], endpoint="update_details")
    @token_required
    def update_details(section: str):
        _, _, update = _section(sections, section)
        return ok(update(actor=current_user(), data=json_body()).to_dict(), "Details updated successfully")

    @app.route("/api/employee-details/documents", methods=["POST"], endpoint="upload_document")
    @token_required
    def upload_document():
        file = request.files.get("file")
        if file is None:
            raise ValidationError("file is required")
        document = details.upload_document(
            actor=current_user(),
            doc_type=request.form.get("doc_type"),
            file=file,
            employee_id=request.form.get("employee_id"),
        )
        return ok(document.to_dict(), "Document uploaded successfully", 201)

    @app.route("/api/employee-details/photo", methods=["POST"], endpoint="upload_photo")
    @token_required
    def upload_photo():
        file = request.files.get("photo")
        if file is None:
            raise ValidationError("photo is required")
        path = details.upload_photo(actor=current_user(), file=file, employee_id=request.form.get("employee_id"))
        return ok({"photo_path": path}, "Photo uploaded successfully", 201)

    @app.route("/api/employee-details/progress", methods=["GET"], endpoint="details_progress")
    @token_required
    def details_progress():
        return ok(details.progress(actor=current_user(), employee_id=query("employee_id")))


def _section(sections: dict, name: str):
    try:
        return sections[name]
    except KeyError:
        raise ValidationError(f"Unknown details section: {name}") from None
