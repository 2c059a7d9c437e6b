from __future__ import annotations

import io

from flask import Flask, send_file

from ..container import Container
from ..core.enums import Role
from ..web.responses import json_body, ok, paged, query
from ..web.security import current_user, roles_required, token_required


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payroll", methods=["GET"], endpoint="list_payroll")
    @token_required
    def list_payroll():
        rows, total, page, limit = service.list_payroll(
            actor=current_user(),
            month=query("month"),
            employee_id=query("employee_id"),
            page=query("page", "1"),
            limit=query("limit"),
        )
        return paged(rows, total, page, limit, "Payroll fetched successfully")

    @app.route("/api/payroll", methods=["POST"], endpoint="create_payroll")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def create_payroll():
        record = service.create_manual(actor=current_user(), payload=json_body())
        return ok(record.to_dict(), "Payroll created successfully", 201)

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="generate_payroll")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def generate_payroll():
        body = json_body()
        if body.get("employee_id"):
            record = service.generate_for_employee(
                actor=current_user(), employee_id=body.get("employee_id"), month=body.get("month")
            )
            return ok(record.to_dict(), "Payroll generated successfully", 201)
        report = service.generate_for_month(actor=current_user(), month=body.get("month"))
        return ok(report.to_dict(), "Payroll generated successfully", 201)

    @app.route("/api/payroll/summary/<employee_id>/<month>", methods=["GET"], endpoint="payroll_summary")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def payroll_summary(employee_id: str, month: str):
        return ok(service.month_summary(employee_id=employee_id, month=month).to_dict())

    @app.route("/api/payroll/report", methods=["GET"], endpoint="payroll_report")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def payroll_report():
        month = query("month")
        pdf = service.report_pdf(
            actor=current_user(),
            company=container.company_service.get_company(),
            month=month,
            employee_id=query("employee_id"),
        )
        return send_file(
            io.BytesIO(pdf),
            as_attachment=True,
            download_name=f"payroll_report_{month or 'current'}.pdf",
            mimetype="application/pdf",
        )
