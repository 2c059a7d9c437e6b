from __future__ import annotations

import io

from flask import Flask, send_file

from ..container import Container
from ..web.responses import paged, query
from ..web.security import current_user, token_required


def register(app: Flask, container: Container) -> None:
    service = container.payslip_service

    @app.route("/api/payslip/<employee_id>/<month>", methods=["GET"], endpoint="download_payslip")
    @token_required
    def download_payslip(employee_id: str, month: str):
        filename, pdf = service.payslip_pdf(actor=current_user(), employee_id=employee_id, month=month)
        return send_file(io.BytesIO(pdf), as_attachment=True, download_name=filename, mimetype="application/pdf")

    @app.route("/api/payslips", methods=["GET"], endpoint="list_payslips")
    @token_required
    def list_payslips():
        rows, total, page, limit = service.list_payslips(
            actor=current_user(),
            month=query("month"),
            page=query("page", "1"),
            limit=query("limit"),
        )
        return paged(rows, total, page, limit, "Payslips fetched successfully")
