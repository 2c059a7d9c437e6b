from __future__ import annotations

import io

from flask import Flask, send_file

from ..container import Container
from ..web.security import current_user, token_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/cards/<employee_id>/<style>", methods=["GET"], endpoint="download_card")
    @token_required
    def download_card(employee_id: str, style: str):
        filename, pdf = container.card_service.card_pdf(actor=current_user(), employee_id=employee_id, style=style)
        return send_file(io.BytesIO(pdf), as_attachment=True, download_name=filename, mimetype="application/pdf")
