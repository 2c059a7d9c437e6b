from __future__ import annotations

from flask import Flask

from ..container import Container
from ..web.responses import ok
from ..web.security import current_user, token_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @token_required
    def dashboard():
        return ok(container.dashboard_service.summary(actor=current_user()), "Dashboard data fetched successfully")
