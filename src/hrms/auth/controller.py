from __future__ import annotations

from flask import Flask

from ..container import Container
from ..web.responses import json_body, ok
from ..web.security import current_user, token_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        result = container.auth_service.login(
            mobile=body.get("mobile"),
            password=body.get("password"),
            role=body.get("role"),
        )
        return ok(result.to_dict(), "Login successful")

    @app.route("/api/change-password", methods=["POST"], endpoint="change_password")
    @token_required
    def change_password():
        body = json_body()
        container.auth_service.change_password(
            actor=current_user(),
            current_password=body.get("current_password"),
            new_password=body.get("new_password"),
        )
        return ok(message="Password changed successfully")

    @app.route("/api/forgot-password", methods=["POST"], endpoint="forgot_password")
    def forgot_password():
        body = json_body()
        container.auth_service.forgot_password(
            mobile=body.get("mobile"),
            role=body.get("role"),
            new_password=body.get("new_password"),
        )
        return ok(message="Password reset successfully")

    @app.route("/api/check-mobile-role", methods=["POST"], endpoint="check_mobile_role")
    def check_mobile_role():
        body = json_body()
        container.auth_service.check_mobile_role(mobile=body.get("mobile"), role=body.get("role"))
        return ok({"exists": True}, "Account found")
