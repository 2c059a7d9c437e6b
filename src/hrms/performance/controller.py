from __future__ import annotations

from flask import Flask

from ..container import Container
from ..core.enums import Role
from ..web.responses import json_body, ok
from ..web.security import current_user, roles_required, token_required


def register(app: Flask, container: Container) -> None:
    service = container.performance_service

    @app.route("/api/performance/goals", methods=["POST"], endpoint="set_goal")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def set_goal():
        return ok(service.set_goal(actor=current_user(), payload=json_body()).to_dict(), "Goal set successfully", 201)

    @app.route("/api/performance/goals/<goal_id>", methods=["PUT"], endpoint="update_goal_progress")
    @token_required
    def update_goal_progress(goal_id: str):
        body = json_body()
        goal = service.update_goal_progress(
            actor=current_user(),
            goal_id=goal_id,
            progress=body.get("progress"),
            status=body.get("status"),
        )
        return ok(goal.to_dict(), "Goal progress updated successfully")

    @app.route("/api/performance/appraisals", methods=["POST"], endpoint="conduct_appraisal")
    @roles_required(Role.SUPER_ADMIN, Role.HR)
    def conduct_appraisal():
        appraisal = service.conduct_appraisal(actor=current_user(), payload=json_body())
        return ok(appraisal.to_dict(), "Appraisal conducted successfully", 201)

    @app.route("/api/performance/self-review", methods=["POST"], endpoint="self_review")
    @token_required
    def self_review():
        body = json_body()
        feedback = service.submit_self_review(
            actor=current_user(),
            employee_id=body.get("employee_id"),
            comments=body.get("comments"),
        )
        return ok(feedback.to_dict(), "Self review submitted successfully", 201)

    @app.route("/api/performance", methods=["GET"], endpoint="my_performance")
    @app.route("/api/performance/<employee_id>", methods=["GET"], endpoint="employee_performance")
    @token_required
    def fetch_performance(employee_id: str = ""):
        view = service.fetch_performance(actor=current_user(), employee_id=employee_id or None)
        return ok(view.to_dict())
