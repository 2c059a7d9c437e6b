from __future__ import annotations

from flask import Flask, request, send_file

from ..container import Container
from ..web.responses import form_or_json, json_body, ok, paged, query
from ..web.security import current_user, token_required


def register(app: Flask, container: Container) -> None:
    service = container.travel_expense_service

    @app.route("/api/travel-expenses", methods=["POST"], endpoint="submit_travel_expense")
    @token_required
    def submit_travel_expense():
        expense = service.submit(actor=current_user(), payload=form_or_json(), receipt=request.files.get("receipt"))
        return ok(expense.to_dict(), "Travel expense submitted successfully", 201)

    @app.route("/api/travel-expenses", methods=["GET"], endpoint="pending_travel_expenses")
    @token_required
    def pending_travel_expenses():
        rows, total, page, limit = service.list_pending(
            actor=current_user(), page=query("page", "1"), limit=query("limit")
        )
        return paged(rows, total, page, limit, "Travel expenses fetched successfully")

    @app.route("/api/travel-expenses/history", methods=["GET"], endpoint="travel_expense_history")
    @token_required
    def travel_expense_history():
        rows, total, page, limit = service.history(actor=current_user(), page=query("page", "1"), limit=query("limit"))
        return paged(rows, total, page, limit, "Travel expense history fetched successfully")

    @app.route("/api/travel-expenses/<int:expense_id>", methods=["GET"], endpoint="get_travel_expense")
    @token_required
    def get_travel_expense(expense_id: int):
        return ok(service.get(actor=current_user(), expense_id=expense_id).to_dict())

    @app.route("/api/travel-expenses/<int:expense_id>", methods=["PUT"], endpoint="update_travel_expense")
    @token_required
    def update_travel_expense(expense_id: int):
        expense = service.update(
            actor=current_user(),
            expense_id=expense_id,
            payload=form_or_json(),
            receipt=request.files.get("receipt"),
        )
        return ok(expense.to_dict(), "Travel expense updated successfully")

    @app.route("/api/travel-expenses/<int:expense_id>", methods=["DELETE"], endpoint="delete_travel_expense")
    @token_required
    def delete_travel_expense(expense_id: int):
        service.delete(actor=current_user(), expense_id=expense_id)
        return ok(message="Travel expense deleted successfully")

    @app.route("/api/travel-expenses/<int:expense_id>/status", methods=["PUT"], endpoint="decide_travel_expense")
    @token_required
    def decide_travel_expense(expense_id: int):
        body = json_body()
        expense = service.decide(
            actor=current_user(),
            expense_id=expense_id,
            status=body.get("status"),
            comment=body.get("comment") or "",
        )
        return ok(expense.to_dict(), f"Travel expense {expense.status.value.lower()}")

    @app.route("/api/travel-expenses/<int:expense_id>/receipt", methods=["GET"], endpoint="travel_expense_receipt")
    @token_required
    def travel_expense_receipt(expense_id: int):
        path = service.receipt_path(actor=current_user(), expense_id=expense_id)
        return send_file(path, as_attachment=True, download_name=path.name)
