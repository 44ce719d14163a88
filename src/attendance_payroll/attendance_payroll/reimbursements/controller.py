from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_auth, int_arg, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    reimbursements = container.reimbursement_service

    @app.route("/api/reimbursements", methods=["POST"], endpoint="submit_reimbursement")
    @login_required
    def submit_reimbursement():
        body = json_body()
        item = reimbursements.submit_reimbursement(
            current_auth(),
            body.get("amount"),
            body.get("description", ""),
            body.get("category", "other"),
            status=body.get("status"),
        )
        return ok(item, 201)

    @app.route("/api/reimbursements/me", methods=["GET"], endpoint="my_reimbursements")
    @login_required
    def my_reimbursements():
        items, summary = reimbursements.list_user_reimbursements(
            current_auth().user_id, period_id=int_arg("period_id")
        )
        return ok({"items": items, "summary": summary})

    @app.route("/api/periods/<int:period_id>/reimbursements", methods=["GET"], endpoint="period_reimbursements")
    @admin_required
    def period_reimbursements(period_id: int):
        items = reimbursements.list_period_reimbursements(
            period_id,
            status=request.args.get("status"),
            page=int_arg("page", 1),
            limit=int_arg("limit", 50),
        )
        return ok(items)

    @app.route(
        "/api/reimbursements/<int:reimbursement_id>/decision",
        methods=["POST"],
        endpoint="decide_reimbursement",
    )
    @admin_required
    def decide_reimbursement(reimbursement_id: int):
        body = json_body()
        return ok(reimbursements.decide_reimbursement(reimbursement_id, body.get("status"), requester=current_auth()))
