from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_auth, int_arg, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    overtime = container.overtime_service

    @app.route("/api/overtime", methods=["POST"], endpoint="submit_overtime")
    @login_required
    def submit_overtime():
        body = json_body()
        record = overtime.submit_overtime(
            current_auth(),
            body.get("overtime_date"),
            body.get("hours_worked"),
            body.get("description", ""),
            status=body.get("status"),
        )
        return ok(record, 201)

    @app.route("/api/overtime/me", methods=["GET"], endpoint="my_overtime")
    @login_required
    def my_overtime():
        records, summary = overtime.list_user_overtime(current_auth().user_id, period_id=int_arg("period_id"))
        return ok({"records": records, "summary": summary})

    @app.route("/api/periods/<int:period_id>/overtime", methods=["GET"], endpoint="period_overtime")
    @admin_required
    def period_overtime(period_id: int):
        records = overtime.list_period_overtime(
            period_id,
            status=request.args.get("status"),
            page=int_arg("page", 1),
            limit=int_arg("limit", 50),
        )
        return ok(records)

    @app.route("/api/overtime/<int:overtime_id>/decision", methods=["POST"], endpoint="decide_overtime")
    @admin_required
    def decide_overtime(overtime_id: int):
        body = json_body()
        return ok(overtime.decide_overtime(overtime_id, body.get("status"), requester=current_auth()))
