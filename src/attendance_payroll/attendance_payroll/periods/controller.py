from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import coerce_date
from ..common.web import admin_required, current_auth, int_arg, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    periods = container.period_service

    @app.route("/api/periods", methods=["POST"], endpoint="create_period")
    @admin_required
    def create_period():
        body = json_body()
        period = periods.create_period(
            requester=current_auth(),
            name=body.get("name", ""),
            start_date=coerce_date(body.get("start_date"), "start_date"),
            end_date=coerce_date(body.get("end_date"), "end_date"),
            description=body.get("description"),
        )
        return ok(period, 201)

    @app.route("/api/periods", methods=["GET"], endpoint="list_periods")
    @login_required
    def list_periods():
        return ok(periods.list_periods(page=int_arg("page", 1), limit=int_arg("limit", 20)))

    @app.route("/api/periods/active", methods=["GET"], endpoint="active_period")
    @login_required
    def active_period():
        return ok(periods.get_active_period())

    @app.route("/api/periods/<int:period_id>", methods=["GET"], endpoint="get_period")
    @login_required
    def get_period(period_id: int):
        period = periods.get_period(period_id)
        return ok({"period": period, "state": period.state, "working_days": period.working_days})

    @app.route("/api/periods/<int:period_id>/close", methods=["POST"], endpoint="close_period")
    @admin_required
    def close_period(period_id: int):
        return ok(periods.close_period(period_id, requester=current_auth()))
