from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, current_auth, int_arg, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    aggregation = container.aggregation_service
    payroll = container.payroll_service

    @app.route("/api/periods/<int:period_id>/summary", methods=["GET"], endpoint="period_summary")
    @admin_required
    def period_summary(period_id: int):
        return ok(aggregation.period_admin_summary(period_id))

    @app.route("/api/periods/<int:period_id>/payroll", methods=["POST"], endpoint="compile_payroll")
    @admin_required
    def compile_payroll(period_id: int):
        body = json_body()
        return ok(payroll.compile_payroll(period_id, requester=current_auth(), notes=body.get("notes")), 201)

    @app.route("/api/periods/<int:period_id>/payroll", methods=["GET"], endpoint="get_payroll")
    @admin_required
    def get_payroll(period_id: int):
        return ok(payroll.get_payroll_for_period(period_id))

    @app.route("/api/payrolls", methods=["GET"], endpoint="list_payrolls")
    @admin_required
    def list_payrolls():
        return ok(payroll.list_payrolls(page=int_arg("page", 1), limit=int_arg("limit", 20)))

    @app.route("/api/periods/<int:period_id>/payroll/summary", methods=["GET"], endpoint="payroll_summary")
    @admin_required
    def payroll_summary(period_id: int):
        return ok(payroll.payroll_summary(period_id, requester=current_auth()))

    @app.route("/api/periods/<int:period_id>/payslips/me", methods=["GET"], endpoint="my_payslip")
    @login_required
    def my_payslip(period_id: int):
        auth = current_auth()
        return ok(payroll.get_payslip(auth.user_id, period_id, requester=auth))

    @app.route("/api/periods/<int:period_id>/payslips/<int:user_id>", methods=["GET"], endpoint="user_payslip")
    @admin_required
    def user_payslip(period_id: int, user_id: int):
        return ok(payroll.get_payslip(user_id, period_id, requester=current_auth()))
