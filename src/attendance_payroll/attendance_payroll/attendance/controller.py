from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, current_auth, int_arg, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/api/attendance", methods=["POST"], endpoint="submit_attendance")
    @login_required
    def submit_attendance():
        body = json_body()
        record = attendance.submit_attendance(current_auth(), body.get("attendance_date"), notes=body.get("notes"))
        return ok(record, 201)

    @app.route("/api/attendance/me", methods=["GET"], endpoint="my_attendance")
    @login_required
    def my_attendance():
        auth = current_auth()
        return ok(attendance.get_user_attendance(auth.user_id, period_id=int_arg("period_id")))

    @app.route("/api/users/<int:user_id>/attendance", methods=["GET"], endpoint="user_attendance")
    @admin_required
    def user_attendance(user_id: int):
        return ok(attendance.get_user_attendance(user_id, period_id=int_arg("period_id")))
