from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        period_id=int(r["period_id"]),
        attendance_date=r["attendance_date"],
        check_in_time=r["check_in_time"],
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, period_id, attendance_date, check_in_time, notes
                FROM attendance_records
                WHERE user_id=%s AND attendance_date=%s
                """,
                (int(user_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(
        self,
        *,
        user_id: int,
        period_id: int,
        attendance_date: date,
        check_in_time: datetime,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        # uq_daily_attendance turns a concurrent duplicate into UniqueViolation.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, period_id, attendance_date, check_in_time, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), int(period_id), attendance_date, check_in_time, notes),
            )
            attendance_id = int(cur.lastrowid)

        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=int(user_id),
            period_id=int(period_id),
            attendance_date=attendance_date,
            check_in_time=check_in_time,
            notes=notes,
        )

    def list_for_user_in_period(self, user_id: int, period_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, period_id, attendance_date, check_in_time, notes
                FROM attendance_records
                WHERE user_id=%s AND period_id=%s
                ORDER BY attendance_id ASC
                """,
                (int(user_id), int(period_id)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_days_by_user(self, period_id: int) -> dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, COUNT(*) AS days
                FROM attendance_records
                WHERE period_id=%s
                GROUP BY user_id
                """,
                (int(period_id),),
            )
            return {int(r["user_id"]): int(r["days"]) for r in fetchall(cur)}
