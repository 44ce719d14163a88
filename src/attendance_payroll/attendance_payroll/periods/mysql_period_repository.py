from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendancePeriod
from .repository import PeriodRepository

_COLUMNS = (
    "period_id, name, description, start_date, end_date, is_active, "
    "payroll_processed, created_by, created_at"
)


def _to_period(r: dict) -> AttendancePeriod:
    return AttendancePeriod(
        period_id=int(r["period_id"]),
        name=r["name"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        is_active=bool(r["is_active"]),
        payroll_processed=bool(r["payroll_processed"]),
        created_by=int(r["created_by"]),
        created_at=r["created_at"],
        description=r.get("description"),
    )


class MySQLPeriodRepository(PeriodRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, period_id: int) -> Optional[AttendancePeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_periods WHERE period_id=%s", (int(period_id),))
            r = fetchone(cur)
            return _to_period(r) if r else None

    def get_active(self) -> Optional[AttendancePeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_periods WHERE is_active=1")
            r = fetchone(cur)
            return _to_period(r) if r else None

    def create_active(
        self,
        *,
        name: str,
        start_date: date,
        end_date: date,
        created_by: int,
        created_at: datetime,
        description: Optional[str] = None,
    ) -> AttendancePeriod:
        # uq_single_active_period rejects a second active row (UniqueViolation).
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_periods(name, description, start_date, end_date, is_active, created_by, created_at)
                VALUES(%s,%s,%s,%s,1,%s,%s)
                """,
                (name, description, start_date, end_date, int(created_by), created_at),
            )
            period_id = int(cur.lastrowid)

        return AttendancePeriod(
            period_id=period_id,
            name=name,
            start_date=start_date,
            end_date=end_date,
            is_active=True,
            payroll_processed=False,
            created_by=int(created_by),
            created_at=created_at,
            description=description,
        )

    def deactivate(self, period_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_periods SET is_active=0 WHERE period_id=%s AND is_active=1",
                (int(period_id),),
            )
            return cur.rowcount > 0

    def list_recent(self, *, limit: int, offset: int = 0) -> Sequence[AttendancePeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_periods
                ORDER BY start_date DESC, period_id DESC
                LIMIT %s OFFSET %s
                """,
                (int(limit), int(offset)),
            )
            return [_to_period(r) for r in fetchall(cur)]
