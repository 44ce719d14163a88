from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import RecordStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import OvertimeRecord
from .repository import OvertimeRepository

_COLUMNS = (
    "overtime_id, user_id, period_id, overtime_date, hours_worked, description, "
    "status, created_at, decided_by, decided_at"
)


def _to_record(r: dict) -> OvertimeRecord:
    return OvertimeRecord(
        overtime_id=int(r["overtime_id"]),
        user_id=int(r["user_id"]),
        period_id=int(r["period_id"]),
        overtime_date=r["overtime_date"],
        hours_worked=to_decimal(r["hours_worked"]),
        description=r["description"],
        status=RecordStatus(r["status"]),
        created_at=r["created_at"],
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
    )


class MySQLOvertimeRepository(OvertimeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, overtime_id: int) -> Optional[OvertimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM overtime_records WHERE overtime_id=%s", (int(overtime_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, overtime_date: date) -> Optional[OvertimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM overtime_records WHERE user_id=%s AND overtime_date=%s",
                (int(user_id), overtime_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(
        self,
        *,
        user_id: int,
        period_id: int,
        overtime_date: date,
        hours_worked: Decimal,
        description: str,
        status: RecordStatus,
        created_at: datetime,
    ) -> OvertimeRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO overtime_records(user_id, period_id, overtime_date, hours_worked, description, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), int(period_id), overtime_date, hours_worked, description, status.value, created_at),
            )
            overtime_id = int(cur.lastrowid)

        return OvertimeRecord(
            overtime_id=overtime_id,
            user_id=int(user_id),
            period_id=int(period_id),
            overtime_date=overtime_date,
            hours_worked=hours_worked,
            description=description,
            status=status,
            created_at=created_at,
        )

    def decide(self, *, overtime_id: int, status: RecordStatus, decided_by: int, decided_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE overtime_records o
                JOIN attendance_periods p ON p.period_id = o.period_id
                SET o.status=%s, o.decided_by=%s, o.decided_at=%s
                WHERE o.overtime_id=%s AND o.status=%s AND p.payroll_processed=0
                """,
                (status.value, int(decided_by), decided_at, int(overtime_id), RecordStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list_for_user_in_period(self, user_id: int, period_id: int) -> Sequence[OvertimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM overtime_records
                WHERE user_id=%s AND period_id=%s
                ORDER BY overtime_id ASC
                """,
                (int(user_id), int(period_id)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_period(
        self,
        period_id: int,
        *,
        status: Optional[RecordStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[OvertimeRecord]:
        clauses = ["period_id=%s"]
        params: list[object] = [int(period_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM overtime_records
                WHERE {" AND ".join(clauses)}
                ORDER BY overtime_id ASC
                LIMIT %s OFFSET %s
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_by_user(self, period_id: int) -> dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, COUNT(*) AS n FROM overtime_records WHERE period_id=%s GROUP BY user_id",
                (int(period_id),),
            )
            return {int(r["user_id"]): int(r["n"]) for r in fetchall(cur)}

    def approved_hours_by_user(self, period_id: int) -> dict[int, Decimal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, SUM(hours_worked) AS hours
                FROM overtime_records
                WHERE period_id=%s AND status=%s
                GROUP BY user_id
                """,
                (int(period_id), RecordStatus.APPROVED.value),
            )
            return {int(r["user_id"]): to_decimal(r["hours"]) for r in fetchall(cur)}
