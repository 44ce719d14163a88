from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import RecordStatus, ReimbursementCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import Reimbursement
from .repository import ReimbursementRepository

_COLUMNS = (
    "reimbursement_id, user_id, period_id, amount, description, category, "
    "status, created_at, decided_by, decided_at"
)


def _to_reimbursement(r: dict) -> Reimbursement:
    return Reimbursement(
        reimbursement_id=int(r["reimbursement_id"]),
        user_id=int(r["user_id"]),
        period_id=int(r["period_id"]),
        amount=to_decimal(r["amount"]),
        description=r["description"],
        category=ReimbursementCategory(r["category"]),
        status=RecordStatus(r["status"]),
        created_at=r["created_at"],
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
    )


class MySQLReimbursementRepository(ReimbursementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, reimbursement_id: int) -> Optional[Reimbursement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM reimbursements WHERE reimbursement_id=%s", (int(reimbursement_id),))
            r = fetchone(cur)
            return _to_reimbursement(r) if r else None

    def create(
        self,
        *,
        user_id: int,
        period_id: int,
        amount: Decimal,
        description: str,
        category: ReimbursementCategory,
        status: RecordStatus,
        created_at: datetime,
    ) -> Reimbursement:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO reimbursements(user_id, period_id, amount, description, category, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), int(period_id), amount, description, category.value, status.value, created_at),
            )
            reimbursement_id = int(cur.lastrowid)

        return Reimbursement(
            reimbursement_id=reimbursement_id,
            user_id=int(user_id),
            period_id=int(period_id),
            amount=amount,
            description=description,
            category=category,
            status=status,
            created_at=created_at,
        )

    def decide(self, *, reimbursement_id: int, status: RecordStatus, decided_by: int, decided_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE reimbursements r
                JOIN attendance_periods p ON p.period_id = r.period_id
                SET r.status=%s, r.decided_by=%s, r.decided_at=%s
                WHERE r.reimbursement_id=%s AND r.status=%s AND p.payroll_processed=0
                """,
                (status.value, int(decided_by), decided_at, int(reimbursement_id), RecordStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list_for_user_in_period(self, user_id: int, period_id: int) -> Sequence[Reimbursement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM reimbursements
                WHERE user_id=%s AND period_id=%s
                ORDER BY reimbursement_id ASC
                """,
                (int(user_id), int(period_id)),
            )
            return [_to_reimbursement(r) for r in fetchall(cur)]

    def list_for_period(
        self,
        period_id: int,
        *,
        status: Optional[RecordStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[Reimbursement]:
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
                FROM reimbursements
                WHERE {" AND ".join(clauses)}
                ORDER BY reimbursement_id ASC
                LIMIT %s OFFSET %s
                """,
                tuple(params),
            )
            return [_to_reimbursement(r) for r in fetchall(cur)]

    def count_by_user(self, period_id: int) -> dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, COUNT(*) AS n FROM reimbursements WHERE period_id=%s GROUP BY user_id",
                (int(period_id),),
            )
            return {int(r["user_id"]): int(r["n"]) for r in fetchall(cur)}

    def approved_amount_by_user(self, period_id: int) -> dict[int, Decimal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, SUM(amount) AS total
                FROM reimbursements
                WHERE period_id=%s AND status=%s
                GROUP BY user_id
                """,
                (int(period_id), RecordStatus.APPROVED.value),
            )
            return {int(r["user_id"]): to_decimal(r["total"]) for r in fetchall(cur)}
