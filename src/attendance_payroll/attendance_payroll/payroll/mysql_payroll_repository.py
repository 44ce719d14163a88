from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import Payroll, PayrollDraft, Payslip
from .repository import PayrollRepository

_COLUMNS = (
    "payroll_id, period_id, total_employees, total_base_salary, total_overtime_amount, "
    "total_reimbursement_amount, total_amount, processed_by, created_at, notes"
)

_PAYSLIP_COLUMNS = (
    "payslip_id, payroll_id, period_id, user_id, full_name, base_salary, attendance_days, "
    "total_working_days, overtime_hours, overtime_rate, overtime_amount, reimbursement_amount, "
    "net_pay, created_at"
)


def _to_payroll(r: dict) -> Payroll:
    return Payroll(
        payroll_id=int(r["payroll_id"]),
        period_id=int(r["period_id"]),
        total_employees=int(r["total_employees"]),
        total_base_salary=to_decimal(r["total_base_salary"]),
        total_overtime_amount=to_decimal(r["total_overtime_amount"]),
        total_reimbursement_amount=to_decimal(r["total_reimbursement_amount"]),
        total_amount=to_decimal(r["total_amount"]),
        processed_by=int(r["processed_by"]),
        created_at=r["created_at"],
        notes=r.get("notes"),
    )


def _to_payslip(r: dict) -> Payslip:
    return Payslip(
        payslip_id=int(r["payslip_id"]),
        payroll_id=int(r["payroll_id"]),
        period_id=int(r["period_id"]),
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        base_salary=to_decimal(r["base_salary"]),
        attendance_days=int(r["attendance_days"]),
        total_working_days=int(r["total_working_days"]),
        overtime_hours=to_decimal(r["overtime_hours"]),
        overtime_rate=to_decimal(r["overtime_rate"]),
        overtime_amount=to_decimal(r["overtime_amount"]),
        reimbursement_amount=to_decimal(r["reimbursement_amount"]),
        net_pay=to_decimal(r["net_pay"]),
        created_at=r["created_at"],
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_period(self, period_id: int) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE period_id=%s", (int(period_id),))
            r = fetchone(cur)
            return _to_payroll(r) if r else None

    def record_compiled(
        self,
        *,
        period_id: int,
        build: Callable[[], PayrollDraft],
        processed_by: int,
        created_at: datetime,
        notes: Optional[str] = None,
    ) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock held until commit; decide_* UPDATEs join this row and wait.
            cur.execute(
                "SELECT is_active, payroll_processed FROM attendance_periods WHERE period_id=%s FOR UPDATE",
                (int(period_id),),
            )
            period = fetchone(cur)
            if not period or int(period["is_active"]) or int(period["payroll_processed"]):
                return None

            draft = build()
            totals = draft.totals

            cur.execute(
                """
                INSERT INTO payrolls(
                    period_id, total_employees, total_base_salary, total_overtime_amount,
                    total_reimbursement_amount, total_amount, processed_by, notes, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(period_id),
                    totals.total_employees,
                    totals.total_base_salary,
                    totals.total_overtime_amount,
                    totals.total_reimbursement_amount,
                    totals.total_amount,
                    int(processed_by),
                    notes,
                    created_at,
                ),
            )
            payroll_id = int(cur.lastrowid)

            if draft.lines:
                cur.executemany(
                    """
                    INSERT INTO payslips(
                        payroll_id, period_id, user_id, full_name, base_salary, attendance_days,
                        total_working_days, overtime_hours, overtime_rate, overtime_amount,
                        reimbursement_amount, net_pay, created_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (
                            payroll_id,
                            int(period_id),
                            line.user_id,
                            line.full_name,
                            line.base_salary,
                            line.attendance_days,
                            line.total_working_days,
                            line.approved_overtime_hours,
                            line.overtime_rate,
                            line.overtime_amount,
                            line.approved_reimbursement_amount,
                            line.net_pay,
                            created_at,
                        )
                        for line in draft.lines
                    ],
                )

            cur.execute(
                "UPDATE attendance_periods SET payroll_processed=1 WHERE period_id=%s AND payroll_processed=0",
                (int(period_id),),
            )

        return Payroll(
            payroll_id=payroll_id,
            period_id=int(period_id),
            total_employees=totals.total_employees,
            total_base_salary=totals.total_base_salary,
            total_overtime_amount=totals.total_overtime_amount,
            total_reimbursement_amount=totals.total_reimbursement_amount,
            total_amount=totals.total_amount,
            processed_by=int(processed_by),
            created_at=created_at,
            notes=notes,
        )

    def list_recent(self, *, limit: int, offset: int = 0) -> Sequence[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payrolls ORDER BY payroll_id DESC LIMIT %s OFFSET %s",
                (int(limit), int(offset)),
            )
            return [_to_payroll(r) for r in fetchall(cur)]

    def get_payslip(self, user_id: int, period_id: int) -> Optional[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PAYSLIP_COLUMNS} FROM payslips WHERE user_id=%s AND period_id=%s",
                (int(user_id), int(period_id)),
            )
            r = fetchone(cur)
            return _to_payslip(r) if r else None

    def list_payslips(self, period_id: int) -> Sequence[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PAYSLIP_COLUMNS} FROM payslips WHERE period_id=%s ORDER BY user_id ASC",
                (int(period_id),),
            )
            return [_to_payslip(r) for r in fetchall(cur)]
