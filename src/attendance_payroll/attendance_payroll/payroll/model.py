from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence


@dataclass(frozen=True)
class EmployeeBreakdown:
    user_id: int
    full_name: str
    base_salary: Decimal
    attendance_days: int
    total_working_days: int
    overtime_records: int
    approved_overtime_hours: Decimal
    overtime_rate: Decimal
    overtime_amount: Decimal
    reimbursement_records: int
    approved_reimbursement_amount: Decimal

    @property
    def net_pay(self) -> Decimal:
        return self.base_salary + self.overtime_amount + self.approved_reimbursement_amount


@dataclass(frozen=True)
class PeriodAdminSummary:
    period_id: int
    total_working_days: int
    total_employees: int
    employees_with_attendance: int
    employee_breakdown: list[EmployeeBreakdown] = field(default_factory=list)


@dataclass(frozen=True)
class PayrollTotals:
    total_employees: int
    total_base_salary: Decimal
    total_overtime_amount: Decimal
    total_reimbursement_amount: Decimal

    @property
    def total_amount(self) -> Decimal:
        return self.total_base_salary + self.total_overtime_amount + self.total_reimbursement_amount

    @classmethod
    def of(cls, rows: Sequence[EmployeeBreakdown]) -> "PayrollTotals":
        zero = Decimal("0.00")
        return cls(
            total_employees=len(rows),
            total_base_salary=sum((r.base_salary for r in rows), zero),
            total_overtime_amount=sum((r.overtime_amount for r in rows), zero),
            total_reimbursement_amount=sum((r.approved_reimbursement_amount for r in rows), zero),
        )


@dataclass(frozen=True)
class PayrollDraft:
    """Figures computed while the period row is locked for compilation."""

    totals: PayrollTotals
    lines: list[EmployeeBreakdown] = field(default_factory=list)


@dataclass(frozen=True)
class Payroll:
    """Persisted, immutable result of compiling one period."""

    payroll_id: int
    period_id: int
    total_employees: int
    total_base_salary: Decimal
    total_overtime_amount: Decimal
    total_reimbursement_amount: Decimal
    total_amount: Decimal
    processed_by: int
    created_at: datetime
    notes: Optional[str] = None


@dataclass(frozen=True)
class Payslip:
    """One employee's line of a compiled payroll. Never mutated."""

    payslip_id: int
    payroll_id: int
    period_id: int
    user_id: int
    full_name: str
    base_salary: Decimal
    attendance_days: int
    total_working_days: int
    overtime_hours: Decimal
    overtime_rate: Decimal
    overtime_amount: Decimal
    reimbursement_amount: Decimal
    net_pay: Decimal
    created_at: datetime


@dataclass(frozen=True)
class PayrollSummary:
    payroll: Payroll
    payslips: list[Payslip] = field(default_factory=list)
