"""Read-side aggregation over persisted records.

Only approved overtime and reimbursements count towards money; pending and
rejected claims are still counted in the per-employee record counts.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..attendance.model import EmployeeAttendanceSummary
from ..attendance.repository import AttendanceRepository
from ..core.constants import MONEY_QUANTUM, RATE_QUANTUM
from ..overtime.repository import OvertimeRepository
from ..periods.model import AttendancePeriod
from ..periods.service import PeriodService
from ..reimbursements.repository import ReimbursementRepository
from ..users.repository import UserRepository
from .calculator.base import OvertimeRateCalculator
from .calculator.standard_calculator import StandardOvertimeRateCalculator
from .model import EmployeeBreakdown, PayrollTotals, PeriodAdminSummary

ZERO = Decimal("0")


def money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


class AggregationService:
    def __init__(
        self,
        periods: PeriodService,
        users: UserRepository,
        attendance: AttendanceRepository,
        overtime: OvertimeRepository,
        reimbursements: ReimbursementRepository,
        *,
        rate_calculator: Optional[OvertimeRateCalculator] = None,
    ):
        self._periods = periods
        self._users = users
        self._attendance = attendance
        self._overtime = overtime
        self._reimbursements = reimbursements
        self._rates = rate_calculator or StandardOvertimeRateCalculator()

    def employee_attendance_summary(self, user_id: int, period_id: int) -> EmployeeAttendanceSummary:
        period = self._periods.get_period(period_id)
        days = self._attendance.count_days_by_user(period.period_id).get(int(user_id), 0)
        return EmployeeAttendanceSummary(
            user_id=int(user_id),
            period_id=period.period_id,
            attendance_days=days,
            total_working_days=period.working_days,
        )

    def employee_breakdown(self, period_id: int) -> list[EmployeeBreakdown]:
        """One row per active employee, in user_id order."""

        return self._breakdown(self._periods.get_period(period_id))

    def period_admin_summary(self, period_id: int) -> PeriodAdminSummary:
        period = self._periods.get_period(period_id)
        rows = self._breakdown(period)
        return PeriodAdminSummary(
            period_id=period.period_id,
            total_working_days=period.working_days,
            total_employees=len(rows),
            employees_with_attendance=sum(1 for r in rows if r.attendance_days > 0),
            employee_breakdown=rows,
        )

    def payroll_totals(self, period_id: int) -> PayrollTotals:
        return PayrollTotals.of(self.employee_breakdown(period_id))

    def _breakdown(self, period: AttendancePeriod) -> list[EmployeeBreakdown]:
        working_days = period.working_days
        employees = list(self._users.list_active_employees())

        attendance_days = self._attendance.count_days_by_user(period.period_id)
        overtime_counts = self._overtime.count_by_user(period.period_id)
        approved_hours = self._overtime.approved_hours_by_user(period.period_id)
        reimbursement_counts = self._reimbursements.count_by_user(period.period_id)
        approved_amounts = self._reimbursements.approved_amount_by_user(period.period_id)

        rows = []
        for employee in employees:
            hours = approved_hours.get(employee.user_id, ZERO)
            rate = self._rates.hourly_rate(employee, working_days=working_days)
            rows.append(
                EmployeeBreakdown(
                    user_id=employee.user_id,
                    full_name=employee.full_name,
                    base_salary=money(employee.salary),
                    attendance_days=attendance_days.get(employee.user_id, 0),
                    total_working_days=working_days,
                    overtime_records=overtime_counts.get(employee.user_id, 0),
                    approved_overtime_hours=hours,
                    overtime_rate=rate.quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP),
                    overtime_amount=money(hours * rate),
                    reimbursement_records=reimbursement_counts.get(employee.user_id, 0),
                    approved_reimbursement_amount=money(approved_amounts.get(employee.user_id, ZERO)),
                )
            )
        return rows
