from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from attendance_payroll.attendance.model import AttendanceRecord
from attendance_payroll.common.datetime_utils import FixedClock
from attendance_payroll.container import assemble
from attendance_payroll.core.enums import RecordStatus, Role
from attendance_payroll.core.exceptions import UniqueViolation
from attendance_payroll.overtime.model import OvertimeRecord
from attendance_payroll.payroll.calculator.standard_calculator import FlatOvertimeRateCalculator
from attendance_payroll.payroll.model import Payroll, Payslip
from attendance_payroll.periods.model import AttendancePeriod
from attendance_payroll.reimbursements.model import Reimbursement
from attendance_payroll.users.model import AuthContext, User

# Wednesday inside January 2024.
NOW = datetime(2024, 1, 17, 10, 0, 0)


class InMemoryUsers:
    def __init__(self, users=()):
        self.users_by_id: dict[int, User] = {u.user_id: u for u in users}

    def list_active_employees(self):
        return [u for _, u in sorted(self.users_by_id.items()) if u.is_employee and u.is_active]


class InMemoryPeriods:
    """Keeps the single-active-period rule the way the unique index does.

    ``lock`` stands in for the period row lock: payroll compilation holds it
    while totals are built and claim decisions wait on it.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self._next_id = 1
        self.rows: dict[int, AttendancePeriod] = {}

    def get_by_id(self, period_id: int) -> Optional[AttendancePeriod]:
        return self.rows.get(int(period_id))

    def get_active(self) -> Optional[AttendancePeriod]:
        return next((p for p in self.rows.values() if p.is_active), None)

    def create_active(self, *, name, start_date, end_date, created_by, created_at, description=None):
        with self.lock:
            if self.get_active():
                raise UniqueViolation("active_marker")
            period = AttendancePeriod(
                period_id=self._next_id,
                name=name,
                start_date=start_date,
                end_date=end_date,
                is_active=True,
                payroll_processed=False,
                created_by=created_by,
                created_at=created_at,
                description=description,
            )
            self.rows[period.period_id] = period
            self._next_id += 1
            return period

    def deactivate(self, period_id: int) -> bool:
        with self.lock:
            period = self.rows.get(int(period_id))
            if not period or not period.is_active:
                return False
            self.rows[period.period_id] = replace(period, is_active=False)
            return True

    def mark_payroll_processed(self, period_id: int) -> bool:
        with self.lock:
            period = self.rows.get(int(period_id))
            if not period or period.is_active or period.payroll_processed:
                return False
            self.rows[period.period_id] = replace(period, payroll_processed=True)
            return True

    def list_recent(self, *, limit: int, offset: int = 0):
        rows = sorted(self.rows.values(), key=lambda p: p.period_id, reverse=True)
        return rows[offset : offset + limit]


class InMemoryAttendance:
    def __init__(self):
        self._lock = threading.Lock()
        self._next_id = 1
        self.rows: list[AttendanceRecord] = []

    def get_for_user_and_date(self, user_id, attendance_date):
        return next(
            (r for r in self.rows if r.user_id == user_id and r.attendance_date == attendance_date),
            None,
        )

    def create(self, *, user_id, period_id, attendance_date, check_in_time, notes=None):
        with self._lock:
            if self.get_for_user_and_date(user_id, attendance_date):
                raise UniqueViolation("uq_attendance_user_date")
            record = AttendanceRecord(
                attendance_id=self._next_id,
                user_id=user_id,
                period_id=period_id,
                attendance_date=attendance_date,
                check_in_time=check_in_time,
                notes=notes,
            )
            self._next_id += 1
            self.rows.append(record)
            return record

    def list_for_user_in_period(self, user_id, period_id):
        return [r for r in self.rows if r.user_id == user_id and r.period_id == period_id]

    def count_days_by_user(self, period_id):
        counts: dict[int, int] = {}
        for r in self.rows:
            if r.period_id == period_id:
                counts[r.user_id] = counts.get(r.user_id, 0) + 1
        return counts


class InMemoryOvertime:
    def __init__(self, periods: InMemoryPeriods):
        self._periods = periods
        self._lock = threading.Lock()
        self._next_id = 1
        self.rows: dict[int, OvertimeRecord] = {}

    def get_by_id(self, overtime_id):
        return self.rows.get(int(overtime_id))

    def get_for_user_and_date(self, user_id, overtime_date):
        return next(
            (r for r in self.rows.values() if r.user_id == user_id and r.overtime_date == overtime_date),
            None,
        )

    def create(self, *, user_id, period_id, overtime_date, hours_worked, description, status, created_at):
        with self._lock:
            if self.get_for_user_and_date(user_id, overtime_date):
                raise UniqueViolation("uq_overtime_user_date")
            record = OvertimeRecord(
                overtime_id=self._next_id,
                user_id=user_id,
                period_id=period_id,
                overtime_date=overtime_date,
                hours_worked=hours_worked,
                description=description,
                status=status,
                created_at=created_at,
            )
            self.rows[record.overtime_id] = record
            self._next_id += 1
            return record

    def decide(self, *, overtime_id, status, decided_by, decided_at):
        with self._periods.lock, self._lock:
            record = self.rows.get(int(overtime_id))
            if not record or record.status != RecordStatus.PENDING:
                return False
            if self._periods.get_by_id(record.period_id).payroll_processed:
                return False
            self.rows[record.overtime_id] = replace(record, status=status, decided_by=decided_by, decided_at=decided_at)
            return True

    def list_for_user_in_period(self, user_id, period_id):
        return [r for r in self.rows.values() if r.user_id == user_id and r.period_id == period_id]

    def list_for_period(self, period_id, *, status=None, limit=50, offset=0):
        rows = [r for r in self.rows.values() if r.period_id == period_id and (status is None or r.status == status)]
        return rows[offset : offset + limit]

    def count_by_user(self, period_id):
        counts: dict[int, int] = {}
        for r in self.rows.values():
            if r.period_id == period_id:
                counts[r.user_id] = counts.get(r.user_id, 0) + 1
        return counts

    def approved_hours_by_user(self, period_id):
        hours: dict[int, Decimal] = {}
        for r in self.rows.values():
            if r.period_id == period_id and r.status == RecordStatus.APPROVED:
                hours[r.user_id] = hours.get(r.user_id, Decimal("0")) + r.hours_worked
        return hours


class InMemoryReimbursements:
    def __init__(self, periods: InMemoryPeriods):
        self._periods = periods
        self._lock = threading.Lock()
        self._next_id = 1
        self.rows: dict[int, Reimbursement] = {}

    def get_by_id(self, reimbursement_id):
        return self.rows.get(int(reimbursement_id))

    def create(self, *, user_id, period_id, amount, description, category, status, created_at):
        with self._lock:
            item = Reimbursement(
                reimbursement_id=self._next_id,
                user_id=user_id,
                period_id=period_id,
                amount=amount,
                description=description,
                category=category,
                status=status,
                created_at=created_at,
            )
            self.rows[item.reimbursement_id] = item
            self._next_id += 1
            return item

    def decide(self, *, reimbursement_id, status, decided_by, decided_at):
        with self._periods.lock, self._lock:
            item = self.rows.get(int(reimbursement_id))
            if not item or item.status != RecordStatus.PENDING:
                return False
            if self._periods.get_by_id(item.period_id).payroll_processed:
                return False
            self.rows[item.reimbursement_id] = replace(item, status=status, decided_by=decided_by, decided_at=decided_at)
            return True

    def list_for_user_in_period(self, user_id, period_id):
        return [r for r in self.rows.values() if r.user_id == user_id and r.period_id == period_id]

    def list_for_period(self, period_id, *, status=None, limit=50, offset=0):
        rows = [r for r in self.rows.values() if r.period_id == period_id and (status is None or r.status == status)]
        return rows[offset : offset + limit]

    def count_by_user(self, period_id):
        counts: dict[int, int] = {}
        for r in self.rows.values():
            if r.period_id == period_id:
                counts[r.user_id] = counts.get(r.user_id, 0) + 1
        return counts

    def approved_amount_by_user(self, period_id):
        amounts: dict[int, Decimal] = {}
        for r in self.rows.values():
            if r.period_id == period_id and r.status == RecordStatus.APPROVED:
                amounts[r.user_id] = amounts.get(r.user_id, Decimal("0")) + r.amount
        return amounts


class InMemoryPayrolls:
    """Holds the period lock across build and insert, like the MySQL transaction."""

    def __init__(self, periods: InMemoryPeriods):
        self._periods = periods
        self._next_id = 1
        self._next_payslip_id = 1
        self.rows: dict[int, Payroll] = {}
        self.payslips: list[Payslip] = []

    def get_by_period(self, period_id):
        return next((p for p in self.rows.values() if p.period_id == period_id), None)

    def record_compiled(self, *, period_id, build, processed_by, created_at, notes=None):
        with self._periods.lock:
            period = self._periods.get_by_id(period_id)
            if not period or period.is_active or period.payroll_processed:
                return None
            if self.get_by_period(period_id):
                raise UniqueViolation("uq_payroll_period")

            draft = build()
            totals = draft.totals
            payroll = Payroll(
                payroll_id=self._next_id,
                period_id=period_id,
                total_employees=totals.total_employees,
                total_base_salary=totals.total_base_salary,
                total_overtime_amount=totals.total_overtime_amount,
                total_reimbursement_amount=totals.total_reimbursement_amount,
                total_amount=totals.total_amount,
                processed_by=processed_by,
                created_at=created_at,
                notes=notes,
            )
            self.rows[payroll.payroll_id] = payroll
            self._next_id += 1

            for line in draft.lines:
                self.payslips.append(
                    Payslip(
                        payslip_id=self._next_payslip_id,
                        payroll_id=payroll.payroll_id,
                        period_id=period_id,
                        user_id=line.user_id,
                        full_name=line.full_name,
                        base_salary=line.base_salary,
                        attendance_days=line.attendance_days,
                        total_working_days=line.total_working_days,
                        overtime_hours=line.approved_overtime_hours,
                        overtime_rate=line.overtime_rate,
                        overtime_amount=line.overtime_amount,
                        reimbursement_amount=line.approved_reimbursement_amount,
                        net_pay=line.net_pay,
                        created_at=created_at,
                    )
                )
                self._next_payslip_id += 1

            self._periods.mark_payroll_processed(period_id)
            return payroll

    def list_recent(self, *, limit, offset=0):
        rows = sorted(self.rows.values(), key=lambda p: p.payroll_id, reverse=True)
        return rows[offset : offset + limit]

    def get_payslip(self, user_id, period_id):
        return next((s for s in self.payslips if s.user_id == user_id and s.period_id == period_id), None)

    def list_payslips(self, period_id):
        return sorted((s for s in self.payslips if s.period_id == period_id), key=lambda s: s.user_id)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock(now):
    return FixedClock(now)


@pytest.fixture
def admin() -> AuthContext:
    return AuthContext(user_id=1, role=Role.ADMIN)


@pytest.fixture
def employee() -> AuthContext:
    return AuthContext(user_id=2, role=Role.EMPLOYEE)


@pytest.fixture
def other_employee() -> AuthContext:
    return AuthContext(user_id=3, role=Role.EMPLOYEE)


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers(
        [
            User(user_id=1, full_name="Admin", username="admin", role=Role.ADMIN, salary=Decimal("0")),
            User(user_id=2, full_name="An Nguyen", username="an", role=Role.EMPLOYEE, salary=Decimal("4600")),
            User(user_id=3, full_name="Binh Tran", username="binh", role=Role.EMPLOYEE, salary=Decimal("9200")),
            User(
                user_id=4,
                full_name="Former Staff",
                username="former",
                role=Role.EMPLOYEE,
                salary=Decimal("5000"),
                is_active=False,
            ),
        ]
    )


@pytest.fixture
def container(users, clock):
    periods = InMemoryPeriods()
    return assemble(
        users_repo=users,
        periods_repo=periods,
        attendance_repo=InMemoryAttendance(),
        overtime_repo=InMemoryOvertime(periods),
        reimbursements_repo=InMemoryReimbursements(periods),
        payrolls_repo=InMemoryPayrolls(periods),
        clock=clock,
        rate_calculator=FlatOvertimeRateCalculator(Decimal("25")),
    )


@pytest.fixture
def january(container, admin) -> AttendancePeriod:
    """Active period covering January 2024 (23 working days)."""

    return container.period_service.create_period(
        requester=admin,
        name="January 2024",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 31),
    )
