from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, SystemClock
from .core.constants import DEFAULT_OVERTIME_MULTIPLIER, STANDARD_HOURS_PER_DAY
from .database.connection import DatabaseConnection, DBConfig
from .overtime.mysql_overtime_repository import MySQLOvertimeRepository
from .overtime.repository import OvertimeRepository
from .overtime.service import OvertimeService
from .payroll.aggregation import AggregationService
from .payroll.calculator.base import OvertimeRateCalculator
from .payroll.calculator.standard_calculator import StandardOvertimeRateCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .periods.mysql_period_repository import MySQLPeriodRepository
from .periods.repository import PeriodRepository
from .periods.service import PeriodService
from .reimbursements.mysql_reimbursement_repository import MySQLReimbursementRepository
from .reimbursements.repository import ReimbursementRepository
from .reimbursements.service import ReimbursementService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    periods_repo: PeriodRepository
    attendance_repo: AttendanceRepository
    overtime_repo: OvertimeRepository
    reimbursements_repo: ReimbursementRepository
    payrolls_repo: PayrollRepository

    period_service: PeriodService
    attendance_service: AttendanceService
    overtime_service: OvertimeService
    reimbursement_service: ReimbursementService
    aggregation_service: AggregationService
    payroll_service: PayrollService

    conn: Optional[DatabaseConnection] = None


def assemble(
    *,
    users_repo: UserRepository,
    periods_repo: PeriodRepository,
    attendance_repo: AttendanceRepository,
    overtime_repo: OvertimeRepository,
    reimbursements_repo: ReimbursementRepository,
    payrolls_repo: PayrollRepository,
    clock: Clock | None = None,
    rate_calculator: OvertimeRateCalculator | None = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of any repository implementations."""

    clock = clock or SystemClock()

    period_service = PeriodService(periods_repo, clock=clock)
    overtime_service = OvertimeService(overtime_repo, period_service, clock=clock)
    reimbursement_service = ReimbursementService(reimbursements_repo, period_service, clock=clock)
    aggregation_service = AggregationService(
        period_service,
        users_repo,
        attendance_repo,
        overtime_repo,
        reimbursements_repo,
        rate_calculator=rate_calculator,
    )
    attendance_service = AttendanceService(attendance_repo, period_service, aggregation_service, clock=clock)
    payroll_service = PayrollService(payrolls_repo, period_service, aggregation_service, clock=clock)

    return Container(
        users_repo=users_repo,
        periods_repo=periods_repo,
        attendance_repo=attendance_repo,
        overtime_repo=overtime_repo,
        reimbursements_repo=reimbursements_repo,
        payrolls_repo=payrolls_repo,
        period_service=period_service,
        attendance_service=attendance_service,
        overtime_service=overtime_service,
        reimbursement_service=reimbursement_service,
        aggregation_service=aggregation_service,
        payroll_service=payroll_service,
        conn=conn,
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    rate_calculator = StandardOvertimeRateCalculator(
        hours_per_day=int(getattr(settings, "STANDARD_HOURS_PER_DAY", STANDARD_HOURS_PER_DAY)),
        multiplier=Decimal(str(getattr(settings, "OVERTIME_MULTIPLIER", DEFAULT_OVERTIME_MULTIPLIER))),
    )

    return assemble(
        users_repo=MySQLUserRepository(conn),
        periods_repo=MySQLPeriodRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        overtime_repo=MySQLOvertimeRepository(conn),
        reimbursements_repo=MySQLReimbursementRepository(conn),
        payrolls_repo=MySQLPayrollRepository(conn),
        rate_calculator=rate_calculator,
        conn=conn,
    )
