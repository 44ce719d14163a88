from datetime import datetime
from decimal import Decimal

import mysql.connector
import pytest
from mysql.connector import errorcode

from attendance_payroll.core.exceptions import UniqueViolation
from attendance_payroll.database.mysql_base import db_cursor
from attendance_payroll.payroll.model import EmployeeBreakdown, PayrollDraft, PayrollTotals
from attendance_payroll.payroll.mysql_payroll_repository import MySQLPayrollRepository

CREATED = datetime(2024, 2, 1, 9, 0, 0)


class FakeCursor:
    def __init__(self, rows=()):
        self.rows = list(rows)
        self.executed = []
        self.executemany_calls = []
        self.lastrowid = None
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))
        if sql.lstrip().upper().startswith("INSERT INTO PAYROLLS"):
            self.lastrowid = 7

    def executemany(self, sql, seq):
        self.executemany_calls.append((" ".join(sql.split()), list(seq)))

    def fetchone(self):
        return self.rows.pop(0) if self.rows else None

    def fetchall(self):
        rows, self.rows = self.rows, []
        return rows

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    def __init__(self, cursor):
        self.conn = FakeConnection(cursor)

    def connect(self):
        return self.conn


def test_success_commits_and_closes():
    factory = FakeConnectionFactory(FakeCursor())

    with db_cursor(factory) as (_, cur):
        cur.execute("SELECT 1")

    assert factory.conn.committed
    assert not factory.conn.rolled_back
    assert factory.conn.closed
    assert cur.closed


def test_duplicate_entry_becomes_unique_violation():
    factory = FakeConnectionFactory(FakeCursor())

    with pytest.raises(UniqueViolation):
        with db_cursor(factory):
            raise mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)

    assert factory.conn.rolled_back
    assert not factory.conn.committed
    assert factory.conn.closed


def test_other_integrity_errors_propagate():
    factory = FakeConnectionFactory(FakeCursor())

    with pytest.raises(mysql.connector.IntegrityError) as excinfo:
        with db_cursor(factory):
            raise mysql.connector.IntegrityError(msg="FK failed", errno=errorcode.ER_NO_REFERENCED_ROW_2)

    assert not isinstance(excinfo.value, UniqueViolation)
    assert factory.conn.rolled_back


def test_any_error_rolls_back():
    factory = FakeConnectionFactory(FakeCursor())

    with pytest.raises(RuntimeError):
        with db_cursor(factory):
            raise RuntimeError("boom")

    assert factory.conn.rolled_back
    assert factory.conn.closed


def _line(user_id, salary):
    return EmployeeBreakdown(
        user_id=user_id,
        full_name=f"User {user_id}",
        base_salary=Decimal(salary),
        attendance_days=20,
        total_working_days=23,
        overtime_records=1,
        approved_overtime_hours=Decimal("2.00"),
        overtime_rate=Decimal("25.0000"),
        overtime_amount=Decimal("50.00"),
        reimbursement_records=0,
        approved_reimbursement_amount=Decimal("0.00"),
    )


def _draft():
    lines = [_line(2, "4600.00"), _line(3, "9200.00")]
    return PayrollDraft(totals=PayrollTotals.of(lines), lines=lines)


def _compile(repo, build):
    return repo.record_compiled(period_id=5, build=build, processed_by=1, created_at=CREATED, notes="Jan")


@pytest.mark.parametrize(
    "locked_row",
    [None, {"is_active": 1, "payroll_processed": 0}, {"is_active": 0, "payroll_processed": 1}],
)
def test_compile_writes_nothing_unless_period_is_closed_and_open_for_payroll(locked_row):
    cursor = FakeCursor([locked_row] if locked_row else [])
    factory = FakeConnectionFactory(cursor)
    built = []

    result = _compile(MySQLPayrollRepository(factory), lambda: built.append(1) or _draft())

    assert result is None
    assert built == []
    assert len(cursor.executed) == 1
    assert "FOR UPDATE" in cursor.executed[0][0]
    assert cursor.executemany_calls == []


def test_compile_inserts_payroll_payslips_and_sets_flag():
    cursor = FakeCursor([{"is_active": 0, "payroll_processed": 0}])
    factory = FakeConnectionFactory(cursor)

    payroll = _compile(MySQLPayrollRepository(factory), _draft)

    assert payroll.payroll_id == 7
    assert payroll.total_employees == 2
    assert payroll.total_amount == Decimal("13900.00")
    assert factory.conn.committed

    statements = [sql for sql, _ in cursor.executed]
    assert statements[0].startswith("SELECT is_active, payroll_processed FROM attendance_periods")
    assert statements[1].startswith("INSERT INTO payrolls")
    assert statements[2].startswith("UPDATE attendance_periods SET payroll_processed=1")

    sql, rows = cursor.executemany_calls[0]
    assert sql.startswith("INSERT INTO payslips")
    assert [row[0] for row in rows] == [7, 7]
    assert [row[2] for row in rows] == [2, 3]
    # net pay is the second to last column
    assert [row[-2] for row in rows] == [Decimal("4650.00"), Decimal("9250.00")]


def test_compile_duplicate_payroll_row_rolls_back():
    class DuplicatePayrollCursor(FakeCursor):
        def execute(self, sql, params=None):
            super().execute(sql, params)
            if sql.lstrip().upper().startswith("INSERT INTO PAYROLLS"):
                raise mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)

    cursor = DuplicatePayrollCursor([{"is_active": 0, "payroll_processed": 0}])
    factory = FakeConnectionFactory(cursor)

    with pytest.raises(UniqueViolation):
        _compile(MySQLPayrollRepository(factory), _draft)

    assert factory.conn.rolled_back
    assert cursor.executemany_calls == []
