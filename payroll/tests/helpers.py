"""
Builders for payroll engine tests.

All timestamps are built on the clinic calendar (Asia/Taipei) unless a test
is specifically about time-zone conversion.
"""

from datetime import date, datetime, time
from decimal import Decimal

import pytz

from payroll.services.contracts import (
    AttendanceEvent,
    CalculationContext,
    LeaveRequest,
    PayrollRules,
    RosterLookup,
    ScheduleEntry,
    ShiftWindow,
    WorkerProfile,
)

CLINIC_TZ = pytz.timezone("Asia/Taipei")

# March 2025 starts on a Saturday: 3rd is Monday, 8th Saturday, 9th Sunday
YEAR = 2025
MONTH = 3
MARCH_STANDARD_HOURS = Decimal("168")  # 21 weekdays x 8


def _hm(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def local_dt(day: int, hhmm: str, month: int = MONTH, year: int = YEAR) -> datetime:
    """Aware clinic-local timestamp"""
    return CLINIC_TZ.localize(datetime.combine(date(year, month, day), _hm(hhmm)))


def make_worker(**overrides) -> WorkerProfile:
    data = {
        "worker_id": "w1",
        "name": "Lin Mei",
        "pay_mode": "hourly",
        "base_rate": Decimal("200"),
        "regime": "normal",
        "accounting_mode": "actual",
    }
    data.update(overrides)
    return WorkerProfile(**data)


def make_event(day: int, clock_in: str, clock_out=None, worker_id: str = "w1") -> AttendanceEvent:
    return AttendanceEvent(
        worker_id=worker_id,
        clock_in=local_dt(day, clock_in),
        clock_out=local_dt(day, clock_out) if clock_out else None,
    )


def make_shift(start: str, end: str, name: str = "") -> ShiftWindow:
    return ShiftWindow(name=name, start=_hm(start), end=_hm(end))


def make_entry(day: int, day_flag: str = "normal", shifts=(), worker_id: str = "w1") -> ScheduleEntry:
    return ScheduleEntry(
        worker_id=worker_id,
        work_date=date(YEAR, MONTH, day),
        day_flag=day_flag,
        shifts=tuple(shifts),
    )


def make_leave(leave_type, hours, worker_id: str = "w1") -> LeaveRequest:
    return LeaveRequest(
        worker_id=worker_id,
        leave_type=leave_type,
        start=local_dt(20, "09:00"),
        end=local_dt(20, "18:00"),
        hours=Decimal(str(hours)),
    )


def make_context(
    worker=None,
    events=(),
    schedule=(),
    holidays=(),
    leaves=(),
    adjustments=(),
    monthly_standard_hours=MARCH_STANDARD_HOURS,
    rules=None,
) -> CalculationContext:
    return CalculationContext(
        worker=worker or make_worker(),
        year=YEAR,
        month=MONTH,
        monthly_standard_hours=monthly_standard_hours,
        events=tuple(events),
        roster=RosterLookup(schedule),
        holidays=frozenset(holidays),
        leaves=tuple(leaves),
        adjustments=tuple(adjustments),
        rules=rules or PayrollRules(),
    )
