"""
Data contracts for payroll calculations.

This module defines the explicit record types the engine consumes and
produces. All of them are created fresh per computation from records the
calling layer has already fetched; the engine never mutates an input.
"""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
import decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .enums import (
    AccountingMode,
    AdjustmentKind,
    DayFlag,
    DayType,
    LeaveType,
    PayMode,
    PhysicianBaseMode,
    WorkRegime,
)
from .payroll_utils import get_timezone

ZERO = Decimal("0")


class PayrollError(Exception):
    """Base class for engine errors"""
    pass


class PayrollConfigurationError(PayrollError):
    """Raised when a computation's configuration makes a pay figure meaningless"""

    def __init__(self, message: str, field_name: Optional[str] = None):
        super().__init__(message)
        self.field_name = field_name
        self.safe_message = message


def as_decimal(value: Any, field_name: str = "value") -> Decimal:
    """
    Convert a numeric input to Decimal.

    Floats go through ``str`` so that 0.1 stays 0.1.

    Raises:
        PayrollConfigurationError: If the value is not numeric
    """
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise PayrollConfigurationError(f"{field_name} is required", field_name)
    try:
        return Decimal(str(value))
    except (ValueError, TypeError, decimal.InvalidOperation) as e:
        raise PayrollConfigurationError(
            f"Cannot convert {field_name} to Decimal: {value!r} - {e}", field_name
        )


def _coerce(instance, *names: str) -> None:
    for name in names:
        object.__setattr__(instance, name, as_decimal(getattr(instance, name), name))


def _parse_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise PayrollConfigurationError(
            f"Invalid {field_name}: {value!r}. Must be one of {enum_cls.values()}",
            field_name,
        )


# --- engine configuration -------------------------------------------------


def _default_daily_caps() -> Dict[WorkRegime, Decimal]:
    return {
        WorkRegime.NORMAL: Decimal("8"),
        WorkRegime.TWO_WEEK: Decimal("10"),
        WorkRegime.FOUR_WEEK: Decimal("10"),
        WorkRegime.EIGHT_WEEK: Decimal("8"),
        WorkRegime.NONE: Decimal("8"),
    }


@dataclass(frozen=True)
class PayrollRules:
    """
    Explicit configuration passed into every computation.

    daily_normal_caps: normal hours per ordinary day, per regime
    monthly_hour_divisor: monthly salary / divisor = hourly-equivalent rate
    late_tolerance_minutes: schedule-mode lateness/earliness tolerance
    time_zone: clinic calendar used to bucket punches into days
    """

    daily_normal_caps: Mapping[WorkRegime, Decimal] = field(
        default_factory=_default_daily_caps
    )
    monthly_hour_divisor: Decimal = Decimal("240")
    late_tolerance_minutes: int = 1
    time_zone: str = "Asia/Taipei"

    def __post_init__(self):
        _coerce(self, "monthly_hour_divisor")
        if self.monthly_hour_divisor <= ZERO:
            raise PayrollConfigurationError(
                "monthly_hour_divisor must be positive", "monthly_hour_divisor"
            )
        caps = {
            _parse_enum(WorkRegime, regime, "regime"): as_decimal(cap, "daily_normal_cap")
            for regime, cap in dict(self.daily_normal_caps).items()
        }
        missing = [regime.value for regime in WorkRegime if regime not in caps]
        if missing:
            raise PayrollConfigurationError(
                f"Missing daily normal caps for regimes: {missing}", "daily_normal_caps"
            )
        object.__setattr__(self, "daily_normal_caps", caps)
        # unknown zones fail here rather than on the first punch
        get_timezone(self.time_zone)

    def daily_cap(self, regime: WorkRegime) -> Decimal:
        return self.daily_normal_caps[regime]


# --- staff inputs -----------------------------------------------------------


@dataclass(frozen=True)
class SalaryAdjustment:
    """A named bonus or deduction line (fixed per worker or one-off per month)"""

    kind: AdjustmentKind
    name: str
    amount: Decimal

    def __post_init__(self):
        object.__setattr__(self, "kind", _parse_enum(AdjustmentKind, self.kind, "kind"))
        _coerce(self, "amount")


@dataclass(frozen=True)
class WorkerProfile:
    """Pay configuration of one staff member, immutable per computation"""

    worker_id: str
    name: str
    pay_mode: PayMode
    base_rate: Decimal
    regime: WorkRegime = WorkRegime.NORMAL
    accounting_mode: AccountingMode = AccountingMode.ACTUAL
    role: str = "staff"
    insurance_labor: Decimal = ZERO
    insurance_health: Decimal = ZERO
    fixed_items: Tuple[SalaryAdjustment, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "worker_id", str(self.worker_id))
        object.__setattr__(self, "pay_mode", _parse_enum(PayMode, self.pay_mode, "pay_mode"))
        object.__setattr__(self, "regime", _parse_enum(WorkRegime, self.regime, "regime"))
        object.__setattr__(
            self,
            "accounting_mode",
            _parse_enum(AccountingMode, self.accounting_mode, "accounting_mode"),
        )
        _coerce(self, "base_rate", "insurance_labor", "insurance_health")
        if self.base_rate <= ZERO:
            raise PayrollConfigurationError(
                f"base_rate must be positive for worker {self.worker_id}", "base_rate"
            )
        object.__setattr__(self, "fixed_items", tuple(self.fixed_items))


@dataclass(frozen=True)
class AttendanceEvent:
    """One punch pair; an open event has no clock-out"""

    worker_id: str
    clock_in: datetime
    clock_out: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "worker_id", str(self.worker_id))

    @property
    def is_open(self) -> bool:
        return self.clock_out is None


@dataclass(frozen=True)
class ShiftWindow:
    """A named published shift window on one day, in clinic-local clock time"""

    name: str
    start: time
    end: time

    def __post_init__(self):
        if self.end <= self.start:
            raise PayrollConfigurationError(
                f"Shift '{self.name}' ends ({self.end}) before it starts ({self.start})",
                "shifts",
            )

    @property
    def label(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"


@dataclass(frozen=True)
class ScheduleEntry:
    """One worker's published roster entry for one day"""

    worker_id: str
    work_date: date
    day_flag: DayFlag = DayFlag.NORMAL
    shifts: Tuple[ShiftWindow, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "worker_id", str(self.worker_id))
        object.__setattr__(self, "day_flag", _parse_enum(DayFlag, self.day_flag, "day_flag"))
        object.__setattr__(
            self, "shifts", tuple(sorted(self.shifts, key=lambda s: s.start))
        )
        if self.day_flag == DayFlag.REGULAR and self.shifts:
            raise PayrollConfigurationError(
                f"Mandatory rest day {self.work_date} for worker {self.worker_id} "
                "cannot carry shift windows",
                "shifts",
            )


class RosterLookup:
    """Roster entries keyed by (worker_id, date)"""

    def __init__(self, entries: Iterable[ScheduleEntry] = ()):
        self._entries: Dict[Tuple[str, date], ScheduleEntry] = {}
        for entry in entries:
            self._entries[(entry.worker_id, entry.work_date)] = entry

    def get(self, worker_id: str, work_date: date) -> Optional[ScheduleEntry]:
        return self._entries.get((str(worker_id), work_date))

    def dates_for(self, worker_id: str) -> List[date]:
        worker_id = str(worker_id)
        return sorted(d for (wid, d) in self._entries if wid == worker_id)

    def __len__(self):
        return len(self._entries)


@dataclass(frozen=True)
class LeaveRequest:
    """An approved leave request; approval filtering is the caller's job"""

    worker_id: str
    leave_type: LeaveType
    start: datetime
    end: datetime
    hours: Decimal

    def __post_init__(self):
        object.__setattr__(self, "worker_id", str(self.worker_id))
        if not isinstance(self.leave_type, LeaveType):
            try:
                object.__setattr__(self, "leave_type", LeaveType.from_string(self.leave_type))
            except ValueError:
                raise PayrollConfigurationError(
                    f"Invalid leave_type: {self.leave_type!r}", "leave_type"
                )
        _coerce(self, "hours")
        if self.hours < ZERO:
            raise PayrollConfigurationError("Leave hours cannot be negative", "hours")


@dataclass(frozen=True)
class CalculationContext:
    """
    Everything one worker's monthly computation needs.

    This keeps the aggregator free of any data-store coupling.
    """

    worker: WorkerProfile
    year: int
    month: int
    monthly_standard_hours: Decimal
    events: Tuple[AttendanceEvent, ...] = ()
    roster: RosterLookup = field(default_factory=RosterLookup)
    holidays: frozenset = frozenset()
    leaves: Tuple[LeaveRequest, ...] = ()
    adjustments: Tuple[SalaryAdjustment, ...] = ()
    rules: PayrollRules = field(default_factory=PayrollRules)

    def __post_init__(self):
        if not 1 <= int(self.month) <= 12:
            raise PayrollConfigurationError(f"Invalid month: {self.month}", "month")
        _coerce(self, "monthly_standard_hours")
        if self.monthly_standard_hours < ZERO:
            raise PayrollConfigurationError(
                "monthly_standard_hours cannot be negative", "monthly_standard_hours"
            )
        object.__setattr__(self, "events", tuple(self.events))
        object.__setattr__(self, "holidays", frozenset(self.holidays))
        object.__setattr__(self, "leaves", tuple(self.leaves))
        object.__setattr__(self, "adjustments", tuple(self.adjustments))


# --- staff outputs ----------------------------------------------------------


@dataclass
class DailyRecord:
    """One worked day of the monthly ledger"""

    work_date: date
    day_type: DayType
    shift_info: str
    clock_in: str
    clock_out: str
    punches: str
    total_hours: Decimal
    normal_hours: Decimal = ZERO
    ot134: Decimal = ZERO
    ot167: Decimal = ZERO
    holiday_hours: Decimal = ZERO
    pay: Decimal = ZERO
    note: str = ""


@dataclass
class AttendanceIssue:
    """A day that produced a note but no creditable hours"""

    work_date: date
    note: str


@dataclass
class SalaryResult:
    """Monthly staff payroll result"""

    worker_id: str
    worker_name: str
    role: str
    pay_mode: PayMode
    regime: WorkRegime
    accounting_mode: AccountingMode
    year: int
    month: int
    hourly_rate: Decimal
    monthly_standard_hours: Decimal

    total_work_hours: Decimal = ZERO
    normal_hours: Decimal = ZERO
    normal_ot_hours: Decimal = ZERO
    period_ot_hours: Decimal = ZERO
    rest_work_hours: Decimal = ZERO
    holiday_work_hours: Decimal = ZERO

    base_pay: Decimal = ZERO
    ot_pay: Decimal = ZERO
    holiday_pay: Decimal = ZERO
    leave_addition: Decimal = ZERO
    leave_deduction: Decimal = ZERO

    fixed_bonus_pay: Decimal = ZERO
    temp_bonus_pay: Decimal = ZERO
    fixed_deduction_pay: Decimal = ZERO
    temp_deduction_pay: Decimal = ZERO
    insurance_labor: Decimal = ZERO
    insurance_health: Decimal = ZERO

    gross_pay: Decimal = ZERO
    total_deduction: Decimal = ZERO
    net_pay: Decimal = ZERO

    warnings: List[str] = field(default_factory=list)
    daily_records: List[DailyRecord] = field(default_factory=list)
    attendance_issues: List[AttendanceIssue] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return serialize_contract(self)


# --- physician inputs / outputs --------------------------------------------


@dataclass(frozen=True)
class SelfPayItem:
    """Self-pay treatment revenue with the physician's percentage share"""

    name: str
    amount: Decimal
    rate: Decimal = Decimal("30")

    def __post_init__(self):
        _coerce(self, "amount", "rate")


@dataclass(frozen=True)
class ExtraItem:
    """Free-form signed adjustment added straight to net pay"""

    name: str
    amount: Decimal

    def __post_init__(self):
        _coerce(self, "amount")


@dataclass(frozen=True)
class PhysicianShift:
    """One rostered clinic session; times may be missing on legacy rosters"""

    work_date: date
    start: Optional[time] = None
    end: Optional[time] = None


@dataclass(frozen=True)
class PhysicianBaseConfig:
    """Per-physician base-pay configuration"""

    mode: PhysicianBaseMode
    hourly_rate: Decimal
    guarantee_salary: Decimal = ZERO
    license_fee: Decimal = ZERO
    hours_per_shift: Decimal = Decimal("3.5")
    shifts_per_week: Decimal = ZERO
    standard_hours: Optional[Decimal] = None
    insurance_labor: Decimal = ZERO
    insurance_health: Decimal = ZERO

    def __post_init__(self):
        object.__setattr__(self, "mode", _parse_enum(PhysicianBaseMode, self.mode, "mode"))
        _coerce(
            self,
            "hourly_rate",
            "guarantee_salary",
            "license_fee",
            "hours_per_shift",
            "shifts_per_week",
            "insurance_labor",
            "insurance_health",
        )
        if self.standard_hours is not None:
            _coerce(self, "standard_hours")
        if self.hourly_rate < ZERO:
            raise PayrollConfigurationError("hourly_rate cannot be negative", "hourly_rate")


@dataclass(frozen=True)
class PhysicianPerformanceInput:
    """Clinical throughput of one performance period"""

    nhi_points: Decimal
    past_base_salary: Decimal
    patient_count: int = 0
    nhi_rate: Optional[Decimal] = None
    reg_fee_deduction: Decimal = ZERO
    clinic_days: int = 0
    transfer_amount: Decimal = ZERO
    self_pay_items: Tuple[SelfPayItem, ...] = ()
    extra_items: Tuple[ExtraItem, ...] = ()

    def __post_init__(self):
        _coerce(self, "nhi_points", "past_base_salary", "reg_fee_deduction", "transfer_amount")
        if self.nhi_rate is not None:
            _coerce(self, "nhi_rate")
        object.__setattr__(self, "self_pay_items", tuple(self.self_pay_items))
        object.__setattr__(self, "extra_items", tuple(self.extra_items))


@dataclass
class PhysicianPayResult:
    """Computed physician pay for one billing month"""

    mode: PhysicianBaseMode
    actual_hours: Decimal
    standard_hours: Decimal
    hourly_rate: Decimal
    work_pay: Decimal
    adjustment: Decimal
    base_pay: Decimal
    nhi_rate: Decimal
    nhi_total: Decimal
    performance_total: Decimal
    past_base_salary: Decimal
    bonus: Decimal
    self_pay_total: Decimal
    extra_total: Decimal
    insurance_labor: Decimal
    insurance_health: Decimal
    net_pay: Decimal
    transfer_amount: Decimal
    cash_amount: Decimal
    patient_count: int = 0
    clinic_days: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return serialize_contract(self)


def serialize_contract(instance) -> Dict[str, Any]:
    """
    Convert a result contract into plain JSON-friendly data.

    Decimals become strings, dates ISO strings and enums their values, so two
    identical computations always serialize to identical bytes.
    """
    return _to_plain(asdict(instance))


def _to_plain(value):
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value
