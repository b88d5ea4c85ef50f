"""
Request serializers for the payroll calculation endpoints.

The serializers validate shapes and basic ranges; pay-configuration rules
(positive rates, shift windows on mandatory rest days, ...) are enforced by
the engine's record types and surface as PayrollConfigurationError.
"""

from decimal import Decimal

from rest_framework import serializers

from django.conf import settings

from .services.contracts import (
    AttendanceEvent,
    CalculationContext,
    ExtraItem,
    LeaveRequest,
    PayrollRules,
    PhysicianBaseConfig,
    PhysicianPerformanceInput,
    PhysicianShift,
    RosterLookup,
    SalaryAdjustment,
    ScheduleEntry,
    SelfPayItem,
    ShiftWindow,
    WorkerProfile,
)
from .services.enums import (
    AccountingMode,
    AdjustmentKind,
    DayFlag,
    LeaveType,
    PayMode,
    PhysicianBaseMode,
    WorkRegime,
)
from .services.payroll_utils import monthly_standard_hours
from .services.physician import resolve_past_base_salary


def _amount(**kwargs):
    return serializers.DecimalField(max_digits=14, decimal_places=4, **kwargs)


class MonthSerializer(serializers.Serializer):
    """Year/month pair shared by every calculation request"""

    year = serializers.IntegerField(min_value=2000, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)


class SalaryAdjustmentSerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=AdjustmentKind.values())
    name = serializers.CharField(max_length=100)
    amount = _amount()


class WorkerProfileSerializer(serializers.Serializer):
    worker_id = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=100)
    pay_mode = serializers.ChoiceField(choices=PayMode.values())
    base_rate = _amount()
    regime = serializers.ChoiceField(
        choices=WorkRegime.values(), default=WorkRegime.NORMAL.value
    )
    accounting_mode = serializers.ChoiceField(
        choices=AccountingMode.values(), default=AccountingMode.get_default().value
    )
    role = serializers.CharField(max_length=50, default="staff")
    insurance_labor = _amount(default=Decimal("0"))
    insurance_health = _amount(default=Decimal("0"))
    fixed_items = SalaryAdjustmentSerializer(many=True, default=list)


class AttendanceEventSerializer(serializers.Serializer):
    clock_in = serializers.DateTimeField()
    clock_out = serializers.DateTimeField(required=False, allow_null=True, default=None)


class ShiftWindowSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=50, required=False, default="")
    start = serializers.TimeField()
    end = serializers.TimeField()

    def validate(self, attrs):
        if attrs["end"] <= attrs["start"]:
            raise serializers.ValidationError({"end": "Shift end must be after its start"})
        return attrs


class ScheduleEntrySerializer(serializers.Serializer):
    date = serializers.DateField()
    day_flag = serializers.ChoiceField(choices=DayFlag.values(), default=DayFlag.NORMAL.value)
    shifts = ShiftWindowSerializer(many=True, default=list)


class LeaveRequestSerializer(serializers.Serializer):
    leave_type = serializers.CharField(max_length=20)
    start = serializers.DateTimeField(required=False, allow_null=True, default=None)
    end = serializers.DateTimeField(required=False, allow_null=True, default=None)
    hours = _amount(min_value=Decimal("0"))

    def validate_leave_type(self, value):
        """Accept both codes and the clinic's display labels"""
        try:
            return LeaveType.from_string(value).value
        except ValueError:
            raise serializers.ValidationError(
                f"Unknown leave type '{value}'. Must be one of {LeaveType.values()}"
            )


class WorkerMonthSerializer(serializers.Serializer):
    """One worker's month of records"""

    worker = WorkerProfileSerializer()
    monthly_standard_hours = _amount(required=False, allow_null=True, min_value=Decimal("0"))
    events = AttendanceEventSerializer(many=True, default=list)
    schedule = ScheduleEntrySerializer(many=True, default=list)
    leaves = LeaveRequestSerializer(many=True, default=list)
    adjustments = SalaryAdjustmentSerializer(many=True, default=list)


class StaffCalculationSerializer(MonthSerializer, WorkerMonthSerializer):
    holidays = serializers.ListField(child=serializers.DateField(), default=list)


class BulkStaffCalculationSerializer(MonthSerializer):
    holidays = serializers.ListField(child=serializers.DateField(), default=list)
    workers = WorkerMonthSerializer(many=True, allow_empty=False)

    def validate_workers(self, value):
        """Results are keyed by worker id, so each id may appear once"""
        seen = set()
        duplicates = []
        for payload in value:
            worker_id = payload["worker"]["worker_id"]
            if worker_id in seen and worker_id not in duplicates:
                duplicates.append(worker_id)
            seen.add(worker_id)
        if duplicates:
            raise serializers.ValidationError(
                f"Duplicate worker_id in batch: {', '.join(duplicates)}"
            )
        return value


class StandardHoursQuerySerializer(MonthSerializer):
    pass


def build_calculation_context(
    year: int, month: int, holidays, payload: dict, rules: PayrollRules
) -> CalculationContext:
    """
    Turn one validated worker payload into the engine's input records.

    Raises:
        PayrollConfigurationError: If the records describe an unusable configuration
    """
    worker_data = payload["worker"]
    worker = WorkerProfile(
        worker_id=worker_data["worker_id"],
        name=worker_data["name"],
        pay_mode=worker_data["pay_mode"],
        base_rate=worker_data["base_rate"],
        regime=worker_data["regime"],
        accounting_mode=worker_data["accounting_mode"],
        role=worker_data["role"],
        insurance_labor=worker_data["insurance_labor"],
        insurance_health=worker_data["insurance_health"],
        fixed_items=tuple(
            SalaryAdjustment(**item) for item in worker_data.get("fixed_items", [])
        ),
    )

    events = tuple(
        AttendanceEvent(
            worker_id=worker.worker_id,
            clock_in=event["clock_in"],
            clock_out=event.get("clock_out"),
        )
        for event in payload.get("events", [])
    )
    roster = RosterLookup(
        ScheduleEntry(
            worker_id=worker.worker_id,
            work_date=entry["date"],
            day_flag=entry["day_flag"],
            shifts=tuple(
                ShiftWindow(name=s.get("name", ""), start=s["start"], end=s["end"])
                for s in entry.get("shifts", [])
            ),
        )
        for entry in payload.get("schedule", [])
    )
    leaves = tuple(
        LeaveRequest(
            worker_id=worker.worker_id,
            leave_type=leave["leave_type"],
            start=leave.get("start"),
            end=leave.get("end"),
            hours=leave["hours"],
        )
        for leave in payload.get("leaves", [])
    )
    adjustments = tuple(SalaryAdjustment(**item) for item in payload.get("adjustments", []))

    ceiling = payload.get("monthly_standard_hours")
    if ceiling is None:
        ceiling = monthly_standard_hours(year, month)

    return CalculationContext(
        worker=worker,
        year=year,
        month=month,
        monthly_standard_hours=ceiling,
        events=events,
        roster=roster,
        holidays=frozenset(holidays),
        leaves=leaves,
        adjustments=adjustments,
        rules=rules,
    )


# --- physicians ---------------------------------------------------------------


class SelfPayItemSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    amount = _amount()
    rate = _amount(default=Decimal("30"), min_value=Decimal("0"), max_value=Decimal("100"))


class ExtraItemSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    amount = _amount()


class PhysicianShiftSerializer(serializers.Serializer):
    date = serializers.DateField()
    start = serializers.TimeField(required=False, allow_null=True, default=None)
    end = serializers.TimeField(required=False, allow_null=True, default=None)


class PhysicianBaseConfigSerializer(serializers.Serializer):
    mode = serializers.ChoiceField(choices=PhysicianBaseMode.values())
    hourly_rate = _amount()
    guarantee_salary = _amount(default=Decimal("0"))
    license_fee = _amount(default=Decimal("0"))
    hours_per_shift = _amount(required=False, min_value=Decimal("0"))
    shifts_per_week = _amount(default=Decimal("0"), min_value=Decimal("0"))
    standard_hours = _amount(required=False, allow_null=True, min_value=Decimal("0"))
    insurance_labor = _amount(default=Decimal("0"))
    insurance_health = _amount(default=Decimal("0"))


class PhysicianPerformanceSerializer(serializers.Serializer):
    nhi_points = _amount(min_value=Decimal("0"))
    nhi_rate = _amount(required=False, allow_null=True)
    past_base_salary = _amount(required=False, allow_null=True)
    patient_count = serializers.IntegerField(min_value=0, default=0)
    reg_fee_deduction = _amount(default=Decimal("0"))
    clinic_days = serializers.IntegerField(min_value=0, default=0)
    transfer_amount = _amount(default=Decimal("0"))
    self_pay_items = SelfPayItemSerializer(many=True, default=list)
    extra_items = ExtraItemSerializer(many=True, default=list)


class PhysicianCalculationSerializer(MonthSerializer):
    config = PhysicianBaseConfigSerializer()
    performance = PhysicianPerformanceSerializer()
    actual_hours = _amount(required=False, allow_null=True, min_value=Decimal("0"))
    shifts = PhysicianShiftSerializer(many=True, default=list)


def build_physician_inputs(payload: dict):
    """
    Turn a validated physician payload into (config, performance, shifts).

    Raises:
        PayrollConfigurationError: If the configuration is unusable
    """
    config_data = dict(payload["config"])
    if config_data.get("hours_per_shift") is None:
        config_data["hours_per_shift"] = settings.PAYROLL_DEFAULT_HOURS_PER_SHIFT
    config = PhysicianBaseConfig(**config_data)

    perf_data = dict(payload["performance"])
    perf_data["past_base_salary"] = resolve_past_base_salary(
        perf_data.get("past_base_salary"), config
    )
    perf_data["self_pay_items"] = tuple(
        SelfPayItem(**item) for item in perf_data.get("self_pay_items", [])
    )
    perf_data["extra_items"] = tuple(
        ExtraItem(**item) for item in perf_data.get("extra_items", [])
    )
    performance = PhysicianPerformanceInput(**perf_data)

    shifts = tuple(
        PhysicianShift(work_date=s["date"], start=s.get("start"), end=s.get("end"))
        for s in payload.get("shifts", [])
    )
    return config, performance, shifts
