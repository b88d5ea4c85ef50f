# Payroll services package

from .contracts import (
    AttendanceEvent,
    CalculationContext,
    LeaveRequest,
    PayrollConfigurationError,
    PayrollError,
    PayrollRules,
    RosterLookup,
    SalaryResult,
    ScheduleEntry,
    ShiftWindow,
    WorkerProfile,
)
from .payroll_service import BulkCalculationResult, PayrollService
from .physician import PhysicianIncentiveCalculator


def payroll_rules_from_settings() -> PayrollRules:
    """
    Build the engine configuration from ``settings.PAYROLL_RULES``.

    This is the only place the engine's configuration meets Django settings.
    """
    from django.conf import settings

    raw = getattr(settings, "PAYROLL_RULES", {}) or {}
    kwargs = {}
    if "daily_normal_caps" in raw:
        kwargs["daily_normal_caps"] = raw["daily_normal_caps"]
    if "monthly_hour_divisor" in raw:
        kwargs["monthly_hour_divisor"] = raw["monthly_hour_divisor"]
    if "late_tolerance_minutes" in raw:
        kwargs["late_tolerance_minutes"] = int(raw["late_tolerance_minutes"])
    kwargs["time_zone"] = raw.get("time_zone") or getattr(
        settings, "CLINIC_TIME_ZONE", "Asia/Taipei"
    )
    return PayrollRules(**kwargs)


__all__ = [
    "AttendanceEvent",
    "BulkCalculationResult",
    "CalculationContext",
    "LeaveRequest",
    "PayrollConfigurationError",
    "PayrollError",
    "PayrollRules",
    "PayrollService",
    "PhysicianIncentiveCalculator",
    "RosterLookup",
    "SalaryResult",
    "ScheduleEntry",
    "ShiftWindow",
    "WorkerProfile",
    "payroll_rules_from_settings",
]
