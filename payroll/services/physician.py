"""
Physician pay: base pay from roster hours plus the performance-pay formula.

Base pay has two configured sub-modes:

    guarantee: guarantee_salary + (actual_hours - standard_hours) x hourly_rate
    license:   license_fee + actual_hours x hourly_rate

The performance bonus compares the NHI-derived performance total against the
base already paid for the same (two-months-earlier) period and is floored at
zero. Self-pay shares are paid on top and never enter that comparison.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from .contracts import (
    ZERO,
    PayrollConfigurationError,
    PhysicianBaseConfig,
    PhysicianPayResult,
    PhysicianPerformanceInput,
    PhysicianShift,
    as_decimal,
)
from .enums import PhysicianBaseMode
from .payroll_utils import minutes_to_hours, round_currency, round_hours, whole_minutes

logger = logging.getLogger(__name__)

DEFAULT_NHI_RATE = Decimal("0.8")
DEFAULT_HOURS_PER_SHIFT = Decimal("3.5")
DAYS_PER_WEEK = Decimal("7")
DAYS_PER_MONTH = Decimal("30")
PERCENT = Decimal("100")


def physician_roster_hours(
    shifts: Iterable[PhysicianShift], hours_per_shift: Decimal = DEFAULT_HOURS_PER_SHIFT
) -> Decimal:
    """
    Total rostered hours of a billing month.

    A shift with both times counts its own length; a shift without times
    (or with an end not after its start) counts ``hours_per_shift``.
    """
    hours_per_shift = as_decimal(hours_per_shift, "hours_per_shift")
    total = ZERO
    for shift in shifts:
        if shift.start is not None and shift.end is not None and shift.end > shift.start:
            minutes = whole_minutes(
                datetime.combine(shift.work_date, shift.start),
                datetime.combine(shift.work_date, shift.end),
            )
            total += minutes_to_hours(minutes)
        else:
            total += hours_per_shift
    return round_hours(total)


def standard_hours_for(config: PhysicianBaseConfig) -> Decimal:
    """
    Standard monthly hours of a guarantee-mode physician.

    An explicit figure wins; otherwise weekly sessions are spread over a
    30-day month.
    """
    if config.standard_hours is not None:
        return round_hours(config.standard_hours)
    weekly = config.shifts_per_week * config.hours_per_shift
    return round_hours(weekly / DAYS_PER_WEEK * DAYS_PER_MONTH)


def resolve_past_base_salary(
    history_base: Optional[Decimal], config: PhysicianBaseConfig
) -> Decimal:
    """Base actually paid for the performance period, else the configured guarantee"""
    if history_base is not None:
        return round_currency(as_decimal(history_base, "past_base_salary"))
    return round_currency(config.guarantee_salary)


class PhysicianIncentiveCalculator:
    """Calculates one physician's monthly pay"""

    def __init__(self, default_nhi_rate: Decimal = DEFAULT_NHI_RATE):
        self.default_nhi_rate = as_decimal(default_nhi_rate, "nhi_rate")

    def base_pay(
        self, config: PhysicianBaseConfig, actual_hours: Decimal
    ) -> Tuple[Decimal, Decimal, Decimal, Decimal]:
        """
        Returns:
            (standard_hours, work_pay, adjustment, base_pay) where work_pay is
            the fixed part and adjustment the hours-driven part
        """
        if config.mode == PhysicianBaseMode.LICENSE:
            work_pay = round_currency(config.license_fee)
            adjustment = round_currency(actual_hours * config.hourly_rate)
            return ZERO, work_pay, adjustment, work_pay + adjustment

        standard = standard_hours_for(config)
        work_pay = round_currency(config.guarantee_salary)
        adjustment = round_currency((actual_hours - standard) * config.hourly_rate)
        return standard, work_pay, adjustment, work_pay + adjustment

    def calculate(
        self,
        performance: PhysicianPerformanceInput,
        config: PhysicianBaseConfig,
        actual_hours: Optional[Decimal] = None,
        shifts: Iterable[PhysicianShift] = (),
    ) -> PhysicianPayResult:
        """
        Calculate physician pay for one billing month.

        Args:
            performance: NHI points and other throughput of the settled period
            config: Base-pay configuration
            actual_hours: Rostered hours, if already known
            shifts: Roster shifts used when actual_hours is not given

        Raises:
            PayrollConfigurationError: On negative hours or NHI rate
        """
        if actual_hours is None:
            actual_hours = physician_roster_hours(shifts, config.hours_per_shift)
        actual_hours = round_hours(as_decimal(actual_hours, "actual_hours"))
        if actual_hours < ZERO:
            raise PayrollConfigurationError("actual_hours cannot be negative", "actual_hours")

        nhi_rate = (
            performance.nhi_rate if performance.nhi_rate is not None else self.default_nhi_rate
        )
        if nhi_rate < ZERO:
            raise PayrollConfigurationError("nhi_rate cannot be negative", "nhi_rate")

        standard, work_pay, adjustment, base = self.base_pay(config, actual_hours)

        nhi_total = round_currency(performance.nhi_points * nhi_rate)
        performance_total = round_currency(
            performance.nhi_points * nhi_rate - performance.reg_fee_deduction
        )
        past_base = round_currency(performance.past_base_salary)
        bonus = max(ZERO, performance_total - past_base)

        self_pay_total = round_currency(
            sum((i.amount * i.rate / PERCENT for i in performance.self_pay_items), ZERO)
        )
        extra_total = round_currency(
            sum((i.amount for i in performance.extra_items), ZERO)
        )
        insurance_labor = round_currency(config.insurance_labor)
        insurance_health = round_currency(config.insurance_health)

        net_pay = (
            base
            + bonus
            + self_pay_total
            + extra_total
            - insurance_labor
            - insurance_health
        )
        transfer = round_currency(performance.transfer_amount)

        logger.info(
            "Physician pay calculated",
            extra={
                "mode": config.mode.value,
                "actual_hours": str(actual_hours),
                "base_pay": str(base),
                "bonus": str(bonus),
                "net_pay": str(net_pay),
                "action": "physician_pay_calculated",
            },
        )

        return PhysicianPayResult(
            mode=config.mode,
            actual_hours=actual_hours,
            standard_hours=standard,
            hourly_rate=config.hourly_rate,
            work_pay=work_pay,
            adjustment=adjustment,
            base_pay=base,
            nhi_rate=nhi_rate,
            nhi_total=nhi_total,
            performance_total=performance_total,
            past_base_salary=past_base,
            bonus=bonus,
            self_pay_total=self_pay_total,
            extra_total=extra_total,
            insurance_labor=insurance_labor,
            insurance_health=insurance_health,
            net_pay=net_pay,
            transfer_amount=transfer,
            cash_amount=net_pay - transfer,
            patient_count=performance.patient_count,
            clinic_days=performance.clinic_days,
        )
