"""
Payroll utility functions: rounding, local-day bucketing and calendar helpers.

Rounding rule, used everywhere in the engine:
    hours    -> 2 decimal places, ROUND_HALF_UP  (round_hours)
    currency -> whole units,      ROUND_HALF_UP  (round_currency)
Every priced component is rounded once when it is produced and totals are
sums of rounded components, so repeated runs never drift by a cent.
"""

import calendar
import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import pytz

logger = logging.getLogger(__name__)

HOURS_QUANTUM = Decimal("0.01")
CURRENCY_QUANTUM = Decimal("1")
MINUTES_PER_HOUR = Decimal("60")
STANDARD_DAILY_HOURS = Decimal("8")

EMPTY_CLOCK = "--:--"


def round_hours(value: Decimal) -> Decimal:
    return Decimal(value).quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)


def round_currency(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def minutes_to_hours(minutes: int) -> Decimal:
    """Whole minutes to hours at two-decimal precision"""
    return round_hours(Decimal(minutes) / MINUTES_PER_HOUR)


def whole_minutes(start: datetime, end: datetime) -> int:
    """
    Whole minutes from start to end, truncated toward zero.

    Negative spans (clock-out before clock-in) are clamped to zero.
    """
    seconds = (end - start).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // 60)


def get_timezone(time_zone: str):
    try:
        return pytz.timezone(time_zone)
    except pytz.UnknownTimeZoneError:
        from .contracts import PayrollConfigurationError

        raise PayrollConfigurationError(f"Unknown time zone: {time_zone}", "time_zone")


def to_local(timestamp: datetime, time_zone: str) -> datetime:
    """
    Express a timestamp in the clinic's local time.

    Aware timestamps are converted; naive ones are taken to be local
    already and are localized as-is.
    """
    tz = get_timezone(time_zone)
    if timestamp.tzinfo is None:
        return tz.localize(timestamp)
    return timestamp.astimezone(tz)


def local_work_date(timestamp: Optional[datetime], time_zone: str) -> Optional[date]:
    """
    Calendar day a punch belongs to, on the clinic's local calendar.

    This is the only place a timestamp is bucketed into a day. A punch at
    2025-03-03T17:30Z is 2025-03-04 in Asia/Taipei, never 03-03.
    """
    if timestamp is None:
        return None
    return to_local(timestamp, time_zone).date()


def format_clock(timestamp: Optional[datetime], time_zone: str) -> str:
    if timestamp is None:
        return EMPTY_CLOCK
    return to_local(timestamp, time_zone).strftime("%H:%M")


def monthly_standard_hours(year: int, month: int) -> Decimal:
    """
    Default monthly standard-hours ceiling: Monday-Friday days x 8 hours.

    Args:
        year: Year (YYYY)
        month: Month number (1-12)

    Returns:
        Ceiling in hours
    """
    _, num_days = calendar.monthrange(year, month)
    working_days = sum(
        1 for day in range(1, num_days + 1) if date(year, month, day).weekday() < 5
    )
    logger.debug(
        f"Standard working days in {year}-{month:02d}: {working_days}",
        extra={"year": year, "month": month, "working_days": working_days},
    )
    return STANDARD_DAILY_HOURS * working_days


def ppf_target_month(year: int, month: int) -> tuple:
    """
    Performance period settled in a given pay month.

    Clinical revenue is reconciled two months late: pay month 2025-03
    settles period 2025-01.
    """
    index = year * 12 + (month - 1) - 2
    return index // 12, index % 12 + 1


def month_bounds(year: int, month: int) -> tuple:
    _, last_day = calendar.monthrange(year, month)
    return date(year, month, 1), date(year, month, last_day)
