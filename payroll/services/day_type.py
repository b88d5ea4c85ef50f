"""Classification of calendar days into pay-relevant day types."""

from datetime import date
from typing import AbstractSet, Optional

from .contracts import ScheduleEntry
from .enums import DayFlag, DayType

_FLAG_TO_DAY_TYPE = {
    DayFlag.REGULAR: DayType.MANDATORY_REST,
    DayFlag.REST: DayType.REST,
    DayFlag.NORMAL: DayType.ORDINARY,
}


def classify_day(
    work_date: date,
    holidays: AbstractSet[date],
    entry: Optional[ScheduleEntry] = None,
) -> DayType:
    """
    Classify one day.

    A statutory holiday wins over whatever the roster says; otherwise the
    roster's day flag decides, and a day without a roster entry is ordinary.
    """
    if work_date in holidays:
        return DayType.HOLIDAY
    if entry is None:
        return DayType.ORDINARY
    return _FLAG_TO_DAY_TYPE[entry.day_flag]
