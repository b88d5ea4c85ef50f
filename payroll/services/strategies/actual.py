"""Actual-punch hour accounting."""

from typing import Optional, Sequence

from ..contracts import AttendanceEvent, ScheduleEntry
from ..enums import AccountingMode
from ..payroll_utils import whole_minutes
from .base import NOTE_MISSING_CLOCK_OUT, AbstractAccountingStrategy, DayResolution

SHIFT_INFO_ACTUAL = "actual"


class ActualHoursStrategy(AbstractAccountingStrategy):
    """
    Trust the punch clock.

    Worked time is latest clock-out minus earliest clock-in across all of
    the day's punches. A day with an open punch contributes nothing; the
    open shift is not guessed at.
    """

    mode = AccountingMode.ACTUAL

    def resolve(
        self,
        resolution: DayResolution,
        events: Sequence[AttendanceEvent],
        entry: Optional[ScheduleEntry],
    ) -> None:
        resolution.shift_info = SHIFT_INFO_ACTUAL
        if not events:
            return

        if any(event.is_open for event in events):
            resolution.notes.append(NOTE_MISSING_CLOCK_OUT)
            resolution.minutes = 0
            return

        earliest_in = min(event.clock_in for event in events)
        latest_out = max(event.clock_out for event in events)
        resolution.minutes = whole_minutes(earliest_in, latest_out)
