"""Schedule-clamped hour accounting."""

from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..contracts import AttendanceEvent, ScheduleEntry, ShiftWindow
from ..enums import AccountingMode
from ..payroll_utils import get_timezone, to_local, whole_minutes
from .base import (
    NOTE_MISSING_CLOCK_OUT,
    NOTE_UNSCHEDULED,
    AbstractAccountingStrategy,
    DayResolution,
)


class ScheduleHoursStrategy(AbstractAccountingStrategy):
    """
    Clamp worked time to the published shift windows.

    For every window the credited time is the overlap between the window and
    each complete punch pair. Early arrival and late departure are not paid;
    late arrival and early leave beyond the tolerance are noted. Punches on a
    day without any window credit nothing.
    """

    mode = AccountingMode.SCHEDULE

    def resolve(
        self,
        resolution: DayResolution,
        events: Sequence[AttendanceEvent],
        entry: Optional[ScheduleEntry],
    ) -> None:
        shifts = entry.shifts if entry is not None else ()
        resolution.shift_info = " ".join(shift.label for shift in shifts)

        if not shifts:
            if events:
                resolution.notes.append(NOTE_UNSCHEDULED)
            resolution.minutes = 0
            return

        if any(event.is_open for event in events):
            resolution.notes.append(NOTE_MISSING_CLOCK_OUT)

        tz_name = self.rules.time_zone
        pairs = [
            (to_local(e.clock_in, tz_name), to_local(e.clock_out, tz_name))
            for e in events
            if not e.is_open
        ]

        total = 0
        for shift in shifts:
            total += self._resolve_window(resolution, shift, pairs)
        resolution.minutes = total

    def _resolve_window(self, resolution: DayResolution, shift: ShiftWindow, pairs) -> int:
        tz = get_timezone(self.rules.time_zone)
        scheduled_start = tz.localize(datetime.combine(resolution.work_date, shift.start))
        scheduled_end = tz.localize(datetime.combine(resolution.work_date, shift.end))

        minutes = 0
        overlapping = []
        for clock_in, clock_out in pairs:
            effective_start = max(clock_in, scheduled_start)
            effective_end = min(clock_out, scheduled_end)
            if effective_end > effective_start:
                minutes += whole_minutes(effective_start, effective_end)
                overlapping.append((clock_in, clock_out))

        if not pairs:
            return 0
        if not overlapping:
            resolution.notes.append(f"absent {shift.label}")
            return 0

        tolerance = timedelta(minutes=self.rules.late_tolerance_minutes)
        first_in = min(clock_in for clock_in, _ in overlapping)
        last_out = max(clock_out for _, clock_out in overlapping)
        if first_in - scheduled_start > tolerance:
            resolution.notes.append(f"late {shift.label} ({first_in:%H:%M})")
        if scheduled_end - last_out > tolerance:
            resolution.notes.append(f"early leave {shift.label} ({last_out:%H:%M})")
        return minutes
