"""
Base strategy interface for hour accounting.

An accounting strategy turns one worker's one calendar day (its punches and
its roster entry) into a single worked-minutes figure. The two concrete
strategies, actual and schedule, are registered with the factory and chosen
by the worker's accounting mode.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from ..contracts import AttendanceEvent, PayrollRules, ScheduleEntry
from ..enums import AccountingMode
from ..payroll_utils import EMPTY_CLOCK, format_clock, minutes_to_hours

logger = logging.getLogger(__name__)

NOTE_MISSING_CLOCK_OUT = "missing clock-out"
NOTE_UNSCHEDULED = "unscheduled attendance"


@dataclass
class DayResolution:
    """Worked time of one day plus what a reviewer needs to see about it"""

    work_date: date
    minutes: int = 0
    shift_info: str = ""
    clock_in: str = EMPTY_CLOCK
    clock_out: str = EMPTY_CLOCK
    punches: str = EMPTY_CLOCK
    notes: List[str] = field(default_factory=list)

    @property
    def hours(self) -> Decimal:
        return minutes_to_hours(self.minutes)

    @property
    def note(self) -> str:
        return "; ".join(self.notes)


class AbstractAccountingStrategy(ABC):
    """
    Abstract base class for hour-accounting strategies.

    This class provides:
    - Consistent interface across both accounting modes
    - The punch display strings shared by both modes
    - Debug logging of per-day notes
    """

    mode: AccountingMode

    def __init__(self, rules: PayrollRules):
        """
        Initialize the strategy with the computation's rules.

        Args:
            rules: Explicit engine configuration (time zone, tolerance)
        """
        self.rules = rules
        self.logger = logger
        self._strategy_name = self.__class__.__name__

    @abstractmethod
    def resolve(
        self,
        resolution: DayResolution,
        events: Sequence[AttendanceEvent],
        entry: Optional[ScheduleEntry],
    ) -> None:
        """
        Fill in worked minutes, shift display and notes for one day.

        Implementations never raise on imperfect attendance; they clamp to
        zero and add a note instead.
        """
        pass

    def resolve_day(
        self,
        work_date: date,
        events: Sequence[AttendanceEvent],
        entry: Optional[ScheduleEntry] = None,
    ) -> DayResolution:
        """
        Main entry point: resolve one day's worked time.

        Args:
            work_date: Local calendar day being resolved
            events: That day's punches, in any order
            entry: That day's roster entry, if one was published

        Returns:
            DayResolution with minutes clamped to zero or more
        """
        events = sorted(events, key=lambda e: e.clock_in)
        resolution = DayResolution(work_date=work_date)
        self._fill_punch_display(resolution, events)
        self.resolve(resolution, events, entry)
        resolution.minutes = max(0, resolution.minutes)

        if resolution.notes:
            self.logger.debug(
                f"{self._strategy_name} noted {work_date}: {resolution.note}",
                extra={
                    "strategy": self._strategy_name,
                    "work_date": work_date.isoformat(),
                    "minutes": resolution.minutes,
                    "action": "attendance_note",
                },
            )
        return resolution

    def _fill_punch_display(
        self, resolution: DayResolution, events: Sequence[AttendanceEvent]
    ) -> None:
        if not events:
            return
        tz = self.rules.time_zone
        resolution.punches = ", ".join(
            f"{format_clock(e.clock_in, tz)}~{format_clock(e.clock_out, tz)}"
            for e in events
        )
        resolution.clock_in = format_clock(events[0].clock_in, tz)
        closed = [e.clock_out for e in events if e.clock_out is not None]
        if closed:
            resolution.clock_out = format_clock(max(closed), tz)
