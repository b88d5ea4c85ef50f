"""
Two-tier overtime splitting.

The first OVERTIME_TIER1_HOURS of any overtime span are paid at 1.34x, the
rest at 1.67x. The same split prices daily overtime beyond the regime cap,
every hour worked on a scheduled rest day, and the period overtime produced
by the monthly ceiling.
"""

from dataclasses import dataclass
from decimal import Decimal

from .contracts import ZERO
from .payroll_utils import round_currency

OVERTIME_TIER1_HOURS = Decimal("2")
OVERTIME_RATE_134 = Decimal("1.34")
OVERTIME_RATE_167 = Decimal("1.67")


@dataclass(frozen=True)
class TierSplit:
    """Hours of one overtime span split into its two tiers, with pay"""

    tier1_hours: Decimal
    tier2_hours: Decimal
    pay: Decimal

    @property
    def total_hours(self) -> Decimal:
        return self.tier1_hours + self.tier2_hours


def split_overtime_hours(hours: Decimal) -> tuple:
    """
    Split hours into (tier1, tier2).

    For hours >= 0, tier1 + tier2 == hours and tier1 <= 2.
    """
    if hours <= ZERO:
        return ZERO, ZERO
    tier1 = min(hours, OVERTIME_TIER1_HOURS)
    return tier1, hours - tier1


def split_overtime(hours: Decimal, hourly_rate: Decimal) -> TierSplit:
    """
    Split an overtime span and price it.

    Args:
        hours: Non-negative overtime hours
        hourly_rate: Worker's hourly (or hourly-equivalent) rate

    Returns:
        TierSplit with pay rounded once to whole currency units
    """
    tier1, tier2 = split_overtime_hours(hours)
    pay = round_currency(
        tier1 * hourly_rate * OVERTIME_RATE_134 + tier2 * hourly_rate * OVERTIME_RATE_167
    )
    return TierSplit(tier1_hours=tier1, tier2_hours=tier2, pay=pay)
