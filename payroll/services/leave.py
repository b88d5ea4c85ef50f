"""
Leave adjustments.

Each approved leave request is priced on its own, independently of the daily
ledger:

- monthly-paid workers lose pay for personal and family-care leave at the
  hourly-equivalent rate, and half of it for sick and menstrual leave;
- hourly-paid workers gain pay for annual, bereavement, official, marriage
  and maternity leave, which their hourly wage does not otherwise cover.

Every other combination is neutral.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from .contracts import ZERO, LeaveRequest
from .enums import LeaveType, PayMode
from .payroll_utils import round_currency

logger = logging.getLogger(__name__)

# leave type -> share of the hourly rate deducted from a monthly salary
MONTHLY_DEDUCTION_RATES = {
    LeaveType.PERSONAL: Decimal("1"),
    LeaveType.FAMILY_CARE: Decimal("1"),
    LeaveType.SICK: Decimal("0.5"),
    LeaveType.MENSTRUAL: Decimal("0.5"),
}

HOURLY_PAID_LEAVE = frozenset(
    {
        LeaveType.ANNUAL,
        LeaveType.BEREAVEMENT,
        LeaveType.OFFICIAL,
        LeaveType.MARRIAGE,
        LeaveType.MATERNITY,
    }
)


@dataclass(frozen=True)
class LeaveTotals:
    addition: Decimal = ZERO
    deduction: Decimal = ZERO


def price_leave(leave: LeaveRequest, pay_mode: PayMode, hourly_rate: Decimal) -> LeaveTotals:
    """Price a single leave request as an addition or a deduction"""
    if pay_mode == PayMode.MONTHLY:
        share = MONTHLY_DEDUCTION_RATES.get(leave.leave_type)
        if share is None:
            return LeaveTotals()
        return LeaveTotals(deduction=round_currency(leave.hours * hourly_rate * share))

    if leave.leave_type in HOURLY_PAID_LEAVE:
        return LeaveTotals(addition=round_currency(leave.hours * hourly_rate))
    return LeaveTotals()


def apply_leave_adjustments(
    leaves: Iterable[LeaveRequest], pay_mode: PayMode, hourly_rate: Decimal
) -> LeaveTotals:
    """
    Sum leave additions and deductions for one worker's month.

    Args:
        leaves: Approved leave requests of the worker
        pay_mode: Worker's pay mode
        hourly_rate: Hourly rate, or the hourly-equivalent of a monthly salary

    Returns:
        LeaveTotals with both sums as whole currency units
    """
    addition = ZERO
    deduction = ZERO
    for leave in leaves:
        priced = price_leave(leave, pay_mode, hourly_rate)
        addition += priced.addition
        deduction += priced.deduction
        logger.debug(
            f"Leave {leave.leave_type.value} {leave.hours}h priced",
            extra={
                "leave_type": leave.leave_type.value,
                "hours": str(leave.hours),
                "addition": str(priced.addition),
                "deduction": str(priced.deduction),
                "action": "leave_priced",
            },
        )
    return LeaveTotals(addition=addition, deduction=deduction)
