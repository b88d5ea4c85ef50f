"""
Enumerations for the clinic payroll engine.

This module defines every closed vocabulary the engine works with, so that
pay modes, regimes, day types and leave types are never passed around as
free-form strings inside the calculation code.
"""

from enum import Enum


class _ValueEnum(Enum):
    """Enum whose string form is its value"""

    def __str__(self):
        return self.value

    @classmethod
    def values(cls) -> list:
        return [member.value for member in cls]


class PayMode(_ValueEnum):
    """How a worker's base pay is expressed"""

    HOURLY = "hourly"
    """Paid per worked hour"""

    MONTHLY = "monthly"
    """Fixed monthly salary; hours only drive overtime and holiday pay"""


class WorkRegime(_ValueEnum):
    """Legal work-time regime that fixes the daily normal-hours cap"""

    NORMAL = "normal"
    TWO_WEEK = "2week"
    FOUR_WEEK = "4week"
    EIGHT_WEEK = "8week"
    NONE = "none"

    @property
    def is_variable(self) -> bool:
        """2-week and 4-week variable regimes allow a 10-hour normal day"""
        return self in (WorkRegime.TWO_WEEK, WorkRegime.FOUR_WEEK)


class AccountingMode(_ValueEnum):
    """
    Hour-accounting strategy.

    Each mode has a registered resolver strategy in ``factory.py``.
    """

    ACTUAL = "actual"
    """Trust the punch clock"""

    SCHEDULE = "schedule"
    """Clamp worked time to the published shift windows"""

    @classmethod
    def get_default(cls) -> "AccountingMode":
        return cls.ACTUAL

    @property
    def display_name(self) -> str:
        return {
            self.ACTUAL: "actual",
            self.SCHEDULE: "schedule",
        }[self]


class DayFlag(_ValueEnum):
    """Day-type flag published on a roster entry"""

    NORMAL = "normal"
    REST = "rest"
    REGULAR = "regular"
    """Mandatory weekly rest day; must carry no shift windows"""


class DayType(_ValueEnum):
    """Pay-relevant classification of a calendar day"""

    ORDINARY = "normal"
    REST = "rest"
    HOLIDAY = "holiday"
    MANDATORY_REST = "regular"


class LeaveType(_ValueEnum):
    """Leave vocabulary, with the labels the clinic's front office uses"""

    PERSONAL = "personal"
    SICK = "sick"
    ANNUAL = "annual"
    COMP = "comp"
    OFFICIAL = "official"
    BEREAVEMENT = "bereavement"
    MARRIAGE = "marriage"
    MATERNITY = "maternity"
    FAMILY_CARE = "family_care"
    MENSTRUAL = "menstrual"

    @classmethod
    def from_string(cls, value: str) -> "LeaveType":
        """
        Parse a leave type from its English value or its front-office label.

        Args:
            value: e.g. "personal", "family-care" or "事假"

        Raises:
            ValueError: If the value is not part of the vocabulary
        """
        if value is None:
            raise ValueError("Leave type is required")
        text = str(value).strip()
        if text in _LEAVE_LABELS:
            return _LEAVE_LABELS[text]
        return cls(text.lower().replace("-", "_"))


_LEAVE_LABELS = {
    "事假": LeaveType.PERSONAL,
    "病假": LeaveType.SICK,
    "特休": LeaveType.ANNUAL,
    "補休": LeaveType.COMP,
    "公假": LeaveType.OFFICIAL,
    "喪假": LeaveType.BEREAVEMENT,
    "婚假": LeaveType.MARRIAGE,
    "產假": LeaveType.MATERNITY,
    "家庭照顧假": LeaveType.FAMILY_CARE,
    "生理假": LeaveType.MENSTRUAL,
}


class AdjustmentKind(_ValueEnum):
    """One-off payroll adjustments entered for a single month"""

    BONUS = "bonus"
    DEDUCTION = "deduction"


class PhysicianBaseMode(_ValueEnum):
    """How a contracted physician's base pay is computed"""

    GUARANTEE = "guarantee"
    """Guaranteed salary adjusted by (actual - standard) hours"""

    LICENSE = "license"
    """License fee plus every rostered hour"""

