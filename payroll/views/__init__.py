"""
Payroll views package.

- calculation_views.py - staff monthly calculations and the standard-hours helper
- physician_views.py - physician pay calculation
"""

from .calculation_views import (
    calculate_staff_payroll,
    calculate_staff_payroll_bulk,
    standard_hours,
)
from .physician_views import calculate_physician_payroll

__all__ = [
    "calculate_staff_payroll",
    "calculate_staff_payroll_bulk",
    "standard_hours",
    "calculate_physician_payroll",
]
