from django.urls import path

from .views import (
    calculate_physician_payroll,
    calculate_staff_payroll,
    calculate_staff_payroll_bulk,
    standard_hours,
)

urlpatterns = [
    path("staff/calculate/", calculate_staff_payroll, name="staff-payroll-calculate"),
    path(
        "staff/calculate-bulk/",
        calculate_staff_payroll_bulk,
        name="staff-payroll-calculate-bulk",
    ),
    path(
        "physicians/calculate/",
        calculate_physician_payroll,
        name="physician-payroll-calculate",
    ),
    path("standard-hours/", standard_hours, name="standard-hours"),
]
