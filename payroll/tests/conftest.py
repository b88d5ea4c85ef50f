"""
Fixtures for payroll tests.
"""

import pytest

from payroll.services.contracts import PayrollRules


@pytest.fixture
def payroll_service():
    """Provide PayrollService instance for tests."""
    from payroll.services.payroll_service import PayrollService

    return PayrollService()


@pytest.fixture
def rules():
    return PayrollRules()


@pytest.fixture
def actual_resolver(rules):
    from payroll.services.strategies.actual import ActualHoursStrategy

    return ActualHoursStrategy(rules)


@pytest.fixture
def schedule_resolver(rules):
    from payroll.services.strategies.schedule import ScheduleHoursStrategy

    return ScheduleHoursStrategy(rules)
