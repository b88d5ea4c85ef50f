"""
Tests for payroll data contracts.

These tests ensure the record types reject configurations that cannot
produce a meaningful pay figure, and that results serialize stably.
"""

from datetime import date, time
from decimal import Decimal

import pytest

from payroll.services.contracts import (
    CalculationContext,
    PayrollConfigurationError,
    PayrollRules,
    RosterLookup,
    ShiftWindow,
    as_decimal,
)
from payroll.services.enums import AccountingMode, PayMode, WorkRegime
from payroll.tests.helpers import make_context, make_entry, make_event, make_shift, make_worker


class TestWorkerProfile:
    def test_string_values_are_parsed(self):
        worker = make_worker(pay_mode="monthly", regime="4week", accounting_mode="schedule")

        assert worker.pay_mode == PayMode.MONTHLY
        assert worker.regime == WorkRegime.FOUR_WEEK
        assert worker.regime.is_variable
        assert worker.accounting_mode == AccountingMode.SCHEDULE

    def test_float_rate_is_converted_exactly(self):
        assert make_worker(base_rate=183.3).base_rate == Decimal("183.3")

    @pytest.mark.parametrize("rate", [0, -200, None])
    def test_missing_or_non_positive_rate_fails(self, rate):
        with pytest.raises(PayrollConfigurationError) as exc_info:
            make_worker(base_rate=rate)

        assert exc_info.value.field_name == "base_rate"

    @pytest.mark.parametrize(
        "field,value",
        [("pay_mode", "weekly"), ("regime", "3week"), ("accounting_mode", "estimated")],
    )
    def test_unknown_enum_values_fail(self, field, value):
        with pytest.raises(PayrollConfigurationError) as exc_info:
            make_worker(**{field: value})

        assert exc_info.value.field_name == field


class TestScheduleRecords:
    def test_shift_must_end_after_it_starts(self):
        with pytest.raises(PayrollConfigurationError):
            ShiftWindow(name="morning", start=time(12, 0), end=time(8, 0))

    def test_mandatory_rest_day_cannot_carry_shifts(self):
        with pytest.raises(PayrollConfigurationError):
            make_entry(9, day_flag="regular", shifts=[make_shift("08:00", "12:00")])

    def test_shifts_are_sorted_by_start(self):
        entry = make_entry(3, shifts=[make_shift("14:00", "18:00"), make_shift("08:00", "12:00")])

        assert [s.label for s in entry.shifts] == ["08:00-12:00", "14:00-18:00"]

    def test_roster_lookup(self):
        roster = RosterLookup([make_entry(5), make_entry(3), make_entry(4, worker_id="w2")])

        assert roster.get("w1", date(2025, 3, 3)) is not None
        assert roster.get("w1", date(2025, 3, 4)) is None
        assert roster.dates_for("w1") == [date(2025, 3, 3), date(2025, 3, 5)]
        assert len(roster) == 3


class TestCalculationContext:
    def test_negative_ceiling_fails(self):
        with pytest.raises(PayrollConfigurationError):
            make_context(monthly_standard_hours=Decimal("-1"))

    def test_invalid_month_fails(self):
        with pytest.raises(PayrollConfigurationError):
            CalculationContext(worker=make_worker(), year=2025, month=13, monthly_standard_hours=0)

    def test_event_open_flag(self):
        assert make_event(3, "08:00").is_open
        assert not make_event(3, "08:00", "12:00").is_open


class TestPayrollRules:
    def test_defaults(self):
        rules = PayrollRules()

        assert rules.daily_cap(WorkRegime.NORMAL) == Decimal("8")
        assert rules.daily_cap(WorkRegime.TWO_WEEK) == Decimal("10")
        assert rules.daily_cap(WorkRegime.FOUR_WEEK) == Decimal("10")
        assert rules.daily_cap(WorkRegime.EIGHT_WEEK) == Decimal("8")
        assert rules.monthly_hour_divisor == Decimal("240")

    def test_caps_may_be_keyed_by_value(self):
        rules = PayrollRules(daily_normal_caps={"normal": 8, "2week": 10, "4week": 10, "8week": 8, "none": 8})

        assert rules.daily_cap(WorkRegime.TWO_WEEK) == Decimal("10")

    def test_missing_regime_cap_fails(self):
        with pytest.raises(PayrollConfigurationError):
            PayrollRules(daily_normal_caps={"normal": 8})

    def test_non_positive_divisor_fails(self):
        with pytest.raises(PayrollConfigurationError):
            PayrollRules(monthly_hour_divisor=0)

    def test_unknown_time_zone_fails(self):
        with pytest.raises(PayrollConfigurationError):
            PayrollRules(time_zone="Mars/Olympus")


class TestSerialization:
    def test_result_to_dict_is_plain_data(self, payroll_service):
        result = payroll_service.calculate(make_context(events=[make_event(3, "08:00", "18:00")]))

        data = result.to_dict()

        assert data["pay_mode"] == "hourly"
        assert data["ot_pay"] == "536"
        assert data["daily_records"][0]["work_date"] == "2025-03-03"
        assert data["daily_records"][0]["day_type"] == "normal"
        assert data["warnings"] == []

    def test_as_decimal_rejects_garbage(self):
        with pytest.raises(PayrollConfigurationError):
            as_decimal("abc", "amount")
