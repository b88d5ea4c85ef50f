"""
Main staff payroll calculation service.

PayrollService folds one worker's month into a SalaryResult:

1. every day that has a punch or a roster entry is classified and resolved
   by the worker's accounting strategy, in ascending date order;
2. the day's hours are credited to the bucket its day type dictates;
3. normal hours above the monthly ceiling are re-priced as period overtime;
4. base pay, leave adjustments and the fixed/one-off lines are applied.

The service holds no state between calls; identical contexts produce
identical results.
"""

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List

from core.logging_utils import err_tag, mask_name, public_emp_id

from .contracts import (
    ZERO,
    AttendanceIssue,
    CalculationContext,
    DailyRecord,
    PayrollError,
    PayrollRules,
    SalaryResult,
    WorkerProfile,
)
from .day_type import classify_day
from .enums import AdjustmentKind, DayType, PayMode
from .factory import AccountingStrategyFactory, get_accounting_factory
from .leave import apply_leave_adjustments
from .overtime import split_overtime
from .payroll_utils import local_work_date, month_bounds, round_currency, round_hours

logger = logging.getLogger(__name__)

HOLIDAY_MULTIPLIER_HOURLY = Decimal("2")
HOLIDAY_MULTIPLIER_MONTHLY = Decimal("1")
MANDATORY_REST_MULTIPLIER = Decimal("2")

NOTE_HOLIDAY = "statutory holiday"
NOTE_MANDATORY_REST = "mandatory rest day violation"

DUPLICATE_WORKER_ERROR = "duplicate worker_id in batch"


@dataclass
class BulkCalculationResult:
    """Results of a multi-worker run keyed by worker id"""

    results: Dict[str, SalaryResult] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)


class PayrollService:
    """
    Orchestrator for monthly staff payroll.

    Strategy selection for hour accounting is delegated to the accounting
    factory; everything else is a pure fold over the month's days.
    """

    def __init__(self, factory: AccountingStrategyFactory = None):
        self.factory = factory or get_accounting_factory()

    @staticmethod
    def hourly_rate_for(worker: WorkerProfile, rules: PayrollRules) -> Decimal:
        """
        Hourly rate used to price overtime, holidays and leave.

        Monthly salaries are converted with the fixed divisor and rounded to
        whole currency units.
        """
        if worker.pay_mode == PayMode.MONTHLY:
            return round_currency(worker.base_rate / rules.monthly_hour_divisor)
        return worker.base_rate

    def calculate(self, context: CalculationContext) -> SalaryResult:
        """
        Calculate one worker's monthly payroll.

        Args:
            context: Complete calculation context

        Returns:
            SalaryResult with the full daily ledger

        Raises:
            PayrollConfigurationError: If the worker's configuration is unusable
        """
        start_time = time.time()
        self._log_calculation_start(context)

        try:
            result = self._execute_calculation(context)
        except PayrollError as e:
            logger.error(
                "Payroll calculation failed",
                extra={
                    "employee": public_emp_id(context.worker.worker_id),
                    "year": context.year,
                    "month": context.month,
                    "err": err_tag(e),
                    "error_type": type(e).__name__,
                    "action": "payroll_calculation_error",
                },
            )
            raise

        logger.info(
            "Payroll calculation completed",
            extra={
                "employee": public_emp_id(context.worker.worker_id),
                "total_work_hours": str(result.total_work_hours),
                "net_pay": str(result.net_pay),
                "warnings": len(result.warnings),
                "duration_ms": (time.time() - start_time) * 1000,
                "action": "payroll_calculation_success",
            },
        )
        return result

    def calculate_bulk(self, contexts: Iterable[CalculationContext]) -> BulkCalculationResult:
        """
        Calculate payroll for several workers.

        Each worker is computed independently; a configuration error for one
        worker is recorded in ``errors`` and does not stop the others. A repeated
        worker id is reported in ``errors`` instead of replacing the first result.
        """
        start_time = time.time()
        bulk = BulkCalculationResult()

        for context in contexts:
            worker_id = context.worker.worker_id
            if worker_id in bulk.results or worker_id in bulk.errors:
                # the first context for an id keeps its result
                earlier = bulk.errors.get(worker_id)
                bulk.errors[worker_id] = (
                    f"{earlier}; {DUPLICATE_WORKER_ERROR}" if earlier else DUPLICATE_WORKER_ERROR
                )
                continue
            try:
                bulk.results[worker_id] = self.calculate(context)
            except PayrollError as e:
                bulk.errors[worker_id] = str(e)

        logger.info(
            f"Bulk calculation completed: {len(bulk.results)} successful, {len(bulk.errors)} failed",
            extra={
                "successful_count": len(bulk.results),
                "failed_count": len(bulk.errors),
                "duration_ms": (time.time() - start_time) * 1000,
                "action": "bulk_calculation_completed",
            },
        )
        return bulk

    def _log_calculation_start(self, context: CalculationContext) -> None:
        worker = context.worker
        logger.info(
            f"Starting payroll calculation for {context.year}-{context.month:02d}",
            extra={
                "employee": public_emp_id(worker.worker_id),
                "name_initials": mask_name(worker.name),
                "pay_mode": worker.pay_mode.value,
                "regime": worker.regime.value,
                "accounting_mode": worker.accounting_mode.value,
                "events": len(context.events),
                "action": "payroll_calculation_start",
            },
        )

    # --- the monthly fold ---------------------------------------------------

    def _execute_calculation(self, context: CalculationContext) -> SalaryResult:
        worker = context.worker
        rules = context.rules
        hourly_rate = self.hourly_rate_for(worker, rules)
        resolver = self.factory.create_resolver(worker.accounting_mode, rules)

        result = SalaryResult(
            worker_id=worker.worker_id,
            worker_name=worker.name,
            role=worker.role,
            pay_mode=worker.pay_mode,
            regime=worker.regime,
            accounting_mode=worker.accounting_mode,
            year=context.year,
            month=context.month,
            hourly_rate=hourly_rate,
            monthly_standard_hours=context.monthly_standard_hours,
        )

        events_by_day = self._group_events_by_day(context)
        for work_date in self._days_to_process(context, events_by_day):
            entry = context.roster.get(worker.worker_id, work_date)
            day_type = classify_day(work_date, context.holidays, entry)
            resolution = resolver.resolve_day(
                work_date, events_by_day.get(work_date, []), entry
            )

            hours = resolution.hours
            if hours <= ZERO:
                if day_type == DayType.MANDATORY_REST and work_date in events_by_day:
                    self._warn_mandatory_rest(result, worker, work_date, hours)
                if resolution.notes:
                    result.attendance_issues.append(
                        AttendanceIssue(work_date=work_date, note=resolution.note)
                    )
                continue

            record = DailyRecord(
                work_date=work_date,
                day_type=day_type,
                shift_info=resolution.shift_info,
                clock_in=resolution.clock_in,
                clock_out=resolution.clock_out,
                punches=resolution.punches,
                total_hours=hours,
                note=resolution.note,
            )
            result.total_work_hours += hours
            self._DAY_HANDLERS[day_type](self, result, record, worker, rules)
            result.daily_records.append(record)

        self._apply_monthly_ceiling(result, context.monthly_standard_hours)
        self._apply_base_pay(result, worker)
        self._apply_leave(result, context)
        self._apply_totals(result, context)
        return result

    def _group_events_by_day(self, context: CalculationContext) -> Dict[date, List]:
        """Bucket the worker's punches by local clock-in day within the month"""
        first_day, last_day = month_bounds(context.year, context.month)
        by_day = defaultdict(list)
        for event in context.events:
            if event.worker_id != context.worker.worker_id:
                continue
            work_date = local_work_date(event.clock_in, context.rules.time_zone)
            if first_day <= work_date <= last_day:
                by_day[work_date].append(event)
        return by_day

    def _days_to_process(self, context: CalculationContext, events_by_day) -> List[date]:
        first_day, last_day = month_bounds(context.year, context.month)
        roster_days = {
            d
            for d in context.roster.dates_for(context.worker.worker_id)
            if first_day <= d <= last_day
        }
        return sorted(set(events_by_day) | roster_days)

    # --- day handlers -------------------------------------------------------

    def _credit_holiday(self, result, record, worker, rules) -> None:
        multiplier = (
            HOLIDAY_MULTIPLIER_MONTHLY
            if worker.pay_mode == PayMode.MONTHLY
            else HOLIDAY_MULTIPLIER_HOURLY
        )
        pay = round_currency(record.total_hours * result.hourly_rate * multiplier)
        result.holiday_work_hours += record.total_hours
        result.holiday_pay += pay
        record.holiday_hours = record.total_hours
        record.pay = pay
        record.note = _join_note(record.note, NOTE_HOLIDAY)

    def _credit_mandatory_rest(self, result, record, worker, rules) -> None:
        pay = round_currency(
            record.total_hours * result.hourly_rate * MANDATORY_REST_MULTIPLIER
        )
        result.holiday_work_hours += record.total_hours
        result.holiday_pay += pay
        record.holiday_hours = record.total_hours
        record.pay = pay
        record.note = _join_note(record.note, NOTE_MANDATORY_REST)
        self._warn_mandatory_rest(result, worker, record.work_date, record.total_hours)

    def _warn_mandatory_rest(self, result, worker, work_date: date, hours: Decimal) -> None:
        """Punches on a mandatory rest day are a compliance warning even when no hours are credited"""
        result.warnings.append(f"{work_date.isoformat()} worked on mandatory rest day")
        logger.warning(
            "Work recorded on a mandatory rest day",
            extra={
                "employee": public_emp_id(worker.worker_id),
                "work_date": work_date.isoformat(),
                "hours": str(hours),
                "action": "mandatory_rest_day_worked",
            },
        )

    def _credit_rest(self, result, record, worker, rules) -> None:
        split = split_overtime(record.total_hours, result.hourly_rate)
        result.rest_work_hours += record.total_hours
        result.ot_pay += split.pay
        record.ot134 = split.tier1_hours
        record.ot167 = split.tier2_hours
        record.pay = split.pay

    def _credit_ordinary(self, result, record, worker, rules) -> None:
        cap = rules.daily_cap(worker.regime)
        normal = min(record.total_hours, cap)
        excess = record.total_hours - normal

        result.normal_hours += normal
        record.normal_hours = normal
        pay = normal * result.hourly_rate if worker.pay_mode == PayMode.HOURLY else ZERO

        if excess > ZERO:
            split = split_overtime(excess, result.hourly_rate)
            result.normal_ot_hours += excess
            result.ot_pay += split.pay
            record.ot134 = split.tier1_hours
            record.ot167 = split.tier2_hours
            pay += split.pay
        record.pay = round_currency(pay)

    _DAY_HANDLERS = {
        DayType.HOLIDAY: _credit_holiday,
        DayType.MANDATORY_REST: _credit_mandatory_rest,
        DayType.REST: _credit_rest,
        DayType.ORDINARY: _credit_ordinary,
    }

    # --- monthly passes -----------------------------------------------------

    def _apply_monthly_ceiling(self, result: SalaryResult, ceiling: Decimal) -> None:
        """Re-price normal hours above the monthly ceiling as period overtime"""
        if result.normal_hours <= ceiling:
            return
        excess = round_hours(result.normal_hours - ceiling)
        split = split_overtime(excess, result.hourly_rate)
        result.period_ot_hours = excess
        result.ot_pay += split.pay
        result.warnings.append(f"exceeded monthly standard hours by {excess}h")
        logger.warning(
            "Monthly standard hours exceeded",
            extra={
                "employee": public_emp_id(result.worker_id),
                "normal_hours": str(result.normal_hours),
                "ceiling": str(ceiling),
                "excess": str(excess),
                "action": "monthly_ceiling_exceeded",
            },
        )

    def _apply_base_pay(self, result: SalaryResult, worker: WorkerProfile) -> None:
        if worker.pay_mode == PayMode.HOURLY:
            paid_hours = result.normal_hours - result.period_ot_hours
            result.base_pay = round_currency(paid_hours * result.hourly_rate)
        else:
            result.base_pay = round_currency(worker.base_rate)

    def _apply_leave(self, result: SalaryResult, context: CalculationContext) -> None:
        leaves = [
            leave
            for leave in context.leaves
            if leave.worker_id == context.worker.worker_id
        ]
        totals = apply_leave_adjustments(leaves, context.worker.pay_mode, result.hourly_rate)
        result.leave_addition = totals.addition
        result.leave_deduction = totals.deduction

    def _apply_totals(self, result: SalaryResult, context: CalculationContext) -> None:
        worker = context.worker
        result.fixed_bonus_pay = _sum_kind(worker.fixed_items, AdjustmentKind.BONUS)
        result.fixed_deduction_pay = _sum_kind(worker.fixed_items, AdjustmentKind.DEDUCTION)
        result.temp_bonus_pay = _sum_kind(context.adjustments, AdjustmentKind.BONUS)
        result.temp_deduction_pay = _sum_kind(context.adjustments, AdjustmentKind.DEDUCTION)
        result.insurance_labor = round_currency(worker.insurance_labor)
        result.insurance_health = round_currency(worker.insurance_health)

        result.gross_pay = (
            result.base_pay
            + result.ot_pay
            + result.holiday_pay
            + result.leave_addition
            + result.fixed_bonus_pay
            + result.temp_bonus_pay
        )
        result.total_deduction = (
            result.insurance_labor
            + result.insurance_health
            + result.fixed_deduction_pay
            + result.temp_deduction_pay
            + result.leave_deduction
        )
        result.net_pay = result.gross_pay - result.total_deduction


def _sum_kind(items, kind: AdjustmentKind) -> Decimal:
    return sum((round_currency(i.amount) for i in items if i.kind == kind), ZERO)


def _join_note(note: str, addition: str) -> str:
    return f"{note}; {addition}" if note else addition
