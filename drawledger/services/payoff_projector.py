"""Payoff service for DrawLedger.

This service answers "what does it take to retire the loan on date X":
- Payoff breakdown (principal + interest + finance fee + document fee)
- Per diem interest at the current balance
- Projection of a breakdown to another date (what-if / N-day slider)
- Monthly projection series for the payoff chart
- Urgency classification relative to maturity
"""
import logging
from datetime import timedelta
from decimal import Decimal

from drawledger.config import (
    DAYS_PER_YEAR,
    DATE_FORMAT_MONTH,
    DEFAULT_SCHEDULE_HORIZON_MONTHS,
    URGENCY_WARNING_DAYS,
    URGENCY_INFO_DAYS,
)
from drawledger.data_structures import PayoffBreakdown, PayoffComparison, ProjectionPoint
from drawledger.services.fee_schedule import FeeScheduleCalculator, month_start
from drawledger.services.ledger_builder import AccrualLedgerBuilder
from drawledger.services.summary import summarize
from drawledger.util import round_money

logger = logging.getLogger(__name__)


def days_to_maturity(maturity_date, evaluation_date):
    """Whole days from ``evaluation_date`` to maturity; negative once past due."""
    if maturity_date is None:
        return None
    return (maturity_date - evaluation_date).days


def urgency_level(days):
    """Display urgency for a days-to-maturity figure.

    critical: past maturity; warning: 0-30 days; info: 31-60 days;
    normal: otherwise, or when the loan has no maturity date.
    """
    if days is None:
        return "normal"
    if days < 0:
        return "critical"
    if days <= URGENCY_WARNING_DAYS:
        return "warning"
    if days <= URGENCY_INFO_DAYS:
        return "info"
    return "normal"


def per_diem(balance, annual_rate):
    if balance <= 0 or annual_rate <= 0:
        return Decimal("0")
    return balance * annual_rate / DAYS_PER_YEAR


class PayoffProjector:
    """Computes payoff breakdowns for one set of loan terms.

    Attributes:
        terms: LoanTerms used for every computation.
        ledger_builder: AccrualLedgerBuilder (lazy-loaded).
        fee_schedule: FeeScheduleCalculator (lazy-loaded).
    """

    def __init__(self, terms, ledger_builder=None, fee_schedule=None):
        self.terms = terms
        self._ledger_builder = ledger_builder
        self._fee_schedule = fee_schedule

    @property
    def ledger_builder(self):
        if self._ledger_builder is None:
            self._ledger_builder = AccrualLedgerBuilder(self.terms)
        return self._ledger_builder

    @property
    def fee_schedule(self):
        if self._fee_schedule is None:
            self._fee_schedule = FeeScheduleCalculator(self.terms)
        return self._fee_schedule

    def compute(self, fee_clock_start, draws, evaluation_date) -> PayoffBreakdown:
        """Payoff breakdown good through ``evaluation_date``.

        Money figures are rounded to cents and the total is the sum of the
        rounded components.
        """
        draws = tuple(draws)
        ledger = self.ledger_builder.build(fee_clock_start, draws, evaluation_date)
        summary = summarize(ledger)

        month, fee = self.fee_schedule.rate_on(fee_clock_start, evaluation_date)

        principal = round_money(summary.principal)
        interest = round_money(summary.total_interest)
        origination_fee = round_money(summary.principal * fee.rate)
        document_fee = round_money(self.terms.document_fee)
        daily = per_diem(summary.principal + summary.total_interest, self.terms.annual_interest_rate)
        maturity_days = days_to_maturity(self.terms.maturity_date, evaluation_date)

        return PayoffBreakdown(
            principal=principal,
            accrued_interest=interest,
            origination_fee=origination_fee,
            document_fee=document_fee,
            total_payoff=principal + interest + origination_fee + document_fee,
            per_diem=round_money(daily),
            fee_rate=fee.rate,
            is_extension=fee.is_extension,
            good_through_date=evaluation_date,
            month_number=month,
            days_of_interest=summary.total_days,
            days_to_maturity=maturity_days,
            urgency=urgency_level(maturity_days),
            draws=draws,
        )

    def project(self, breakdown, target_date, fee_clock_start) -> PayoffBreakdown:
        """Re-evaluate ``breakdown`` as of ``target_date``.

        The breakdown's draw snapshot is replayed, so the result is the same
        as computing the payoff at ``target_date`` directly.
        """
        return self.compute(fee_clock_start, breakdown.draws, target_date)

    def project_days(self, breakdown, days, fee_clock_start) -> PayoffBreakdown:
        return self.project(breakdown, breakdown.good_through_date + timedelta(days=days),
                            fee_clock_start)

    def compare(self, breakdown, target_dates, fee_clock_start):
        """Cost of paying off on each of ``target_dates`` instead of the
        breakdown's own date."""
        comparisons = []
        for target in sorted(target_dates):
            projected = self.project(breakdown, target, fee_clock_start)
            comparisons.append(PayoffComparison(
                target_date=target,
                days_from_base=(target - breakdown.good_through_date).days,
                total_payoff=projected.total_payoff,
                additional_cost=projected.total_payoff - breakdown.total_payoff,
                fee_rate=projected.fee_rate,
                is_extension=projected.is_extension,
            ))
        return comparisons

    def projection_series(self, fee_clock_start, draws, as_of,
                          through_month=DEFAULT_SCHEDULE_HORIZON_MONTHS):
        """One payoff point at the start of each fee month, 1..through_month.

        Months up to and including the one containing ``as_of`` are marked
        actual, later ones projected. Empty until the fee clock starts.
        """
        if fee_clock_start is None:
            logger.debug("No fee clock start; projection series unavailable")
            return []

        draws = tuple(draws)
        current_month, _ = self.fee_schedule.rate_on(fee_clock_start, as_of)
        points = []
        for month in range(1, through_month + 1):
            point_date = month_start(fee_clock_start, month)
            payoff = self.compute(fee_clock_start, draws, point_date)
            points.append(ProjectionPoint(
                month=month,
                date=point_date,
                label=point_date.strftime(DATE_FORMAT_MONTH),
                fee_rate=payoff.fee_rate,
                principal=payoff.principal,
                cumulative_interest=payoff.accrued_interest,
                total_fees=payoff.origination_fee + payoff.document_fee,
                total_payoff=payoff.total_payoff,
                is_actual=month <= current_month,
                is_current_month=month == current_month,
                is_extension_month=month == self.terms.extension_start_month,
            ))
        return points


def compute_payoff(terms, fee_clock_start, draws, evaluation_date) -> PayoffBreakdown:
    return PayoffProjector(terms).compute(fee_clock_start, draws, evaluation_date)


def project(breakdown, target_date, fee_clock_start, terms) -> PayoffBreakdown:
    return PayoffProjector(terms).project(breakdown, target_date, fee_clock_start)


def compare_payoffs(breakdown, target_dates, fee_clock_start, terms):
    return PayoffProjector(terms).compare(breakdown, target_dates, fee_clock_start)


def projection_series(terms, fee_clock_start, draws, as_of,
                      through_month=DEFAULT_SCHEDULE_HORIZON_MONTHS):
    return PayoffProjector(terms).projection_series(fee_clock_start, draws, as_of, through_month)
