"""Business logic engine for DrawLedger.

This module provides the DrawLedgerEngine class which acts as a facade over
the focused service classes in drawledger/services/. An engine is bound to
one loan (resolved terms plus its funded draws); every query recomputes from
those inputs, so what-if calls never change the engine's state.

Service Classes:
    - FeeScheduleCalculator: Fee rate lookups and schedules
    - AccrualLedgerBuilder: Day-by-day accrual ledger
    - SummaryAggregator: Ledger totals
    - PayoffProjector: Payoff breakdowns and projections
"""
import logging
from datetime import date

from drawledger.config import DEFAULT_PROJECTION_DAYS, DEFAULT_SCHEDULE_HORIZON_MONTHS
from drawledger.services import (
    AccrualLedgerBuilder,
    FeeScheduleCalculator,
    PayoffProjector,
    SummaryAggregator,
    TermResolver,
    fee_clock_start,
    funded_draws,
    loan_performance,
)
from drawledger.reports import ledger_to_dataframe
from drawledger.util import parse_date

logger = logging.getLogger(__name__)


def _as_date(value):
    return date.today() if value is None else parse_date(value)


class DrawLedgerEngine:
    """Accrual and payoff queries for a single draw loan.

    Attributes:
        terms: Resolved LoanTerms.
        draws: Tuple of funded DrawEvent.
        fee_clock_start: Date the fee clock started (override, else first
            funded draw), or None.
        fee_schedule: FeeScheduleCalculator instance (lazy-loaded).
        ledger_builder: AccrualLedgerBuilder instance (lazy-loaded).
        summary_aggregator: SummaryAggregator instance (lazy-loaded).
        payoff_projector: PayoffProjector instance (lazy-loaded).
    """

    def __init__(self, terms, draws, fee_start_override=None):
        self.terms = terms
        self.draws = tuple(draws)
        self.fee_clock_start = fee_clock_start(self.draws, fee_start_override)
        self._fee_schedule = None
        self._ledger_builder = None
        self._summary_aggregator = None
        self._payoff_projector = None

        if self.fee_clock_start is None:
            logger.info("No funded draws yet; fee clock has not started")

    @classmethod
    def from_records(cls, loan_record, draw_records, lender_overrides=None, fee_start_override=None):
        """Build an engine from raw loan and draw records.

        Draw records are filtered to funded draws; see services.draws.
        """
        terms = TermResolver(lender_overrides).resolve(loan_record)
        return cls(terms, funded_draws(draw_records), fee_start_override)

    @property
    def fee_schedule(self):
        """Lazy-load FeeScheduleCalculator instance."""
        if self._fee_schedule is None:
            self._fee_schedule = FeeScheduleCalculator(self.terms)
        return self._fee_schedule

    @property
    def ledger_builder(self):
        """Lazy-load AccrualLedgerBuilder instance."""
        if self._ledger_builder is None:
            self._ledger_builder = AccrualLedgerBuilder(self.terms)
        return self._ledger_builder

    @property
    def summary_aggregator(self):
        """Lazy-load SummaryAggregator instance."""
        if self._summary_aggregator is None:
            self._summary_aggregator = SummaryAggregator()
        return self._summary_aggregator

    @property
    def payoff_projector(self):
        """Lazy-load PayoffProjector instance."""
        if self._payoff_projector is None:
            self._payoff_projector = PayoffProjector(
                self.terms, self.ledger_builder, self.fee_schedule)
        return self._payoff_projector

    # ------------------------------------------------------------------
    # Ledger
    # ------------------------------------------------------------------

    def get_ledger(self, as_of=None, payoff_date=None):
        """Accrual ledger through ``as_of`` (default today).

        Delegates to AccrualLedgerBuilder.
        """
        payoff_date = parse_date(payoff_date) if payoff_date is not None else None
        return self.ledger_builder.build(self.fee_clock_start, self.draws, _as_date(as_of), payoff_date)

    def get_ledger_df(self, as_of=None, payoff_date=None):
        return ledger_to_dataframe(self.get_ledger(as_of, payoff_date))

    def get_summary(self, as_of=None):
        return self.summary_aggregator.summarize(self.get_ledger(as_of))

    def simulate_draw(self, amount, draw_date, as_of=None):
        """Ledger including one hypothetical draw. The engine is unchanged."""
        return self.ledger_builder.simulate(
            self.fee_clock_start, self.draws, amount, parse_date(draw_date), _as_date(as_of))

    # ------------------------------------------------------------------
    # Fees
    # ------------------------------------------------------------------

    def get_fee_schedule(self, horizon_months=DEFAULT_SCHEDULE_HORIZON_MONTHS):
        return self.fee_schedule.schedule(self.fee_clock_start, horizon_months)

    def current_fee_rate(self, as_of=None):
        """(month number, FeeRate) in effect on ``as_of``."""
        return self.fee_schedule.rate_on(self.fee_clock_start, _as_date(as_of))

    def next_fee_increase(self, as_of=None):
        return self.fee_schedule.next_increase(self.fee_clock_start, _as_date(as_of))

    def days_until_next_fee_increase(self, as_of=None):
        return self.fee_schedule.days_until_next_increase(self.fee_clock_start, _as_date(as_of))

    def get_fee_escalations(self, end_date=None):
        return self.fee_schedule.escalations(self.fee_clock_start, _as_date(end_date))

    # ------------------------------------------------------------------
    # Payoff
    # ------------------------------------------------------------------

    def get_payoff(self, evaluation_date=None):
        """Payoff breakdown good through ``evaluation_date`` (default today).

        Delegates to PayoffProjector.
        """
        return self.payoff_projector.compute(self.fee_clock_start, self.draws, _as_date(evaluation_date))

    def project_payoff(self, breakdown, target_date):
        return self.payoff_projector.project(breakdown, parse_date(target_date), self.fee_clock_start)

    def project_payoff_days(self, days=DEFAULT_PROJECTION_DAYS, evaluation_date=None):
        """Payoff ``days`` after ``evaluation_date`` (the projection slider)."""
        return self.payoff_projector.project_days(
            self.get_payoff(evaluation_date), days, self.fee_clock_start)

    def compare_payoffs(self, target_dates, evaluation_date=None):
        """What-if comparison of payoff on each target date vs ``evaluation_date``."""
        base = self.get_payoff(evaluation_date)
        targets = [parse_date(d) for d in target_dates]
        return self.payoff_projector.compare(base, targets, self.fee_clock_start)

    def get_projection(self, as_of=None, through_month=DEFAULT_SCHEDULE_HORIZON_MONTHS):
        return self.payoff_projector.projection_series(
            self.fee_clock_start, self.draws, _as_date(as_of), through_month)

    # ------------------------------------------------------------------
    # Performance
    # ------------------------------------------------------------------

    def get_performance(self, as_of=None, payoff_amount=None, payoff_date=None,
                        appraised_value=None, budget=None):
        payoff_date = parse_date(payoff_date) if payoff_date is not None else None
        return loan_performance(self.terms, self.draws, _as_date(as_of), payoff_amount,
                                payoff_date, appraised_value, budget)
