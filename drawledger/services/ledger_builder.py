"""Accrual ledger service for DrawLedger.

Reconstructs the interest-accrual timeline of a draw loan by replaying its
events in date order:
- Draw rows for each funded draw on or before the as-of date
- Month boundary rows each time the fee clock enters a new month
- A "Current" row at the as-of date
- An optional "Payoff" row at a later payoff date

Interest is simple daily interest on principal (the sum of draws); accrued
interest never earns interest itself.
"""
import logging
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from drawledger.config import DAYS_PER_YEAR
from drawledger.data_structures import LedgerRow, RowKind
from drawledger.services.draws import make_draw
from drawledger.services.fee_schedule import fee_rate_at_month, month_number
from drawledger.util import days_between

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Same-day ordering: draws land before the markers that report on them
_KIND_ORDER = {
    RowKind.DRAW: 0,
    RowKind.MONTH_BOUNDARY: 1,
    RowKind.AS_OF: 2,
    RowKind.PAYOFF: 3,
}


def sort_draws(draws):
    """Sort draws by date, then draw number; unnumbered draws keep input order."""
    return sorted(draws, key=lambda d: (d.date, d.sequence_number is None, d.sequence_number or 0))


def period_interest(principal, annual_rate, days):
    if days <= 0 or principal <= 0:
        return ZERO
    return principal * annual_rate * days / DAYS_PER_YEAR


def _month_boundaries(fee_clock_start, through):
    boundaries = []
    months = 1
    boundary = fee_clock_start + relativedelta(months=months)
    while boundary <= through:
        # month number that begins on this boundary
        boundaries.append((boundary, months + 1))
        months += 1
        boundary = fee_clock_start + relativedelta(months=months)
    return boundaries


def _timeline(fee_clock_start, draws, as_of, payoff_date):
    events = [(d.date, RowKind.DRAW, d) for d in draws]

    if fee_clock_start is not None and draws:
        for boundary, month in _month_boundaries(fee_clock_start, as_of):
            events.append((boundary, RowKind.MONTH_BOUNDARY, month))

    events.append((as_of, RowKind.AS_OF, None))

    if payoff_date is not None:
        if payoff_date > as_of:
            events.append((payoff_date, RowKind.PAYOFF, None))
        elif payoff_date < as_of:
            logger.warning("Payoff date %s precedes as-of date %s; no payoff row added",
                           payoff_date, as_of)

    # sorted() is stable, so same-day draws keep their draw-number order
    return sorted(events, key=lambda e: (e[0], _KIND_ORDER[e[1]]))


def _describe(kind, payload):
    if kind == RowKind.DRAW:
        return payload.description
    if kind == RowKind.MONTH_BOUNDARY:
        return f"Month {payload} begins"
    if kind == RowKind.AS_OF:
        return "Current"
    return "Payoff"


def build_ledger(terms, fee_clock_start, draws, as_of, payoff_date=None):
    """Build the accrual ledger for a set of funded draws.

    Args:
        terms: LoanTerms.
        fee_clock_start: Date the fee clock started, or None if no draw has
            funded yet (no month boundaries, base fee rate throughout).
        draws: Iterable of DrawEvent. Draws dated after ``as_of`` are left
            out.
        as_of: Date of the "Current" row.
        payoff_date: Optional later date for a terminal "Payoff" row.

    Returns:
        List of LedgerRow in date order.
    """
    draws = list(draws)
    eligible = sort_draws(d for d in draws if d.date <= as_of)
    if len(eligible) < len(draws):
        logger.debug("Excluded %d draw(s) dated after %s", len(draws) - len(eligible), as_of)
    if fee_clock_start is None and eligible:
        logger.debug("Fee clock not started; using month 1 fee rate")

    rate = terms.annual_interest_rate
    running_principal = ZERO
    cumulative_interest = ZERO
    previous_date = None
    rows = []

    for event_date, kind, payload in _timeline(fee_clock_start, eligible, as_of, payoff_date):
        days = 0 if previous_date is None else max(0, days_between(previous_date, event_date))
        # interest on the principal outstanding before this event
        interest = period_interest(running_principal, rate, days)
        cumulative_interest += interest

        draw_amount = ZERO
        if kind == RowKind.DRAW:
            draw_amount = payload.amount
            running_principal += draw_amount

        month = month_number(fee_clock_start, event_date) if fee_clock_start is not None else None
        rows.append(LedgerRow(
            date=event_date,
            kind=kind,
            description=_describe(kind, payload),
            draw_amount=draw_amount,
            days_since_previous=days,
            interest_accrued=interest,
            cumulative_interest=cumulative_interest,
            principal=running_principal,
            total_balance=running_principal + cumulative_interest,
            month_number=month,
            fee_rate=fee_rate_at_month(terms, month or 1).rate,
        ))
        previous_date = event_date

    logger.debug("Built ledger with %d rows through %s", len(rows), rows[-1].date)
    return rows


def simulate_draw(terms, fee_clock_start, draws, amount, draw_date, as_of):
    """Ledger as it would look with one more (hypothetical) draw.

    When nothing has funded yet the simulated draw starts the fee clock.
    The simulated draw is only included if it is dated on or before ``as_of``.
    """
    simulated = make_draw(amount, draw_date, simulated=True)
    if fee_clock_start is None:
        fee_clock_start = simulated.date
    return build_ledger(terms, fee_clock_start, list(draws) + [simulated], as_of)


class AccrualLedgerBuilder:
    """Builds accrual ledgers for a single set of loan terms.

    Attributes:
        terms: LoanTerms used for every ledger.
    """

    def __init__(self, terms):
        self.terms = terms

    def build(self, fee_clock_start, draws, as_of, payoff_date=None):
        return build_ledger(self.terms, fee_clock_start, draws, as_of, payoff_date)

    def simulate(self, fee_clock_start, draws, amount, draw_date, as_of):
        return simulate_draw(self.terms, fee_clock_start, draws, amount, draw_date, as_of)


__all__ = ['AccrualLedgerBuilder', 'build_ledger', 'simulate_draw', 'sort_draws',
           'period_interest']
