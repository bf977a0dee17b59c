"""Loan performance metrics for DrawLedger.

Portfolio-level figures shown next to the payoff report: IRR of the draw and
payoff cash flows, loan-to-value, budget utilization and lender income.
"""
import logging
from decimal import Decimal

from pyxirr import xirr

from drawledger.config import (
    IRR_FAIR_MIN,
    IRR_STRONG_MIN,
    LTV_LOW_MAX,
    LTV_MODERATE_MAX,
)
from drawledger.data_structures import LoanPerformance
from drawledger.services.ledger_builder import period_interest, sort_draws
from drawledger.util import round_money

logger = logging.getLogger(__name__)


def loan_irr(draws, payoff_amount, payoff_date):
    """Annualized IRR of the loan from the lender's side.

    Draws are outflows, the payoff is the single inflow. Returns None when
    there is nothing to solve (no payoff, no draws) or the solver fails.
    """
    if not payoff_amount or payoff_date is None:
        return None
    draws = [d for d in draws if d.date <= payoff_date]
    if not draws:
        return None

    dates = [d.date for d in draws] + [payoff_date]
    amounts = [-float(d.amount) for d in draws] + [float(payoff_amount)]
    try:
        result = xirr(dates, amounts)
    except Exception as e:
        logger.warning("IRR calculation failed: %s", e)
        return None
    return float(result) if result is not None else None


def irr_band(irr):
    if irr is None:
        return None
    if irr >= IRR_STRONG_MIN:
        return "strong"
    if irr >= IRR_FAIR_MIN:
        return "fair"
    return "weak"


def loan_to_value(loan_amount, appraised_value):
    """LTV as a percentage; None when either figure is missing or zero."""
    if not loan_amount or not appraised_value:
        return None
    return float(loan_amount) / float(appraised_value) * 100


def ltv_band(ltv):
    if ltv is None:
        return None
    if ltv <= LTV_LOW_MAX:
        return "low"
    if ltv <= LTV_MODERATE_MAX:
        return "moderate"
    return "high"


def utilization(spent, budget):
    """Percent of budget drawn; 0 for an empty budget."""
    if not budget:
        return 0.0
    return float(spent) / float(budget) * 100


def loan_income(terms, draws, as_of):
    """Lender income through ``as_of``: (fee income, interest income).

    Fee income is the base origination fee on the committed loan amount;
    interest is earned on each draw from its date to ``as_of``.
    """
    fee = round_money((terms.loan_amount or Decimal("0")) * terms.base_fee_rate)
    interest = Decimal("0")
    for draw in sort_draws(d for d in draws if d.date <= as_of):
        interest += period_interest(draw.amount, terms.annual_interest_rate, (as_of - draw.date).days)
    return fee, round_money(interest)


def loan_performance(terms, draws, as_of, payoff_amount=None, payoff_date=None,
                     appraised_value=None, budget=None) -> LoanPerformance:
    """Collect the performance metrics for one loan."""
    draws = list(draws)
    irr = loan_irr(draws, payoff_amount, payoff_date)
    ltv = loan_to_value(terms.loan_amount, appraised_value)
    spent = sum((d.amount for d in draws if d.date <= as_of), Decimal("0"))
    fee_income, interest_income = loan_income(terms, draws, payoff_date or as_of)
    return LoanPerformance(
        irr=irr,
        irr_band=irr_band(irr),
        loan_to_value=ltv,
        ltv_band=ltv_band(ltv),
        utilization=utilization(spent, budget if budget is not None else terms.loan_amount),
        fee_income=fee_income,
        interest_income=interest_income,
    )
