"""Services package for DrawLedger business logic.

Each module handles one stage of the accrual pipeline; the DrawLedgerEngine
facade wires them together.
"""

from .term_resolver import TermResolver, resolve_terms
from .draws import fee_clock_start, funded_draws, make_draw
from .fee_schedule import (
    FeeScheduleCalculator,
    fee_rate_at_month,
    generate_schedule,
    month_number,
    next_fee_increase,
    days_until_next_fee_increase,
    fee_escalation_schedule,
)
from .ledger_builder import AccrualLedgerBuilder, build_ledger, simulate_draw
from .summary import SummaryAggregator, summarize
from .payoff_projector import (
    PayoffProjector,
    compute_payoff,
    project,
    compare_payoffs,
    projection_series,
    urgency_level,
)
from .performance import loan_irr, loan_performance, loan_to_value, utilization

__all__ = ['TermResolver', 'resolve_terms', 'fee_clock_start', 'funded_draws', 'make_draw',
           'FeeScheduleCalculator', 'fee_rate_at_month', 'generate_schedule', 'month_number',
           'next_fee_increase', 'days_until_next_fee_increase', 'fee_escalation_schedule',
           'AccrualLedgerBuilder', 'build_ledger', 'simulate_draw',
           'SummaryAggregator', 'summarize',
           'PayoffProjector', 'compute_payoff', 'project', 'compare_payoffs',
           'projection_series', 'urgency_level',
           'loan_irr', 'loan_performance', 'loan_to_value', 'utilization']
