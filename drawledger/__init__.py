"""DrawLedger: accrual, fee escalation and payoff engine for construction draw loans."""

from .data_structures import (
    DrawEvent,
    FeeScheduleEntry,
    LedgerRow,
    LoanTerms,
    PayoffBreakdown,
    RowKind,
    Summary,
)
from .engine import DrawLedgerEngine
from .exceptions import DrawLedgerError, InvalidDrawError, InvalidTermsError

__version__ = "0.1.0"

__all__ = ['DrawEvent', 'FeeScheduleEntry', 'LedgerRow', 'LoanTerms', 'PayoffBreakdown',
           'RowKind', 'Summary', 'DrawLedgerEngine', 'DrawLedgerError', 'InvalidDrawError',
           'InvalidTermsError']
