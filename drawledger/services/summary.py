"""Ledger summary service for DrawLedger."""
from decimal import Decimal

from drawledger.data_structures import RowKind, Summary


def summarize(ledger) -> Summary:
    """Reduce a ledger to its totals.

    Principal, interest and balance come from the last row; days are summed
    across rows. An empty ledger gives an all-zero Summary.
    """
    if not ledger:
        return Summary()

    last = ledger[-1]
    total_days = sum(row.days_since_previous for row in ledger)
    average = last.cumulative_interest / total_days if total_days > 0 else Decimal("0")

    return Summary(
        principal=last.principal,
        total_interest=last.cumulative_interest,
        total_balance=last.total_balance,
        total_days=total_days,
        total_draws=sum(1 for row in ledger if row.kind == RowKind.DRAW),
        max_balance=max(row.total_balance for row in ledger),
        average_daily_interest=average,
    )


class SummaryAggregator:
    """Reduces ledgers to Summary values."""

    def summarize(self, ledger) -> Summary:
        return summarize(ledger)
