from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

from drawledger.config import DATE_FORMAT_STORAGE


@dataclass(frozen=True)
class LoanTerms:
    """Resolved, immutable loan terms.

    Rates are fractions (0.11 == 11%). ``loan_start_date`` only feeds the
    derived maturity date; the fee clock starts at the first funded draw.
    """
    loan_amount: Optional[Decimal]
    annual_interest_rate: Decimal
    base_fee_rate: Decimal
    fee_escalation_increment: Decimal
    base_fee_months: int
    extension_start_month: int
    document_fee: Decimal
    maturity_date: Optional[date] = None
    loan_term_months: int = 12
    loan_start_date: Optional[date] = None
    extension_fee_rate: Optional[Decimal] = None
    post_extension_increment: Optional[Decimal] = None


@dataclass(frozen=True)
class DrawEvent:
    amount: Decimal
    date: date
    sequence_number: Optional[int] = None
    simulated: bool = False

    @property
    def description(self) -> str:
        if self.simulated:
            return "Simulated Draw"
        if self.sequence_number:
            return f"Draw #{self.sequence_number}"
        return "Draw"


class RowKind(str, Enum):
    DRAW = "draw"
    MONTH_BOUNDARY = "month_boundary"
    AS_OF = "as_of"
    PAYOFF = "payoff"


@dataclass
class LedgerRow:
    date: date
    kind: RowKind
    description: str
    draw_amount: Decimal
    days_since_previous: int
    interest_accrued: Decimal
    cumulative_interest: Decimal
    principal: Decimal
    total_balance: Decimal
    month_number: Optional[int] = None
    fee_rate: Optional[Decimal] = None


@dataclass
class Summary:
    principal: Decimal = Decimal("0")
    total_interest: Decimal = Decimal("0")
    total_balance: Decimal = Decimal("0")
    total_days: int = 0
    total_draws: int = 0
    max_balance: Decimal = Decimal("0")
    average_daily_interest: Decimal = Decimal("0")


@dataclass(frozen=True)
class FeeRate:
    rate: Decimal
    is_extension: bool


@dataclass
class FeeScheduleEntry:
    month: int
    date: date
    fee_rate: Decimal
    fee_rate_display: str
    is_extension_month: bool
    escalation_type: str


@dataclass
class FeeIncrease:
    """A point at which the fee rate changes."""
    date: date
    month_number: int
    previous_rate: Decimal
    new_rate: Decimal


@dataclass
class PayoffBreakdown:
    principal: Decimal
    accrued_interest: Decimal
    origination_fee: Decimal
    document_fee: Decimal
    total_payoff: Decimal
    per_diem: Decimal
    fee_rate: Decimal
    is_extension: bool
    good_through_date: date
    month_number: int
    days_of_interest: int
    days_to_maturity: Optional[int] = None
    urgency: str = "normal"
    # Draw snapshot the breakdown was computed from; lets projection replay it
    draws: Tuple[DrawEvent, ...] = field(default=(), repr=False, compare=False)

    @property
    def fee_rate_display(self) -> str:
        return f"{self.fee_rate * 100:.2f}%"


@dataclass
class ProjectionPoint:
    month: int
    date: date
    label: str
    fee_rate: Decimal
    principal: Decimal
    cumulative_interest: Decimal
    total_fees: Decimal
    total_payoff: Decimal
    is_actual: bool
    is_current_month: bool
    is_extension_month: bool


@dataclass
class PayoffComparison:
    target_date: date
    days_from_base: int
    total_payoff: Decimal
    additional_cost: Decimal
    fee_rate: Decimal
    is_extension: bool


@dataclass
class LoanPerformance:
    irr: Optional[float]
    irr_band: Optional[str]
    loan_to_value: Optional[float]
    ltv_band: Optional[str]
    utilization: float
    fee_income: Decimal
    interest_income: Decimal

    @property
    def total_income(self) -> Decimal:
        return self.fee_income + self.interest_income


@dataclass
class ReportConfig:
    include_ledger: bool = True
    include_fee_schedule: bool = True
    include_projection: bool = True
    schedule_months: int = 18
    date_format: str = DATE_FORMAT_STORAGE
    # Columns for the ledger sheet, in display order
    ledger_columns: List[str] = field(default_factory=lambda: [
        "Date", "Type", "Description", "Draw", "Days", "Interest",
        "Cumulative Interest", "Principal", "Balance", "Fee Rate"])
