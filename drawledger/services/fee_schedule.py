"""Fee schedule service for DrawLedger.

The finance fee charged at payoff depends on how many months the fee clock
has been running:
- Months 1..base_fee_months: base fee rate
- Later months: base rate + (month - base_fee_months) * escalation increment
- From extension_start_month on the rate is flagged as extension. When the
  terms carry an explicit extension_fee_rate the rate jumps to it there and
  escalates by post_extension_increment afterwards.
"""
from dateutil.relativedelta import relativedelta

from drawledger.config import DEFAULT_SCHEDULE_HORIZON_MONTHS
from drawledger.data_structures import FeeIncrease, FeeRate, FeeScheduleEntry


def month_number(fee_clock_start, as_of):
    """1-indexed fee month containing ``as_of``.

    Month 2 begins one calendar month after the fee clock starts (Jan 1 ->
    Feb 1). Months are counted with relativedelta, so a clock started on the
    31st enters month 2 on the last day of a shorter month (Jan 31 -> Feb 29).
    Returns 1 when the fee clock has not started or ``as_of`` is before it.
    """
    if fee_clock_start is None:
        return 1
    delta = relativedelta(as_of, fee_clock_start)
    return max(1, delta.years * 12 + delta.months + 1)


def month_start(fee_clock_start, month):
    """First date of fee month ``month``."""
    return fee_clock_start + relativedelta(months=month - 1)


def fee_rate_at_month(terms, month):
    month = max(1, month)
    if month <= terms.base_fee_months:
        return FeeRate(terms.base_fee_rate, False)

    if terms.extension_fee_rate is not None and month >= terms.extension_start_month:
        increment = terms.post_extension_increment
        if increment is None:
            increment = terms.fee_escalation_increment
        rate = terms.extension_fee_rate + (month - terms.extension_start_month) * increment
        return FeeRate(rate, True)

    elapsed = month - terms.base_fee_months
    rate = terms.base_fee_rate + elapsed * terms.fee_escalation_increment
    return FeeRate(rate, month >= terms.extension_start_month)


def escalation_type(terms, month):
    if month <= terms.base_fee_months:
        return "base"
    if month >= terms.extension_start_month:
        return "extension"
    return "escalating"


def generate_schedule(terms, horizon_months, fee_clock_start):
    """Fee rate for each month 1..horizon_months.

    Each entry is dated ``fee_clock_start + month`` months. Returns an empty
    list when the fee clock has not started.
    """
    if fee_clock_start is None:
        return []

    schedule = []
    for month in range(1, horizon_months + 1):
        fee = fee_rate_at_month(terms, month)
        schedule.append(FeeScheduleEntry(
            month=month,
            date=fee_clock_start + relativedelta(months=month),
            fee_rate=fee.rate,
            fee_rate_display=f"{fee.rate * 100:.2f}%",
            is_extension_month=fee.is_extension,
            escalation_type=escalation_type(terms, month),
        ))
    return schedule


def next_fee_increase(terms, fee_clock_start, as_of):
    """Find the next month whose fee rate differs from the current one.

    Returns:
        FeeIncrease dated at the start of that month, or None if the fee
        clock has not started or the rate never changes again.
    """
    if fee_clock_start is None:
        return None

    current = month_number(fee_clock_start, as_of)
    current_rate = fee_rate_at_month(terms, current).rate
    last_candidate = current + max(terms.base_fee_months, terms.extension_start_month) + 1

    for month in range(current + 1, last_candidate + 1):
        rate = fee_rate_at_month(terms, month).rate
        if rate != current_rate:
            return FeeIncrease(
                date=month_start(fee_clock_start, month),
                month_number=month,
                previous_rate=current_rate,
                new_rate=rate,
            )
    return None


def days_until_next_fee_increase(terms, fee_clock_start, as_of):
    increase = next_fee_increase(terms, fee_clock_start, as_of)
    if increase is None:
        return None
    return (increase.date - as_of).days


def fee_escalation_schedule(terms, fee_clock_start, end_date,
                            min_months=DEFAULT_SCHEDULE_HORIZON_MONTHS):
    """Every month at which the fee rate changes, through the later of
    ``end_date``'s month and ``min_months``."""
    if fee_clock_start is None:
        return []

    last_month = max(month_number(fee_clock_start, end_date), min_months)
    changes = []
    previous = fee_rate_at_month(terms, 1).rate
    for month in range(2, last_month + 1):
        rate = fee_rate_at_month(terms, month).rate
        if rate != previous:
            changes.append(FeeIncrease(
                date=month_start(fee_clock_start, month),
                month_number=month,
                previous_rate=previous,
                new_rate=rate,
            ))
        previous = rate
    return changes


class FeeScheduleCalculator:
    """Fee rate lookups bound to a single set of loan terms.

    Attributes:
        terms: LoanTerms the schedule is computed for.
    """

    def __init__(self, terms):
        self.terms = terms

    def rate_at_month(self, month):
        return fee_rate_at_month(self.terms, month)

    def rate_on(self, fee_clock_start, as_of):
        """Fee rate in effect on ``as_of``; month 1 if the clock has not started."""
        month = month_number(fee_clock_start, as_of)
        return month, fee_rate_at_month(self.terms, month)

    def schedule(self, fee_clock_start, horizon_months=DEFAULT_SCHEDULE_HORIZON_MONTHS):
        return generate_schedule(self.terms, horizon_months, fee_clock_start)

    def next_increase(self, fee_clock_start, as_of):
        return next_fee_increase(self.terms, fee_clock_start, as_of)

    def days_until_next_increase(self, fee_clock_start, as_of):
        return days_until_next_fee_increase(self.terms, fee_clock_start, as_of)

    def escalations(self, fee_clock_start, end_date):
        return fee_escalation_schedule(self.terms, fee_clock_start, end_date)
