"""Draw normalization for DrawLedger.

Draw records arrive from the lending application as loose mappings. This
module filters them to funded draws, validates them and converts them into
immutable DrawEvent values, and derives the fee-clock start date.
"""
import logging

from drawledger.config import FUNDED_STATUS
from drawledger.data_structures import DrawEvent
from drawledger.exceptions import InvalidDrawError
from drawledger.util import parse_date, to_decimal

logger = logging.getLogger(__name__)

# Date fields checked in order of preference
DRAW_DATE_FIELDS = ('funded_at', 'request_date', 'date')


def make_draw(amount, draw_date, sequence_number=None, simulated=False) -> DrawEvent:
    """Validate and build a single DrawEvent.

    Raises:
        InvalidDrawError: If the amount is not a positive number or the date
            cannot be parsed.
    """
    raw = {'amount': amount, 'date': draw_date}
    try:
        dec = to_decimal(amount)
    except ValueError:
        raise InvalidDrawError(f"amount {amount!r} is not a number", raw)
    if dec <= 0:
        raise InvalidDrawError(f"amount must be positive, got {dec}", raw)

    try:
        parsed = parse_date(draw_date)
    except ValueError:
        raise InvalidDrawError(f"date {draw_date!r} cannot be parsed", raw)

    if sequence_number is not None:
        try:
            sequence_number = int(sequence_number)
        except (TypeError, ValueError):
            raise InvalidDrawError(f"draw number {sequence_number!r} is not an integer", raw)
        if sequence_number < 1:
            raise InvalidDrawError(f"draw number must be positive, got {sequence_number}", raw)

    return DrawEvent(amount=dec, date=parsed, sequence_number=sequence_number, simulated=simulated)


def _record_date(record):
    for key in DRAW_DATE_FIELDS:
        value = record.get(key)
        if not _is_missing(value) and str(value).strip():
            return value
    return None


def _is_missing(value):
    # pandas hands back NaN for empty CSV cells
    return value is None or value != value


def funded_draws(records):
    """Convert raw draw records into DrawEvents.

    Records carrying a ``status`` are kept only when the status is
    ``funded``; records without a status are assumed to be pre-filtered.
    The draw date is taken from ``funded_at``, then ``request_date``, then
    ``date``.

    Args:
        records: Iterable of mappings with ``amount``, a date field and an
            optional ``draw_number``.

    Returns:
        List of DrawEvent in input order.

    Raises:
        InvalidDrawError: On a non-positive amount or missing/bad date.
    """
    draws = []
    skipped = 0
    for record in records:
        status = record.get('status')
        if not _is_missing(status) and str(status).strip().lower() != FUNDED_STATUS:
            skipped += 1
            continue

        draw_date = _record_date(record)
        if draw_date is None:
            raise InvalidDrawError("draw has no date", dict(record))

        number = record.get('draw_number')
        if _is_missing(number):
            number = None
        draws.append(make_draw(record.get('amount'), draw_date, number))

    if skipped:
        logger.debug("Skipped %d draw(s) not in %r status", skipped, FUNDED_STATUS)
    return draws


def fee_clock_start(draws, override=None):
    """Return the date the fee clock starts.

    An explicit override wins; otherwise it is the earliest funded draw.
    Returns None when nothing has funded.
    """
    if override is not None:
        return parse_date(override)
    if not draws:
        return None
    return min(d.date for d in draws)
