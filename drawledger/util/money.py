from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from drawledger.config import MONEY_QUANTUM


def to_decimal(value) -> Decimal:
    """
    Coerce loan figures to Decimal. Accepts:
    - Decimal / int
    - float (via its shortest repr, so 0.11 stays 0.11)
    - "$100,000.00", "0.11", " 1000 "
    """
    if value is None:
        raise ValueError("to_decimal: value is None")
    if isinstance(value, bool):
        raise ValueError(f"to_decimal: unexpected boolean {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"to_decimal: not a finite number {value!r}")
        return Decimal(repr(value))

    s = str(value).strip().replace("$", "").replace(",", "")
    if not s:
        raise ValueError("to_decimal: empty string")
    try:
        dec = Decimal(s)
    except InvalidOperation as exc:
        raise ValueError(f"to_decimal: cannot parse {value!r}") from exc
    if not dec.is_finite():
        raise ValueError(f"to_decimal: not a finite number {value!r}")
    return dec


def round_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    dec = round_money(value)
    if dec < 0:
        return f"-${-dec:,.2f}"
    return f"${dec:,.2f}"
