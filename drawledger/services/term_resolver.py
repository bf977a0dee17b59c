"""Loan term resolution service for DrawLedger.

This service turns a raw loan record (as stored by the lending application)
into a canonical LoanTerms value. Values are resolved with the hierarchy:
    1. Loan record (highest priority)
    2. Lender overrides
    3. System defaults from config (lowest priority)
"""
import logging

from dateutil.relativedelta import relativedelta

from drawledger.config import (
    DEFAULT_INTEREST_RATE,
    DEFAULT_ORIGINATION_FEE_RATE,
    DEFAULT_FEE_ESCALATION_INCREMENT,
    DEFAULT_BASE_FEE_MONTHS,
    DEFAULT_LOAN_TERM_MONTHS,
    DEFAULT_DOCUMENT_FEE,
)
from drawledger.data_structures import LoanTerms
from drawledger.exceptions import InvalidTermsError
from drawledger.util import parse_date, to_decimal

logger = logging.getLogger(__name__)

# Record keys understood by the resolver, with their system defaults.
# extension_fee_month defaults to the month after the loan term.
TERM_DEFAULTS = {
    'interest_rate_annual': DEFAULT_INTEREST_RATE,
    'origination_fee_pct': DEFAULT_ORIGINATION_FEE_RATE,
    'fee_escalation_pct': DEFAULT_FEE_ESCALATION_INCREMENT,
    'fee_escalation_after_months': DEFAULT_BASE_FEE_MONTHS,
    'loan_term_months': DEFAULT_LOAN_TERM_MONTHS,
    'document_fee': DEFAULT_DOCUMENT_FEE,
    'extension_fee_month': None,
    'extension_fee_rate': None,
    'post_extension_escalation': None,
    'loan_amount': None,
    'loan_start_date': None,
    'maturity_date': None,
}


def _lookup(key, record, lender_overrides):
    value = record.get(key)
    if value is None and lender_overrides:
        value = lender_overrides.get(key)
    if value is None:
        value = TERM_DEFAULTS[key]
    return value


def _decimal_field(key, value):
    if value is None:
        return None
    try:
        return to_decimal(value)
    except ValueError:
        raise InvalidTermsError(key, value, "not a number")


def _int_field(key, value):
    dec = _decimal_field(key, value)
    if dec != dec.to_integral_value():
        raise InvalidTermsError(key, value, "must be a whole number of months")
    return int(dec)


def _date_field(key, value):
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError:
        raise InvalidTermsError(key, value, "not a date")


def resolve_terms(record, lender_overrides=None, require_loan_amount=False):
    """Resolve a raw loan record into LoanTerms.

    Args:
        record: Mapping of loan fields (``interest_rate_annual``,
            ``origination_fee_pct``, ``loan_amount``, ``loan_start_date``,
            ``loan_term_months``, ``maturity_date``, ...). Missing or None
            fields fall back to lender overrides, then to config defaults.
        lender_overrides: Optional mapping with the same keys.
        require_loan_amount: When True a missing loan amount is an error.

    Returns:
        LoanTerms.

    Raises:
        InvalidTermsError: On negative rates or fees, inconsistent month
            thresholds, or a missing or non-positive loan amount when
            ``require_loan_amount`` is set.
    """
    record = record or {}

    annual_rate = _decimal_field('interest_rate_annual',
                                 _lookup('interest_rate_annual', record, lender_overrides))
    if annual_rate < 0:
        raise InvalidTermsError('interest_rate_annual', annual_rate, "must not be negative")

    loan_amount = _decimal_field('loan_amount', _lookup('loan_amount', record, lender_overrides))
    if loan_amount is not None and loan_amount <= 0:
        if require_loan_amount:
            raise InvalidTermsError('loan_amount', loan_amount, "must be positive")
        logger.warning("Ignoring non-positive loan amount %s", loan_amount)
        loan_amount = None
    if loan_amount is None and require_loan_amount:
        raise InvalidTermsError('loan_amount', None, "is required")

    base_fee_rate = _decimal_field('origination_fee_pct',
                                   _lookup('origination_fee_pct', record, lender_overrides))
    increment = _decimal_field('fee_escalation_pct',
                               _lookup('fee_escalation_pct', record, lender_overrides))
    document_fee = _decimal_field('document_fee', _lookup('document_fee', record, lender_overrides))
    for key, value in (('origination_fee_pct', base_fee_rate),
                       ('fee_escalation_pct', increment),
                       ('document_fee', document_fee)):
        if value < 0:
            raise InvalidTermsError(key, value, "must not be negative")

    term_months = _int_field('loan_term_months', _lookup('loan_term_months', record, lender_overrides))
    if term_months < 1:
        raise InvalidTermsError('loan_term_months', term_months, "must be at least 1")

    base_fee_months = _int_field('fee_escalation_after_months',
                                 _lookup('fee_escalation_after_months', record, lender_overrides))
    if base_fee_months < 1:
        raise InvalidTermsError('fee_escalation_after_months', base_fee_months, "must be at least 1")

    extension_month = _lookup('extension_fee_month', record, lender_overrides)
    if extension_month is None:
        extension_month = term_months + 1
    extension_month = _int_field('extension_fee_month', extension_month)
    if extension_month < base_fee_months:
        raise InvalidTermsError('extension_fee_month', extension_month,
                                f"must not precede the end of the base fee period (month {base_fee_months})")

    extension_rate = _decimal_field('extension_fee_rate',
                                    _lookup('extension_fee_rate', record, lender_overrides))
    post_increment = _decimal_field('post_extension_escalation',
                                    _lookup('post_extension_escalation', record, lender_overrides))
    for key, value in (('extension_fee_rate', extension_rate),
                       ('post_extension_escalation', post_increment)):
        if value is not None and value < 0:
            raise InvalidTermsError(key, value, "must not be negative")

    start_date = _date_field('loan_start_date', _lookup('loan_start_date', record, lender_overrides))
    maturity_date = _date_field('maturity_date', _lookup('maturity_date', record, lender_overrides))
    if maturity_date is None and start_date is not None:
        maturity_date = start_date + relativedelta(months=term_months)
        logger.debug("Derived maturity date %s from start %s + %d months",
                     maturity_date, start_date, term_months)

    return LoanTerms(
        loan_amount=loan_amount,
        annual_interest_rate=annual_rate,
        base_fee_rate=base_fee_rate,
        fee_escalation_increment=increment,
        base_fee_months=base_fee_months,
        extension_start_month=extension_month,
        document_fee=document_fee,
        maturity_date=maturity_date,
        loan_term_months=term_months,
        loan_start_date=start_date,
        extension_fee_rate=extension_rate,
        post_extension_increment=post_increment,
    )


class TermResolver:
    """Resolves loan records against a fixed set of lender overrides.

    Attributes:
        lender_overrides: Mapping applied beneath each loan record.
    """

    def __init__(self, lender_overrides=None):
        self.lender_overrides = dict(lender_overrides or {})

    def resolve(self, record, require_loan_amount=False) -> LoanTerms:
        return resolve_terms(record, self.lender_overrides, require_loan_amount)

    @staticmethod
    def defaults() -> LoanTerms:
        """Terms with every field at its system default."""
        return resolve_terms({})


__all__ = ['TermResolver', 'resolve_terms', 'TERM_DEFAULTS']
