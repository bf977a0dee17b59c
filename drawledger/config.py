"""Centralized configuration for DrawLedger.

This module contains the term-sheet defaults, day-count conventions and
display constants used across the accrual and payoff services.
"""
from decimal import Decimal

# =============================================================================
# TERM SHEET DEFAULTS
# =============================================================================

# Default annual interest rate (11%)
DEFAULT_INTEREST_RATE = Decimal("0.11")

# Default origination (finance) fee rate charged at payoff (2%)
DEFAULT_ORIGINATION_FEE_RATE = Decimal("0.02")

# Monthly fee escalation once the base period ends (+0.25% per month)
DEFAULT_FEE_ESCALATION_INCREMENT = Decimal("0.0025")

# Months charged at the base fee rate before escalation begins
DEFAULT_BASE_FEE_MONTHS = 6

# Default loan term in months
DEFAULT_LOAN_TERM_MONTHS = 12

# Fixed document fee added to every payoff
DEFAULT_DOCUMENT_FEE = Decimal("1000")

# =============================================================================
# BUSINESS RULES
# =============================================================================

# Interest day-count basis (actual/365)
DAYS_PER_YEAR = 365

# Money is rounded to cents, half-up
MONEY_QUANTUM = Decimal("0.01")

# Draw status that counts towards accrual
FUNDED_STATUS = "funded"

# Urgency thresholds in days to maturity
URGENCY_WARNING_DAYS = 30
URGENCY_INFO_DAYS = 60

# Default horizon for fee schedules and projection charts
DEFAULT_SCHEDULE_HORIZON_MONTHS = 18

# Default forward projection for the payoff slider
DEFAULT_PROJECTION_DAYS = 30

# =============================================================================
# PERFORMANCE BANDS
# =============================================================================

# Loan-to-value bands (percent)
LTV_LOW_MAX = 65
LTV_MODERATE_MAX = 74

# IRR bands (fraction)
IRR_STRONG_MIN = 0.15
IRR_FAIR_MIN = 0.10

# =============================================================================
# DISPLAY FORMATS
# =============================================================================

# Date format for report cells (ISO 8601)
DATE_FORMAT_STORAGE = "%Y-%m-%d"

# Month label used by projection charts
DATE_FORMAT_MONTH = "%b-%y"

# =============================================================================
# REPORT EXPORT
# =============================================================================

SHEET_PAYOFF = "Payoff"
SHEET_LEDGER = "Ledger"
SHEET_FEE_SCHEDULE = "Fee Schedule"
SHEET_PROJECTION = "Projection"

# =============================================================================
# LOGGING
# =============================================================================

# Record format for the CLI's stream and file handlers
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

# Levels accepted by --log-level
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Third-party loggers held at WARNING or above
QUIET_LOGGERS = ("xlsxwriter", "dateutil")
