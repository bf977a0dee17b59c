"""Custom exceptions for DrawLedger."""


class DrawLedgerError(Exception):
    """Base exception for all DrawLedger errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class InvalidTermsError(DrawLedgerError):
    """Raised when loan terms cannot be resolved into a valid LoanTerms."""

    def __init__(self, field: str, value=None, reason: str = None):
        details = {'field': field}
        if value is not None:
            details['value'] = value

        message = f"Invalid loan term '{field}'"
        if reason:
            message = f"{message}: {reason}"

        super().__init__(message, details)
        self.field = field


class InvalidDrawError(DrawLedgerError):
    """Raised when a draw has a non-positive amount or an unparseable date."""

    def __init__(self, reason: str, draw=None):
        details = {}
        if draw is not None:
            details['draw'] = draw

        super().__init__(f"Invalid draw: {reason}", details)
