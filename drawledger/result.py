"""Outcome values for report exports.

Writing a report touches the filesystem, so PayoffReportGenerator hands back
an ExportResult instead of raising: the written path on success, otherwise
an error message tagged with an ErrorType category.
"""
from dataclasses import dataclass
from typing import Optional

from drawledger.exceptions import DrawLedgerError


class ErrorType:
    """Why an export produced no file."""
    VALIDATION = "VALIDATION"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    EXPORT = "EXPORT"


@dataclass(frozen=True)
class ExportResult:
    """Outcome of writing one report.

    Attributes:
        success: True when the file was written.
        value: Path of the written file.
        error: Message describing the failure.
        error_type: One of the ErrorType constants.
    """
    success: bool
    value: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @classmethod
    def ok(cls, path):
        return cls(success=True, value=path)

    @classmethod
    def fail(cls, error, error_type=ErrorType.EXPORT):
        return cls(success=False, error=error, error_type=error_type)

    def __bool__(self):
        return self.success

    def unwrap(self):
        """Written path; raises DrawLedgerError carrying the category on failure."""
        if not self.success:
            raise DrawLedgerError(self.error, {'error_type': self.error_type})
        return self.value

    def unwrap_or(self, default):
        return self.value if self.success else default
