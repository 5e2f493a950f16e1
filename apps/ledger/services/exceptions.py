"""
Domain-specific exceptions for ledger app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class LedgerServiceError(Exception):
    """Base exception for all ledger service errors."""
    pass


class PurchaseNotFoundError(LedgerServiceError):
    """Raised when a purchase does not exist or is inaccessible."""
    pass


class PaymentNotFoundError(LedgerServiceError):
    """Raised when a payment does not exist or is inaccessible."""
    pass


class LedgerValidationError(LedgerServiceError):
    """Raised when ledger input is malformed."""
    pass


class InvalidAmountError(LedgerValidationError):
    """Raised when an amount is not a positive two-place number."""
    pass


class MissingFieldError(LedgerValidationError):
    """Raised when a required field is absent or blank."""

    def __init__(self, field):
        self.field = field
        super().__init__(f"{field} is required")


class LedgerConflictError(LedgerServiceError):
    """Raised when the account lock cannot be taken."""
    pass
