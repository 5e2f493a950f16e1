"""
Domain-specific exceptions for accounts app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class AccountsServiceError(Exception):
    """Base exception for all accounts service errors."""
    pass


class AccountNotFoundError(AccountsServiceError):
    """Raised when an account does not exist or is inaccessible."""
    pass


class InsufficientPermissionsError(AccountsServiceError):
    """Raised when a user lacks required permissions for an action."""
    pass


class InvalidAccountNameError(AccountsServiceError):
    """Raised when an account name is blank."""
    pass


class AlreadyHasAccessError(AccountsServiceError):
    """Raised when a user already owns or shares an account."""
    pass


class AccessGrantNotFoundError(AccountsServiceError):
    """Raised when revoking access the user never had."""
    pass
