"""Domain-specific exceptions for users services."""


class UsersServiceError(Exception):
    """Base exception for users services."""
    pass


class UserRegistrationError(UsersServiceError):
    """Raised when user registration fails."""
    pass


class InaccessibleAccountError(UsersServiceError):
    """Raised when a user picks a ledger account they cannot open."""
    pass
