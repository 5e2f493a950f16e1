"""Services for users business logic."""

from .exceptions import (
    UsersServiceError,
    UserRegistrationError,
    InaccessibleAccountError,
)
from .user_registration import register_user
from .profile_management import update_profile

__all__ = [
    # Exceptions
    'UsersServiceError',
    'UserRegistrationError',
    'InaccessibleAccountError',
    # Services
    'register_user',
    'update_profile',
]
