"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.accounts.services import create_default_account

from .exceptions import UserRegistrationError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = ""
) -> User:
    """
    Register a new user and open their first ledger account.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is taken or the user cannot be saved
    """
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("User already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name
        )
    except (IntegrityError, ValueError) as e:
        raise UserRegistrationError(f"Registration failed: {str(e)}")

    create_default_account(owner=user)

    logger.info("Registered user %s", user.id)
    return user
