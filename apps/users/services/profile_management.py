"""Profile management service."""

from uuid import UUID
from typing import Optional

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.accounts.services import get_account_for_user, AccountNotFoundError

from .exceptions import InaccessibleAccountError

User = get_user_model()

# Sentinel distinguishing "leave unchanged" from "clear the default account"
UNSET = object()


@transaction.atomic
def update_profile(
    *,
    user: User,
    display_name: Optional[str] = None,
    default_account_id=UNSET,
) -> User:
    """
    Update the current user's profile.

    Args:
        user: User being updated
        display_name: New display name, or None to keep the current one
        default_account_id: UUID of an owned or shared account, None to clear
            it, or omitted to keep the current one

    Returns:
        Updated User instance

    Raises:
        InaccessibleAccountError: If the user has no access to the account
    """
    update_fields = []

    if display_name is not None:
        user.display_name = display_name.strip()
        update_fields.append('display_name')

    if default_account_id is not UNSET:
        if default_account_id is None:
            user.default_account = None
        else:
            try:
                user.default_account = get_account_for_user(
                    account_id=UUID(str(default_account_id)),
                    user=user
                )
            except (AccountNotFoundError, ValueError):
                raise InaccessibleAccountError("You don't have access to this account")
        update_fields.append('default_account')

    if update_fields:
        user.save(update_fields=update_fields + ['updated_at'])

    return user
