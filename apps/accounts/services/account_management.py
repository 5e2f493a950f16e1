"""
Account management service.

Handles creating, listing and renaming ledger accounts, and answers the
question every ledger operation starts with: can this user open this account?
"""

import logging
from typing import List
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, QuerySet

from apps.users.models import User
from apps.accounts.models import Account

from .exceptions import (
    AccountNotFoundError,
    InsufficientPermissionsError,
    InvalidAccountNameError,
)

logger = logging.getLogger(__name__)


def _clean_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidAccountNameError("Valid name is required")
    return name.strip()


@transaction.atomic
def create_account(*, owner: User, name: str) -> Account:
    """
    Create an account owned by ``owner``.

    Raises:
        InvalidAccountNameError: If name is blank
    """
    account = Account.objects.create(name=_clean_name(name), owner=owner)
    logger.info("Created account %s for user %s", account.id, owner.id)
    return account


def create_default_account(*, owner: User) -> Account:
    """Create the account every user starts with."""
    return create_account(owner=owner, name=settings.LEDGER_DEFAULT_ACCOUNT_NAME)


def get_user_accounts(*, user: User) -> QuerySet:
    """Return accounts the user owns or has been granted access to."""
    return (
        Account.objects
        .filter(Q(owner=user) | Q(access_grants__user=user))
        .select_related('owner')
        .distinct()
    )


def get_account_for_user(*, account_id: UUID, user: User) -> Account:
    """
    Fetch an account the user may read and write.

    A missing account and an account the user cannot open are reported the
    same way, so callers cannot probe for account ids.

    Raises:
        AccountNotFoundError: If the account does not exist or is inaccessible
    """
    try:
        account = Account.objects.select_related('owner').get(id=account_id)
    except (Account.DoesNotExist, ValidationError, ValueError):
        raise AccountNotFoundError("Account not found")

    if not account.has_access(user):
        raise AccountNotFoundError("Account not found")

    return account


@transaction.atomic
def rename_account(*, account_id: UUID, user: User, name: str) -> Account:
    """
    Rename an account (owner only).

    Raises:
        InvalidAccountNameError: If name is blank
        AccountNotFoundError: If the account does not exist or is inaccessible
        InsufficientPermissionsError: If user shares but does not own the account
    """
    new_name = _clean_name(name)

    try:
        account = Account.objects.select_for_update().get(id=account_id)
    except (Account.DoesNotExist, ValidationError):
        raise AccountNotFoundError("Account not found")

    if not account.is_owner(user):
        if account.has_access(user):
            raise InsufficientPermissionsError("Only the account owner can rename it")
        raise AccountNotFoundError("Account not found")

    account.name = new_name
    account.save(update_fields=['name', 'updated_at'])
    return account


def list_accounts_with_stats(*, user: User) -> List[dict]:
    """
    Return every account the user can open, merged with its ledger totals.

    Returns:
        List of dicts with ``account`` plus the keys of
        :func:`apps.ledger.services.get_account_stats`.
    """
    from apps.ledger.services import get_account_stats

    return [
        {'account': account, **get_account_stats(account_id=account.id)}
        for account in get_user_accounts(user=user)
    ]
