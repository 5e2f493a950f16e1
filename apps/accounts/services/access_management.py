"""
Shared-access management service.

Grants and revokes read/write access to an account for users other than
its owner.
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.users.models import User
from apps.accounts.models import Account, AccountAccess

from .exceptions import (
    AccountNotFoundError,
    InsufficientPermissionsError,
    AlreadyHasAccessError,
    AccessGrantNotFoundError,
)

logger = logging.getLogger(__name__)


def _get_owned_account(account_id: UUID, owner: User) -> Account:
    try:
        account = (
            Account.objects
            .select_for_update()
            .get(id=account_id)
        )
    except (Account.DoesNotExist, ValidationError):
        raise AccountNotFoundError("Account not found")

    if not account.is_owner(owner):
        if not account.has_access(owner):
            raise AccountNotFoundError("Account not found")
        raise InsufficientPermissionsError("Only the account owner can manage access")

    return account


@transaction.atomic
def grant_access(*, account_id: UUID, owner: User, user: User) -> AccountAccess:
    """
    Share an account with ``user``.

    Raises:
        AccountNotFoundError: If account doesn't exist
        InsufficientPermissionsError: If ``owner`` does not own the account
        AlreadyHasAccessError: If ``user`` already owns or shares the account
    """
    account = _get_owned_account(account_id, owner)

    if account.is_owner(user):
        raise AlreadyHasAccessError("User already owns this account")

    try:
        with transaction.atomic():
            grant = AccountAccess.objects.create(account=account, user=user)
    except IntegrityError:
        raise AlreadyHasAccessError("User already has access to this account")

    logger.info("Granted user %s access to account %s", user.id, account.id)
    return grant


@transaction.atomic
def revoke_access(*, account_id: UUID, owner: User, user: User) -> None:
    """
    Remove a shared-access grant.

    Raises:
        AccountNotFoundError: If account doesn't exist
        InsufficientPermissionsError: If ``owner`` does not own the account
        AccessGrantNotFoundError: If ``user`` had no grant
    """
    account = _get_owned_account(account_id, owner)

    deleted, _ = AccountAccess.objects.filter(account=account, user=user).delete()
    if not deleted:
        raise AccessGrantNotFoundError("User has no access grant for this account")

    # A revoked account can no longer be the user's default
    User.objects.filter(pk=user.pk, default_account=account).update(default_account=None)

    logger.info("Revoked user %s access to account %s", user.id, account.id)


def get_shared_users(*, account_id: UUID) -> QuerySet:
    """Return access grants of an account with their users."""
    return (
        AccountAccess.objects
        .filter(account_id=account_id)
        .select_related('user')
        .order_by('created_at')
    )
