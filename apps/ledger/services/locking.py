"""
Per-account serialization of balance changes.

Every operation that reads and rewrites purchase balances first locks the
owning account row. Two writers on the same account queue up behind each
other; writers on different accounts never block one another.
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from apps.accounts.models import Account
from apps.accounts.services.exceptions import AccountNotFoundError

from .exceptions import LedgerConflictError

logger = logging.getLogger(__name__)


def lock_account(account_id: UUID) -> Account:
    """
    Lock the account row for the rest of the current transaction.

    Must be called inside ``transaction.atomic``.

    Raises:
        AccountNotFoundError: If the account does not exist
        LedgerConflictError: If the database refused the lock
    """
    if not transaction.get_connection().in_atomic_block:
        raise transaction.TransactionManagementError(
            "lock_account() must be called inside an atomic block"
        )

    try:
        return Account.objects.select_for_update().get(id=account_id)
    except (Account.DoesNotExist, ValidationError):
        raise AccountNotFoundError("Account not found")
    except DatabaseError as e:
        logger.warning("Could not lock account %s: %s", account_id, e)
        raise LedgerConflictError("Account is busy, please retry") from e
