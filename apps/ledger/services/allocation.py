"""
Payment allocation.

A payment pays off the oldest open purchases first: earliest ``date``, then
earliest entry for purchases sharing a date. Each purchase absorbs
``min(remaining payment, remaining balance)``. Anything left after every
purchase is settled is an overpayment; nothing stores it.
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Tuple
from uuid import UUID

from django.db import transaction

from ..models import Purchase
from ..money import to_cents, from_cents
from .exceptions import InvalidAmountError
from .locking import lock_account

logger = logging.getLogger(__name__)


def distribute_payment(purchases: Iterable, amount_cents: int) -> Tuple[list, int]:
    """
    Spread ``amount_cents`` over ``purchases`` in the order given.

    Updates ``amount_remaining`` on the purchases in place and touches nothing
    else; saving is the caller's job.

    Args:
        purchases: Objects with an ``amount_remaining`` attribute, already in
            allocation order
        amount_cents: Payment amount in integer cents

    Returns:
        Tuple of (purchases whose balance changed, cents left unapplied)
    """
    touched = []
    left = amount_cents

    for purchase in purchases:
        if left <= 0:
            break

        balance = to_cents(purchase.amount_remaining)
        if balance <= 0:
            continue

        applied = min(left, balance)
        purchase.amount_remaining = from_cents(balance - applied)
        left -= applied
        touched.append(purchase)

    return touched, max(left, 0)


@transaction.atomic
def allocate(*, account_id: UUID, amount: Decimal) -> List[Purchase]:
    """
    Apply a payment amount to the account's open purchases.

    Locks the account, so balances read here cannot be changed by a
    concurrent allocation or reconciliation before they are written back.

    Args:
        account_id: Account UUID
        amount: Positive payment amount

    Returns:
        Purchases whose balance changed, in allocation order

    Raises:
        InvalidAmountError: If amount is not positive
        AccountNotFoundError: If the account does not exist
        LedgerConflictError: If the account lock cannot be taken
    """
    amount_cents = to_cents(amount)
    if amount_cents <= 0:
        raise InvalidAmountError("Amount must be positive")

    lock_account(account_id)

    purchases = (
        Purchase.objects
        .for_account(account_id)
        .outstanding()
        .in_allocation_order()
    )
    touched, unapplied = distribute_payment(purchases, amount_cents)

    for purchase in touched:
        purchase.save(update_fields=['amount_remaining', 'updated_at'])
        logger.debug("Purchase %s now has %s due", purchase.id, purchase.amount_remaining)

    if unapplied:
        logger.debug(
            "Overpayment of %s on account %s left unapplied",
            from_cents(unapplied), account_id
        )

    logger.debug("Allocated %s across %d purchases", amount, len(touched))
    return touched
