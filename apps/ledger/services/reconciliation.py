"""Rebuild purchase balances from the full payment history."""

import logging
from typing import List
from uuid import UUID

from django.db import transaction

from ..models import Purchase, Payment
from ..money import to_cents
from .allocation import distribute_payment
from .locking import lock_account

logger = logging.getLogger(__name__)


@transaction.atomic
def reconcile(*, account_id: UUID) -> List[Purchase]:
    """
    Reset every purchase to its full amount and replay all payments.

    Payments are replayed oldest first (date, then entry order) through the
    same allocation rule a new payment uses, so the result only depends on
    the surviving purchases and payments. Running it twice changes nothing.

    The whole rebuild runs under the account lock in one transaction. If any
    write fails, every balance keeps its previous value.

    Args:
        account_id: Account UUID

    Returns:
        Purchases whose stored balance changed, in allocation order

    Raises:
        AccountNotFoundError: If the account does not exist
        LedgerConflictError: If the account lock cannot be taken
    """
    lock_account(account_id)

    purchases = list(
        Purchase.objects.for_account(account_id).in_allocation_order()
    )
    before = {purchase.pk: to_cents(purchase.amount_remaining) for purchase in purchases}

    for purchase in purchases:
        purchase.amount_remaining = purchase.amount

    payments = Payment.objects.for_account(account_id).in_allocation_order()
    for payment in payments:
        distribute_payment(purchases, to_cents(payment.amount))

    changed = [
        purchase for purchase in purchases
        if to_cents(purchase.amount_remaining) != before[purchase.pk]
    ]
    for purchase in changed:
        purchase.save(update_fields=['amount_remaining', 'updated_at'])

    logger.info(
        "Reconciled account %s: %d of %d purchases changed",
        account_id, len(changed), len(purchases)
    )
    return changed
