"""
Ledger management service.

Creates and deletes purchases and payments, keeping purchase balances
consistent with the payment history. Every balance change happens under the
account lock inside a single transaction: if any step fails, the new row is
rolled back together with the balances.
"""

import logging
from datetime import date as date_type, datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from apps.users.models import User
from apps.accounts.services import get_account_for_user

from ..models import Purchase, Payment
from ..money import round_money
from .exceptions import (
    PurchaseNotFoundError,
    PaymentNotFoundError,
    LedgerValidationError,
    InvalidAmountError,
    MissingFieldError,
)
from .allocation import allocate
from .reconciliation import reconcile
from .aggregation import get_account_stats
from .locking import lock_account

logger = logging.getLogger(__name__)

MAX_AMOUNT = Decimal('9999999999.99')
MAX_DESCRIPTION_LENGTH = 500


def _clean_amount(value) -> Decimal:
    if value is None or value == '':
        raise MissingFieldError('amount')
    if isinstance(value, bool):
        raise InvalidAmountError("Amount must be a number")
    try:
        amount = round_money(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountError("Amount must be a number")
    if not amount.is_finite():
        raise InvalidAmountError("Amount must be a number")
    if amount <= 0:
        raise InvalidAmountError("Amount must be positive")
    if amount > MAX_AMOUNT:
        raise InvalidAmountError("Amount is too large")
    return amount


def _clean_date(value) -> date_type:
    if value is None or value == '':
        raise MissingFieldError('date')
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date_type):
        return value
    if isinstance(value, str):
        try:
            return date_type.fromisoformat(value)
        except ValueError:
            pass
    raise LedgerValidationError("Date must be an ISO date (YYYY-MM-DD)")


def _clean_description(value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise MissingFieldError('description')
    value = value.strip()
    if len(value) > MAX_DESCRIPTION_LENGTH:
        raise LedgerValidationError(
            f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters"
        )
    return value


def _get_row(model, row_id, not_found):
    try:
        return model.objects.get(id=row_id)
    except (model.DoesNotExist, ValidationError, ValueError):
        raise not_found


# =============================================================================
# PURCHASES
# =============================================================================

@transaction.atomic
def create_purchase(
    *,
    account_id: UUID,
    user: User,
    amount,
    description: str,
    date
) -> Purchase:
    """
    Record a purchase with its full amount outstanding.

    Existing payments are not re-applied to the new purchase; a backdated
    purchase only picks up earlier payments after an explicit reconcile.

    Raises:
        MissingFieldError: If amount, description or date is missing
        InvalidAmountError: If amount is not a positive number
        LedgerValidationError: If date or description is malformed
        AccountNotFoundError: If the account does not exist or is inaccessible
        LedgerConflictError: If the account lock cannot be taken
    """
    amount = _clean_amount(amount)
    description = _clean_description(description)
    date = _clean_date(date)

    account = get_account_for_user(account_id=account_id, user=user)
    lock_account(account.id)

    purchase = Purchase.objects.create(
        account=account,
        amount=amount,
        amount_remaining=amount,
        description=description,
        date=date,
    )

    logger.info("Created purchase %s (%s) on account %s", purchase.id, amount, account.id)
    return purchase


@transaction.atomic
def delete_purchase(
    *,
    purchase_id: UUID,
    user: User,
    reconcile_after: Optional[bool] = None
) -> None:
    """
    Delete a purchase.

    Payment amounts that were applied to the purchase stay consumed unless
    the account is reconciled afterwards. ``reconcile_after=None`` defers to
    the ``LEDGER_RECONCILE_ON_PURCHASE_DELETE`` setting.

    Raises:
        PurchaseNotFoundError: If the purchase does not exist
        AccountNotFoundError: If the account is inaccessible
        LedgerConflictError: If the account lock cannot be taken
    """
    purchase = _get_row(Purchase, purchase_id, PurchaseNotFoundError("Purchase not found"))
    account = get_account_for_user(account_id=purchase.account_id, user=user)
    lock_account(account.id)

    # Re-read under the lock; a concurrent request may have removed it
    deleted, _ = Purchase.objects.filter(id=purchase.id).delete()
    if not deleted:
        raise PurchaseNotFoundError("Purchase not found")

    logger.info("Deleted purchase %s from account %s", purchase.id, account.id)

    if reconcile_after is None:
        reconcile_after = getattr(settings, 'LEDGER_RECONCILE_ON_PURCHASE_DELETE', False)
    if reconcile_after:
        reconcile(account_id=account.id)


def list_purchases(
    *,
    account_id: UUID,
    user: User,
    date_from=None,
    date_to=None,
    outstanding_only: bool = False
) -> QuerySet:
    """
    List an account's purchases, newest first.

    Raises:
        AccountNotFoundError: If the account does not exist or is inaccessible
    """
    account = get_account_for_user(account_id=account_id, user=user)
    queryset = Purchase.objects.for_account(account.id)

    if date_from:
        queryset = queryset.filter(date__gte=date_from)
    if date_to:
        queryset = queryset.filter(date__lte=date_to)
    if outstanding_only:
        queryset = queryset.outstanding()

    return queryset.in_display_order()


# =============================================================================
# PAYMENTS
# =============================================================================

@transaction.atomic
def create_payment(*, account_id: UUID, user: User, amount, date) -> Payment:
    """
    Record a payment and allocate it to the oldest open purchases.

    Raises:
        MissingFieldError: If amount or date is missing
        InvalidAmountError: If amount is not a positive number
        LedgerValidationError: If date is malformed
        AccountNotFoundError: If the account does not exist or is inaccessible
        LedgerConflictError: If the account lock cannot be taken
    """
    amount = _clean_amount(amount)
    date = _clean_date(date)

    account = get_account_for_user(account_id=account_id, user=user)
    lock_account(account.id)

    payment = Payment.objects.create(account=account, amount=amount, date=date)
    allocate(account_id=account.id, amount=payment.amount)

    logger.info("Created payment %s (%s) on account %s", payment.id, amount, account.id)
    return payment


@transaction.atomic
def delete_payment(*, payment_id: UUID, user: User) -> List[Purchase]:
    """
    Delete a payment and rebuild the account's balances without it.

    Returns:
        Purchases whose balance changed

    Raises:
        PaymentNotFoundError: If the payment does not exist
        AccountNotFoundError: If the account is inaccessible
        LedgerConflictError: If the account lock cannot be taken
    """
    payment = _get_row(Payment, payment_id, PaymentNotFoundError("Payment not found"))
    account = get_account_for_user(account_id=payment.account_id, user=user)
    lock_account(account.id)

    deleted, _ = Payment.objects.filter(id=payment.id).delete()
    if not deleted:
        raise PaymentNotFoundError("Payment not found")

    logger.info("Deleted payment %s from account %s", payment.id, account.id)
    return reconcile(account_id=account.id)


def list_payments(
    *,
    account_id: UUID,
    user: User,
    date_from=None,
    date_to=None
) -> QuerySet:
    """
    List an account's payments, newest first.

    Raises:
        AccountNotFoundError: If the account does not exist or is inaccessible
    """
    account = get_account_for_user(account_id=account_id, user=user)
    queryset = Payment.objects.for_account(account.id)

    if date_from:
        queryset = queryset.filter(date__gte=date_from)
    if date_to:
        queryset = queryset.filter(date__lte=date_to)

    return queryset.in_display_order()


# =============================================================================
# ACCOUNT-LEVEL
# =============================================================================

def reconcile_account(*, account_id: UUID, user: User) -> List[Purchase]:
    """
    Rebuild balances on request, e.g. after entering a backdated purchase.

    Raises:
        AccountNotFoundError: If the account does not exist or is inaccessible
        LedgerConflictError: If the account lock cannot be taken
    """
    account = get_account_for_user(account_id=account_id, user=user)
    return reconcile(account_id=account.id)


def get_stats_for_user(*, account_id: UUID, user: User) -> dict:
    """
    Account totals for a user who can open the account.

    Raises:
        AccountNotFoundError: If the account does not exist or is inaccessible
    """
    account = get_account_for_user(account_id=account_id, user=user)
    return get_account_stats(account_id=account.id)
