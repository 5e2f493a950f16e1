"""Account totals, computed on read."""

from decimal import Decimal
from uuid import UUID

from django.db.models import Count, DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from ..models import Purchase, Payment
from ..money import ZERO, round_money

MONEY = DecimalField(max_digits=14, decimal_places=2)


def _money_sum(field):
    return Coalesce(Sum(field), Value(ZERO), output_field=MONEY)


def get_account_stats(*, account_id: UUID) -> dict:
    """
    Summarize an account's purchases and payments.

    Returns:
        Dict with total_purchases, total_payments, amount_due (Decimal,
        two places) and purchase_count, payment_count (int). An empty
        account reports zeros.
    """
    purchases = Purchase.objects.for_account(account_id).aggregate(
        total=_money_sum('amount'),
        due=_money_sum('amount_remaining'),
        count=Count('id'),
    )
    payments = Payment.objects.for_account(account_id).aggregate(
        total=_money_sum('amount'),
        count=Count('id'),
    )

    return {
        'total_purchases': round_money(purchases['total']),
        'total_payments': round_money(payments['total']),
        'amount_due': round_money(purchases['due']),
        'purchase_count': purchases['count'],
        'payment_count': payments['count'],
    }


def calculate_amount_due(*, account_id: UUID) -> Decimal:
    """Sum of the open balances of every purchase on the account."""
    due = Purchase.objects.for_account(account_id).aggregate(
        due=_money_sum('amount_remaining')
    )['due']
    return round_money(due)
