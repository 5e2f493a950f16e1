from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class LedgerQuerySet(models.QuerySet):
    """Orderings shared by purchases and payments."""

    def for_account(self, account_id):
        return self.filter(account_id=account_id)

    def in_allocation_order(self):
        """Oldest first: earliest date, then earliest entry."""
        return self.order_by('date', 'created_at', 'id')

    def in_display_order(self):
        return self.order_by('-date', '-created_at')


class PurchaseQuerySet(LedgerQuerySet):

    def outstanding(self):
        return self.filter(amount_remaining__gt=0)


class Purchase(models.Model):
    """A debt recorded against an account."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    account = models.ForeignKey(
        'accounts.Account',
        on_delete=models.CASCADE,
        related_name='purchases'
    )

    # Original debt and the part of it still unpaid.
    # Invariant: 0 <= amount_remaining <= amount
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    amount_remaining = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    description = models.CharField(max_length=500)
    date = models.DateField()

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PurchaseQuerySet.as_manager()

    class Meta:
        db_table = 'purchases'
        indexes = [
            models.Index(fields=['account', 'date', 'created_at'], name='purchases_account_date_idx'),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.description} - {self.amount} ({self.amount_remaining} due)"

    @property
    def is_paid(self):
        return self.amount_remaining <= 0

    @property
    def amount_paid(self):
        return self.amount - self.amount_remaining


class Payment(models.Model):
    """A credit applied to an account's purchases, oldest first."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    account = models.ForeignKey(
        'accounts.Account',
        on_delete=models.CASCADE,
        related_name='payments'
    )

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    date = models.DateField()

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LedgerQuerySet.as_manager()

    class Meta:
        db_table = 'payments'
        indexes = [
            models.Index(fields=['account', 'date', 'created_at'], name='payments_account_date_idx'),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"Payment {self.amount} on {self.date}"
