from decimal import Decimal
from rest_framework import serializers
from .models import Purchase, Payment


# =============================================================================
# Input Serializers
# =============================================================================

class LedgerFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for ledger listings.

    Query Parameters:
        account (UUID): Account to list (required)
        date_from (date): Entries on or after this date
        date_to (date): Entries on or before this date
    """

    account = serializers.UUIDField()
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        """Validate date range."""
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')

        if date_from and date_to:
            if date_from > date_to:
                raise serializers.ValidationError({
                    'date_to': 'End date must be after start date'
                })

        return attrs


class PurchaseFilterSerializer(LedgerFilterSerializer):
    """Ledger filters plus ``outstanding`` (only purchases with a balance due)."""

    outstanding = serializers.BooleanField(required=False, default=False)


class PurchaseDeleteSerializer(serializers.Serializer):
    """Query parameters for purchase deletion."""

    reconcile = serializers.BooleanField(required=False, allow_null=True, default=None)


class PurchaseCreateSerializer(serializers.Serializer):
    """Validate purchase creation input."""

    account = serializers.UUIDField()
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    description = serializers.CharField(max_length=500)
    date = serializers.DateField()


class PaymentCreateSerializer(serializers.Serializer):
    """Validate payment creation input."""

    account = serializers.UUIDField()
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    date = serializers.DateField()


# =============================================================================
# Output Serializers
# =============================================================================

class PurchaseSerializer(serializers.ModelSerializer):
    """Purchase with its open balance."""

    account = serializers.UUIDField(source='account_id', read_only=True)
    is_paid = serializers.BooleanField(read_only=True)

    class Meta:
        model = Purchase
        fields = [
            'id',
            'account',
            'amount',
            'amount_remaining',
            'is_paid',
            'description',
            'date',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):

    account = serializers.UUIDField(source='account_id', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id',
            'account',
            'amount',
            'date',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class AccountStatsSerializer(serializers.Serializer):
    """Totals for one account."""

    total_purchases = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_payments = serializers.DecimalField(max_digits=14, decimal_places=2)
    amount_due = serializers.DecimalField(max_digits=14, decimal_places=2)
    purchase_count = serializers.IntegerField()
    payment_count = serializers.IntegerField()
