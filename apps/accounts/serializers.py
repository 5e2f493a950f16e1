from rest_framework import serializers
from .models import Account, AccountAccess
from apps.users.models import User


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class AccountSerializer(serializers.ModelSerializer):
    """Account without totals."""

    owner = UserMinimalSerializer(read_only=True)
    is_owner = serializers.SerializerMethodField()

    class Meta:
        model = Account
        fields = ['id', 'name', 'owner', 'is_owner', 'created_at', 'updated_at']
        read_only_fields = fields

    def get_is_owner(self, obj):
        """Whether the requesting user owns the account."""
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.is_owner(request.user)
        return False


class AccountWithStatsSerializer(serializers.Serializer):
    """
    Account merged with its ledger totals.

    Expects the dicts returned by ``list_accounts_with_stats``.
    """

    account = AccountSerializer()
    total_purchases = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_payments = serializers.DecimalField(max_digits=14, decimal_places=2)
    amount_due = serializers.DecimalField(max_digits=14, decimal_places=2)
    purchase_count = serializers.IntegerField()
    payment_count = serializers.IntegerField()

    def to_representation(self, instance):
        # Flatten the account fields next to the totals
        data = super().to_representation(instance)
        account = data.pop('account')
        return {**account, **data}


class AccountCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)


class AccountRenameSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)


class AccessGrantSerializer(serializers.ModelSerializer):
    """A user an account is shared with."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = AccountAccess
        fields = ['id', 'user', 'created_at']
        read_only_fields = fields


class AccessChangeSerializer(serializers.Serializer):
    """Identify the user to share with (or stop sharing with)."""

    email = serializers.EmailField()
