from django.contrib import admin
from .models import Account, AccountAccess
from apps.ledger.services import get_account_stats


class AccountAccessInline(admin.TabularInline):
    """Inline admin for shared-access grants."""
    model = AccountAccess
    extra = 0
    fields = ['user', 'created_at']
    readonly_fields = ['created_at']
    autocomplete_fields = ['user']


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    """Admin interface for ledger accounts."""

    list_display = ['name', 'owner', 'amount_due', 'created_at']
    search_fields = ['name', 'owner__email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    inlines = [AccountAccessInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def amount_due(self, obj):
        return get_account_stats(account_id=obj.id)['amount_due']
    amount_due.short_description = 'Amount due'
