from django.contrib import admin, messages
from .models import Purchase, Payment
from .services import reconcile, LedgerConflictError


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    """
    Admin interface for purchases.

    Balances are owned by the allocation engine, so amount_remaining is
    read-only here. Use the reconcile action to rebuild an account.
    """

    list_display = ['description', 'account', 'amount', 'amount_remaining', 'date', 'created_at']
    list_filter = ['date']
    search_fields = ['description', 'account__name', 'account__owner__email']
    readonly_fields = ['id', 'amount_remaining', 'created_at', 'updated_at']
    date_hierarchy = 'date'
    ordering = ['-date', '-created_at']
    actions = ['reconcile_accounts']

    # Ledger rows are written through the services, under the account lock
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        # Deletion must honour the reconcile policy; use the API
        return False

    @admin.action(description='Reconcile the accounts of selected purchases')
    def reconcile_accounts(self, request, queryset):
        account_ids = set(queryset.values_list('account_id', flat=True))
        busy = []
        for account_id in account_ids:
            try:
                reconcile(account_id=account_id)
            except LedgerConflictError:
                busy.append(account_id)

        done = len(account_ids) - len(busy)
        if done:
            self.message_user(request, f"Reconciled {done} account(s).", messages.SUCCESS)
        if busy:
            self.message_user(
                request,
                f"Skipped {len(busy)} busy account(s), try again.",
                messages.WARNING
            )


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):

    list_display = ['account', 'amount', 'date', 'created_at']
    list_filter = ['date']
    search_fields = ['account__name', 'account__owner__email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    date_hierarchy = 'date'
    ordering = ['-date', '-created_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        # Deleting a payment requires a reconcile; use the API
        return False
