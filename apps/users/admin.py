from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count

from apps.accounts.services import get_user_accounts
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin for email-login users.

    The default account picker offers only accounts the user owns or has
    been granted, the same rule the profile endpoint enforces.
    """

    list_display = ['email', 'display_name', 'default_account', 'account_count', 'is_active', 'last_login']
    list_filter = ['is_active', 'is_staff']
    search_fields = ['email', 'display_name']
    ordering = ['email']
    readonly_fields = ['created_at', 'updated_at', 'last_login']

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Ledger', {'fields': ('display_name', 'default_account')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser')}),
        ('Activity', {'fields': ('last_login', 'created_at', 'updated_at')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2'),
        }),
    )

    def get_queryset(self, request):
        return (
            super().get_queryset(request)
            .select_related('default_account')
            .annotate(owned_count=Count('owned_accounts'))
        )

    def get_form(self, request, obj=None, **kwargs):
        form = super().get_form(request, obj, **kwargs)
        if obj is not None and 'default_account' in form.base_fields:
            form.base_fields['default_account'].queryset = get_user_accounts(user=obj)
        return form

    @admin.display(description='Owned accounts', ordering='owned_count')
    def account_count(self, obj):
        return obj.owned_count
