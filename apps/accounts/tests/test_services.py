"""
Service layer unit tests for accounts app.

Tests cover:
- Account creation and naming rules
- Owned and shared account visibility
- Owner-only operations
- Shared-access grants
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from apps.accounts.models import Account, AccountAccess
from apps.accounts.services import (
    create_account,
    create_default_account,
    get_user_accounts,
    get_account_for_user,
    rename_account,
    list_accounts_with_stats,
    grant_access,
    revoke_access,
    get_shared_users,
)
from apps.accounts.services.exceptions import (
    AccountNotFoundError,
    InsufficientPermissionsError,
    InvalidAccountNameError,
    AlreadyHasAccessError,
    AccessGrantNotFoundError,
)


# =============================================================================
# Account Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestAccountManagement:
    """Tests for account_management.py service functions."""

    def test_create_account_strips_name(self, owner):
        account = create_account(owner=owner, name='  Trip  ')

        assert account.name == 'Trip'
        assert account.owner == owner

    def test_create_account_blank_name(self, owner):
        with pytest.raises(InvalidAccountNameError):
            create_account(owner=owner, name='   ')

        assert not Account.objects.filter(owner=owner).exists()

    def test_create_default_account(self, owner):
        account = create_default_account(owner=owner)

        assert account.name == 'My Account'

    def test_user_accounts_include_shared(self, owner, sharer, shared_account):
        own = create_account(owner=sharer, name='Mine')

        accounts = list(get_user_accounts(user=sharer))

        assert set(accounts) == {own, shared_account}

    def test_user_accounts_are_distinct(self, shared_account, owner, stranger):
        AccountAccess.objects.create(account=shared_account, user=stranger)

        assert list(get_user_accounts(user=owner)) == [shared_account]

    def test_get_account_for_owner_and_sharer(self, shared_account, owner, sharer):
        assert get_account_for_user(account_id=shared_account.id, user=owner) == shared_account
        assert get_account_for_user(account_id=shared_account.id, user=sharer) == shared_account

    def test_get_account_for_stranger(self, account, stranger):
        """An inaccessible account looks exactly like a missing one."""
        with pytest.raises(AccountNotFoundError) as no_access:
            get_account_for_user(account_id=account.id, user=stranger)
        with pytest.raises(AccountNotFoundError) as missing:
            get_account_for_user(account_id=uuid4(), user=stranger)

        assert str(no_access.value) == str(missing.value)

    def test_get_account_malformed_id(self, owner):
        with pytest.raises(AccountNotFoundError):
            get_account_for_user(account_id='not-a-uuid', user=owner)

    def test_rename_by_owner(self, account, owner):
        renamed = rename_account(account_id=account.id, user=owner, name='Flat')

        assert renamed.name == 'Flat'
        account.refresh_from_db()
        assert account.name == 'Flat'

    def test_rename_by_sharer(self, shared_account, sharer):
        with pytest.raises(InsufficientPermissionsError):
            rename_account(account_id=shared_account.id, user=sharer, name='Mine now')

    def test_rename_by_stranger(self, account, stranger):
        with pytest.raises(AccountNotFoundError):
            rename_account(account_id=account.id, user=stranger, name='Mine now')

    def test_rename_blank(self, account, owner):
        with pytest.raises(InvalidAccountNameError):
            rename_account(account_id=account.id, user=owner, name='')

        account.refresh_from_db()
        assert account.name == 'Household'

    def test_list_accounts_with_stats(self, funded_account, owner):
        result = list_accounts_with_stats(user=owner)

        assert len(result) == 1
        entry = result[0]
        assert entry['account'] == funded_account
        assert entry['total_purchases'] == Decimal('80.00')
        assert entry['total_payments'] == Decimal('40.00')
        assert entry['amount_due'] == Decimal('40.00')
        assert entry['purchase_count'] == 2
        assert entry['payment_count'] == 1


# =============================================================================
# Access Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestAccessManagement:
    """Tests for access_management.py service functions."""

    def test_grant_access(self, account, owner, sharer):
        grant = grant_access(account_id=account.id, owner=owner, user=sharer)

        assert grant.account == account
        assert account.has_access(sharer)

    def test_grant_twice(self, shared_account, owner, sharer):
        with pytest.raises(AlreadyHasAccessError):
            grant_access(account_id=shared_account.id, owner=owner, user=sharer)

        assert AccountAccess.objects.filter(account=shared_account).count() == 1

    def test_grant_to_owner(self, account, owner):
        with pytest.raises(AlreadyHasAccessError):
            grant_access(account_id=account.id, owner=owner, user=owner)

    def test_sharer_cannot_grant(self, shared_account, sharer, stranger):
        with pytest.raises(InsufficientPermissionsError):
            grant_access(account_id=shared_account.id, owner=sharer, user=stranger)

    def test_stranger_cannot_grant(self, account, stranger, sharer):
        with pytest.raises(AccountNotFoundError):
            grant_access(account_id=account.id, owner=stranger, user=sharer)

    def test_revoke_access(self, shared_account, owner, sharer):
        revoke_access(account_id=shared_account.id, owner=owner, user=sharer)

        assert not shared_account.has_access(sharer)

    def test_revoke_clears_default_account(self, shared_account, owner, sharer):
        sharer.default_account = shared_account
        sharer.save()

        revoke_access(account_id=shared_account.id, owner=owner, user=sharer)

        sharer.refresh_from_db()
        assert sharer.default_account is None

    def test_revoke_missing_grant(self, account, owner, stranger):
        with pytest.raises(AccessGrantNotFoundError):
            revoke_access(account_id=account.id, owner=owner, user=stranger)

    def test_get_shared_users(self, shared_account, sharer):
        grants = list(get_shared_users(account_id=shared_account.id))

        assert [grant.user for grant in grants] == [sharer]
