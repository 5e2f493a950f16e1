import pytest
from decimal import Decimal
from uuid import uuid4
from unittest.mock import patch
from django.db import OperationalError
from django.urls import reverse
from rest_framework import status

from apps.accounts.models import Account, AccountAccess
from apps.ledger.models import Purchase


# =============================================================================
# Account List / Detail Tests
# =============================================================================

@pytest.mark.django_db
class TestAccountList:
    """Tests for GET /api/accounts/"""

    def test_list_with_stats(self, owner_client, funded_account):
        url = reverse('accounts:account-list')
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        entry = response.data[0]
        assert entry['id'] == str(funded_account.id)
        assert entry['name'] == 'Household'
        assert entry['is_owner'] is True
        assert entry['amount_due'] == '40.00'
        assert entry['total_purchases'] == '80.00'
        assert entry['total_payments'] == '40.00'
        assert entry['purchase_count'] == 2
        assert entry['payment_count'] == 1

    def test_list_includes_shared(self, sharer_client, shared_account):
        url = reverse('accounts:account-list')
        response = sharer_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [entry['id'] for entry in response.data] == [str(shared_account.id)]
        assert response.data[0]['is_owner'] is False

    def test_list_excludes_foreign(self, stranger_client, account):
        url = reverse('accounts:account-list')
        response = stranger_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == []

    def test_list_unauthenticated(self, api_client):
        url = reverse('accounts:account-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestAccountCreate:
    """Tests for POST /api/accounts/"""

    def test_create(self, owner_client, owner):
        url = reverse('accounts:account-list')
        response = owner_client.post(url, {'name': 'Holiday'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['name'] == 'Holiday'
        assert response.data['amount_due'] == '0.00'
        assert Account.objects.filter(owner=owner, name='Holiday').exists()

    def test_create_blank_name(self, owner_client):
        url = reverse('accounts:account-list')
        response = owner_client.post(url, {'name': '   '}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestAccountDetail:
    """Tests for GET/PATCH /api/accounts/{id}/"""

    def test_retrieve(self, sharer_client, shared_account):
        url = reverse('accounts:account-detail', args=[shared_account.id])
        response = sharer_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['owner']['email'] == 'owner@example.com'
        assert response.data['amount_due'] == '0.00'

    def test_retrieve_no_access(self, stranger_client, account):
        url = reverse('accounts:account-detail', args=[account.id])
        response = stranger_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'error': 'Account not found'}

    def test_rename_by_owner(self, owner_client, account):
        url = reverse('accounts:account-detail', args=[account.id])
        response = owner_client.patch(url, {'name': 'Flat'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Flat'

    def test_rename_by_sharer(self, sharer_client, shared_account):
        url = reverse('accounts:account-detail', args=[shared_account.id])
        response = sharer_client.patch(url, {'name': 'Mine'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        shared_account.refresh_from_db()
        assert shared_account.name == 'Household'

    def test_rename_by_stranger(self, stranger_client, account):
        url = reverse('accounts:account-detail', args=[account.id])
        response = stranger_client.patch(url, {'name': 'Mine'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_rename_blank(self, owner_client, account):
        url = reverse('accounts:account-detail', args=[account.id])
        response = owner_client.patch(url, {'name': ''}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Stats / Reconcile Tests
# =============================================================================

@pytest.mark.django_db
class TestAccountStats:
    """Tests for GET /api/accounts/{id}/stats/"""

    def test_stats(self, owner_client, funded_account):
        url = reverse('accounts:account-stats', args=[funded_account.id])
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            'total_purchases': '80.00',
            'total_payments': '40.00',
            'amount_due': '40.00',
            'purchase_count': 2,
            'payment_count': 1,
        }

    def test_stats_unknown_account(self, owner_client):
        url = reverse('accounts:account-stats', args=[uuid4()])
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestAccountReconcile:
    """Tests for POST /api/accounts/{id}/reconcile/"""

    def test_reconcile_repairs_balances(self, owner_client, funded_account):
        """Drifted balances are rebuilt from the payment history."""
        Purchase.objects.filter(account=funded_account).update(amount_remaining=Decimal('0.00'))

        url = reverse('accounts:account-reconcile', args=[funded_account.id])
        response = owner_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2
        remaining = {
            p.description: p.amount_remaining
            for p in Purchase.objects.filter(account=funded_account)
        }
        assert remaining == {'Groceries': Decimal('10.00'), 'Fuel': Decimal('30.00')}

    def test_reconcile_consistent_account(self, owner_client, funded_account):
        url = reverse('accounts:account-reconcile', args=[funded_account.id])
        response = owner_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == []

    def test_reconcile_no_access(self, stranger_client, account):
        url = reverse('accounts:account-reconcile', args=[account.id])
        response = stranger_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_reconcile_lock_conflict(self, owner_client, account):
        url = reverse('accounts:account-reconcile', args=[account.id])
        with patch(
            'apps.ledger.services.locking.Account.objects.select_for_update',
            side_effect=OperationalError('database is locked')
        ):
            response = owner_client.post(url)

        assert response.status_code == status.HTTP_409_CONFLICT


# =============================================================================
# Shared Access Tests
# =============================================================================

@pytest.mark.django_db
class TestAccountAccess:
    """Tests for /api/accounts/{id}/access/"""

    def test_list_grants(self, sharer_client, shared_account):
        url = reverse('accounts:account-access', args=[shared_account.id])
        response = sharer_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['user']['email'] == 'sharer@example.com'

    def test_grant(self, owner_client, account, sharer):
        url = reverse('accounts:account-access', args=[account.id])
        response = owner_client.post(url, {'email': 'SHARER@example.com'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert AccountAccess.objects.filter(account=account, user=sharer).exists()

    def test_grant_unknown_email(self, owner_client, account):
        url = reverse('accounts:account-access', args=[account.id])
        response = owner_client.post(url, {'email': 'nobody@example.com'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_grant_twice(self, owner_client, shared_account):
        url = reverse('accounts:account-access', args=[shared_account.id])
        response = owner_client.post(url, {'email': 'sharer@example.com'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_sharer_cannot_grant(self, sharer_client, shared_account, stranger):
        url = reverse('accounts:account-access', args=[shared_account.id])
        response = sharer_client.post(url, {'email': stranger.email}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_revoke(self, owner_client, shared_account, sharer):
        url = reverse('accounts:account-access', args=[shared_account.id])
        response = owner_client.delete(url, {'email': sharer.email}, format='json')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not AccountAccess.objects.filter(account=shared_account).exists()
