import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.users.models import User
from apps.accounts.models import Account, AccountAccess
from apps.ledger.models import Purchase, Payment


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def owner(db):
    """Create and return the account owner."""
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        display_name='Account Owner',
    )


@pytest.fixture
def sharer(db):
    """Create and return a user the account is shared with."""
    return User.objects.create_user(
        email='sharer@example.com',
        password='TestPass123!',
        display_name='Sharer',
    )


@pytest.fixture
def stranger(db):
    """Create and return a user with no access."""
    return User.objects.create_user(
        email='stranger@example.com',
        password='TestPass123!',
        display_name='Stranger',
    )


@pytest.fixture
def account(owner):
    """Account owned by ``owner``."""
    return Account.objects.create(name='Household', owner=owner)


@pytest.fixture
def shared_account(account, sharer):
    """``account`` shared with ``sharer``."""
    AccountAccess.objects.create(account=account, user=sharer)
    return account


@pytest.fixture
def funded_account(account):
    """Account with two purchases and one partial payment applied."""
    Purchase.objects.create(
        account=account,
        amount=Decimal('50.00'),
        amount_remaining=Decimal('10.00'),
        description='Groceries',
        date=date(2024, 1, 1),
    )
    Purchase.objects.create(
        account=account,
        amount=Decimal('30.00'),
        amount_remaining=Decimal('30.00'),
        description='Fuel',
        date=date(2024, 1, 2),
    )
    Payment.objects.create(account=account, amount=Decimal('40.00'), date=date(2024, 1, 3))
    return account


@pytest.fixture
def owner_client(owner):
    """API client authenticated as the owner."""
    return _client_for(owner)


@pytest.fixture
def sharer_client(sharer):
    """API client authenticated as the sharer."""
    return _client_for(sharer)


@pytest.fixture
def stranger_client(stranger):
    """API client authenticated as a user without access."""
    return _client_for(stranger)
