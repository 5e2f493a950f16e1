import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.users.models import User
from apps.accounts.models import Account, AccountAccess
from apps.ledger.models import Purchase, Payment


D1 = date(2024, 1, 1)
D2 = date(2024, 1, 2)
D3 = date(2024, 1, 3)


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
def account(owner, sharer):
    """Account owned by ``owner`` and shared with ``sharer``."""
    account = Account.objects.create(name='Household', owner=owner)
    AccountAccess.objects.create(account=account, user=sharer)
    return account


@pytest.fixture
def other_account(owner):
    """Second account of the same owner."""
    return Account.objects.create(name='Holiday', owner=owner)


@pytest.fixture
def make_purchase(account):
    """Factory for purchases with the full amount outstanding."""
    def _make(amount, when=D1, description='Purchase', target=None, remaining=None):
        amount = Decimal(amount)
        return Purchase.objects.create(
            account=target or account,
            amount=amount,
            amount_remaining=amount if remaining is None else Decimal(remaining),
            description=description,
            date=when,
        )
    return _make


@pytest.fixture
def make_payment(account):
    """Factory for payment rows (no allocation)."""
    def _make(amount, when=D1, target=None):
        return Payment.objects.create(
            account=target or account,
            amount=Decimal(amount),
            date=when,
        )
    return _make


@pytest.fixture
def two_purchases(make_purchase):
    """P1 $50 on day 1 and P2 $30 on day 2."""
    return (
        make_purchase('50.00', D1, 'P1'),
        make_purchase('30.00', D2, 'P2'),
    )


@pytest.fixture
def owner_client(owner):
    """API client authenticated as the owner."""
    client = APIClient()
    refresh = RefreshToken.for_user(owner)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def sharer_client(sharer):
    """API client authenticated as the sharer."""
    client = APIClient()
    refresh = RefreshToken.for_user(sharer)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def stranger_client(stranger):
    """API client authenticated as a user without access."""
    client = APIClient()
    refresh = RefreshToken.for_user(stranger)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client

