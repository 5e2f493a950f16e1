"""
Accounts app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and row locking.
"""

from .exceptions import (
    AccountsServiceError,
    AccountNotFoundError,
    InsufficientPermissionsError,
    InvalidAccountNameError,
    AlreadyHasAccessError,
    AccessGrantNotFoundError,
)

from .account_management import (
    create_account,
    create_default_account,
    get_user_accounts,
    get_account_for_user,
    rename_account,
    list_accounts_with_stats,
)

from .access_management import (
    grant_access,
    revoke_access,
    get_shared_users,
)


__all__ = [
    # Exceptions
    'AccountsServiceError',
    'AccountNotFoundError',
    'InsufficientPermissionsError',
    'InvalidAccountNameError',
    'AlreadyHasAccessError',
    'AccessGrantNotFoundError',

    # Account Management
    'create_account',
    'create_default_account',
    'get_user_accounts',
    'get_account_for_user',
    'rename_account',
    'list_accounts_with_stats',

    # Access Management
    'grant_access',
    'revoke_access',
    'get_shared_users',
]
