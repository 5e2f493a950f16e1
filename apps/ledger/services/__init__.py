"""
Ledger app services layer.

Allocation and reconciliation keep purchase balances consistent with the
payment history; ledger_management is the entry point for views.
"""

from .exceptions import (
    LedgerServiceError,
    PurchaseNotFoundError,
    PaymentNotFoundError,
    LedgerValidationError,
    InvalidAmountError,
    MissingFieldError,
    LedgerConflictError,
)

from .locking import lock_account

from .allocation import (
    distribute_payment,
    allocate,
)

from .reconciliation import reconcile

from .aggregation import (
    get_account_stats,
    calculate_amount_due,
)

from .ledger_management import (
    create_purchase,
    delete_purchase,
    list_purchases,
    create_payment,
    delete_payment,
    list_payments,
    reconcile_account,
    get_stats_for_user,
)


__all__ = [
    # Exceptions
    'LedgerServiceError',
    'PurchaseNotFoundError',
    'PaymentNotFoundError',
    'LedgerValidationError',
    'InvalidAmountError',
    'MissingFieldError',
    'LedgerConflictError',

    # Locking
    'lock_account',

    # Allocation
    'distribute_payment',
    'allocate',

    # Reconciliation
    'reconcile',

    # Aggregation
    'get_account_stats',
    'calculate_amount_due',

    # Ledger Management
    'create_purchase',
    'delete_purchase',
    'list_purchases',
    'create_payment',
    'delete_payment',
    'list_payments',
    'reconcile_account',
    'get_stats_for_user',
]
