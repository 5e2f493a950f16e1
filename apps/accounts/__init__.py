"""
Accounts App - Shared Ledger Accounts

An account groups the purchases and payments of one ledger. It is owned by
a single user and can be shared with others, who then get the same
read/write access to its purchases and payments.

Architecture:
- Models: Account, AccountAccess
- Services: account_management, access_management
- Views: AccountViewSet (list with stats, rename, stats, reconcile)
"""
