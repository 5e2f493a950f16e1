"""
Ledger App - Purchases, Payments and the Amount Due

Users record purchases (debts) and payments against an account. Every
payment is allocated oldest-first across the open purchase balances; deleting
a payment resets all balances and replays the remaining payment history.

Key Features:
- Oldest-first payment allocation (date, then creation order)
- Full reconciliation after deletions
- Per-account row locking around every balance change
- Integer-cent arithmetic, no floating-point drift
- Account totals computed on read

Architecture:
- Models: Purchase, Payment
- Services: allocation, reconciliation, aggregation, ledger_management
- Views: PurchaseViewSet, PaymentViewSet
"""
