"""
Management command to rebuild purchase balances from payment history.

Useful after importing data or entering backdated purchases in bulk.

Usage:
    python manage.py reconcile_accounts
    python manage.py reconcile_accounts --account <uuid> --dry-run
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.accounts.models import Account
from apps.accounts.services import AccountNotFoundError
from apps.ledger.services import reconcile, LedgerConflictError


class Command(BaseCommand):
    help = 'Reset every purchase balance and replay all payments'

    def add_arguments(self, parser):
        parser.add_argument(
            '--account',
            help='Only reconcile the account with this id',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would change without saving',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        if options['account']:
            account_ids = [options['account']]
        else:
            account_ids = list(Account.objects.order_by('created_at').values_list('id', flat=True))

        total_changed = 0
        for account_id in account_ids:
            try:
                with transaction.atomic():
                    changed = reconcile(account_id=account_id)
                    if dry_run:
                        transaction.set_rollback(True)
            except AccountNotFoundError:
                raise CommandError(f'Account {account_id} not found')
            except LedgerConflictError as e:
                self.stdout.write(self.style.WARNING(f'  Skipped {account_id}: {e}'))
                continue

            for purchase in changed:
                self.stdout.write(
                    f'  - {purchase.description} | {purchase.date} | now {purchase.amount_remaining} due'
                )
            total_changed += len(changed)

        if dry_run:
            self.stdout.write(
                self.style.WARNING(f'--dry-run mode: {total_changed} purchase(s) would change.')
            )
            return

        self.stdout.write(
            self.style.SUCCESS(
                f'Reconciled {len(account_ids)} account(s), {total_changed} purchase(s) changed.'
            )
        )
