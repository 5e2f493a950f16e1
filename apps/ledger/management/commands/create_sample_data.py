"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data

This creates:
- 3 users (admin, alice, bob)
- A shared household account and a personal account
- Purchases and payments, allocated through the ledger services
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from datetime import date, timedelta

from apps.users.models import User
from apps.accounts.models import Account
from apps.accounts.services import create_account, grant_access
from apps.ledger.services import create_purchase, create_payment, get_account_stats


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        accounts = self.create_accounts(users)
        self.create_ledger(users, accounts)

        for account in accounts.values():
            stats = get_account_stats(account_id=account.id)
            self.stdout.write(f"  {account.name}: {stats['amount_due']} due")

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        self.stdout.write('  alice@example.com / password123')
        self.stdout.write('  bob@example.com / password123')

    def clear_data(self):
        """Clear all ledger data and sample users."""
        # Purchases and payments cascade with their accounts
        Account.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_users(self):
        """Create test users."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'display_name': 'Admin User',
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        alice, _ = User.objects.get_or_create(
            email='alice@example.com',
            defaults={'display_name': 'Alice'}
        )
        alice.set_password('password123')
        alice.save()

        bob, _ = User.objects.get_or_create(
            email='bob@example.com',
            defaults={'display_name': 'Bob'}
        )
        bob.set_password('password123')
        bob.save()

        return {'admin': admin, 'alice': alice, 'bob': bob}

    def create_accounts(self, users):
        """Create a shared and a personal account."""
        self.stdout.write('  Creating accounts...')

        household = create_account(owner=users['alice'], name='Household')
        grant_access(account_id=household.id, owner=users['alice'], user=users['bob'])

        personal = create_account(owner=users['bob'], name='Bob personal')

        users['alice'].default_account = household
        users['alice'].save(update_fields=['default_account'])

        return {'household': household, 'personal': personal}

    def create_ledger(self, users, accounts):
        """Record purchases first, then payments, oldest first."""
        self.stdout.write('  Creating purchases and payments...')

        start = date.today() - timedelta(days=30)
        alice = users['alice']
        bob = users['bob']
        household = accounts['household'].id
        personal = accounts['personal'].id

        purchases = [
            (household, alice, '54.20', 'Groceries', 0),
            (household, bob, '18.75', 'Cleaning supplies', 3),
            (household, alice, '120.00', 'Electricity bill', 7),
            (household, bob, '32.40', 'Groceries', 14),
            (personal, bob, '9.99', 'Streaming subscription', 2),
            (personal, bob, '45.00', 'Concert ticket', 10),
        ]
        for account_id, user, amount, description, offset in purchases:
            create_purchase(
                account_id=account_id,
                user=user,
                amount=amount,
                description=description,
                date=start + timedelta(days=offset),
            )

        payments = [
            (household, bob, '60.00', 15),
            (household, alice, '50.00', 20),
            (personal, bob, '20.00', 12),
        ]
        for account_id, user, amount, offset in payments:
            create_payment(
                account_id=account_id,
                user=user,
                amount=amount,
                date=start + timedelta(days=offset),
            )
