from django.db import models
import uuid


class Account(models.Model):
    """A ledger of purchases and payments owned by one user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    owner = models.ForeignKey(
        'users.User',
        on_delete=models.CASCADE,
        related_name='owned_accounts'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'accounts'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='accounts_owner_created_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return self.name

    def is_owner(self, user):
        return self.owner_id == user.pk

    def has_access(self, user):
        """Owner or holder of a shared-access grant."""
        if self.is_owner(user):
            return True
        return self.access_grants.filter(user=user).exists()


class AccountAccess(models.Model):
    """Shared read/write access to an account without ownership."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name='access_grants')
    user = models.ForeignKey('users.User', on_delete=models.CASCADE, related_name='account_grants')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'account_access'
        unique_together = [['account', 'user']]
        ordering = ['created_at']

    def __str__(self):
        return f"{self.user.get_display_name()} -> {self.account.name}"
