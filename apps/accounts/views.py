from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    AccountWithStatsSerializer,
    AccountCreateSerializer,
    AccountRenameSerializer,
    AccessGrantSerializer,
    AccessChangeSerializer,
)

from apps.users.models import User
from apps.accounts.services import (
    create_account,
    get_account_for_user,
    rename_account,
    list_accounts_with_stats,
    grant_access,
    revoke_access,
    get_shared_users,
    # Exceptions
    AccountNotFoundError,
    InsufficientPermissionsError,
    InvalidAccountNameError,
    AlreadyHasAccessError,
    AccessGrantNotFoundError,
)
from apps.ledger.services import (
    get_account_stats,
    get_stats_for_user,
    reconcile_account,
    LedgerConflictError,
)
from apps.ledger.serializers import AccountStatsSerializer, PurchaseSerializer


class AccountViewSet(viewsets.GenericViewSet):
    """
    Ledger accounts of the current user (owned and shared).

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Accounts with totals
    create: Create an account
    retrieve: Account with totals
    partial_update: Rename (owner only)
    stats: Totals only
    reconcile: Rebuild purchase balances from the payment history
    access: List, grant or revoke shared access (owner only)
    """

    serializer_class = AccountWithStatsSerializer
    permission_classes = [IsAuthenticated]

    def _with_stats(self, account):
        data = {'account': account, **get_account_stats(account_id=account.id)}
        return AccountWithStatsSerializer(data, context={'request': self.request}).data

    def list(self, request):
        """List accounts with their totals."""
        accounts = list_accounts_with_stats(user=request.user)
        serializer = AccountWithStatsSerializer(accounts, many=True, context={'request': request})
        return Response(serializer.data)

    @extend_schema(request=AccountCreateSerializer, responses={201: AccountWithStatsSerializer})
    def create(self, request):
        """Create an account owned by the current user."""
        serializer = AccountCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            account = create_account(owner=request.user, name=serializer.validated_data['name'])
        except InvalidAccountNameError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self._with_stats(account), status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        """Get one account with its totals."""
        try:
            account = get_account_for_user(account_id=pk, user=request.user)
        except AccountNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(self._with_stats(account))

    @extend_schema(request=AccountRenameSerializer, responses={200: AccountWithStatsSerializer})
    def partial_update(self, request, pk=None):
        """Rename an account (owner only)."""
        serializer = AccountRenameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            account = rename_account(
                account_id=pk,
                user=request.user,
                name=serializer.validated_data['name']
            )
        except AccountNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except InvalidAccountNameError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self._with_stats(account))

    @extend_schema(responses={200: AccountStatsSerializer})
    @action(detail=True, methods=['get'])
    def stats(self, request, pk=None):
        """Get account totals."""
        try:
            stats = get_stats_for_user(account_id=pk, user=request.user)
        except AccountNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(AccountStatsSerializer(stats).data)

    @extend_schema(request=None, responses={200: PurchaseSerializer(many=True)})
    @action(detail=True, methods=['post'])
    def reconcile(self, request, pk=None):
        """
        Rebuild purchase balances.

        Returns the purchases whose balance changed.
        """
        try:
            changed = reconcile_account(account_id=pk, user=request.user)
        except AccountNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except LedgerConflictError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(PurchaseSerializer(changed, many=True).data)

    @extend_schema(
        request=AccessChangeSerializer,
        responses={200: AccessGrantSerializer(many=True), 201: AccessGrantSerializer},
    )
    @action(detail=True, methods=['get', 'post', 'delete'])
    def access(self, request, pk=None):
        """
        Manage shared access.

        GET    - users the account is shared with
        POST   - share with {"email": ...} (owner only)
        DELETE - stop sharing with {"email": ...} (owner only)
        """
        try:
            account = get_account_for_user(account_id=pk, user=request.user)
        except AccountNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        if request.method == 'GET':
            grants = get_shared_users(account_id=account.id)
            return Response(AccessGrantSerializer(grants, many=True).data)

        serializer = AccessChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        target = User.objects.filter(
            email__iexact=serializer.validated_data['email']
        ).first()
        if target is None:
            return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)

        try:
            if request.method == 'POST':
                grant = grant_access(account_id=account.id, owner=request.user, user=target)
                return Response(AccessGrantSerializer(grant).data, status=status.HTTP_201_CREATED)

            revoke_access(account_id=account.id, owner=request.user, user=target)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except AccessGrantNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except AlreadyHasAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
