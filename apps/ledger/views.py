from rest_framework import viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .serializers import (
    PurchaseSerializer,
    PaymentSerializer,
    PurchaseFilterSerializer,
    LedgerFilterSerializer,
    PurchaseDeleteSerializer,
    PurchaseCreateSerializer,
    PaymentCreateSerializer,
)

from apps.accounts.services import AccountNotFoundError
from apps.ledger.services import (
    create_purchase,
    delete_purchase,
    list_purchases,
    create_payment,
    delete_payment,
    list_payments,
    # Exceptions
    PurchaseNotFoundError,
    PaymentNotFoundError,
    LedgerValidationError,
    LedgerConflictError,
)


def ledger_error_response(error):
    """Map a service exception to an error response."""
    if isinstance(error, (AccountNotFoundError, PurchaseNotFoundError, PaymentNotFoundError)):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, LedgerConflictError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({'error': str(error)}, status=code)


LEDGER_ERRORS = (
    AccountNotFoundError,
    PurchaseNotFoundError,
    PaymentNotFoundError,
    LedgerValidationError,
    LedgerConflictError,
)


class LedgerPagination(PageNumberPagination):
    """Custom pagination for ledger entries."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


ACCOUNT_PARAM = OpenApiParameter('account', OpenApiTypes.UUID, required=True)


class PurchaseViewSet(viewsets.GenericViewSet):
    """
    Purchases recorded against an account.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Purchases of ?account=, newest first
    create: Record a purchase (full amount outstanding)
    destroy: Delete a purchase (?reconcile=true to rebuild balances)
    """

    serializer_class = PurchaseSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = LedgerPagination

    @extend_schema(
        parameters=[
            ACCOUNT_PARAM,
            OpenApiParameter('date_from', OpenApiTypes.DATE),
            OpenApiParameter('date_to', OpenApiTypes.DATE),
            OpenApiParameter('outstanding', OpenApiTypes.BOOL),
        ],
        responses={200: PurchaseSerializer(many=True)},
    )
    def list(self, request):
        """List purchases of an account."""
        filter_serializer = PurchaseFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        try:
            purchases = list_purchases(
                account_id=params['account'],
                user=request.user,
                date_from=params.get('date_from'),
                date_to=params.get('date_to'),
                outstanding_only=params['outstanding'],
            )
        except LEDGER_ERRORS as e:
            return ledger_error_response(e)

        page = self.paginate_queryset(purchases)
        if page is not None:
            return self.get_paginated_response(PurchaseSerializer(page, many=True).data)
        return Response(PurchaseSerializer(purchases, many=True).data)

    @extend_schema(
        request=PurchaseCreateSerializer,
        responses={201: PurchaseSerializer},
    )
    def create(self, request):
        """Record a purchase."""
        serializer = PurchaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            purchase = create_purchase(
                account_id=data['account'],
                user=request.user,
                amount=data['amount'],
                description=data['description'],
                date=data['date'],
            )
        except LEDGER_ERRORS as e:
            return ledger_error_response(e)

        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[OpenApiParameter('reconcile', OpenApiTypes.BOOL)],
        responses={204: None},
    )
    def destroy(self, request, pk=None):
        """Delete a purchase."""
        params_serializer = PurchaseDeleteSerializer(data=request.query_params)
        params_serializer.is_valid(raise_exception=True)

        try:
            delete_purchase(
                purchase_id=pk,
                user=request.user,
                reconcile_after=params_serializer.validated_data.get('reconcile'),
            )
        except LEDGER_ERRORS as e:
            return ledger_error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)


class PaymentViewSet(viewsets.GenericViewSet):
    """
    Payments made against an account.

    list: Payments of ?account=, newest first
    create: Record a payment and allocate it oldest-first
    destroy: Delete a payment and reconcile the account
    """

    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = LedgerPagination

    @extend_schema(
        parameters=[
            ACCOUNT_PARAM,
            OpenApiParameter('date_from', OpenApiTypes.DATE),
            OpenApiParameter('date_to', OpenApiTypes.DATE),
        ],
        responses={200: PaymentSerializer(many=True)},
    )
    def list(self, request):
        """List payments of an account."""
        filter_serializer = LedgerFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        try:
            payments = list_payments(
                account_id=params['account'],
                user=request.user,
                date_from=params.get('date_from'),
                date_to=params.get('date_to'),
            )
        except LEDGER_ERRORS as e:
            return ledger_error_response(e)

        page = self.paginate_queryset(payments)
        if page is not None:
            return self.get_paginated_response(PaymentSerializer(page, many=True).data)
        return Response(PaymentSerializer(payments, many=True).data)

    @extend_schema(
        request=PaymentCreateSerializer,
        responses={201: PaymentSerializer},
    )
    def create(self, request):
        """Record a payment."""
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            payment = create_payment(
                account_id=data['account'],
                user=request.user,
                amount=data['amount'],
                date=data['date'],
            )
        except LEDGER_ERRORS as e:
            return ledger_error_response(e)

        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={204: None})
    def destroy(self, request, pk=None):
        """Delete a payment."""
        try:
            delete_payment(payment_id=pk, user=request.user)
        except LEDGER_ERRORS as e:
            return ledger_error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)
