from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'ledger'

router = DefaultRouter()
router.register(r'purchases', views.PurchaseViewSet, basename='purchase')
router.register(r'payments', views.PaymentViewSet, basename='payment')

urlpatterns = [
    # GET    /api/ledger/purchases/?account=   - List purchases
    # POST   /api/ledger/purchases/            - Record purchase
    # DELETE /api/ledger/purchases/{id}/       - Delete purchase (?reconcile=true)
    # GET    /api/ledger/payments/?account=    - List payments
    # POST   /api/ledger/payments/             - Record payment (allocates)
    # DELETE /api/ledger/payments/{id}/        - Delete payment (reconciles)
    path('', include(router.urls)),
]
