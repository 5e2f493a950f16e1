from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'accounts'

router = DefaultRouter()
router.register(r'', views.AccountViewSet, basename='account')

urlpatterns = [
    # GET    /api/accounts/                  - List accounts with totals
    # POST   /api/accounts/                  - Create account
    # GET    /api/accounts/{id}/             - Account with totals
    # PATCH  /api/accounts/{id}/             - Rename (owner only)
    # GET    /api/accounts/{id}/stats/       - Totals only
    # POST   /api/accounts/{id}/reconcile/   - Rebuild balances
    # GET/POST/DELETE /api/accounts/{id}/access/ - Shared access
    path('', include(router.urls)),
]
