from rest_framework.routers import DefaultRouter
from .views import (
    FinancialAccountViewSet,
    FinancialCategoryViewSet,
    FinancialReportViewSet,
    FinancialTransactionViewSet,
    FinancialTransferViewSet,
)

router = DefaultRouter()
router.register(r'accounts', FinancialAccountViewSet, basename='financial-account')
router.register(r'categories', FinancialCategoryViewSet, basename='financial-category')
router.register(r'transactions', FinancialTransactionViewSet, basename='financial-transaction')
router.register(r'transfers', FinancialTransferViewSet, basename='financial-transfer')
router.register(r'reports', FinancialReportViewSet, basename='financial-report')

urlpatterns = router.urls
