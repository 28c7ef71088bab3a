from django.urls import path

from .views import ChangePlanView, PlanCatalogView, UsageView

urlpatterns = [
    path('plans/', PlanCatalogView.as_view(), name='billing-plans'),
    path('usage/', UsageView.as_view(), name='billing-usage'),
    path('change-plan/', ChangePlanView.as_view(), name='billing-change-plan'),
]
