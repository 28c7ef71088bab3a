from django.urls import path
from rest_framework.routers import DefaultRouter
from .views import CompanyRegistrationViewSet, CompanyProfileView

router = DefaultRouter()
router.register(r'companies/register', CompanyRegistrationViewSet, basename='company-register')

urlpatterns = router.urls + [
    path('company/', CompanyProfileView.as_view(), name='company-profile'),
]
