from rest_framework.routers import DefaultRouter
from .views import UserViewSet, CompanyAuthViewSet

router = DefaultRouter()
router.register(r'users', UserViewSet, basename='user')
router.register(r'auth', CompanyAuthViewSet, basename='company-login')

urlpatterns = router.urls
