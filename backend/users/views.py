import logging

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework.exceptions import ValidationError
from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema

from companies.permissions import IsCompanyActiveOrReadOnly
from core.mixins import CompanyFilteredViewSet
from notifications.models import NotificationType
from notifications.utils import notify_user
from .permissions import IsCompanyMember, IsCompanyOwner, IsOwnerOrAdmin
from .serializers import (
    UserSerializer,
    UserCreateSerializer,
    CompanyAwareTokenObtainPairSerializer,
    AssignRoleSerializer,
)

User = get_user_model()
logger = logging.getLogger(__name__)


# ----------------------------------------------------------
#  User ViewSet
# ----------------------------------------------------------
class UserViewSet(CompanyFilteredViewSet):
    serializer_class = UserSerializer
    limited_resource = "users"

    def get_queryset(self):
        user = self.request.user
        if user.is_superuser and not user.company_id:
            return User.objects.all().order_by("id")
        if not user.company_id:
            return User.objects.none()
        return User.objects.filter(company=user.company).order_by("id")

    def get_permissions(self):
        if self.action in ["create", "update", "partial_update", "destroy"]:
            return [IsAuthenticated(), IsOwnerOrAdmin(), IsCompanyActiveOrReadOnly()]
        if self.action == "assign_role":
            return [IsAuthenticated(), IsCompanyOwner()]
        return [IsAuthenticated(), IsCompanyMember()]

    def get_serializer_class(self):
        if self.action == "create":
            return UserCreateSerializer
        if self.action == "assign_role":
            return AssignRoleSerializer
        return UserSerializer

    def perform_destroy(self, instance):
        if instance.pk == self.request.user.pk:
            raise ValidationError("You cannot delete your own account.")
        instance.delete()

    @action(detail=False, methods=["get"])
    def me(self, request):
        serializer = UserSerializer(request.user)
        return Response(serializer.data)

    @action(detail=True, methods=["post"], url_path="assign-role")
    def assign_role(self, request, pk=None):
        target = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        role = serializer.validated_data["role"]
        target.role = role
        target.save(update_fields=["role"])

        logger.info("User %s role changed to %s by %s", target.id, role, request.user.id)
        notify_user(
            company=target.company,
            recipient=target,
            title="Role Changed",
            message=f"Your role has been updated to {role}.",
            notification_type=NotificationType.ROLE_CHANGED,
        )

        return Response(
            {"message": f"Role '{role}' assigned successfully.", "user_id": target.id},
            status=status.HTTP_200_OK,
        )


# ----------------------------------------------------------
#  Company Login
# ----------------------------------------------------------
@extend_schema(tags=["Company Login"])
class CompanyAuthViewSet(viewsets.ViewSet):
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Company Login",
        request=CompanyAwareTokenObtainPairSerializer,
        responses={200: CompanyAwareTokenObtainPairSerializer},
    )
    @action(detail=False, methods=["post"])
    def login(self, request):
        serializer = CompanyAwareTokenObtainPairSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(serializer.validated_data, status=status.HTTP_200_OK)
