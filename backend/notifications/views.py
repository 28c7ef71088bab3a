from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from users.permissions import IsCompanyMember
from .models import APPOINTMENT_TYPES, BILLING_TYPES, Notification
from .serializers import NotificationSerializer

TYPE_GROUPS = {
    "appointments": APPOINTMENT_TYPES,
    "billing": BILLING_TYPES,
}


class NotificationViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    The requesting staff member's inbox. Rows are created by appointment and
    billing events; users only read them and mark them as read.

    Filters: ``is_read``, ``type`` (one notification type), ``group``
    (``appointments`` or ``billing``), ``appointment`` (id).
    """

    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def get_queryset(self):
        qs = Notification.objects.filter(recipient=self.request.user).select_related("appointment")
        params = self.request.query_params

        is_read = params.get("is_read")
        if is_read is not None:
            qs = qs.filter(is_read=is_read.lower() in ("1", "true"))
        if params.get("type"):
            qs = qs.filter(notification_type=params["type"])
        if params.get("group") in TYPE_GROUPS:
            qs = qs.filter(notification_type__in=TYPE_GROUPS[params["group"]])
        if params.get("appointment"):
            qs = qs.filter(appointment_id=params["appointment"])
        return qs

    @action(detail=True, methods=["post"])
    def mark_read(self, request, pk=None):
        notification = self.get_object()
        notification.mark_read()
        return Response(self.get_serializer(notification).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"])
    def mark_all_read(self, request):
        now = timezone.now()
        updated = Notification.objects.filter(recipient=request.user, is_read=False).update(
            is_read=True, read_at=now, updated_at=now
        )
        return Response({"updated": updated}, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"])
    def unread_count(self, request):
        unread = Notification.objects.filter(recipient=request.user, is_read=False)
        return Response({
            "unread": unread.count(),
            "appointments": unread.filter(notification_type__in=APPOINTMENT_TYPES).count(),
            "billing": unread.filter(notification_type__in=BILLING_TYPES).count(),
        })
