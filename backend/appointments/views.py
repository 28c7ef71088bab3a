import logging

from django.db import transaction
from django.db.models import Avg, Count, Q, Sum
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from core.exceptions import DomainRuleViolation
from core.mixins import CompanyFilteredViewSet
from notifications.models import NotificationType
from notifications.utils import notify_company_managers
from .models import Appointment, AppointmentStatusChange
from .serializers import (
    AppointmentSerializer,
    AppointmentStatusChangeSerializer,
    AppointmentTransitionSerializer,
)
from .transitions import AppointmentStatus, ForbiddenRole, TransitionError, check_transition

logger = logging.getLogger(__name__)

NOTIFY_ON = {
    AppointmentStatus.CANCELLED.value: NotificationType.APPOINTMENT_CANCELLED,
    AppointmentStatus.NO_SHOW.value: NotificationType.APPOINTMENT_NO_SHOW,
}


def _date_param(params, name):
    value = params.get(name)
    if not value:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError({name: "Use the YYYY-MM-DD format."})
    return parsed


class AppointmentViewSet(CompanyFilteredViewSet):
    """
    Appointments of the company.

    ``status`` is read-only here: it only changes through the ``transition``
    action, which validates the move against the status graph.
    """

    queryset = Appointment.objects.select_related("client", "pet", "service", "assigned_to")
    serializer_class = AppointmentSerializer
    required_feature = "appointments"

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params

        statuses = [s for s in params.get("status", "").split(",") if s]
        if statuses:
            qs = qs.filter(status__in=statuses)

        for field in ("client", "pet", "service", "assigned_to", "priority", "payment_status"):
            if params.get(field):
                qs = qs.filter(**{field: params[field]})

        date_from = _date_param(params, "date_from")
        if date_from:
            qs = qs.filter(date_time__date__gte=date_from)
        date_to = _date_param(params, "date_to")
        if date_to:
            qs = qs.filter(date_time__date__lte=date_to)

        search = params.get("search")
        if search:
            qs = qs.filter(
                Q(client__name__icontains=search)
                | Q(pet__name__icontains=search)
                | Q(service__name__icontains=search)
                | Q(notes__icontains=search)
            )

        return qs

    @action(detail=True, methods=["post"])
    def transition(self, request, pk=None):
        """Move the appointment to another status: {"status": ..., "reason": ...}."""
        appointment = self.get_object()
        serializer = AppointmentTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        target = serializer.validated_data["status"]
        reason = serializer.validated_data.get("reason")
        user = request.user

        with transaction.atomic():
            appointment = Appointment.objects.select_for_update().get(pk=appointment.pk)
            current = appointment.status

            try:
                check_transition(current, target, user.role, reason)
            except ForbiddenRole as exc:
                raise DomainRuleViolation(str(exc), code=exc.code, status_code=status.HTTP_403_FORBIDDEN)
            except TransitionError as exc:
                raise DomainRuleViolation(str(exc), code=exc.code)

            reason = (reason or "").strip()
            appointment.status = target
            update_fields = ["status", "updated_at"]
            if target == AppointmentStatus.CANCELLED:
                appointment.cancellation_reason = reason
                appointment.cancelled_by = user
                appointment.cancelled_at = timezone.now()
                update_fields += ["cancellation_reason", "cancelled_by", "cancelled_at"]
            appointment.save(update_fields=update_fields)

            AppointmentStatusChange.objects.create(
                appointment=appointment,
                from_status=current,
                to_status=target,
                changed_by=user,
                reason=reason,
            )

        logger.info(
            "Appointment %s moved %s -> %s by user %s (company %s)",
            appointment.id, current, target, user.id, appointment.company.slug,
        )

        if target in NOTIFY_ON:
            label = AppointmentStatus(target).label.lower()
            notify_company_managers(
                appointment.company,
                title=f"Appointment {label}",
                message=(
                    f"The appointment of {appointment.client.name} for {appointment.service.name} "
                    f"on {timezone.localtime(appointment.date_time):%d/%m/%Y %H:%M} was marked as {label}."
                    + (f" Reason: {reason}" if reason else "")
                ),
                notification_type=NOTIFY_ON[target],
                appointment=appointment,
            )

        return Response(self.get_serializer(appointment).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"])
    def history(self, request, pk=None):
        appointment = self.get_object()
        return Response(AppointmentStatusChangeSerializer(appointment.status_changes.all(), many=True).data)

    @action(detail=False, methods=["get"])
    def stats(self, request):
        qs = self.get_queryset()
        total = qs.count()

        by_status = {s: 0 for s in AppointmentStatus.values}
        for row in qs.values("status").annotate(total=Count("id")):
            by_status[row["status"]] = row["total"]

        by_priority = {
            row["priority"]: row["total"]
            for row in qs.values("priority").annotate(total=Count("id")).order_by("priority")
        }

        billable = qs.exclude(status__in=[AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW])
        revenue = {
            "total": billable.aggregate(v=Sum("total_amount"))["v"] or 0,
            "paid": billable.filter(payment_status="paid").aggregate(v=Sum("total_amount"))["v"] or 0,
            "pending": billable.filter(payment_status__in=["pending", "partial"]).aggregate(v=Sum("total_amount"))["v"] or 0,
        }

        popular_services = [
            {"service": row["service__name"], "count": row["total"]}
            for row in qs.values("service__name").annotate(total=Count("id")).order_by("-total", "service__name")[:5]
        ]

        def rate(count):
            return round(count * 100 / total, 1) if total else 0

        return Response({
            "total": total,
            "by_status": by_status,
            "by_priority": by_priority,
            "revenue": revenue,
            "average_duration": round(qs.aggregate(v=Avg("duration_minutes"))["v"] or 0, 1),
            "popular_services": popular_services,
            "no_show_rate": rate(by_status[AppointmentStatus.NO_SHOW.value]),
            "cancellation_rate": rate(by_status[AppointmentStatus.CANCELLED.value]),
        })
