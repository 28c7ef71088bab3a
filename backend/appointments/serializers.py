from django.contrib.auth import get_user_model
from rest_framework import serializers

from clients.models import Client
from core.serializers import CompanyScopedRelatedField
from pets.models import Pet
from services.models import Service
from .models import Appointment, AppointmentStatusChange
from .transitions import AppointmentStatus, allowed_transitions

User = get_user_model()


class AppointmentStatusChangeSerializer(serializers.ModelSerializer):
    changed_by = serializers.StringRelatedField()

    class Meta:
        model = AppointmentStatusChange
        fields = ["id", "from_status", "to_status", "changed_by", "reason", "created_at"]


class AppointmentSerializer(serializers.ModelSerializer):
    client = CompanyScopedRelatedField(queryset=Client.objects.all())
    pet = CompanyScopedRelatedField(queryset=Pet.objects.all(), required=False, allow_null=True)
    service = CompanyScopedRelatedField(queryset=Service.objects.all())
    assigned_to = CompanyScopedRelatedField(queryset=User.objects.all(), required=False, allow_null=True)

    client_name = serializers.CharField(source="client.name", read_only=True)
    pet_name = serializers.CharField(source="pet.name", read_only=True, default=None)
    service_name = serializers.CharField(source="service.name", read_only=True)
    service_color = serializers.CharField(source="service.color", read_only=True)

    duration_minutes = serializers.IntegerField(required=False, min_value=1)
    service_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)
    discount_amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)
    allowed_transitions = serializers.SerializerMethodField()

    class Meta:
        model = Appointment
        fields = [
            "id", "client", "client_name", "pet", "pet_name", "service", "service_name",
            "service_color", "assigned_to", "date_time", "duration_minutes", "status",
            "priority", "notes", "internal_notes", "service_price", "discount_amount",
            "total_amount", "payment_status", "cancellation_reason", "cancelled_by",
            "cancelled_at", "reminder_sent_at", "allowed_transitions", "created_at", "updated_at",
        ]
        read_only_fields = [
            "status", "total_amount", "cancellation_reason", "cancelled_by",
            "cancelled_at", "reminder_sent_at", "created_at", "updated_at",
        ]

    def get_allowed_transitions(self, obj):
        request = self.context.get("request")
        role = getattr(getattr(request, "user", None), "role", None)
        return allowed_transitions(obj.status, role)

    def validate(self, attrs):
        client = attrs.get("client", getattr(self.instance, "client", None))
        pet = attrs.get("pet", getattr(self.instance, "pet", None))
        service = attrs.get("service", getattr(self.instance, "service", None))

        if pet is not None and client is not None and pet.client_id != client.pk:
            raise serializers.ValidationError({"pet": "This pet does not belong to the selected client."})

        if "service" in attrs and not service.is_active:
            raise serializers.ValidationError({"service": "This service is not active."})

        if self.instance is None:
            attrs.setdefault("duration_minutes", service.duration_minutes)
            attrs.setdefault("service_price", service.price)

        price = attrs.get("service_price", getattr(self.instance, "service_price", None))
        discount = attrs.get("discount_amount", getattr(self.instance, "discount_amount", 0)) or 0
        if price is not None and discount > price:
            raise serializers.ValidationError({"discount_amount": "Discount cannot exceed the service price."})

        return attrs


class AppointmentTransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=AppointmentStatus.choices)
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
