from django.db import transaction
from rest_framework import serializers

from core.serializers import CompanyScopedRelatedField
from . import pricing
from .models import PackageItem, Service, ServicePackage, ServicePhoto


class ServiceSerializer(serializers.ModelSerializer):
    category_display = serializers.CharField(source="get_category_display", read_only=True)

    class Meta:
        model = Service
        fields = [
            "id", "name", "description", "category", "category_display", "price",
            "duration_minutes", "color", "is_active", "requires_appointment",
            "max_pets_per_session", "available_days", "available_hours",
            "created_at", "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]
        # The per-company name constraint is checked in validate_name
        validators = []

    def validate_name(self, value):
        request = self.context["request"]
        qs = Service.objects.filter(company=request.user.company, name__iexact=value.strip())
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A service with this name already exists.")
        return value.strip()


class ServicePhotoSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServicePhoto
        fields = ["id", "service", "photo_url", "caption", "is_primary", "created_at"]
        read_only_fields = ["service", "created_at"]


class ServicePhotoUpdateSerializer(serializers.ModelSerializer):
    """Caption and primary flag only; the stored URL never changes."""

    class Meta:
        model = ServicePhoto
        fields = ["caption", "is_primary"]


class ServiceTemplateSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    category = serializers.CharField()
    description = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    duration_minutes = serializers.IntegerField()
    popular = serializers.BooleanField()
    max_pets_per_session = serializers.IntegerField()
    available_days = serializers.ListField(child=serializers.IntegerField())
    available_hours = serializers.DictField(child=serializers.CharField())


class PackageItemSerializer(serializers.ModelSerializer):
    service = CompanyScopedRelatedField(queryset=Service.objects.all())
    service_name = serializers.CharField(source="service.name", read_only=True)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = PackageItem
        fields = ["id", "service", "service_name", "quantity", "unit_price", "total_price"]


class ServicePackageSerializer(serializers.ModelSerializer):
    items = PackageItemSerializer(many=True)

    class Meta:
        model = ServicePackage
        fields = [
            "id", "name", "description", "items", "discount_type", "discount_value",
            "total_price", "final_price", "is_active", "valid_until",
            "created_at", "updated_at",
        ]
        read_only_fields = ["total_price", "final_price", "created_at", "updated_at"]

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("A package must include at least one service.")
        service_ids = [item["service"].pk for item in value]
        if len(service_ids) != len(set(service_ids)):
            raise serializers.ValidationError("Each service can appear only once in a package.")
        for item in value:
            # Snapshot the current service price when none is given
            item.setdefault("unit_price", item["service"].price)
        return value

    def validate(self, attrs):
        discount_type = attrs.get("discount_type", getattr(self.instance, "discount_type", pricing.DISCOUNT_PERCENTAGE))
        discount_value = attrs.get("discount_value", getattr(self.instance, "discount_value", 0))

        if "items" in attrs:
            item_pairs = [(item["quantity"], item["unit_price"]) for item in attrs["items"]]
        elif self.instance is not None:
            item_pairs = [(item.quantity, item.unit_price) for item in self.instance.items.all()]
        else:
            item_pairs = []

        try:
            total = pricing.items_total(item_pairs)
            pricing.apply_discount(total, discount_type, discount_value)
        except pricing.PricingError as exc:
            raise serializers.ValidationError({"discount_value": str(exc)})

        return attrs

    def _write_items(self, package, items):
        package.items.all().delete()
        PackageItem.objects.bulk_create(
            PackageItem(package=package, **item) for item in items
        )
        package.recalculate()
        package.save(update_fields=["total_price", "final_price", "updated_at"])

    @transaction.atomic
    def create(self, validated_data):
        items = validated_data.pop("items")
        package = ServicePackage.objects.create(**validated_data)
        self._write_items(package, items)
        return package

    @transaction.atomic
    def update(self, instance, validated_data):
        items = validated_data.pop("items", None)
        instance = super().update(instance, validated_data)
        if items is not None:
            self._write_items(instance, items)
        else:
            instance.recalculate()
            instance.save(update_fields=["total_price", "final_price", "updated_at"])
        return instance
