from decimal import Decimal

from django.db import transaction
from rest_framework import serializers

from appointments.models import Appointment
from core.serializers import CompanyScopedRelatedField
from .models import (
    EXPENSE,
    INCOME,
    FinancialAccount,
    FinancialCategory,
    FinancialTransaction,
    FinancialTransfer,
)


class FinancialAccountSerializer(serializers.ModelSerializer):
    balance = serializers.SerializerMethodField()

    class Meta:
        model = FinancialAccount
        fields = [
            "id", "name", "account_type", "initial_balance", "balance", "bank_name",
            "account_number", "is_active", "created_at", "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def get_balance(self, obj):
        # Annotated by with_balance() on list/retrieve; computed otherwise
        balance = getattr(obj, "balance", None)
        if balance is None:
            balance = obj.current_balance()
        return str(Decimal(balance).quantize(Decimal("0.01")))


class FinancialCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = FinancialCategory
        fields = ["id", "name", "category_type", "color", "icon", "is_default", "is_active", "created_at"]
        read_only_fields = ["created_at"]


class FinancialTransactionSerializer(serializers.ModelSerializer):
    account = CompanyScopedRelatedField(queryset=FinancialAccount.objects.all())
    category = CompanyScopedRelatedField(queryset=FinancialCategory.objects.all())
    appointment = CompanyScopedRelatedField(queryset=Appointment.objects.all(), required=False, allow_null=True)
    account_name = serializers.CharField(source="account.name", read_only=True)
    category_name = serializers.CharField(source="category.name", read_only=True, default=None)

    class Meta:
        model = FinancialTransaction
        fields = [
            "id", "account", "account_name", "category", "category_name", "transaction_type",
            "amount", "description", "transaction_date", "reference_type", "appointment",
            "transfer", "notes", "created_by", "created_at", "updated_at",
        ]
        read_only_fields = ["reference_type", "transfer", "created_by", "created_at", "updated_at"]

    def validate(self, attrs):
        if self.instance is not None and self.instance.transfer_id:
            raise serializers.ValidationError("Transfer entries cannot be edited; change the transfer instead.")

        transaction_type = attrs.get("transaction_type", getattr(self.instance, "transaction_type", None))
        category = attrs.get("category", getattr(self.instance, "category", None))
        if category is not None and category.category_type != transaction_type:
            raise serializers.ValidationError(
                {"category": f"A {category.category_type} category cannot be used for a {transaction_type} transaction."}
            )

        appointment = attrs.get("appointment", getattr(self.instance, "appointment", None))
        attrs["reference_type"] = "appointment" if appointment else "manual"
        return attrs


class FinancialTransferSerializer(serializers.ModelSerializer):
    from_account = CompanyScopedRelatedField(queryset=FinancialAccount.objects.all())
    to_account = CompanyScopedRelatedField(queryset=FinancialAccount.objects.all())
    from_account_name = serializers.CharField(source="from_account.name", read_only=True)
    to_account_name = serializers.CharField(source="to_account.name", read_only=True)

    class Meta:
        model = FinancialTransfer
        fields = [
            "id", "from_account", "from_account_name", "to_account", "to_account_name",
            "amount", "description", "transfer_date", "created_by", "created_at",
        ]
        read_only_fields = ["created_by", "created_at"]

    def validate(self, attrs):
        if attrs["from_account"].pk == attrs["to_account"].pk:
            raise serializers.ValidationError({"to_account": "Source and destination accounts must differ."})
        return attrs

    def create(self, validated_data):
        request = self.context["request"]
        source = validated_data["from_account"]
        destination = validated_data["to_account"]
        amount = validated_data["amount"]

        with transaction.atomic():
            # Lock both accounts in a stable order so concurrent transfers cannot overdraw
            locked = {
                acc.pk: acc
                for acc in FinancialAccount.objects.select_for_update().filter(
                    pk__in=[source.pk, destination.pk]
                ).order_by("pk")
            }
            if locked[source.pk].current_balance() < amount:
                raise serializers.ValidationError({"amount": "Insufficient balance in the source account."})

            transfer = FinancialTransfer.objects.create(**validated_data)
            description = validated_data.get("description") or f"Transfer {source.name} -> {destination.name}"
            common = {
                "company": transfer.company,
                "amount": amount,
                "description": description,
                "transaction_date": transfer.transfer_date,
                "reference_type": "transfer",
                "transfer": transfer,
                "created_by": validated_data.get("created_by") or request.user,
            }
            FinancialTransaction.objects.bulk_create([
                FinancialTransaction(account=source, transaction_type=EXPENSE, **common),
                FinancialTransaction(account=destination, transaction_type=INCOME, **common),
            ])

        return transfer
