from rest_framework import serializers

from .constants import PLANS


class ChangePlanSerializer(serializers.Serializer):
    plan_type = serializers.ChoiceField(choices=PLANS)
