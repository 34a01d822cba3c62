# fleet/serializers.py
from rest_framework import serializers

from fleet.models import OwnerType, Vehicle


class VehicleSerializer(serializers.ModelSerializer):
    hired_by = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = Vehicle
        fields = [
            "id",
            "vehicle_number",
            "transporter",
            "owner_type",
            "original_owner",
            "hired_by",
            "driver",
            "status",
            "trailer_type",
            "created_at",
        ]


class VehicleRegisterSerializer(serializers.Serializer):
    vehicle_number = serializers.CharField(max_length=32)
    owner_type = serializers.ChoiceField(choices=OwnerType.choices, default=OwnerType.OWN)
    driver_id = serializers.IntegerField(required=False, allow_null=True)
    trailer_type = serializers.CharField(required=False, allow_blank=True, default="")


class VehicleUpdateSerializer(serializers.Serializer):
    driver_id = serializers.IntegerField(required=False)
    trailer_type = serializers.CharField(required=False, allow_blank=True)
    status = serializers.CharField(required=False)
