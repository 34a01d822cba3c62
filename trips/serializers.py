# trips/serializers.py
from rest_framework import serializers

from trips.models import Trip, TripMilestone, TripType
from trips.services.state import current_milestone


class TripMilestoneSerializer(serializers.ModelSerializer):
    class Meta:
        model = TripMilestone
        fields = [
            "milestone_number",
            "milestone_type",
            "backend_meaning",
            "timestamp",
            "latitude",
            "longitude",
            "photo",
            "recorded_by",
        ]


class TripSerializer(serializers.ModelSerializer):
    milestones = TripMilestoneSerializer(many=True, read_only=True)
    current_milestone = serializers.SerializerMethodField()
    vehicle_number = serializers.SerializerMethodField()
    driver_name = serializers.SerializerMethodField()

    class Meta:
        model = Trip
        fields = [
            "id",
            "trip_code",
            "transporter",
            "vehicle",
            "vehicle_number",
            "driver",
            "driver_name",
            "container_number",
            "reference",
            "pickup_address",
            "pickup_lat",
            "pickup_lon",
            "drop_address",
            "drop_lat",
            "drop_lon",
            "trip_type",
            "status",
            "milestones",
            "current_milestone",
            "started_at",
            "completed_at",
            "cancelled_at",
            "cancel_reason",
            "pod_photo",
            "pod_uploaded_at",
            "pod_approved_at",
            "pod_approved_by",
            "created_at",
            "updated_at",
        ]

    def get_current_milestone(self, obj):
        cm = current_milestone(obj)
        return cm.as_dict() if cm else None

    def get_vehicle_number(self, obj):
        return obj.vehicle.vehicle_number if obj.vehicle_id else None

    def get_driver_name(self, obj):
        return (obj.driver.name or obj.driver.mobile) if obj.driver_id else None


class SharedTripSerializer(TripSerializer):
    """Public read-only view; drops internal ids and the share token."""

    class Meta(TripSerializer.Meta):
        fields = [
            "trip_code",
            "vehicle_number",
            "driver_name",
            "container_number",
            "reference",
            "pickup_address",
            "drop_address",
            "trip_type",
            "status",
            "milestones",
            "current_milestone",
            "started_at",
            "completed_at",
        ]


class LocationSerializer(serializers.Serializer):
    address = serializers.CharField(required=False, allow_blank=True, default="")
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lon = serializers.FloatField(min_value=-180, max_value=180)


class TripCreateSerializer(serializers.Serializer):
    trip_type = serializers.CharField()
    vehicle_id = serializers.IntegerField(required=False, allow_null=True)
    driver_id = serializers.IntegerField(required=False, allow_null=True)
    container_number = serializers.CharField(required=False, allow_blank=True, default="")
    reference = serializers.CharField(required=False, allow_blank=True, default="")
    pickup = LocationSerializer(required=False, allow_null=True)
    drop = LocationSerializer(required=False, allow_null=True)


class TripUpdateSerializer(serializers.Serializer):
    vehicle_id = serializers.IntegerField(required=False, allow_null=True)
    driver_id = serializers.IntegerField(required=False, allow_null=True)
    container_number = serializers.CharField(required=False, allow_blank=True)
    reference = serializers.CharField(required=False, allow_blank=True)
    pickup = LocationSerializer(required=False, allow_null=True)
    drop = LocationSerializer(required=False, allow_null=True)


class MilestoneInputSerializer(serializers.Serializer):
    # Range checks live in the service so realtime messages get the same errors.
    milestone_number = serializers.IntegerField()
    latitude = serializers.FloatField()
    longitude = serializers.FloatField()
    photo = serializers.CharField(required=False, allow_blank=True, default="")


class CancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class PodUploadSerializer(serializers.Serializer):
    photo = serializers.CharField()


class ShareSerializer(serializers.Serializer):
    expiry_hours = serializers.IntegerField(required=False, min_value=1, allow_null=True)
    expiry_days = serializers.IntegerField(required=False, min_value=1, allow_null=True)


class TripFilterSerializer(serializers.Serializer):
    status = serializers.CharField(required=False)
    vehicle_id = serializers.IntegerField(required=False)
    driver_id = serializers.IntegerField(required=False)
    trip_type = serializers.ChoiceField(choices=TripType.choices, required=False)
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
    q = serializers.CharField(required=False, allow_blank=True)
