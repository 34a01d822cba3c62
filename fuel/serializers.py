# fuel/serializers.py
from rest_framework import serializers

from fuel.models import FraudType, FuelTransaction


class FuelTransactionSerializer(serializers.ModelSerializer):
    fraud_flags = serializers.SerializerMethodField()
    has_fraud_flags = serializers.BooleanField(read_only=True)

    class Meta:
        model = FuelTransaction
        fields = [
            "id",
            "transaction_code",
            "driver",
            "fuel_card",
            "pump_owner",
            "pump_staff",
            "vehicle_number",
            "amount",
            "requested_amount",
            "latitude",
            "longitude",
            "location_address",
            "status",
            "qr_code_expiry",
            "confirmed_at",
            "completed_at",
            "cancelled_at",
            "cancel_reason",
            "receipt_photo",
            "receipt_uploaded_at",
            "fraud_flags",
            "has_fraud_flags",
            "notes",
            "created_at",
        ]

    def get_fraud_flags(self, obj):
        return obj.fraud_flags()


class GenerateQRSerializer(serializers.Serializer):
    vehicle_number = serializers.CharField(max_length=32)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    latitude = serializers.FloatField()
    longitude = serializers.FloatField()
    address = serializers.CharField(required=False, allow_blank=True, default="")


class QRCodeSerializer(serializers.Serializer):
    qr_code = serializers.CharField()


class ConfirmSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)


class CancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class SubmitSerializer(serializers.Serializer):
    qr_code = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    latitude = serializers.FloatField()
    longitude = serializers.FloatField()
    pump_owner_id = serializers.IntegerField(required=False)
    address = serializers.CharField(required=False, allow_blank=True, default="")


class ReceiptSerializer(serializers.Serializer):
    photo = serializers.CharField()


class FlagSerializer(serializers.Serializer):
    fraud_type = serializers.ChoiceField(choices=FraudType.choices, required=False, allow_null=True)
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class ResolveSerializer(serializers.Serializer):
    is_fraud = serializers.BooleanField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class FraudFilterSerializer(serializers.Serializer):
    resolved = serializers.ChoiceField(choices=["true", "false"], required=False)
    fraud_type = serializers.ChoiceField(choices=FraudType.choices, required=False)
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
