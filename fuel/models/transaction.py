# fuel/models/transaction.py
from django.conf import settings
from django.db import models
from django.utils import timezone


class FuelTransactionStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"
    FLAGGED = "flagged", "Flagged"


class FraudType(models.TextChoices):
    DUPLICATE_RECEIPT = "duplicate_receipt", "Duplicate receipt"
    GPS_MISMATCH = "gps_mismatch", "GPS mismatch"
    EXPRESS_UPLOADS = "express_uploads", "Express uploads"
    UNUSUAL_PATTERN = "unusual_pattern", "Unusual pattern"


class FuelTransaction(models.Model):
    transaction_code = models.CharField(max_length=40, unique=True, editable=False)
    qr_code = models.CharField(max_length=512, unique=True)
    qr_code_expiry = models.DateTimeField()

    driver = models.ForeignKey("fleet.Driver", on_delete=models.PROTECT, related_name="fuel_transactions")
    fuel_card = models.ForeignKey("fuel.FuelCard", on_delete=models.PROTECT, related_name="transactions")
    pump_owner = models.ForeignKey("fuel.PumpOwner", null=True, blank=True, on_delete=models.PROTECT, related_name="transactions")
    pump_staff = models.ForeignKey("fuel.PumpStaff", null=True, blank=True, on_delete=models.SET_NULL, related_name="transactions")

    vehicle_number = models.CharField(max_length=32)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    requested_amount = models.DecimalField(max_digits=12, decimal_places=2)

    # Driver location at issuance, replaced by the pump-side location at submit.
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    location_address = models.CharField(max_length=255, blank=True, default="")

    status = models.CharField(
        max_length=16, choices=FuelTransactionStatus.choices, default=FuelTransactionStatus.PENDING, db_index=True
    )
    confirmed_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey("fleet.Driver", null=True, blank=True, on_delete=models.SET_NULL, related_name="+")
    cancel_reason = models.CharField(max_length=255, blank=True, default="")

    receipt_photo = models.CharField(max_length=500, blank=True, default="", db_index=True)
    receipt_uploaded_at = models.DateTimeField(null=True, blank=True)
    receipt_uploaded_by = models.ForeignKey("fleet.Driver", null=True, blank=True, on_delete=models.SET_NULL, related_name="+")

    # fraud flags
    duplicate_receipt = models.BooleanField(default=False)
    gps_mismatch = models.BooleanField(default=False)
    gps_mismatch_distance = models.FloatField(null=True, blank=True)
    express_uploads = models.BooleanField(default=False)
    unusual_pattern = models.BooleanField(default=False)
    flagged_at = models.DateTimeField(null=True, blank=True)
    flagged_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")
    fraud_resolved = models.BooleanField(default=False)
    fraud_resolved_at = models.DateTimeField(null=True, blank=True)
    fraud_resolved_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    # flag columns, named after FraudType values
    FLAG_FIELDS = (
        "duplicate_receipt",
        "gps_mismatch",
        "express_uploads",
        "unusual_pattern",
    )

    class Meta:
        db_table = "fuel_transaction"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["driver", "status", "created_at"], name="fuel_tx_driver_status_idx"),
            models.Index(fields=["pump_owner", "status"], name="fuel_tx_pump_status_idx"),
        ]

    def __str__(self):
        return f"{self.transaction_code} [{self.status}]"

    @property
    def has_fraud_flags(self) -> bool:
        return any(getattr(self, f) for f in self.FLAG_FIELDS)

    def fraud_flags(self) -> dict:
        return {
            "duplicate_receipt": self.duplicate_receipt,
            "gps_mismatch": self.gps_mismatch,
            "gps_mismatch_distance": self.gps_mismatch_distance,
            "express_uploads": self.express_uploads,
            "unusual_pattern": self.unusual_pattern,
            "resolved": self.fraud_resolved,
            "resolved_at": self.fraud_resolved_at,
            "resolved_by": self.fraud_resolved_by_id,
            "flagged_at": self.flagged_at,
            "flagged_by": self.flagged_by_id,
        }
