# trips/models/trip.py
from django.db import models
from django.utils import timezone


class TripType(models.TextChoices):
    IMPORT = "IMPORT", "Import"
    EXPORT = "EXPORT", "Export"


class TripStatus(models.TextChoices):
    PLANNED = "PLANNED", "Planned"
    ACTIVE = "ACTIVE", "Active"
    COMPLETED = "COMPLETED", "Completed"
    POD_PENDING = "POD_PENDING", "POD pending"
    CANCELLED = "CANCELLED", "Cancelled"


class Trip(models.Model):
    trip_code = models.CharField(max_length=40, unique=True, editable=False)

    transporter = models.ForeignKey("fleet.Transporter", on_delete=models.PROTECT, related_name="trips")
    vehicle = models.ForeignKey("fleet.Vehicle", null=True, blank=True, on_delete=models.PROTECT, related_name="trips")
    driver = models.ForeignKey("fleet.Driver", null=True, blank=True, on_delete=models.SET_NULL, related_name="trips")

    container_number = models.CharField(max_length=32, blank=True, default="")
    reference = models.CharField(max_length=120, blank=True, default="")

    pickup_address = models.CharField(max_length=255, blank=True, default="")
    pickup_lat = models.FloatField(null=True, blank=True)
    pickup_lon = models.FloatField(null=True, blank=True)
    drop_address = models.CharField(max_length=255, blank=True, default="")
    drop_lat = models.FloatField(null=True, blank=True)
    drop_lon = models.FloatField(null=True, blank=True)

    trip_type = models.CharField(max_length=8, choices=TripType.choices)
    status = models.CharField(max_length=16, choices=TripStatus.choices, default=TripStatus.PLANNED, db_index=True)

    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancel_reason = models.CharField(max_length=255, blank=True, default="")

    # Proof of delivery (photo is an opaque storage reference)
    pod_photo = models.CharField(max_length=500, blank=True, default="")
    pod_uploaded_at = models.DateTimeField(null=True, blank=True)
    pod_uploaded_by_role = models.CharField(max_length=20, blank=True, default="")
    pod_uploaded_by_id = models.PositiveBigIntegerField(null=True, blank=True)
    pod_approved_at = models.DateTimeField(null=True, blank=True)
    pod_approved_by = models.ForeignKey(
        "fleet.Transporter", null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )

    share_token = models.CharField(max_length=64, null=True, blank=True, unique=True)
    share_token_expiry = models.DateTimeField(null=True, blank=True)

    created_by_company_user = models.ForeignKey(
        "fleet.CompanyUser", null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    # Not auto_now_add: queue order is by creation time and the clock is injectable.
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "trips_trip"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["vehicle", "status", "created_at"], name="trips_vehicle_status_idx"),
            models.Index(fields=["transporter", "status"], name="trips_transporter_status_idx"),
            models.Index(fields=["driver", "status"], name="trips_driver_status_idx"),
        ]

    def __str__(self):
        return f"{self.trip_code} [{self.status}]"
