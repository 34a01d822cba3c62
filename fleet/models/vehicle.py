# fleet/models/vehicle.py
from django.db import models
from django.db.models import Q


class OwnerType(models.TextChoices):
    OWN = "OWN", "Own"
    HIRED = "HIRED", "Hired"


class VehicleStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class Vehicle(models.Model):
    vehicle_number = models.CharField(max_length=32, db_index=True)
    transporter = models.ForeignKey("fleet.Transporter", on_delete=models.PROTECT, related_name="vehicles")
    owner_type = models.CharField(max_length=8, choices=OwnerType.choices, default=OwnerType.OWN, db_index=True)

    # OWN: the registering transporter. HIRED: the transporter owning the OWN record.
    original_owner = models.ForeignKey(
        "fleet.Transporter",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="originally_owned_vehicles",
    )
    # Only populated on OWN records: transporters currently hiring this vehicle.
    hired_by = models.ManyToManyField("fleet.Transporter", blank=True, related_name="hired_vehicles")

    driver = models.ForeignKey("fleet.Driver", null=True, blank=True, on_delete=models.SET_NULL, related_name="vehicles")
    status = models.CharField(max_length=16, choices=VehicleStatus.choices, default=VehicleStatus.ACTIVE)
    trailer_type = models.CharField(max_length=64, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "fleet_vehicle"
        constraints = [
            models.UniqueConstraint(
                fields=["vehicle_number"],
                condition=Q(owner_type="OWN"),
                name="uq_vehicle_own_number",
            ),
            models.UniqueConstraint(
                fields=["vehicle_number", "transporter"],
                condition=Q(owner_type="HIRED"),
                name="uq_vehicle_hired_number_transporter",
            ),
        ]
        indexes = [
            models.Index(fields=["transporter", "status"], name="fleet_veh_trans_status_idx"),
        ]

    def __str__(self):
        return f"{self.vehicle_number} ({self.owner_type})"

    @property
    def is_active(self) -> bool:
        return self.status == VehicleStatus.ACTIVE

    def save(self, *args, **kwargs):
        if self._state.adding and self.owner_type == OwnerType.OWN and not self.original_owner_id:
            self.original_owner_id = self.transporter_id
        super().save(*args, **kwargs)
