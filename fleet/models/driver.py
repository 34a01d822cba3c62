# fleet/models/driver.py
from django.db import models


class DriverStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"
    BLOCKED = "blocked", "Blocked"


class Driver(models.Model):
    transporter = models.ForeignKey(
        "fleet.Transporter",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="drivers",
    )
    name = models.CharField(max_length=128, blank=True, default="")
    mobile = models.CharField(max_length=10, unique=True)
    status = models.CharField(max_length=16, choices=DriverStatus.choices, default=DriverStatus.PENDING)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "fleet_driver"
        indexes = [
            models.Index(fields=["transporter", "status"], name="fleet_drv_trans_status_idx"),
        ]

    def __str__(self):
        return self.name or self.mobile
