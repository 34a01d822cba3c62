# fuel/models/pump.py
from django.db import models


class PumpOwner(models.Model):
    name = models.CharField(max_length=128)
    pump_name = models.CharField(max_length=128, blank=True, default="")
    mobile = models.CharField(max_length=10, unique=True)
    address = models.CharField(max_length=255, blank=True, default="")
    # Registered pump location; used for the GPS mismatch check.
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "fuel_pump_owner"

    def __str__(self):
        return self.pump_name or self.name

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class PumpStaff(models.Model):
    pump_owner = models.ForeignKey(PumpOwner, on_delete=models.CASCADE, related_name="staff")
    name = models.CharField(max_length=128)
    mobile = models.CharField(max_length=10, unique=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "fuel_pump_staff"

    def __str__(self):
        return f"{self.name} @ {self.pump_owner}"
