from django.contrib.auth.models import User
from django.db import models


class Role(models.TextChoices):
    TRANSPORTER = "transporter", "Transporter"
    DRIVER = "driver", "Driver"
    COMPANY_USER = "company_user", "Company user"
    PUMP_OWNER = "pump_owner", "Pump owner"
    PUMP_STAFF = "pump_staff", "Pump staff"
    ADMIN = "admin", "Admin"


class UserProfile(models.Model):
    """Binds a login to the party it acts as."""

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="userprofile")
    role = models.CharField(max_length=20, choices=Role.choices)

    transporter = models.ForeignKey("fleet.Transporter", null=True, blank=True, on_delete=models.CASCADE, related_name="+")
    driver = models.ForeignKey("fleet.Driver", null=True, blank=True, on_delete=models.CASCADE, related_name="+")
    company_user = models.ForeignKey("fleet.CompanyUser", null=True, blank=True, on_delete=models.CASCADE, related_name="+")
    pump_owner = models.ForeignKey("fuel.PumpOwner", null=True, blank=True, on_delete=models.CASCADE, related_name="+")
    pump_staff = models.ForeignKey("fuel.PumpStaff", null=True, blank=True, on_delete=models.CASCADE, related_name="+")

    def __str__(self):
        return f"{self.user.username} ({self.get_role_display()})"
