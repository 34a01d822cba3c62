# fleet/models/transporter.py
from django.db import models


class Transporter(models.Model):
    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"
    STATUS_BLOCKED = "blocked"
    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
        (STATUS_BLOCKED, "Blocked"),
    ]

    name = models.CharField(max_length=128, blank=True, default="")
    company = models.CharField(max_length=128, blank=True, default="")
    mobile = models.CharField(max_length=10, unique=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "fleet_transporter"

    def __str__(self):
        return self.company or self.name or self.mobile


class CompanyPermission(models.TextChoices):
    VIEW_TRIPS = "view_trips", "View trips"
    CREATE_TRIPS = "create_trips", "Create trips"
    MANAGE_VEHICLES = "manage_vehicles", "Manage vehicles"


class CompanyUser(models.Model):
    """Sub-user of a transporter account, scoped by an explicit permission list."""

    transporter = models.ForeignKey(Transporter, on_delete=models.CASCADE, related_name="company_users")
    name = models.CharField(max_length=128)
    mobile = models.CharField(max_length=10, unique=True)
    permissions = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "fleet_company_user"

    def __str__(self):
        return f"{self.name} ({self.transporter})"
