# fuel/models/card.py
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class FuelCardStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"
    BLOCKED = "blocked", "Blocked"


class FuelCard(models.Model):
    card_number = models.CharField(max_length=32, unique=True)
    transporter = models.ForeignKey("fleet.Transporter", null=True, blank=True, on_delete=models.SET_NULL, related_name="fuel_cards")
    driver = models.ForeignKey("fleet.Driver", null=True, blank=True, on_delete=models.SET_NULL, related_name="fuel_cards")
    balance = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(Decimal("0.00"))]
    )
    status = models.CharField(max_length=16, choices=FuelCardStatus.choices, default=FuelCardStatus.ACTIVE)
    last_used_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "fuel_card"
        constraints = [
            models.CheckConstraint(condition=models.Q(balance__gte=0), name="ck_fuel_card_balance_non_negative"),
        ]
        indexes = [
            models.Index(fields=["driver", "status"], name="fuel_card_driver_status_idx"),
        ]

    def __str__(self):
        return self.card_number
