# Generated manually for fuel tables

from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("fleet", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PumpOwner",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=128)),
                ("pump_name", models.CharField(blank=True, default="", max_length=128)),
                ("mobile", models.CharField(max_length=10, unique=True)),
                ("address", models.CharField(blank=True, default="", max_length=255)),
                ("latitude", models.FloatField(blank=True, null=True)),
                ("longitude", models.FloatField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"db_table": "fuel_pump_owner"},
        ),
        migrations.CreateModel(
            name="PumpStaff",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=128)),
                ("mobile", models.CharField(max_length=10, unique=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("pump_owner", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="staff", to="fuel.pumpowner"
                )),
            ],
            options={"db_table": "fuel_pump_staff"},
        ),
        migrations.CreateModel(
            name="FuelCard",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("card_number", models.CharField(max_length=32, unique=True)),
                ("balance", models.DecimalField(
                    decimal_places=2,
                    default=Decimal("0.00"),
                    max_digits=12,
                    validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                )),
                ("status", models.CharField(
                    choices=[("active", "Active"), ("inactive", "Inactive"), ("blocked", "Blocked")],
                    default="active",
                    max_length=16,
                )),
                ("last_used_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("driver", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="fuel_cards", to="fleet.driver",
                )),
                ("transporter", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="fuel_cards", to="fleet.transporter",
                )),
            ],
            options={
                "db_table": "fuel_card",
                "indexes": [models.Index(fields=["driver", "status"], name="fuel_card_driver_status_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(balance__gte=0), name="ck_fuel_card_balance_non_negative"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="FuelTransaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("transaction_code", models.CharField(editable=False, max_length=40, unique=True)),
                ("qr_code", models.CharField(max_length=512, unique=True)),
                ("qr_code_expiry", models.DateTimeField()),
                ("vehicle_number", models.CharField(max_length=32)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("requested_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("latitude", models.FloatField(blank=True, null=True)),
                ("longitude", models.FloatField(blank=True, null=True)),
                ("location_address", models.CharField(blank=True, default="", max_length=255)),
                ("status", models.CharField(
                    choices=[
                        ("pending", "Pending"),
                        ("confirmed", "Confirmed"),
                        ("completed", "Completed"),
                        ("cancelled", "Cancelled"),
                        ("flagged", "Flagged"),
                    ],
                    db_index=True,
                    default="pending",
                    max_length=16,
                )),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("cancel_reason", models.CharField(blank=True, default="", max_length=255)),
                ("receipt_photo", models.CharField(blank=True, db_index=True, default="", max_length=500)),
                ("receipt_uploaded_at", models.DateTimeField(blank=True, null=True)),
                ("duplicate_receipt", models.BooleanField(default=False)),
                ("gps_mismatch", models.BooleanField(default=False)),
                ("gps_mismatch_distance", models.FloatField(blank=True, null=True)),
                ("express_uploads", models.BooleanField(default=False)),
                ("unusual_pattern", models.BooleanField(default=False)),
                ("flagged_at", models.DateTimeField(blank=True, null=True)),
                ("fraud_resolved", models.BooleanField(default=False)),
                ("fraud_resolved_at", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("cancelled_by", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="+", to="fleet.driver",
                )),
                ("driver", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT, related_name="fuel_transactions", to="fleet.driver"
                )),
                ("flagged_by", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="+", to=settings.AUTH_USER_MODEL,
                )),
                ("fraud_resolved_by", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="+", to=settings.AUTH_USER_MODEL,
                )),
                ("fuel_card", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT, related_name="transactions", to="fuel.fuelcard"
                )),
                ("pump_owner", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.PROTECT,
                    related_name="transactions", to="fuel.pumpowner",
                )),
                ("pump_staff", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="transactions", to="fuel.pumpstaff",
                )),
                ("receipt_uploaded_by", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="+", to="fleet.driver",
                )),
            ],
            options={
                "db_table": "fuel_transaction",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["driver", "status", "created_at"], name="fuel_tx_driver_status_idx"),
                    models.Index(fields=["pump_owner", "status"], name="fuel_tx_pump_status_idx"),
                ],
            },
        ),
    ]
