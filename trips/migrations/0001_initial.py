# Generated manually for trip tables

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("fleet", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Trip",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("trip_code", models.CharField(editable=False, max_length=40, unique=True)),
                ("container_number", models.CharField(blank=True, default="", max_length=32)),
                ("reference", models.CharField(blank=True, default="", max_length=120)),
                ("pickup_address", models.CharField(blank=True, default="", max_length=255)),
                ("pickup_lat", models.FloatField(blank=True, null=True)),
                ("pickup_lon", models.FloatField(blank=True, null=True)),
                ("drop_address", models.CharField(blank=True, default="", max_length=255)),
                ("drop_lat", models.FloatField(blank=True, null=True)),
                ("drop_lon", models.FloatField(blank=True, null=True)),
                ("trip_type", models.CharField(choices=[("IMPORT", "Import"), ("EXPORT", "Export")], max_length=8)),
                ("status", models.CharField(
                    choices=[
                        ("PLANNED", "Planned"),
                        ("ACTIVE", "Active"),
                        ("COMPLETED", "Completed"),
                        ("POD_PENDING", "POD pending"),
                        ("CANCELLED", "Cancelled"),
                    ],
                    db_index=True,
                    default="PLANNED",
                    max_length=16,
                )),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("cancel_reason", models.CharField(blank=True, default="", max_length=255)),
                ("pod_photo", models.CharField(blank=True, default="", max_length=500)),
                ("pod_uploaded_at", models.DateTimeField(blank=True, null=True)),
                ("pod_uploaded_by_role", models.CharField(blank=True, default="", max_length=20)),
                ("pod_uploaded_by_id", models.PositiveBigIntegerField(blank=True, null=True)),
                ("pod_approved_at", models.DateTimeField(blank=True, null=True)),
                ("share_token", models.CharField(blank=True, max_length=64, null=True, unique=True)),
                ("share_token_expiry", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by_company_user", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="+", to="fleet.companyuser",
                )),
                ("driver", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="trips", to="fleet.driver",
                )),
                ("pod_approved_by", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="+", to="fleet.transporter",
                )),
                ("transporter", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT, related_name="trips", to="fleet.transporter"
                )),
                ("vehicle", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.PROTECT,
                    related_name="trips", to="fleet.vehicle",
                )),
            ],
            options={
                "db_table": "trips_trip",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["vehicle", "status", "created_at"], name="trips_vehicle_status_idx"),
                    models.Index(fields=["transporter", "status"], name="trips_transporter_status_idx"),
                    models.Index(fields=["driver", "status"], name="trips_driver_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TripMilestone",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("milestone_number", models.PositiveSmallIntegerField()),
                ("milestone_type", models.CharField(
                    choices=[
                        ("CONTAINER_PICKED", "Container Picked"),
                        ("REACHED_LOCATION", "Reached Location"),
                        ("LOADING_UNLOADING", "Loading Unloading"),
                        ("REACHED_DESTINATION", "Reached Destination"),
                        ("TRIP_COMPLETED", "Trip Completed"),
                    ],
                    max_length=32,
                )),
                ("backend_meaning", models.CharField(max_length=120)),
                ("timestamp", models.DateTimeField()),
                ("latitude", models.FloatField()),
                ("longitude", models.FloatField()),
                ("photo", models.CharField(blank=True, default="", max_length=500)),
                ("recorded_by", models.ForeignKey(
                    null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="fleet.driver"
                )),
                ("trip", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="milestones", to="trips.trip"
                )),
            ],
            options={
                "db_table": "trips_milestone",
                "ordering": ["milestone_number"],
                "constraints": [
                    models.UniqueConstraint(fields=("trip", "milestone_number"), name="uq_trip_milestone_number"),
                    models.CheckConstraint(
                        condition=models.Q(milestone_number__gte=1, milestone_number__lte=5),
                        name="ck_trip_milestone_number_range",
                    ),
                ],
            },
        ),
    ]
