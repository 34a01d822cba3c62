# Generated manually for fleet tables

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Transporter",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(blank=True, default="", max_length=128)),
                ("company", models.CharField(blank=True, default="", max_length=128)),
                ("mobile", models.CharField(max_length=10, unique=True)),
                ("status", models.CharField(
                    choices=[("active", "Active"), ("inactive", "Inactive"), ("blocked", "Blocked")],
                    default="active",
                    max_length=16,
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"db_table": "fleet_transporter"},
        ),
        migrations.CreateModel(
            name="CompanyUser",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=128)),
                ("mobile", models.CharField(max_length=10, unique=True)),
                ("permissions", models.JSONField(blank=True, default=list)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("transporter", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="company_users",
                    to="fleet.transporter",
                )),
            ],
            options={"db_table": "fleet_company_user"},
        ),
        migrations.CreateModel(
            name="Driver",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(blank=True, default="", max_length=128)),
                ("mobile", models.CharField(max_length=10, unique=True)),
                ("status", models.CharField(
                    choices=[("pending", "Pending"), ("active", "Active"), ("inactive", "Inactive"), ("blocked", "Blocked")],
                    default="pending",
                    max_length=16,
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("transporter", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="drivers",
                    to="fleet.transporter",
                )),
            ],
            options={
                "db_table": "fleet_driver",
                "indexes": [models.Index(fields=["transporter", "status"], name="fleet_drv_trans_status_idx")],
            },
        ),
        migrations.CreateModel(
            name="Vehicle",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("vehicle_number", models.CharField(db_index=True, max_length=32)),
                ("owner_type", models.CharField(
                    choices=[("OWN", "Own"), ("HIRED", "Hired")], db_index=True, default="OWN", max_length=8
                )),
                ("status", models.CharField(
                    choices=[("active", "Active"), ("inactive", "Inactive")], default="active", max_length=16
                )),
                ("trailer_type", models.CharField(blank=True, default="", max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("driver", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="vehicles",
                    to="fleet.driver",
                )),
                ("hired_by", models.ManyToManyField(blank=True, related_name="hired_vehicles", to="fleet.transporter")),
                ("original_owner", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="originally_owned_vehicles",
                    to="fleet.transporter",
                )),
                ("transporter", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="vehicles",
                    to="fleet.transporter",
                )),
            ],
            options={
                "db_table": "fleet_vehicle",
                "indexes": [models.Index(fields=["transporter", "status"], name="fleet_veh_trans_status_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(owner_type="OWN"),
                        fields=("vehicle_number",),
                        name="uq_vehicle_own_number",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(owner_type="HIRED"),
                        fields=("vehicle_number", "transporter"),
                        name="uq_vehicle_hired_number_transporter",
                    ),
                ],
            },
        ),
    ]
