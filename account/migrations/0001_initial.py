# Generated manually for role profiles

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("fleet", "0001_initial"),
        ("fuel", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="UserProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role", models.CharField(
                    choices=[
                        ("transporter", "Transporter"),
                        ("driver", "Driver"),
                        ("company_user", "Company user"),
                        ("pump_owner", "Pump owner"),
                        ("pump_staff", "Pump staff"),
                        ("admin", "Admin"),
                    ],
                    max_length=20,
                )),
                ("user", models.OneToOneField(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="userprofile",
                    to=settings.AUTH_USER_MODEL,
                )),
                ("transporter", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.CASCADE,
                    related_name="+", to="fleet.transporter",
                )),
                ("driver", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.CASCADE,
                    related_name="+", to="fleet.driver",
                )),
                ("company_user", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.CASCADE,
                    related_name="+", to="fleet.companyuser",
                )),
                ("pump_owner", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.CASCADE,
                    related_name="+", to="fuel.pumpowner",
                )),
                ("pump_staff", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.CASCADE,
                    related_name="+", to="fuel.pumpstaff",
                )),
            ],
        ),
    ]
