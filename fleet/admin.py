from django.contrib import admin

from .models import CompanyUser, Driver, Transporter, Vehicle


@admin.register(Transporter)
class TransporterAdmin(admin.ModelAdmin):
    list_display = ("company", "name", "mobile", "status")
    search_fields = ("company", "name", "mobile")
    list_filter = ("status",)


@admin.register(CompanyUser)
class CompanyUserAdmin(admin.ModelAdmin):
    list_display = ("name", "mobile", "transporter", "is_active")
    search_fields = ("name", "mobile")
    raw_id_fields = ("transporter",)


@admin.register(Driver)
class DriverAdmin(admin.ModelAdmin):
    list_display = ("name", "mobile", "transporter", "status")
    search_fields = ("name", "mobile")
    list_filter = ("status",)
    raw_id_fields = ("transporter",)


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ("vehicle_number", "owner_type", "transporter", "original_owner", "status")
    search_fields = ("vehicle_number",)
    list_filter = ("owner_type", "status")
    raw_id_fields = ("transporter", "original_owner", "driver")
    filter_horizontal = ("hired_by",)
