from django.contrib import admin

from .models import FuelCard, FuelTransaction, PumpOwner, PumpStaff


@admin.register(PumpOwner)
class PumpOwnerAdmin(admin.ModelAdmin):
    list_display = ("pump_name", "name", "mobile", "latitude", "longitude", "is_active")
    search_fields = ("pump_name", "name", "mobile")


@admin.register(PumpStaff)
class PumpStaffAdmin(admin.ModelAdmin):
    list_display = ("name", "mobile", "pump_owner", "is_active")
    search_fields = ("name", "mobile")
    raw_id_fields = ("pump_owner",)


@admin.register(FuelCard)
class FuelCardAdmin(admin.ModelAdmin):
    list_display = ("card_number", "driver", "transporter", "balance", "status", "last_used_at")
    search_fields = ("card_number",)
    list_filter = ("status",)
    raw_id_fields = ("driver", "transporter")


@admin.register(FuelTransaction)
class FuelTransactionAdmin(admin.ModelAdmin):
    list_display = (
        "transaction_code", "driver", "vehicle_number", "amount", "status",
        "duplicate_receipt", "gps_mismatch", "express_uploads", "unusual_pattern", "fraud_resolved",
    )
    list_filter = ("status", "fraud_resolved", "gps_mismatch", "unusual_pattern")
    search_fields = ("transaction_code", "vehicle_number")
    raw_id_fields = ("driver", "fuel_card", "pump_owner", "pump_staff", "cancelled_by", "receipt_uploaded_by")
    readonly_fields = ("transaction_code", "qr_code", "qr_code_expiry", "created_at", "updated_at")
