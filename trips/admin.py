from django.contrib import admin

from .models import Trip, TripMilestone


class TripMilestoneInline(admin.TabularInline):
    model = TripMilestone
    extra = 0
    can_delete = False
    readonly_fields = (
        "milestone_number", "milestone_type", "backend_meaning",
        "timestamp", "latitude", "longitude", "photo", "recorded_by",
    )

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Trip)
class TripAdmin(admin.ModelAdmin):
    list_display = ("trip_code", "trip_type", "status", "transporter", "vehicle", "driver", "created_at")
    list_filter = ("status", "trip_type")
    search_fields = ("trip_code", "container_number", "reference", "vehicle__vehicle_number")
    raw_id_fields = ("transporter", "vehicle", "driver", "pod_approved_by", "created_by_company_user")
    readonly_fields = ("trip_code", "share_token", "share_token_expiry", "created_at", "updated_at")
    inlines = [TripMilestoneInline]
