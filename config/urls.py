from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/trips/", include("trips.urls", namespace="trips")),
    path("api/vehicles/", include("fleet.urls", namespace="fleet")),
    path("api/fuel/", include("fuel.urls", namespace="fuel")),
]
