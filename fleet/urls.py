from django.urls import path

from . import views

app_name = "fleet"

urlpatterns = [
    path("", views.VehicleListCreateView.as_view(), name="list"),
    path("<int:pk>/", views.VehicleDetailView.as_view(), name="detail"),
    path("<int:pk>/disable/", views.VehicleDisableView.as_view(), name="disable"),
    path("<int:pk>/availability/", views.VehicleAvailabilityView.as_view(), name="availability"),
    path("<int:pk>/queue/", views.VehicleQueueView.as_view(), name="queue"),
]
