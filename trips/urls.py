from django.urls import path

from . import views

app_name = "trips"

urlpatterns = [
    path("", views.TripListCreateView.as_view(), name="list"),
    path("active/", views.ActiveTripListView.as_view(), name="active"),
    path("pending-pod/", views.PendingPodListView.as_view(), name="pending_pod"),
    path("shared/<str:token>/", views.SharedTripView.as_view(), name="shared"),
    path("<int:pk>/", views.TripDetailView.as_view(), name="detail"),
    path("<int:pk>/start/", views.TripStartView.as_view(), name="start"),
    path("<int:pk>/milestones/", views.TripMilestoneView.as_view(), name="milestone"),
    path("<int:pk>/complete/", views.TripCompleteView.as_view(), name="complete"),
    path("<int:pk>/cancel/", views.TripCancelView.as_view(), name="cancel"),
    path("<int:pk>/pod/", views.TripPodUploadView.as_view(), name="pod_upload"),
    path("<int:pk>/pod/approve/", views.TripPodApproveView.as_view(), name="pod_approve"),
    path("<int:pk>/share/", views.TripShareView.as_view(), name="share"),
]
