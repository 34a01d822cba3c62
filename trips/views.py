# trips/views.py
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from account.actors import actor_for_user
from trips import selectors
from trips.models import Trip
from trips.serializers import (
    CancelSerializer,
    MilestoneInputSerializer,
    PodUploadSerializer,
    ShareSerializer,
    SharedTripSerializer,
    TripCreateSerializer,
    TripFilterSerializer,
    TripMilestoneSerializer,
    TripSerializer,
    TripUpdateSerializer,
)
from trips.services import lifecycle
from trips.services.state import current_milestone, milestone_timeline


def _current(trip):
    cm = current_milestone(trip)
    return cm.as_dict() if cm else None


class TripListCreateView(APIView):
    def get(self, request):
        actor = actor_for_user(request.user)
        f = TripFilterSerializer(data=request.query_params)
        f.is_valid(raise_exception=True)
        qs = selectors.filter_trips(selectors.trips_for(actor), **f.validated_data)
        return Response({"success": True, "trips": TripSerializer(qs, many=True).data})

    def post(self, request):
        actor = actor_for_user(request.user)
        ser = TripCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        trip = lifecycle.create_trip(actor, **ser.validated_data)
        return Response({"success": True, "trip": TripSerializer(trip).data}, status=status.HTTP_201_CREATED)


class ActiveTripListView(APIView):
    def get(self, request):
        actor = actor_for_user(request.user)
        qs = selectors.active_trips(actor)
        return Response({"success": True, "trips": TripSerializer(qs, many=True).data})


class PendingPodListView(APIView):
    def get(self, request):
        actor = actor_for_user(request.user)
        qs = selectors.pending_pod_trips(actor)
        return Response({"success": True, "trips": TripSerializer(qs, many=True).data})


class TripDetailView(APIView):
    def get(self, request, pk):
        actor = actor_for_user(request.user)
        trip = selectors.get_trip_for(actor, pk)
        return Response({
            "success": True,
            "trip": TripSerializer(trip).data,
            "timeline": milestone_timeline(trip),
        })

    def patch(self, request, pk):
        actor = actor_for_user(request.user)
        trip = selectors.get_trip_for(actor, pk)
        ser = TripUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        trip = lifecycle.update_trip(trip, actor, **ser.validated_data)
        return Response({"success": True, "trip": TripSerializer(trip).data})


class TripStartView(APIView):
    def post(self, request, pk):
        actor = actor_for_user(request.user)
        trip = selectors.get_trip_for(actor, pk)
        trip = lifecycle.start_trip(trip, actor)
        return Response({
            "success": True,
            "trip": TripSerializer(trip).data,
            "currentMilestone": _current(trip),
        })


class TripMilestoneView(APIView):
    def post(self, request, pk):
        actor = actor_for_user(request.user)
        trip = selectors.get_trip_for(actor, pk)
        ser = MilestoneInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        milestone = lifecycle.record_milestone(trip, actor, **ser.validated_data)
        return Response(
            {
                "success": True,
                "milestone": TripMilestoneSerializer(milestone).data,
                "currentMilestone": _current(trip),
            },
            status=status.HTTP_201_CREATED,
        )


class TripCompleteView(APIView):
    def post(self, request, pk):
        actor = actor_for_user(request.user)
        trip = selectors.get_trip_for(actor, pk)
        trip, next_trip = lifecycle.complete_trip(trip, actor)
        return Response({
            "success": True,
            "trip": TripSerializer(trip).data,
            "nextTrip": TripSerializer(next_trip).data if next_trip else None,
        })


class TripCancelView(APIView):
    def post(self, request, pk):
        actor = actor_for_user(request.user)
        trip = selectors.get_trip_for(actor, pk)
        ser = CancelSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        trip = lifecycle.cancel_trip(trip, actor, reason=ser.validated_data["reason"])
        return Response({"success": True, "trip": TripSerializer(trip).data})


class TripPodUploadView(APIView):
    def post(self, request, pk):
        actor = actor_for_user(request.user)
        trip = selectors.get_trip_for(actor, pk)
        ser = PodUploadSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        trip = lifecycle.upload_pod(trip, actor, photo=ser.validated_data["photo"])
        return Response({"success": True, "trip": TripSerializer(trip).data}, status=status.HTTP_201_CREATED)


class TripPodApproveView(APIView):
    def post(self, request, pk):
        actor = actor_for_user(request.user)
        trip = selectors.get_trip_for(actor, pk)
        trip = lifecycle.approve_pod(trip, actor)
        return Response({"success": True, "trip": TripSerializer(trip).data})


class TripShareView(APIView):
    def post(self, request, pk):
        actor = actor_for_user(request.user)
        trip = get_object_or_404(Trip, pk=pk)
        ser = ShareSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        trip = lifecycle.share_trip(trip, actor, **ser.validated_data)
        return Response({
            "success": True,
            "share_token": trip.share_token,
            "share_token_expiry": trip.share_token_expiry,
            "share_path": f"/api/trips/shared/{trip.share_token}/",
        })


class SharedTripView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "shared_trip"

    def get(self, request, token):
        trip = lifecycle.get_shared_trip(token)
        return Response({
            "success": True,
            "trip": SharedTripSerializer(trip).data,
            "timeline": milestone_timeline(trip),
        })
