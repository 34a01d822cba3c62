# fleet/views.py
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from account.actors import actor_for_user
from core.exceptions import AccessError
from fleet.models import Transporter, Vehicle
from fleet.serializers import VehicleRegisterSerializer, VehicleSerializer, VehicleUpdateSerializer
from fleet.services import vehicles as vehicle_service
from trips.serializers import TripSerializer
from trips.services.availability import vehicle_availability
from trips.services.queue import get_vehicle_queue_status


def _vehicle_for(actor, pk) -> Vehicle:
    if actor.is_admin:
        return vehicle_service.get_vehicle_by_id(pk)
    if actor.transporter_id is None:
        raise AccessError("Only transporters can access vehicles")
    return vehicle_service.get_vehicle_for(pk, transporter_id=actor.transporter_id)


class VehicleListCreateView(APIView):
    def get(self, request):
        actor = actor_for_user(request.user)
        qs = Vehicle.objects.all()
        if not actor.is_admin:
            if actor.transporter_id is None:
                raise AccessError("Only transporters can access vehicles")
            qs = qs.filter(transporter_id=actor.transporter_id)
        owner_type = request.query_params.get("owner_type")
        if owner_type:
            qs = qs.filter(owner_type=owner_type.upper())
        qs = qs.prefetch_related("hired_by").order_by("vehicle_number")
        return Response({"success": True, "vehicles": VehicleSerializer(qs, many=True).data})

    def post(self, request):
        actor = actor_for_user(request.user)
        if actor.transporter_id is None or not actor.acts_for_transporter(actor.transporter_id):
            raise AccessError("Only transporters can register vehicles")
        if not actor.has_permission("manage_vehicles"):
            raise AccessError("Missing permission: manage_vehicles")
        ser = VehicleRegisterSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        transporter = Transporter.objects.get(pk=actor.transporter_id)
        driver = None
        if data.get("driver_id"):
            driver = vehicle_service.get_driver_for(data["driver_id"], transporter_id=transporter.pk)
        vehicle = vehicle_service.register_vehicle(
            transporter,
            vehicle_number=data["vehicle_number"],
            owner_type=data["owner_type"],
            driver=driver,
            trailer_type=data["trailer_type"],
        )
        return Response({"success": True, "vehicle": VehicleSerializer(vehicle).data}, status=status.HTTP_201_CREATED)


class VehicleDetailView(APIView):
    def get(self, request, pk):
        actor = actor_for_user(request.user)
        vehicle = _vehicle_for(actor, pk)
        return Response({"success": True, "vehicle": VehicleSerializer(vehicle).data})

    def patch(self, request, pk):
        actor = actor_for_user(request.user)
        vehicle = _vehicle_for(actor, pk)
        ser = VehicleUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)
        driver = None
        if data.get("driver_id"):
            driver = vehicle_service.get_driver_for(data.pop("driver_id"), transporter_id=vehicle.transporter_id)
        vehicle = vehicle_service.update_vehicle(vehicle, actor, driver=driver, **data)
        return Response({"success": True, "vehicle": VehicleSerializer(vehicle).data})

    def delete(self, request, pk):
        actor = actor_for_user(request.user)
        vehicle = _vehicle_for(actor, pk)
        vehicle_service.delete_vehicle(vehicle, actor)
        return Response(status=status.HTTP_204_NO_CONTENT)


class VehicleDisableView(APIView):
    def post(self, request, pk):
        actor = actor_for_user(request.user)
        vehicle = _vehicle_for(actor, pk)
        vehicle = vehicle_service.disable_vehicle(vehicle, actor)
        return Response({"success": True, "vehicle": VehicleSerializer(vehicle).data})


class VehicleAvailabilityView(APIView):
    def get(self, request, pk):
        actor = actor_for_user(request.user)
        vehicle = _vehicle_for(actor, pk)
        return Response({"success": True, "availability": vehicle_availability(vehicle.pk)})


class VehicleQueueView(APIView):
    def get(self, request, pk):
        actor = actor_for_user(request.user)
        vehicle = _vehicle_for(actor, pk)
        queue = get_vehicle_queue_status(vehicle.pk)
        return Response({
            "success": True,
            "has_active_trip": queue["has_active_trip"],
            "active_trip": TripSerializer(queue["active_trip"]).data if queue["active_trip"] else None,
            "queued_count": queue["queued_count"],
            "queued_trips": TripSerializer(queue["queued_trips"], many=True).data,
        })
