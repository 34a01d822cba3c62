# fuel/views.py
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from account.actors import actor_for_user
from account.permissions import IsAdmin, IsDriver, IsPumpStaff
from fuel import selectors
from fuel.serializers import (
    CancelSerializer,
    ConfirmSerializer,
    FlagSerializer,
    FraudFilterSerializer,
    FuelTransactionSerializer,
    GenerateQRSerializer,
    QRCodeSerializer,
    ReceiptSerializer,
    ResolveSerializer,
    SubmitSerializer,
)
from fuel.services import fraud, review
from fuel.services import transactions as tx_service


class GenerateQRView(APIView):
    permission_classes = [IsDriver]

    def post(self, request):
        actor = actor_for_user(request.user)
        ser = GenerateQRSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        issued = tx_service.generate_qr(actor, **ser.validated_data)
        return Response(
            {
                "success": True,
                "transaction": FuelTransactionSerializer(issued.transaction).data,
                "qr_code": issued.qr_code,
                "qr_image": issued.qr_image,
            },
            status=status.HTTP_201_CREATED,
        )


class ValidateQRView(APIView):
    permission_classes = [IsPumpStaff]

    def post(self, request):
        actor = actor_for_user(request.user)
        ser = QRCodeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        tx = tx_service.validate_qr(actor, qr_code=ser.validated_data["qr_code"])
        return Response({"success": True, "transaction": FuelTransactionSerializer(tx).data})


class SubmitView(APIView):
    permission_classes = [IsPumpStaff]

    def post(self, request):
        actor = actor_for_user(request.user)
        ser = SubmitSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        tx = tx_service.submit_transaction(actor, **ser.validated_data)
        return Response({
            "success": True,
            "transaction": FuelTransactionSerializer(tx).data,
            "fraud_detected": tx.has_fraud_flags,
        })


class TransactionListView(APIView):
    def get(self, request):
        actor = actor_for_user(request.user)
        params = request.query_params
        qs = selectors.filter_transactions(
            selectors.transactions_for(actor),
            status=params.get("status"),
            vehicle_number=params.get("vehicle_number"),
            start_date=params.get("start_date"),
            end_date=params.get("end_date"),
        )
        return Response({"success": True, "transactions": FuelTransactionSerializer(qs, many=True).data})


class TransactionDetailView(APIView):
    def get(self, request, pk):
        actor = actor_for_user(request.user)
        tx = selectors.get_transaction_for(actor, pk)
        return Response({"success": True, "transaction": FuelTransactionSerializer(tx).data})


class ConfirmView(APIView):
    permission_classes = [IsDriver]

    def post(self, request, pk):
        actor = actor_for_user(request.user)
        tx = selectors.get_transaction_for(actor, pk)
        ser = ConfirmSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        tx = tx_service.confirm_transaction(tx, actor, amount=ser.validated_data.get("amount"))
        return Response({"success": True, "transaction": FuelTransactionSerializer(tx).data})


class CancelView(APIView):
    def post(self, request, pk):
        actor = actor_for_user(request.user)
        tx = selectors.get_transaction_for(actor, pk)
        ser = CancelSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        tx = tx_service.cancel_transaction(tx, actor, reason=ser.validated_data["reason"])
        return Response({"success": True, "transaction": FuelTransactionSerializer(tx).data})


class ReceiptUploadView(APIView):
    permission_classes = [IsDriver]

    def post(self, request, pk):
        actor = actor_for_user(request.user)
        tx = selectors.get_transaction_for(actor, pk)
        ser = ReceiptSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        tx = tx_service.upload_receipt(tx, actor, photo=ser.validated_data["photo"])
        return Response({
            "success": True,
            "transaction": FuelTransactionSerializer(tx).data,
            "fraud_detected": tx.has_fraud_flags,
        })


class ReceiptView(APIView):
    def get(self, request, pk):
        actor = actor_for_user(request.user)
        tx = selectors.get_transaction_for(actor, pk)
        return Response({"success": True, "receipt": selectors.receipt_view(tx)})


class FraudAlertListView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        ser = FraudFilterSerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)
        if "resolved" in data:
            data["resolved"] = data["resolved"] == "true"
        qs = fraud.alerts_queryset(**data)
        return Response({"success": True, "alerts": FuelTransactionSerializer(qs, many=True).data})


class FraudStatisticsView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        ser = FraudFilterSerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        stats = fraud.fraud_statistics(
            start_date=ser.validated_data.get("start_date"),
            end_date=ser.validated_data.get("end_date"),
        )
        return Response({"success": True, "statistics": stats})


class FlagView(APIView):
    permission_classes = [IsAdmin]

    def post(self, request, pk):
        actor = actor_for_user(request.user)
        tx = selectors.get_transaction_for(actor, pk)
        ser = FlagSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        tx = review.flag_transaction(tx, actor, **ser.validated_data)
        return Response({"success": True, "transaction": FuelTransactionSerializer(tx).data})


class ResolveView(APIView):
    permission_classes = [IsAdmin]

    def post(self, request, pk):
        actor = actor_for_user(request.user)
        tx = selectors.get_transaction_for(actor, pk)
        ser = ResolveSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        tx = review.resolve_fraud_alert(tx, actor, **ser.validated_data)
        return Response({"success": True, "transaction": FuelTransactionSerializer(tx).data})
