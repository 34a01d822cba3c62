from django.urls import path

from . import views

app_name = "fuel"

urlpatterns = [
    path("generate-qr/", views.GenerateQRView.as_view(), name="generate_qr"),
    path("validate-qr/", views.ValidateQRView.as_view(), name="validate_qr"),
    path("submit/", views.SubmitView.as_view(), name="submit"),
    path("transactions/", views.TransactionListView.as_view(), name="transactions"),
    path("transactions/<int:pk>/", views.TransactionDetailView.as_view(), name="transaction_detail"),
    path("transactions/<int:pk>/confirm/", views.ConfirmView.as_view(), name="confirm"),
    path("transactions/<int:pk>/cancel/", views.CancelView.as_view(), name="cancel"),
    path("transactions/<int:pk>/receipt/", views.ReceiptUploadView.as_view(), name="receipt_upload"),
    path("transactions/<int:pk>/receipt/view/", views.ReceiptView.as_view(), name="receipt"),
    path("fraud/alerts/", views.FraudAlertListView.as_view(), name="fraud_alerts"),
    path("fraud/statistics/", views.FraudStatisticsView.as_view(), name="fraud_statistics"),
    path("fraud/<int:pk>/flag/", views.FlagView.as_view(), name="flag"),
    path("fraud/<int:pk>/resolve/", views.ResolveView.as_view(), name="resolve"),
]
