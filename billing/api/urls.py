# billing/api/urls.py

from django.urls import path
from . import views

app_name = "billing"

urlpatterns = [
    # Checkout
    path("purchase/<str:slug>/init/", views.InitPurchaseView.as_view(), name="init-purchase"),
    path("client-key/", views.ClientKeyView.as_view(), name="client-key"),
    path("payments/", views.CreatePaymentView.as_view(), name="create-payment"),
    path("payments/success/", views.PaymentSuccessView.as_view(), name="payment-success"),

    # Orders
    path("orders/", views.OrderListView.as_view(), name="orders"),
    path("orders/<uuid:order_id>/", views.OrderDetailView.as_view(), name="order-detail"),
    path("orders/<uuid:order_id>/status/", views.OrderStatusView.as_view(), name="order-status"),

    # Enrollments
    path("enrollments/", views.EnrollmentListView.as_view(), name="enrollments"),
    path("enrollments/active/", views.ActiveEnrollmentListView.as_view(), name="active-enrollments"),
    path("enrollments/check/<uuid:program_id>/", views.EnrollmentCheckView.as_view(), name="enrollment-check"),
]
