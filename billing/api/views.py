# billing/api/views.py

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny

from core.exceptions import PaymentApprovalFailed, ResourceNotFound
from programs.models import Program
from billing.services import enrollment_service, order_service
from billing.services.payment_service import PaymentService
from .serializers import (
    CreatePaymentSerializer,
    PaymentSuccessSerializer,
    OrderCreateSerializer,
    OrderStatusSerializer,
    OrderSerializer,
    EnrollmentSerializer,
)

logger = logging.getLogger(__name__)


# ============================================================
# CHECKOUT
# ============================================================

class InitPurchaseView(APIView):
    """Checkout bootstrap. Anonymous callers get a sign-in redirect."""
    permission_classes = [AllowAny]

    @extend_schema(tags=["Billing"])
    def get(self, request, slug):
        return Response(PaymentService().init_purchase(request.user, slug))


class ClientKeyView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(tags=["Billing"])
    def get(self, request):
        return Response(PaymentService().get_client_key())


class CreatePaymentView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Billing"], request=CreatePaymentSerializer)
    def post(self, request):
        serializer = CreatePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        # A declined order stays CANCELLED, so the request transaction must commit.
        try:
            result = PaymentService().create_payment(
                request.user,
                program_slug=data["program_slug"],
                payment_key=data["payment_key"],
                amount=data["amount"],
                order_id=data.get("order_id"),
            )
        except PaymentApprovalFailed as e:
            return Response(
                {"success": False, "message": str(e.detail), "error_code": e.default_code},
                status=e.status_code,
            )
        return Response(result, status=status.HTTP_201_CREATED)


class PaymentSuccessView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Billing"], request=PaymentSuccessSerializer)
    def post(self, request):
        serializer = PaymentSuccessSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = PaymentService().process_payment_success(
            request.user,
            payment_key=data["payment_key"],
            gateway_order_id=data["order_id"],
            amount=data["amount"],
            program_slug=data["program_slug"],
        )
        return Response(result, status=status.HTTP_201_CREATED)


# ============================================================
# ORDERS
# ============================================================

class OrderListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Orders"], responses=OrderSerializer(many=True))
    def get(self, request):
        orders = order_service.get_my_orders(request.user)
        return Response({"success": True, "data": OrderSerializer(orders, many=True).data})

    @extend_schema(tags=["Orders"], request=OrderCreateSerializer, responses=OrderSerializer)
    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        program = Program.objects.filter(id=serializer.validated_data["program_id"]).first()
        if program is None:
            raise ResourceNotFound("Program not found.")

        order = order_service.create_order(request.user, program, serializer.validated_data["amount"])
        return Response(
            {"success": True, "data": OrderSerializer(order).data},
            status=status.HTTP_201_CREATED,
        )


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Orders"], responses=OrderSerializer)
    def get(self, request, order_id):
        order = order_service.get_order_detail(request.user, order_id)
        return Response({"success": True, "data": OrderSerializer(order).data})


class OrderStatusView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Orders"], request=OrderStatusSerializer, responses=OrderSerializer)
    def patch(self, request, order_id):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = order_service.update_order_status(request.user, order_id, serializer.validated_data["status"])
        return Response({"success": True, "data": OrderSerializer(order).data})


# ============================================================
# ENROLLMENTS
# ============================================================

class EnrollmentListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Enrollments"], responses=EnrollmentSerializer(many=True))
    def get(self, request):
        enrollments = enrollment_service.get_enrollments(request.user)
        return Response({"success": True, "data": EnrollmentSerializer(enrollments, many=True).data})


class ActiveEnrollmentListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Enrollments"], responses=EnrollmentSerializer(many=True))
    def get(self, request):
        enrollments = enrollment_service.get_active_enrollments(request.user)
        return Response({"success": True, "data": EnrollmentSerializer(enrollments, many=True).data})


class EnrollmentCheckView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Enrollments"])
    def get(self, request, program_id):
        program = Program.objects.filter(id=program_id).first()
        if program is None:
            raise ResourceNotFound("Program not found.")

        return Response({
            "success": True,
            "data": {"enrolled": enrollment_service.check_enrollment(request.user, program)},
        })
