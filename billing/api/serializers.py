# billing/api/serializers.py

from rest_framework import serializers

from billing.models import Enrollment, Order


class CreatePaymentSerializer(serializers.Serializer):
    program_slug = serializers.CharField(max_length=280)
    payment_key = serializers.CharField(max_length=200)
    amount = serializers.CharField(max_length=20)
    order_id = serializers.UUIDField(required=False, allow_null=True)


class PaymentSuccessSerializer(serializers.Serializer):
    program_slug = serializers.CharField(max_length=280)
    payment_key = serializers.CharField(max_length=200)
    order_id = serializers.CharField(max_length=64, help_text="Gateway order id")
    amount = serializers.CharField(max_length=20)


class OrderCreateSerializer(serializers.Serializer):
    program_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=0, min_value=0)


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)


class OrderSerializer(serializers.ModelSerializer):
    program_title = serializers.CharField(source="program.title", read_only=True)
    program_slug = serializers.CharField(source="program.slug", read_only=True)
    coach_name = serializers.CharField(source="coach.full_name", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id", "buyer", "program", "program_title", "program_slug",
            "coach", "coach_name", "amount", "status", "payment_key",
            "created_at", "updated_at",
        ]
        read_only_fields = fields


class EnrollmentSerializer(serializers.ModelSerializer):
    program_title = serializers.CharField(source="program.title", read_only=True)
    program_slug = serializers.CharField(source="program.slug", read_only=True)
    has_access = serializers.BooleanField(read_only=True)

    class Meta:
        model = Enrollment
        fields = [
            "id", "user", "program", "program_title", "program_slug", "order",
            "start_date", "end_date", "status", "has_access",
            "created_at", "updated_at",
        ]
        read_only_fields = fields
