# members/api/serializers.py

from rest_framework import serializers

from billing.models import Enrollment


class EnrollmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Enrollment.Status.choices)


class EnrollmentExtendSerializer(serializers.Serializer):
    end_date = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class EnrollmentDatesSerializer(serializers.Serializer):
    """Either date may be sent; null clears it."""
    start_date = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    end_date = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        if "start_date" not in attrs and "end_date" not in attrs:
            raise serializers.ValidationError("start_date or end_date is required.")
        return attrs


class ManagedEnrollmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Enrollment
        fields = ["id", "user", "program", "status", "start_date", "end_date", "updated_at"]
        read_only_fields = fields
