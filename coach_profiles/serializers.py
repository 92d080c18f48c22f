from rest_framework import serializers
from .models import CoachProfile, SNS_KEYS


class CoachProfilePublicSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source="account.full_name", read_only=True)

    class Meta:
        model = CoachProfile
        fields = [
            "id",
            "account",
            "full_name",
            "nickname",
            "profile_image_url",
            "representative_image",
            "introduction",
            "experience",
            "certifications",
            "sns_links",
        ]


class CoachProfilePrivateSerializer(serializers.ModelSerializer):
    """Owner view and write serializer."""

    class Meta:
        model = CoachProfile
        fields = [
            "id",
            "account",
            "nickname",
            "profile_image_url",
            "representative_image",
            "introduction",
            "experience",
            "certifications",
            "contact_number",
            "sns_links",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "account", "created_at", "updated_at"]

    def validate_introduction(self, value):
        if value and len(value) > 200:
            raise serializers.ValidationError("Introduction must be 200 characters or fewer.")
        return value

    def validate_certifications(self, value):
        if not isinstance(value, list) or not all(isinstance(c, str) for c in value):
            raise serializers.ValidationError("certifications must be a list of strings.")
        return [c.strip() for c in value if c.strip()]

    def validate_sns_links(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("sns_links must be an object.")
        unknown = set(value) - set(SNS_KEYS)
        if unknown:
            raise serializers.ValidationError(
                f"Unsupported links: {', '.join(sorted(unknown))}. Allowed: {', '.join(SNS_KEYS)}"
            )
        return {k: v for k, v in value.items() if v}
