"""
API Serializers for authentication and accounts.
"""
from rest_framework import serializers
from users.models import User, UserProfile


class SignUpSerializer(serializers.Serializer):
    """Serializer for email sign-up."""

    email = serializers.EmailField()
    password = serializers.CharField(min_length=8, max_length=100, write_only=True)
    confirm_password = serializers.CharField(write_only=True)
    full_name = serializers.CharField(min_length=2, max_length=50)
    avatar_url = serializers.URLField(required=False, allow_blank=True, allow_null=True)
    role = serializers.ChoiceField(
        choices=[User.Role.USER, User.Role.COACH],
        default=User.Role.USER,
    )

    def validate_full_name(self, value):
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError("Name must be at least 2 characters.")
        return value

    def validate(self, attrs):
        if attrs["password"] != attrs["confirm_password"]:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match."})
        return attrs


class SignInSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class SignOutSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    provider_access_token = serializers.CharField(required=False, allow_blank=True)


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()


class PasswordResetSerializer(serializers.Serializer):
    """Reset with the recovery token delivered by the provider's email link."""

    access_token = serializers.CharField()
    password = serializers.CharField(min_length=8, max_length=100, write_only=True)
    confirm_password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        if attrs["password"] != attrs["confirm_password"]:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match."})
        return attrs


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(min_length=8, max_length=100, write_only=True)

    def validate(self, attrs):
        if attrs["current_password"] == attrs["new_password"]:
            raise serializers.ValidationError(
                {"new_password": "New password must differ from the current one."}
            )
        return attrs


class AccountSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "full_name", "role", "avatar_url", "created_at"]
        read_only_fields = fields


class AccountUpdateSerializer(serializers.Serializer):
    full_name = serializers.CharField(min_length=2, max_length=50)
    avatar_url = serializers.URLField(required=False, allow_blank=True, allow_null=True)


class UserProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserProfile
        fields = [
            "id",
            "nickname",
            "bio",
            "profile_image_url",
            "phone_number",
            "fitness_goals",
            "fitness_level",
            "onboarding_completed",
            "onboarding_data",
            "onboarding_completed_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "onboarding_completed",
            "onboarding_completed_at",
            "updated_at",
        ]

    def validate_fitness_goals(self, value):
        if not isinstance(value, list) or not all(isinstance(g, str) for g in value):
            raise serializers.ValidationError("fitness_goals must be a list of strings.")
        return [g.strip() for g in value if g.strip()]


class OnboardingSerializer(serializers.Serializer):
    ONBOARDING_KEYS = ("gender", "currentWorkoutType", "workoutExperience")

    fitness_level = serializers.ChoiceField(choices=UserProfile.FitnessLevel.choices)
    fitness_goals = serializers.ListField(child=serializers.CharField(max_length=100), default=list)
    onboarding_data = serializers.DictField(default=dict)

    def validate_onboarding_data(self, value):
        unknown = set(value) - set(self.ONBOARDING_KEYS)
        if unknown:
            raise serializers.ValidationError(f"Unknown keys: {', '.join(sorted(unknown))}")
        return value
