# progress/api/serializers.py

from rest_framework import serializers

from programs.models import ProgramBlueprint, WorkoutLibrary
from progress.models import SectionRecord, WorkoutLog


class WorkoutLogSerializer(serializers.ModelSerializer):
    library = serializers.PrimaryKeyRelatedField(queryset=WorkoutLibrary.objects.all())
    blueprint = serializers.PrimaryKeyRelatedField(
        queryset=ProgramBlueprint.objects.all(), required=False, allow_null=True
    )
    library_title = serializers.CharField(source="library.title", read_only=True)

    class Meta:
        model = WorkoutLog
        fields = [
            "id", "user", "library", "library_title", "blueprint", "log_date",
            "content", "intensity", "max_weight", "total_volume", "total_duration",
            "coach_comment", "is_checked_by_coach", "created_at", "updated_at",
        ]
        read_only_fields = [
            "id", "user", "coach_comment", "is_checked_by_coach", "created_at", "updated_at",
        ]

    def validate_content(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("content must be an object.")
        return value


class CoachCommentSerializer(serializers.Serializer):
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")


class SectionRecordSerializer(serializers.ModelSerializer):
    section_title = serializers.CharField(source="section.title", read_only=True)
    user_name = serializers.CharField(source="user.full_name", read_only=True)

    class Meta:
        model = SectionRecord
        fields = [
            "id", "user", "user_name", "section", "section_title", "section_item",
            "content", "completed_at", "coach_comment", "created_at", "updated_at",
        ]
        read_only_fields = fields


class SectionRecordSubmitSerializer(serializers.Serializer):
    section_item_id = serializers.UUIDField()
    content = serializers.JSONField()

    def validate_content(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("content must be an object.")
        return value


class SectionRecordUpdateSerializer(serializers.Serializer):
    content = serializers.JSONField()
