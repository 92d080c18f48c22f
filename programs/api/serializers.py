# programs/api/serializers.py

"""
PROGRAM SERIALIZERS

Coach-facing (write) and public (read) representations, plus
input serializers for curriculum and routine block endpoints.
"""

from rest_framework import serializers
from programs.models import (
    Program,
    BlueprintSection,
    RoutineBlock,
    WorkoutLibrary,
)


class ProgramSerializer(serializers.ModelSerializer):
    """Coach-side read/write serializer."""

    class Meta:
        model = Program
        fields = [
            'id', 'coach', 'title', 'slug', 'type', 'description',
            'is_public', 'is_for_sale', 'price', 'access_period_days',
            'difficulty', 'duration_weeks', 'days_per_week',
            'start_date', 'end_date',
            'main_image_list', 'program_image', 'curriculum',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'coach', 'created_at', 'updated_at']
        extra_kwargs = {'slug': {'required': False}}

    def validate_curriculum(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("curriculum must be a list.")
        for entry in value:
            if not isinstance(entry, dict) or not entry.get('title'):
                raise serializers.ValidationError("Each curriculum entry needs a title.")
            if set(entry) - {'title', 'description'}:
                raise serializers.ValidationError("Curriculum entries accept only title and description.")
        return value

    def validate_main_image_list(self, value):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise serializers.ValidationError("main_image_list must be a list of URLs.")
        return value

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': "End date must be on or after start date."})
        return attrs


class ProgramPublicSerializer(serializers.ModelSerializer):
    coach_name = serializers.CharField(source='coach.full_name', read_only=True)

    class Meta:
        model = Program
        fields = [
            'id', 'title', 'slug', 'type', 'description', 'coach', 'coach_name',
            'is_for_sale', 'price', 'access_period_days',
            'difficulty', 'duration_weeks', 'days_per_week',
            'main_image_list', 'program_image', 'curriculum',
        ]


# ============================================================
# CURRICULUM INPUT
# ============================================================

class BlueprintCreateSerializer(serializers.Serializer):
    phase_number = serializers.IntegerField(min_value=1)
    day_number = serializers.IntegerField(min_value=1)
    day_title = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class BlueprintUpdateSerializer(serializers.Serializer):
    day_title = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class PhaseCreateSerializer(serializers.Serializer):
    phase_number = serializers.IntegerField(min_value=1)
    day_count = serializers.IntegerField(min_value=1, max_value=31)


class SectionSerializer(serializers.ModelSerializer):
    order_index = serializers.IntegerField(min_value=0, required=False, write_only=True)

    class Meta:
        model = BlueprintSection
        fields = ['id', 'title', 'content', 'record_type', 'is_recordable', 'order_index',
                  'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class OrderEntrySerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    order_index = serializers.IntegerField(min_value=0)


class RoutineLinkSerializer(serializers.Serializer):
    routine_block_id = serializers.UUIDField()


# ============================================================
# LIBRARY & ROUTINE BLOCKS
# ============================================================

class WorkoutLibrarySerializer(serializers.ModelSerializer):
    class Meta:
        model = WorkoutLibrary
        fields = ['id', 'coach', 'title', 'category', 'workout_type', 'video_url',
                  'description', 'is_system', 'created_at', 'updated_at']
        read_only_fields = ['id', 'coach', 'is_system', 'created_at', 'updated_at']


class RoutineBlockSerializer(serializers.ModelSerializer):
    class Meta:
        model = RoutineBlock
        fields = ['id', 'name', 'workout_format', 'target_value', 'is_leaderboard_enabled',
                  'description', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class RoutineItemCreateSerializer(serializers.Serializer):
    library_id = serializers.UUIDField()
    recommendation = serializers.DictField(required=False, default=dict)


class RoutineItemUpdateSerializer(serializers.Serializer):
    recommendation = serializers.DictField()


class RoutineItemOrderSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    order_index = serializers.IntegerField(min_value=0)
