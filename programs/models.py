# programs/models.py

import uuid
from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils.text import slugify


class Program(models.Model):
    """
    Training program created by a coach and sold to members.

    access_period_days = None means lifetime access after purchase.
    """

    class Type(models.TextChoices):
        SINGLE = 'SINGLE', 'Single purchase'
        SUBSCRIPTION = 'SUBSCRIPTION', 'Subscription'

    class Difficulty(models.TextChoices):
        BEGINNER = 'BEGINNER', 'Beginner'
        INTERMEDIATE = 'INTERMEDIATE', 'Intermediate'
        ADVANCED = 'ADVANCED', 'Advanced'

    class Meta:
        db_table = 'programs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['coach', 'created_at']),
            models.Index(fields=['is_public', 'is_for_sale']),
        ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    coach = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='coach_programs'
    )

    # Program details
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=280, unique=True, blank=True, allow_unicode=True)
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.SINGLE)
    description = models.TextField(blank=True, null=True)

    # Visibility & sale
    is_public = models.BooleanField(default=False)
    is_for_sale = models.BooleanField(default=False)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=0,
        default=0,
        validators=[MinValueValidator(0)]
    )
    access_period_days = models.PositiveIntegerField(
        null=True, blank=True,
        help_text="Days of access after purchase; empty means lifetime"
    )

    # Structure
    difficulty = models.CharField(max_length=20, choices=Difficulty.choices, blank=True, null=True)
    duration_weeks = models.PositiveIntegerField(
        null=True, blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(104)]
    )
    days_per_week = models.PositiveIntegerField(
        null=True, blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(7)]
    )
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)

    # Media & curriculum overview
    main_image_list = models.JSONField(default=list, blank=True)
    program_image = models.URLField(max_length=500, blank=True, null=True)
    curriculum = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.title} by {self.coach}"

    def save(self, *args, **kwargs):
        if not self.slug:
            base_slug = slugify(self.title, allow_unicode=True)
            suffix = str(self.id)[:8]
            self.slug = f"{base_slug}-{suffix}" if base_slug else suffix
        super().save(*args, **kwargs)


# ============================================================
# WORKOUT LIBRARY & ROUTINE BLOCKS
# ============================================================

class WorkoutLibrary(models.Model):
    """Exercise catalog entry. coach is NULL for system exercises."""

    class WorkoutType(models.TextChoices):
        WEIGHT_REPS = 'WEIGHT_REPS', 'Weight & reps'
        TIME = 'TIME', 'Time'
        DURATION = 'DURATION', 'Duration'
        DISTANCE = 'DISTANCE', 'Distance'

    class Meta:
        db_table = 'workout_library'
        ordering = ['-created_at', '-updated_at']
        verbose_name_plural = 'Workout library'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    coach = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True, blank=True,
        related_name='library_workouts'
    )
    title = models.CharField(max_length=255)
    category = models.CharField(max_length=100, blank=True, null=True)
    workout_type = models.CharField(
        max_length=20,
        choices=WorkoutType.choices,
        default=WorkoutType.WEIGHT_REPS
    )
    video_url = models.URLField(max_length=500, blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    is_system = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title


class RoutineBlock(models.Model):
    """Reusable named set of exercises with a workout format."""

    class WorkoutFormat(models.TextChoices):
        FOR_TIME = 'FOR_TIME', 'For time'
        AMRAP = 'AMRAP', 'AMRAP'
        EMOM = 'EMOM', 'EMOM'
        TABATA = 'TABATA', 'Tabata'
        STRENGTH = 'STRENGTH', 'Strength'
        CUSTOM = 'CUSTOM', 'Custom'

    class Meta:
        db_table = 'routine_blocks'
        ordering = ['-created_at']

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    coach = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='routine_blocks'
    )
    name = models.CharField(max_length=255)
    workout_format = models.CharField(
        max_length=20,
        choices=WorkoutFormat.choices,
        default=WorkoutFormat.CUSTOM
    )
    target_value = models.CharField(max_length=100, blank=True, null=True)
    is_leaderboard_enabled = models.BooleanField(default=False)
    description = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.workout_format})"


class RoutineItem(models.Model):
    """Exercise slot inside a routine block."""

    class Meta:
        db_table = 'routine_items'
        ordering = ['order_index']

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    block = models.ForeignKey(RoutineBlock, on_delete=models.CASCADE, related_name='items')
    library = models.ForeignKey(WorkoutLibrary, on_delete=models.CASCADE, related_name='routine_items')
    order_index = models.PositiveIntegerField(default=0)
    recommendation = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.block.name} #{self.order_index}: {self.library.title}"


# ============================================================
# CURRICULUM: BLUEPRINTS & SECTIONS
# ============================================================

class ProgramBlueprint(models.Model):
    """One day of the curriculum plan, addressed by (phase, day)."""

    class Meta:
        db_table = 'program_blueprints'
        ordering = ['phase_number', 'day_number']
        constraints = [
            models.UniqueConstraint(
                fields=['program', 'phase_number', 'day_number'],
                name='unique_program_phase_day'
            )
        ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name='blueprints')
    phase_number = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    day_number = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    day_title = models.CharField(max_length=255, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.program.title} P{self.phase_number}-D{self.day_number}"

    @property
    def label(self):
        return f"P{self.phase_number}-D{self.day_number}"


class BlueprintRoutineBlock(models.Model):
    class Meta:
        db_table = 'blueprint_routine_blocks'
        ordering = ['order_index']

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    blueprint = models.ForeignKey(ProgramBlueprint, on_delete=models.CASCADE, related_name='routine_links')
    routine_block = models.ForeignKey(RoutineBlock, on_delete=models.CASCADE, related_name='blueprint_links')
    order_index = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)


class BlueprintSection(models.Model):
    """Content unit (HTML) that members read and optionally record against."""

    class RecordType(models.TextChoices):
        TIME_BASED = 'TIME_BASED', 'Time based'
        WEIGHT_BASED = 'WEIGHT_BASED', 'Weight based'
        REP_BASED = 'REP_BASED', 'Rep based'
        DISTANCE_BASED = 'DISTANCE_BASED', 'Distance based'
        SURVEY = 'SURVEY', 'Survey'
        CHECKLIST = 'CHECKLIST', 'Checklist'
        PHOTO = 'PHOTO', 'Photo'
        OTHER = 'OTHER', 'Other'

    class Meta:
        db_table = 'blueprint_sections'
        ordering = ['-created_at']

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    content = models.TextField(blank=True, null=True)
    record_type = models.CharField(
        max_length=20,
        choices=RecordType.choices,
        default=RecordType.OTHER
    )
    is_recordable = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title


class BlueprintSectionItem(models.Model):
    """Ordered placement of a section on a blueprint day."""

    class Meta:
        db_table = 'blueprint_section_items'
        ordering = ['order_index']
        indexes = [
            models.Index(fields=['blueprint', 'order_index']),
        ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    blueprint = models.ForeignKey(ProgramBlueprint, on_delete=models.CASCADE, related_name='section_items')
    section = models.ForeignKey(BlueprintSection, on_delete=models.CASCADE, related_name='items')
    order_index = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.blueprint} #{self.order_index}: {self.section.title}"
