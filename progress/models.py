# progress/models.py

import uuid
from django.db import models
from django.conf import settings
from django.utils import timezone


class WorkoutLog(models.Model):
    """
    A member's record of one exercise on one date.

    blueprint is set when the log is homework for a program day.
    total_duration is in seconds.
    """

    class Intensity(models.TextChoices):
        LOW = 'LOW', 'Low'
        MEDIUM = 'MEDIUM', 'Medium'
        HIGH = 'HIGH', 'High'

    class Meta:
        db_table = 'workout_logs'
        ordering = ['-log_date', '-created_at']
        indexes = [
            models.Index(fields=['user', 'log_date']),
            models.Index(fields=['blueprint', 'is_checked_by_coach']),
            models.Index(fields=['library', 'log_date']),
        ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='workout_logs'
    )
    library = models.ForeignKey(
        'programs.WorkoutLibrary',
        on_delete=models.CASCADE,
        related_name='workout_logs'
    )
    blueprint = models.ForeignKey(
        'programs.ProgramBlueprint',
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='workout_logs'
    )

    log_date = models.DateTimeField(default=timezone.now)
    content = models.JSONField(default=dict, blank=True)
    intensity = models.CharField(max_length=10, choices=Intensity.choices, null=True, blank=True)

    # Performance metrics
    max_weight = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    total_volume = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    total_duration = models.PositiveIntegerField(null=True, blank=True)

    # Coach feedback
    coach_comment = models.TextField(blank=True, null=True)
    is_checked_by_coach = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user} - {self.library.title} @ {self.log_date:%Y-%m-%d}"


class SectionRecord(models.Model):
    """A member's submission against a recordable blueprint section."""

    class Meta:
        db_table = 'section_records'
        ordering = ['-completed_at']
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'section_item'],
                name='unique_user_section_item_record'
            )
        ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='section_records'
    )
    user_profile = models.ForeignKey(
        'users.UserProfile',
        on_delete=models.CASCADE,
        related_name='section_records'
    )
    section = models.ForeignKey(
        'programs.BlueprintSection',
        on_delete=models.CASCADE,
        related_name='records'
    )
    section_item = models.ForeignKey(
        'programs.BlueprintSectionItem',
        on_delete=models.CASCADE,
        related_name='records'
    )

    content = models.JSONField(default=dict, blank=True)
    completed_at = models.DateTimeField(default=timezone.now)
    coach_comment = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user} - {self.section.title}"
