import uuid

from django.db import models
from django.conf import settings

User = settings.AUTH_USER_MODEL

SNS_KEYS = ("instagram", "youtube", "blog")


class CoachProfile(models.Model):
    """
    Public-facing coach profile.
    contact_number is only shown to the owner.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name="coach_profile",
    )
    profile_image_url = models.URLField(max_length=500, blank=True, null=True)
    representative_image = models.URLField(max_length=500, blank=True, null=True)
    nickname = models.CharField(max_length=50, blank=True, null=True)
    introduction = models.CharField(max_length=200, blank=True, null=True)
    experience = models.TextField(blank=True, null=True)
    certifications = models.JSONField(default=list, blank=True)
    contact_number = models.CharField(max_length=20, blank=True, null=True)
    sns_links = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "coach_profile"
        verbose_name = "Coach Profile"
        verbose_name_plural = "Coach Profiles"

    def __str__(self):
        return self.nickname or f"Coach {self.account_id}"
