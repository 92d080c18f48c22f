from django.apps import AppConfig


class CoachProfilesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "coach_profiles"
    verbose_name = "Coach Profiles"
