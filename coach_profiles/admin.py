from django.contrib import admin
from .models import CoachProfile


@admin.register(CoachProfile)
class CoachProfileAdmin(admin.ModelAdmin):
    list_display = ("account", "nickname", "contact_number", "updated_at")
    search_fields = ("account__email", "account__full_name", "nickname")
    raw_id_fields = ("account",)
    readonly_fields = ("created_at", "updated_at")
