from django.contrib import admin
from .models import User, UserProfile


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "email",
        "full_name",
        "role",
        "is_active",
        "created_at",
    )
    search_fields = ("email", "full_name")
    list_filter = ("role", "is_active", "is_staff")
    readonly_fields = ("id", "created_at", "last_login")
    ordering = ("-created_at",)
    exclude = ("password",)


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("account", "nickname", "fitness_level", "onboarding_completed")
    search_fields = ("account__email", "nickname")
    list_filter = ("fitness_level", "onboarding_completed")
    raw_id_fields = ("account",)
