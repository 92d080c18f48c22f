# progress/admin.py

from django.contrib import admin

from .models import WorkoutLog, SectionRecord


@admin.register(WorkoutLog)
class WorkoutLogAdmin(admin.ModelAdmin):
    list_display = [
        'user', 'library', 'blueprint', 'log_date', 'intensity',
        'max_weight', 'total_volume', 'total_duration', 'is_checked_by_coach',
    ]
    list_filter = ['intensity', 'is_checked_by_coach', 'log_date']
    search_fields = ['user__email', 'user__full_name', 'library__title']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['user', 'library', 'blueprint']


@admin.register(SectionRecord)
class SectionRecordAdmin(admin.ModelAdmin):
    list_display = ['user', 'section', 'completed_at', 'has_comment']
    list_filter = ['completed_at']
    search_fields = ['user__email', 'section__title']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['user', 'user_profile', 'section', 'section_item']

    def has_comment(self, obj):
        return bool(obj.coach_comment)
    has_comment.boolean = True
    has_comment.short_description = 'Commented'
