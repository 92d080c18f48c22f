# programs/admin.py

from django.contrib import admin
from django.db.models import Count

from .models import (
    Program,
    WorkoutLibrary,
    RoutineBlock,
    RoutineItem,
    ProgramBlueprint,
    BlueprintRoutineBlock,
    BlueprintSection,
    BlueprintSectionItem,
)


@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    list_display = [
        'title',
        'coach',
        'type',
        'difficulty',
        'price',
        'is_public',
        'is_for_sale',
        'day_count',
        'created_at',
    ]
    list_filter = ['type', 'difficulty', 'is_public', 'is_for_sale', 'created_at']
    search_fields = ['title', 'slug', 'coach__email', 'coach__full_name']
    readonly_fields = ['id', 'slug', 'created_at', 'updated_at']
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Info', {
            'fields': ('id', 'coach', 'title', 'slug', 'type', 'description')
        }),
        ('Sale', {
            'fields': ('is_public', 'is_for_sale', 'price', 'access_period_days')
        }),
        ('Structure', {
            'fields': ('difficulty', 'duration_weeks', 'days_per_week', 'start_date', 'end_date')
        }),
        ('Media & Curriculum', {
            'fields': ('main_image_list', 'program_image', 'curriculum'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('coach').annotate(
            _day_count=Count('blueprints')
        )

    def day_count(self, obj):
        return obj._day_count
    day_count.short_description = 'Days'
    day_count.admin_order_field = '_day_count'


@admin.register(WorkoutLibrary)
class WorkoutLibraryAdmin(admin.ModelAdmin):
    list_display = ['title', 'category', 'workout_type', 'is_system', 'coach', 'created_at']
    list_filter = ['workout_type', 'is_system', 'category']
    search_fields = ['title', 'category', 'description']
    readonly_fields = ['id', 'created_at', 'updated_at']


class RoutineItemInline(admin.TabularInline):
    model = RoutineItem
    extra = 0
    fields = ['order_index', 'library', 'recommendation']
    autocomplete_fields = ['library']


@admin.register(RoutineBlock)
class RoutineBlockAdmin(admin.ModelAdmin):
    list_display = ['name', 'coach', 'workout_format', 'is_leaderboard_enabled', 'created_at']
    list_filter = ['workout_format', 'is_leaderboard_enabled']
    search_fields = ['name', 'coach__email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    inlines = [RoutineItemInline]


class BlueprintSectionItemInline(admin.TabularInline):
    model = BlueprintSectionItem
    extra = 0
    fields = ['order_index', 'section']


class BlueprintRoutineBlockInline(admin.TabularInline):
    model = BlueprintRoutineBlock
    extra = 0
    fields = ['order_index', 'routine_block']


@admin.register(ProgramBlueprint)
class ProgramBlueprintAdmin(admin.ModelAdmin):
    list_display = ['program', 'phase_number', 'day_number', 'day_title']
    list_filter = ['phase_number']
    search_fields = ['program__title', 'day_title']
    ordering = ['program', 'phase_number', 'day_number']
    inlines = [BlueprintSectionItemInline, BlueprintRoutineBlockInline]


@admin.register(BlueprintSection)
class BlueprintSectionAdmin(admin.ModelAdmin):
    list_display = ['title', 'record_type', 'is_recordable', 'created_at']
    list_filter = ['record_type', 'is_recordable']
    search_fields = ['title']
    readonly_fields = ['id', 'created_at', 'updated_at']
