# progress/api/urls.py

from django.urls import path
from . import views

app_name = "progress"

urlpatterns = [
    # Workout logs
    path("workout-logs/", views.WorkoutLogListView.as_view(), name="workout-logs"),
    path("workout-logs/<uuid:log_id>/", views.WorkoutLogDetailView.as_view(), name="workout-log-detail"),
    path(
        "coach/members/<uuid:member_id>/workout-logs/",
        views.CoachMemberWorkoutLogsView.as_view(),
        name="coach-member-workout-logs",
    ),
    path(
        "coach/workout-logs/<uuid:log_id>/comment/",
        views.CoachWorkoutLogCommentView.as_view(),
        name="coach-workout-log-comment",
    ),
    path(
        "coach/workout-logs/<uuid:log_id>/toggle-check/",
        views.CoachWorkoutLogToggleCheckView.as_view(),
        name="coach-workout-log-toggle-check",
    ),

    # Section records
    path("section-records/", views.SectionRecordListView.as_view(), name="section-records"),
    path("section-records/<uuid:record_id>/", views.SectionRecordDetailView.as_view(), name="section-record-detail"),
    path(
        "coach/programs/<uuid:program_id>/section-records/",
        views.CoachProgramSectionRecordsView.as_view(),
        name="coach-program-section-records",
    ),
    path(
        "coach/section-records/<uuid:record_id>/comment/",
        views.CoachSectionRecordCommentView.as_view(),
        name="coach-section-record-comment",
    ),
    path(
        "coach/section-records/<uuid:record_id>/",
        views.CoachSectionRecordDetailView.as_view(),
        name="coach-section-record-detail",
    ),

    # Performance
    path("performance/", views.MyPerformanceView.as_view(), name="performance"),
    path("performance/summary/", views.MyTrainingSummaryView.as_view(), name="performance-summary"),
]
