# members/api/urls.py

from django.urls import path
from . import views

app_name = "members"

PROGRAM = "programs/<uuid:program_id>/"

urlpatterns = [
    # Program-scoped
    path(PROGRAM, views.MemberListView.as_view(), name="members"),
    path(PROGRAM + "stats/", views.MemberStatsView.as_view(), name="member-stats"),
    path(PROGRAM + "expiring/", views.ExpiringMembersView.as_view(), name="expiring-members"),
    path(PROGRAM + "dashboard/", views.DashboardStatsView.as_view(), name="dashboard"),
    path(PROGRAM + "recent-purchases/", views.RecentPurchasesView.as_view(), name="recent-purchases"),
    path(PROGRAM + "homework/", views.HomeworkPageView.as_view(), name="homework"),
    path(
        PROGRAM + "homework/<int:phase_number>/<int:day_number>/",
        views.HomeworkSubmissionsView.as_view(),
        name="homework-submissions",
    ),
    path(PROGRAM + "<uuid:member_id>/", views.MemberDetailView.as_view(), name="member-detail"),
    path(PROGRAM + "<uuid:member_id>/workout-logs/", views.MemberWorkoutLogsView.as_view(), name="member-workout-logs"),
    path(PROGRAM + "<uuid:member_id>/comments/", views.MemberCommentsView.as_view(), name="member-comments"),
    path(PROGRAM + "<uuid:member_id>/prs/", views.MemberCurrentPRsView.as_view(), name="member-prs"),
    path(PROGRAM + "<uuid:member_id>/pr-history/", views.MemberPRHistoryView.as_view(), name="member-pr-history"),

    # Coach-wide
    path("<uuid:member_id>/orders/", views.MemberOrdersView.as_view(), name="member-orders"),
    path("enrollments/<uuid:enrollment_id>/status/", views.EnrollmentStatusView.as_view(), name="enrollment-status"),
    path("enrollments/<uuid:enrollment_id>/extend/", views.EnrollmentExtendView.as_view(), name="enrollment-extend"),
    path("enrollments/<uuid:enrollment_id>/dates/", views.EnrollmentDatesView.as_view(), name="enrollment-dates"),
]
