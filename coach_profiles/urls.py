from django.urls import path
from .views import MyCoachProfileView, CoachProfileView

app_name = "coach_profiles"

urlpatterns = [
    path("me/profile/", MyCoachProfileView.as_view(), name="my-profile"),
    path("<uuid:coach_id>/profile/", CoachProfileView.as_view(), name="profile"),
]
