# users/api/urls.py
from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    SignUpView,
    SignInView,
    SignOutView,
    PasswordResetRequestView,
    PasswordResetView,
    ChangePasswordView,
    MyAccountView,
    MyProfileView,
    OnboardingView,
)

app_name = "users"

urlpatterns = [
    # Authentication
    path("signup/", SignUpView.as_view(), name="signup"),
    path("signin/", SignInView.as_view(), name="signin"),
    path("signout/", SignOutView.as_view(), name="signout"),

    # Token refresh
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),

    # Password
    path("password/reset-request/", PasswordResetRequestView.as_view(), name="password-reset-request"),
    path("password/reset/", PasswordResetView.as_view(), name="password-reset"),
    path("password/change/", ChangePasswordView.as_view(), name="password-change"),

    # Account & profile
    path("me/", MyAccountView.as_view(), name="me"),
    path("me/profile/", MyProfileView.as_view(), name="my-profile"),
    path("me/onboarding/", OnboardingView.as_view(), name="onboarding"),
]
