# users/api/views.py
import logging

from drf_spectacular.utils import extend_schema
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.throttling import ScopedRateThrottle

from ..services.auth_service import AuthService
from ..services.account_service import AccountService
from .serializers import (
    SignUpSerializer,
    SignInSerializer,
    SignOutSerializer,
    PasswordResetRequestSerializer,
    PasswordResetSerializer,
    ChangePasswordSerializer,
    AccountSerializer,
    AccountUpdateSerializer,
    UserProfileSerializer,
    OnboardingSerializer,
)

logger = logging.getLogger(__name__)


class AuthThrottleMixin:
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth"


# ============================================================
# AUTHENTICATION
# ============================================================

class SignUpView(AuthThrottleMixin, APIView):
    """Create an account (provider user + local mirror)."""
    permission_classes = [AllowAny]

    @extend_schema(tags=["Auth"], request=SignUpSerializer)
    def post(self, request):
        serializer = SignUpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = AuthService().sign_up(
            email=data["email"],
            password=data["password"],
            full_name=data["full_name"],
            role=data["role"],
            avatar_url=data.get("avatar_url"),
        )

        return Response(
            {
                "success": True,
                "message": "Sign-up complete. Please verify your email before signing in.",
                "data": AccountSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )


class SignInView(AuthThrottleMixin, APIView):
    """Verify credentials and return JWT tokens with a role-based redirect."""
    permission_classes = [AllowAny]

    @extend_schema(tags=["Auth"], request=SignInSerializer)
    def post(self, request):
        serializer = SignInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService().sign_in(
            serializer.validated_data["email"],
            serializer.validated_data["password"],
        )

        return Response({
            "success": True,
            "access": result.access,
            "refresh": result.refresh,
            "provider_access_token": result.provider_access_token,
            "redirect_to": result.redirect_to,
            "user": AccountSerializer(result.user).data,
        })


class SignOutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Auth"], request=SignOutSerializer)
    def post(self, request):
        serializer = SignOutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        AuthService().sign_out(
            serializer.validated_data["refresh"],
            serializer.validated_data.get("provider_access_token") or None,
        )
        return Response({"success": True})


class PasswordResetRequestView(AuthThrottleMixin, APIView):
    permission_classes = [AllowAny]

    @extend_schema(tags=["Auth"], request=PasswordResetRequestSerializer)
    def post(self, request):
        serializer = PasswordResetRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        AuthService().request_password_reset(serializer.validated_data["email"])
        return Response({
            "success": True,
            "message": "If the email is registered, a reset link has been sent.",
        })


class PasswordResetView(AuthThrottleMixin, APIView):
    permission_classes = [AllowAny]

    @extend_schema(tags=["Auth"], request=PasswordResetSerializer)
    def post(self, request):
        serializer = PasswordResetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        AuthService().reset_password(
            serializer.validated_data["access_token"],
            serializer.validated_data["password"],
        )
        return Response({"success": True, "message": "Password has been reset."})


class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Auth"], request=ChangePasswordSerializer)
    def post(self, request):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        AuthService().change_password(
            request.user,
            serializer.validated_data["current_password"],
            serializer.validated_data["new_password"],
        )
        return Response({"success": True, "message": "Password has been changed."})


# ============================================================
# ACCOUNT
# ============================================================

class MyAccountView(APIView):
    """GET / PATCH / DELETE the signed-in account."""
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Account"], responses=AccountSerializer)
    def get(self, request):
        return Response({"success": True, "data": AccountService().get_my_account(request.user)})

    @extend_schema(tags=["Account"], request=AccountUpdateSerializer, responses=AccountSerializer)
    def patch(self, request):
        serializer = AccountUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = AccountService().update_account(
            request.user,
            full_name=serializer.validated_data["full_name"],
            avatar_url=serializer.validated_data.get("avatar_url"),
        )
        return Response({
            "success": True,
            "message": "Account updated.",
            "data": AccountSerializer(user).data,
        })

    @extend_schema(tags=["Account"])
    def delete(self, request):
        AccountService().delete_account(request.user)
        return Response({"success": True, "message": "Account deleted."})


class MyProfileView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Account"], responses=UserProfileSerializer)
    def get(self, request):
        profile = AccountService().get_or_create_profile(request.user)
        return Response({"success": True, "data": UserProfileSerializer(profile).data})

    @extend_schema(tags=["Account"], request=UserProfileSerializer, responses=UserProfileSerializer)
    def patch(self, request):
        service = AccountService()
        profile = service.get_or_create_profile(request.user)
        serializer = UserProfileSerializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        profile = service.update_profile(request.user, **serializer.validated_data)
        return Response({"success": True, "data": UserProfileSerializer(profile).data})


class OnboardingView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Account"], request=OnboardingSerializer, responses=UserProfileSerializer)
    def post(self, request):
        serializer = OnboardingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        profile = AccountService().complete_onboarding(request.user, **serializer.validated_data)
        return Response({"success": True, "data": UserProfileSerializer(profile).data})
