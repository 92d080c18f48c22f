# users/services/auth_service.py

"""
AUTH SERVICE

Email/password authentication backed by the identity provider.

Flow:
1. Provider verifies credentials (or creates the user)
2. Local account is mirrored under the provider's user id
3. API access uses our own JWT pair (simplejwt)
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from django.db import transaction, IntegrityError
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import (
    ConflictError,
    ExternalServiceError,
    NotAuthenticated,
    ValidationFailed,
)
from users.models import User
from users.services.identity_provider import (
    IdentityProviderError,
    ProviderUser,
    get_identity_provider,
    password_reset_redirect,
)

logger = logging.getLogger(__name__)

COACH_HOME = "/coach/dashboard"
MEMBER_HOME = "/user/program"


@dataclass
class SignInResult:
    user: User
    access: str
    refresh: str
    redirect_to: str
    provider_access_token: Optional[str] = None
    extra: dict = field(default_factory=dict)


def redirect_for(user: User) -> str:
    return COACH_HOME if user.role == User.Role.COACH else MEMBER_HOME


def issue_tokens(user: User):
    refresh = RefreshToken.for_user(user)
    refresh["role"] = user.role
    return str(refresh.access_token), str(refresh)


class AuthService:
    """
    Service for sign-up, sign-in and password management.
    """

    def __init__(self, provider=None):
        self.provider = provider or get_identity_provider()

    def sign_up(self, email: str, password: str, full_name: str,
                role: str = User.Role.USER, avatar_url: Optional[str] = None) -> User:
        """
        Create the provider user, then the local account with the same id.
        """
        email = User.objects.normalize_email(email).lower()

        if User.objects.filter(email__iexact=email).exists():
            raise ConflictError("An account with this email already exists.")

        try:
            provider_user = self.provider.sign_up(
                email,
                password,
                metadata={
                    "full_name": full_name,
                    "role": role,
                    "avatar_url": avatar_url,
                },
            )
        except IdentityProviderError as e:
            logger.warning(f"SIGN_UP_ERROR for {email}: {e.message}")
            if e.status_code in (400, 422):
                raise ValidationFailed(e.message)
            raise ExternalServiceError(e.message)

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    email=email,
                    id=provider_user.id,
                    full_name=full_name,
                    role=role,
                    avatar_url=avatar_url or None,
                )
        except IntegrityError:
            raise ConflictError("An account with this email already exists.")

        logger.info(f"Account created: {user.id} ({user.role})")
        return user

    def sign_in(self, email: str, password: str) -> SignInResult:
        email = email.strip().lower()

        try:
            session = self.provider.sign_in_with_password(email, password)
        except IdentityProviderError as e:
            logger.info(f"Sign-in rejected for {email}: {e.message}")
            if e.status_code is None or e.status_code >= 500:
                raise ExternalServiceError("Authentication service is unavailable.")
            raise NotAuthenticated("Invalid email or password.")

        user = self._mirror_account(session.user)
        if not user.is_active:
            raise NotAuthenticated("This account is disabled.")

        access, refresh = issue_tokens(user)
        return SignInResult(
            user=user,
            access=access,
            refresh=refresh,
            redirect_to=redirect_for(user),
            provider_access_token=session.access_token,
        )

    @transaction.atomic
    def _mirror_account(self, provider_user: ProviderUser) -> User:
        """Upsert the local account for a provider user."""
        metadata = provider_user.metadata or {}
        user = User.objects.select_for_update().filter(id=provider_user.id).first()

        if user is None:
            role = metadata.get("role")
            if role not in (User.Role.USER, User.Role.COACH):
                role = User.Role.USER
            user = User.objects.create_user(
                email=provider_user.email,
                id=provider_user.id,
                full_name=metadata.get("full_name") or "",
                role=role,
                avatar_url=metadata.get("avatar_url") or None,
            )
            logger.info(f"Mirrored provider account {user.id}")
        return user

    def sign_out(self, refresh_token: str, provider_access_token: Optional[str] = None) -> None:
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError as e:
            raise ValidationFailed(f"Invalid refresh token: {e}")

        if provider_access_token:
            try:
                self.provider.sign_out(provider_access_token)
            except IdentityProviderError as e:
                logger.warning(f"SIGN_OUT_PROVIDER_ERROR: {e.message}")

    def request_password_reset(self, email: str) -> None:
        """Always succeeds from the caller's point of view."""
        try:
            self.provider.recover(email.strip().lower(), redirect_to=password_reset_redirect() or None)
        except IdentityProviderError as e:
            logger.warning(f"PASSWORD_RESET_REQUEST_ERROR: {e.message}")

    def reset_password(self, provider_access_token: str, password: str) -> None:
        try:
            self.provider.update_user(provider_access_token, password=password)
        except IdentityProviderError as e:
            logger.warning(f"PASSWORD_RESET_ERROR: {e.message}")
            raise ValidationFailed(e.message)

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        try:
            session = self.provider.sign_in_with_password(user.email, current_password)
        except IdentityProviderError:
            raise ValidationFailed("Current password is incorrect.")

        try:
            self.provider.update_user(session.access_token, password=new_password)
        except IdentityProviderError as e:
            logger.warning(f"CHANGE_PASSWORD_ERROR for {user.id}: {e.message}")
            raise ValidationFailed(e.message)

        logger.info(f"Password changed for {user.id}")


def get_user_id(request) -> Optional[str]:
    """Current account id, or None for anonymous requests."""
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return str(user.id)
