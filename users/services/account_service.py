# users/services/account_service.py

import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone

from core.cache import invalidate_paths
from core.exceptions import ExternalServiceError
from users.models import User, UserProfile
from users.services.identity_provider import IdentityProviderError, get_identity_provider

logger = logging.getLogger(__name__)


class AccountService:
    """Account and member-profile management for the signed-in user."""

    def __init__(self, provider=None):
        self.provider = provider or get_identity_provider()

    def get_my_account(self, user: User) -> dict:
        return {
            "id": str(user.id),
            "email": user.email,
            "full_name": user.full_name,
            "role": user.role,
            "avatar_url": user.avatar_url,
            "created_at": user.created_at,
        }

    def update_account(self, user: User, full_name: str, avatar_url: Optional[str] = None) -> User:
        try:
            self.provider.admin_update_user(
                user.id,
                {"full_name": full_name, "avatar_url": avatar_url},
            )
        except IdentityProviderError as e:
            logger.error(f"UPDATE_AUTH_ERROR for {user.id}: {e.message}")
            raise ExternalServiceError("Failed to update authentication details.")

        user.full_name = full_name
        user.avatar_url = avatar_url or None
        user.save(update_fields=["full_name", "avatar_url"])

        invalidate_paths("/coach/dashboard", "/coach/profile")
        return user

    def delete_account(self, user: User) -> None:
        """
        Provider first; local rows (profiles, programs, orders, logs)
        go with the cascade.
        """
        try:
            self.provider.admin_delete_user(user.id)
        except IdentityProviderError as e:
            logger.error(f"DELETE_AUTH_ERROR for {user.id}: {e.message}")
            raise ExternalServiceError("Failed to delete authentication details.")

        user_id = user.id
        user.delete()
        logger.info(f"Account deleted: {user_id}")

    # --------------------------------------------------------
    # Member profile
    # --------------------------------------------------------

    def get_or_create_profile(self, user: User) -> UserProfile:
        profile, _ = UserProfile.objects.get_or_create(account=user)
        return profile

    def update_profile(self, user: User, **fields) -> UserProfile:
        profile = self.get_or_create_profile(user)
        for name, value in fields.items():
            setattr(profile, name, value)
        profile.save()
        return profile

    @transaction.atomic
    def complete_onboarding(self, user: User, fitness_level: str, fitness_goals: list,
                            onboarding_data: dict) -> UserProfile:
        profile, _ = UserProfile.objects.select_for_update().get_or_create(account=user)
        profile.fitness_level = fitness_level
        profile.fitness_goals = fitness_goals
        profile.onboarding_data = onboarding_data
        profile.onboarding_completed = True
        profile.onboarding_completed_at = timezone.now()
        profile.save()
        return profile
