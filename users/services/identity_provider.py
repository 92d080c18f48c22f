# users/services/identity_provider.py

"""
Identity provider (Supabase GoTrue) client.

Passwords never touch our database: sign-up, password checks, resets and
account deletion are all delegated here. Every failure surfaces as
IdentityProviderError carrying the provider's message.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from django.conf import settings

from core.baas import BaaSClient, BaaSError

logger = logging.getLogger(__name__)


class IdentityProviderError(BaaSError):
    pass


@dataclass
class ProviderUser:
    id: uuid.UUID
    email: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ProviderUser":
        return cls(
            id=uuid.UUID(str(payload["id"])),
            email=payload.get("email", ""),
            metadata=payload.get("user_metadata") or {},
        )


@dataclass
class ProviderSession:
    access_token: str
    refresh_token: str
    user: ProviderUser


class IdentityProviderClient(BaaSClient):
    service_name = "identity_provider"

    def _call(self, method: str, path: str, **kwargs) -> Any:
        try:
            return self._request(method, path, **kwargs)
        except IdentityProviderError:
            raise
        except BaaSError as e:
            raise IdentityProviderError(e.message, status_code=e.status_code, payload=e.payload) from e

    def sign_up(self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None) -> ProviderUser:
        payload = self._call(
            "POST",
            "/auth/v1/signup",
            operation="sign_up",
            json_data={"email": email, "password": password, "data": metadata or {}},
        )
        # With email confirmation on, the user object comes back unwrapped
        user_payload = payload.get("user") or payload
        if not user_payload.get("id"):
            raise IdentityProviderError("Failed to create user.")
        logger.info(f"Provider user created for {email}")
        return ProviderUser.from_payload(user_payload)

    def sign_in_with_password(self, email: str, password: str) -> ProviderSession:
        payload = self._call(
            "POST",
            "/auth/v1/token",
            operation="sign_in_with_password",
            params={"grant_type": "password"},
            json_data={"email": email, "password": password},
        )
        return ProviderSession(
            access_token=payload.get("access_token", ""),
            refresh_token=payload.get("refresh_token", ""),
            user=ProviderUser.from_payload(payload["user"]),
        )

    def sign_out(self, access_token: str) -> None:
        self._call(
            "POST",
            "/auth/v1/logout",
            operation="sign_out",
            headers=self._headers(bearer=access_token),
        )

    def recover(self, email: str, redirect_to: Optional[str] = None) -> None:
        params = {"redirect_to": redirect_to} if redirect_to else None
        self._call(
            "POST",
            "/auth/v1/recover",
            operation="recover",
            params=params,
            json_data={"email": email},
        )

    def update_user(self, access_token: str, password: Optional[str] = None,
                    data: Optional[Dict[str, Any]] = None) -> ProviderUser:
        body: Dict[str, Any] = {}
        if password is not None:
            body["password"] = password
        if data is not None:
            body["data"] = data
        payload = self._call(
            "PUT",
            "/auth/v1/user",
            operation="update_user",
            headers=self._headers(bearer=access_token),
            json_data=body,
        )
        return ProviderUser.from_payload(payload)

    def admin_update_user(self, user_id, data: Dict[str, Any]) -> ProviderUser:
        payload = self._call(
            "PUT",
            f"/auth/v1/admin/users/{user_id}",
            operation="admin_update_user",
            headers=self._headers(service_role=True),
            json_data={"user_metadata": data},
        )
        return ProviderUser.from_payload(payload)

    def admin_delete_user(self, user_id) -> None:
        self._call(
            "DELETE",
            f"/auth/v1/admin/users/{user_id}",
            operation="admin_delete_user",
            headers=self._headers(service_role=True),
        )


def get_identity_provider() -> IdentityProviderClient:
    return IdentityProviderClient()


def password_reset_redirect() -> str:
    return getattr(settings, "SUPABASE_CONFIG", {}).get("PASSWORD_RESET_REDIRECT", "")
