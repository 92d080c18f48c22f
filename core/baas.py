# core/baas.py

"""
Base HTTP client for the backend-as-a-service provider (Supabase).

Handles:
- request execution with timeout / connection error handling
- status code interpretation
- JSON parsing
- logging with operation context

Subclasses (identity provider, storage) only build paths and payloads.
"""

import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class BaaSError(Exception):
    """Raised for transport failures and non-2xx responses."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class BaaSClient:
    """Thin requests-based client bound to SUPABASE_CONFIG."""

    service_name = "supabase"

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None,
                 timeout: Optional[float] = None):
        config = getattr(settings, "SUPABASE_CONFIG", {})
        self.base_url = (base_url or config.get("URL", "")).rstrip("/")
        self.api_key = api_key or config.get("ANON_KEY", "")
        self.service_role_key = config.get("SERVICE_ROLE_KEY", "")
        self.timeout = timeout or config.get("TIMEOUT_SECONDS", 10)
        self._session = None

    @property
    def session(self) -> requests.Session:
        """Lazy initialization of the HTTP session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def _headers(self, bearer: Optional[str] = None, service_role: bool = False) -> Dict[str, str]:
        key = self.service_role_key if service_role else self.api_key
        return {
            "apikey": key,
            "Authorization": f"Bearer {bearer or key}",
        }

    def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        json_data: Optional[Dict[str, Any]] = None,
        data: Optional[bytes] = None,
    ) -> Any:
        if not self.base_url:
            logger.error(f"{self.service_name.upper()}_NOT_CONFIGURED ({operation})")
            raise BaaSError(f"{self.service_name} is not configured")

        url = f"{self.base_url}{path}"

        try:
            response = self.session.request(
                method,
                url,
                headers=headers or self._headers(),
                params=params,
                json=json_data,
                data=data,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            logger.warning(f"{self.service_name}_timeout op={operation}: {e}")
            raise BaaSError(f"{self.service_name} request timed out") from e
        except requests.RequestException as e:
            logger.warning(f"{self.service_name}_connection_error op={operation}: {e}")
            raise BaaSError(f"Failed to connect to {self.service_name}") from e

        payload = self._parse(response)

        if not response.ok:
            message = self._error_message(payload) or f"{self.service_name} request failed"
            logger.warning(
                f"{self.service_name}_error op={operation} status={response.status_code}: {message}"
            )
            raise BaaSError(message, status_code=response.status_code, payload=payload)

        return payload

    @staticmethod
    def _parse(response: requests.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {"raw": response.text}

    @staticmethod
    def _error_message(payload: Any) -> Optional[str]:
        if not isinstance(payload, dict):
            return None
        for key in ("msg", "message", "error_description", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
        return None
