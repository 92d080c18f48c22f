# billing/services/payment_gateway.py

"""
TOSS PAYMENTS CLIENT

Server-side payment approval. The widget collects the payment on the
client; approve() confirms it with the gateway using the secret key.
"""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


@dataclass
class ApprovalResult:
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


class TossPaymentsClient:

    def __init__(self, secret_key: Optional[str] = None, api_base: Optional[str] = None):
        config = settings.PAYMENT_CONFIG
        self.secret_key = config["SECRET_KEY"] if secret_key is None else secret_key
        self.api_base = (api_base or config["API_BASE"]).rstrip("/")
        self.timeout = config.get("TIMEOUT_SECONDS", 10)

    @property
    def client_key(self) -> str:
        return settings.PAYMENT_CONFIG.get("CLIENT_KEY", "")

    def _auth_header(self) -> str:
        token = base64.b64encode(f"{self.secret_key}:".encode()).decode()
        return f"Basic {token}"

    def approve(self, payment_key: str, order_id: str, amount: str) -> ApprovalResult:
        if not self.secret_key:
            logger.error("PAYMENT_CONFIG_ERROR: TOSS_PAYMENTS_SECRET_KEY is not set")
            return ApprovalResult(False, error="Payment configuration error")

        try:
            response = requests.post(
                f"{self.api_base}/v1/payments/{payment_key}",
                json={"orderId": str(order_id), "amount": amount},
                headers={
                    "Authorization": self._auth_header(),
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"TOSS_PAYMENT_API_ERROR: {e}")
            return ApprovalResult(False, error="Payment API call failed")

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            logger.error(f"TOSS_PAYMENT_APPROVAL_ERROR: status={response.status_code} body={data}")
            message = data.get("message") if isinstance(data, dict) else None
            return ApprovalResult(False, data=data if isinstance(data, dict) else {},
                                  error=message or "Payment approval failed")

        logger.info(f"TOSS_PAYMENT_APPROVED: order={order_id} payment_key={payment_key}")
        return ApprovalResult(True, data=data)
