"""
Payment gateway client.
Creates and confirms Stripe payment intents against a saved payment method.
"""

from decimal import Decimal, ROUND_HALF_UP
from functools import lru_cache
from typing import Any, Dict, Optional
import httpx
import logging

from portal.config import settings

logger = logging.getLogger(__name__)


class StripeGateway:
    """
    Thin async client for the Stripe payment intents endpoint.

    Every call returns a result dict instead of raising, so callers can decide
    whether a declined or unreachable payment is an error.
    """

    def __init__(
        self,
        secret_key: Optional[str],
        api_base: str = "https://api.stripe.com/v1",
        currency: str = "usd",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.secret_key = secret_key
        self.api_base = api_base.rstrip("/")
        self.currency = currency
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.secret_key)

    @staticmethod
    def to_minor_units(amount: Any) -> int:
        """Convert a dollar amount to cents."""
        cents = (Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return int(cents)

    @staticmethod
    def _error_message(error: Any) -> Optional[str]:
        if isinstance(error, dict):
            return error.get("message") or error.get("code")
        if error:
            return str(error)
        return None

    async def create_payment_intent(
        self,
        amount: Any,
        payment_method_id: str,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Charge ``amount`` to a saved payment method.

        Returns:
            Dict with ``success`` and either ``payment_intent_id``/``status``
            or ``error``.
        """
        if not self.configured:
            logger.warning("Payment attempted without a configured gateway key")
            return {"success": False, "error": "Payment gateway is not configured"}

        form = {
            "amount": str(self.to_minor_units(amount)),
            "currency": self.currency,
            "payment_method": payment_method_id,
            "confirm": "true",
            "automatic_payment_methods[enabled]": "true",
            "automatic_payment_methods[allow_redirects]": "never",
        }
        if description:
            form["description"] = description
        for key, value in (metadata or {}).items():
            form[f"metadata[{key}]"] = value

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as http_client:
                response = await http_client.post(
                    f"{self.api_base}/payment_intents",
                    data=form,
                    headers={"Authorization": f"Bearer {self.secret_key}"}
                )
        except httpx.HTTPError as e:
            logger.error(f"Payment gateway request failed: {e}")
            return {"success": False, "error": "Payment gateway is unreachable"}

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if response.status_code != 200:
            message = self._error_message(payload.get("error")) or f"Payment declined ({response.status_code})"
            logger.warning(f"Payment intent rejected: {message}")
            return {"success": False, "error": message}

        status = payload.get("status")
        if status not in ("succeeded", "processing", "requires_capture"):
            logger.warning(f"Payment intent {payload.get('id')} ended in status {status}")
            return {
                "success": False,
                "payment_intent_id": payload.get("id"),
                "status": status,
                "error": f"Payment was not completed (status: {status})",
            }

        logger.info(f"Payment intent {payload.get('id')} {status} for {form['amount']} {self.currency}")
        return {"success": True, "payment_intent_id": payload.get("id"), "status": status}


@lru_cache()
def get_payment_gateway() -> StripeGateway:
    """
    Get the configured payment gateway.
    Used as a FastAPI dependency.
    """
    return StripeGateway(
        secret_key=settings.stripe_secret_key,
        api_base=settings.stripe_api_base,
        currency=settings.currency,
        timeout=settings.payment_timeout_seconds,
    )
