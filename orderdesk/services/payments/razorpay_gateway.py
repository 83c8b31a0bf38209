import logging
from typing import Any, Dict, Optional

import httpx

from .base import PaymentsProvider
from .errors import GatewayError

logger = logging.getLogger(__name__)

ORDERS_PATH = "/v1/orders"


class RazorpayGateway(PaymentsProvider):
    """
    Razorpay Orders API client.

    Talks to the REST API directly with basic auth (key id / key secret).
    Every failure mode, including timeouts, comes back as GatewayError so
    callers only deal with one exception type. Timeouts are flagged retryable.

    Args:
        key_id: Razorpay key id
        key_secret: Razorpay key secret, also used for signature checks
        base_url: API root, overridable for sandboxes and tests
        timeout: seconds to wait for the gateway before giving up
        transport: optional httpx transport (tests pass a MockTransport)
    """

    name = "razorpay"

    def __init__(
        self,
        key_id: Optional[str],
        key_secret: Optional[str],
        base_url: str = "https://api.razorpay.com",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._key_id = key_id
        self._key_secret = key_secret
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    def __repr__(self) -> str:
        # never leak credentials through reprs/tracebacks
        return f"RazorpayGateway(base_url={str(self._client.base_url)!r})"

    def is_configured(self) -> bool:
        return bool(self._key_id and self._key_secret)

    async def create_order(self, options: Dict[str, Any]) -> Dict[str, Any]:
        if not self.is_configured():
            raise GatewayError("payments gateway not configured")

        try:
            r = await self._client.post(
                ORDERS_PATH,
                json=options,
                auth=(self._key_id, self._key_secret),
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Razorpay order creation timed out for receipt {options.get('receipt')}")
            raise GatewayError("payments gateway timed out", retryable=True) from e
        except httpx.HTTPError as e:
            logger.error(f"Razorpay request failed: {type(e).__name__}")
            raise GatewayError("payments gateway unreachable", retryable=True) from e

        if r.status_code >= 400:
            # razorpay puts a description under error.description
            try:
                body = r.json()
            except ValueError:
                body = None
            error = body.get("error") if isinstance(body, dict) else None
            description = error.get("description", "") if isinstance(error, dict) else ""
            logger.error(f"Razorpay order creation failed: {r.status_code} {description}")
            raise GatewayError(
                "payments gateway rejected the order",
                retryable=r.status_code >= 500,
                status_code=r.status_code,
            )

        try:
            order = r.json()
        except ValueError as e:
            raise GatewayError("payments gateway returned a non-JSON body", status_code=r.status_code) from e
        if not isinstance(order, dict) or "id" not in order:
            raise GatewayError("payments gateway response is missing an order id", status_code=r.status_code)

        logger.info(f"Razorpay order created: {order['id']}")
        return order

    async def aclose(self) -> None:
        await self._client.aclose()
