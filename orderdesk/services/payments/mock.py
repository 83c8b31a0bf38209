import secrets
import time
from typing import Any, Dict

from .base import PaymentsProvider


class MockPayments(PaymentsProvider):
    """in-process stand-in for the gateway, shaped like a Razorpay order."""

    name = "mock"

    async def create_order(self, options: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": f"order_{secrets.token_hex(7)}",
            "entity": "order",
            "amount": options["amount"],
            "amount_paid": 0,
            "amount_due": options["amount"],
            "currency": options["currency"],
            "receipt": options["receipt"],
            "status": "created",
            "attempts": 0,
            "created_at": int(time.time()),
        }
