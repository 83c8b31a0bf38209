"""
Payment order initiation and payment signature verification.

Checkout happens in two steps against the gateway:
1. the server creates a gateway order for the cart amount and hands its id to the client
2. after the customer pays, the client posts back the order id, payment id and
   the gateway's signature, which we recompute with the shared key secret

Keys are passed in explicitly; nothing here reads the environment.
"""
import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass, asdict
from decimal import Decimal, DecimalException, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Optional

from .base import PaymentsProvider
from .errors import GatewayError, InternalError, SignatureMismatchError, ValidationError

logger = logging.getLogger(__name__)

RECEIPT_BYTES = 10  # 80 bits -> 20 hex chars
MINOR_UNITS_PER_MAJOR = Decimal("100")
DEFAULT_CURRENCY = "INR"


@dataclass
class PaymentOrderOptions:
    """body sent to the gateway's create-order call."""
    amount: int  # minor units (paise)
    currency: str
    receipt: str

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class VerificationResult:
    success: bool
    order_id: str


def to_minor_units(amount: Any) -> int:
    """
    Convert a major-unit amount to integer minor units.

    Goes through Decimal(str(amount)) so float noise doesn't leak in
    (0.29 is 29, not 28) and rounds half-up: 19.995 -> 2000.
    Sub-paisa precision beyond that is rounded away, not rejected.
    """
    if isinstance(amount, bool) or amount is None:
        raise ValidationError("amount must be a positive number")
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValidationError("amount must be a positive number") from e
    if not value.is_finite() or value <= 0:
        raise ValidationError("amount must be a positive number")

    try:
        minor = int((value * MINOR_UNITS_PER_MAJOR).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except DecimalException as e:
        # more digits than the decimal context can hold, e.g. "1e30"
        raise ValidationError("amount is too large") from e
    if minor <= 0:
        raise ValidationError("amount is below the smallest chargeable unit")
    return minor


def new_receipt() -> str:
    return secrets.token_hex(RECEIPT_BYTES)


def build_order_options(amount: Any, currency: Optional[str] = None) -> PaymentOrderOptions:
    if currency is None:
        currency = DEFAULT_CURRENCY
    if not currency or not isinstance(currency, str):
        raise ValidationError("currency is required")
    return PaymentOrderOptions(
        amount=to_minor_units(amount),
        currency=currency.upper(),
        receipt=new_receipt(),
    )


def compute_signature(order_id: str, payment_id: str, key_secret: str) -> str:
    """HMAC-SHA256 of "<order_id>|<payment_id>" keyed with the gateway secret, lowercase hex."""
    payload = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(key_secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


class PaymentOrderService:
    """creates gateway-side orders; nothing is persisted locally."""

    def __init__(self, provider: PaymentsProvider, currency: str = DEFAULT_CURRENCY):
        self.provider = provider
        self.currency = currency

    async def create_payment_order(self, amount: Any, currency: Optional[str] = None) -> Dict[str, Any]:
        options = build_order_options(amount, currency or self.currency)
        try:
            order = await self.provider.create_order(options.dict())
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Error in creating the gateway order")
            raise InternalError("unexpected error while creating the gateway order") from e
        logger.info(f"Gateway order {order.get('id')} created for receipt {options.receipt}")
        return order


class SignatureVerifier:
    def __init__(self, key_secret: Optional[str]):
        self._key_secret = key_secret

    def __repr__(self) -> str:
        return "SignatureVerifier(key_secret=***)"

    def verify_payment(self, order_id: Any, payment_id: Any, signature: Any) -> VerificationResult:
        # presence check happens before any hashing; "None|pay_1" is never signed by the gateway
        for field in (order_id, payment_id, signature):
            if not isinstance(field, str) or not field:
                raise ValidationError("Missing payment verification fields")

        try:
            if not self._key_secret:
                raise RuntimeError("payment key secret is not configured")
            expected = compute_signature(order_id, payment_id, self._key_secret)
            matches = hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8"))
        except Exception as e:
            logger.exception("Server error while verifying payment signature")
            raise InternalError("signature verification failed") from e

        if not matches:
            logger.warning("Invalid signature")
            raise SignatureMismatchError("Invalid signature")

        return VerificationResult(success=True, order_id=order_id)
