from orderdesk.core.config import settings

from .base import PaymentsProvider
from .mock import MockPayments
from .razorpay_gateway import RazorpayGateway


def get_payments_provider() -> PaymentsProvider:
    provider = (settings.PAYMENTS_PROVIDER or "mock").lower()
    if provider == "razorpay":
        return RazorpayGateway(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_KEY_SECRET,
            base_url=settings.RAZORPAY_BASE_URL,
            timeout=settings.PAYMENTS_TIMEOUT_SECONDS,
        )
    # default to mock for local dev
    return MockPayments()
