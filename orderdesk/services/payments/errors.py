class PaymentError(Exception):
    """base for everything the payments layer raises."""


class GatewayError(PaymentError):
    """the payment gateway failed, timed out or is misconfigured."""

    def __init__(self, message: str, *, retryable: bool = False, status_code: int | None = None):
        super().__init__(message)
        self.retryable = retryable
        self.status_code = status_code


class ValidationError(PaymentError):
    """request inputs are missing or malformed."""


class SignatureMismatchError(PaymentError):
    """computed signature doesn't match the one the gateway callback supplied."""


class InternalError(PaymentError):
    """unexpected failure inside the payments layer."""
