"""
Payments services package.

This package contains:
- Gateway order creation (amount -> minor units, receipts)
- Payment signature verification
- Gateway providers (Razorpay, mock) and the provider factory
"""

from .checkout import (
    PaymentOrderOptions,
    PaymentOrderService,
    SignatureVerifier,
    VerificationResult,
    build_order_options,
    compute_signature,
    new_receipt,
    to_minor_units,
)
from .errors import (
    PaymentError,
    GatewayError,
    ValidationError,
    SignatureMismatchError,
    InternalError,
)

__all__ = [
    'PaymentOrderOptions',
    'PaymentOrderService',
    'SignatureVerifier',
    'VerificationResult',
    'build_order_options',
    'compute_signature',
    'new_receipt',
    'to_minor_units',
    'PaymentError',
    'GatewayError',
    'ValidationError',
    'SignatureMismatchError',
    'InternalError',
]
