from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel


class PaymentOrderRequest(BaseModel):
    amount: Decimal
    currency: Optional[str] = None


class PaymentOrderResponse(BaseModel):
    data: Dict[str, Any]


class VerificationRequest(BaseModel):
    # optional on purpose: presence is checked by the verifier before hashing
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None


class VerificationResponse(BaseModel):
    success: bool
    order_id: str


class MessageResponse(BaseModel):
    message: str
