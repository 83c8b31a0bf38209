import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from orderdesk.core.config import settings
from orderdesk.schemas.payments import (
    PaymentOrderRequest,
    PaymentOrderResponse,
    VerificationRequest,
    VerificationResponse,
    MessageResponse,
)
from orderdesk.services.payments import (
    GatewayError,
    InternalError,
    PaymentOrderService,
    SignatureMismatchError,
    SignatureVerifier,
    ValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["payments"])

GATEWAY_FAILURE_MESSAGE = "Something went wrong!"
SERVER_ERROR_MESSAGE = "Server error!"
INVALID_SIGNATURE_MESSAGE = "Invalid signature"

_error_responses = {
    400: {"model": MessageResponse},
    500: {"model": MessageResponse},
}


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def get_payment_order_service(request: Request) -> PaymentOrderService:
    # provider is created on startup and closed on shutdown, see main.py
    return PaymentOrderService(request.app.state.payments_provider, currency=settings.PAYMENTS_CURRENCY)


def get_signature_verifier() -> SignatureVerifier:
    return SignatureVerifier(settings.RAZORPAY_KEY_SECRET)


@router.post("/orders", response_model=PaymentOrderResponse, responses=_error_responses)
async def create_payment_order(
    payload: PaymentOrderRequest,
    service: PaymentOrderService = Depends(get_payment_order_service),
):
    try:
        order = await service.create_payment_order(payload.amount, payload.currency)
    except ValidationError as e:
        return _message(400, str(e))
    except GatewayError as e:
        logger.error(f"Gateway order creation failed (retryable={e.retryable}): {e}")
        return _message(500, GATEWAY_FAILURE_MESSAGE)
    except InternalError:
        return _message(500, SERVER_ERROR_MESSAGE)
    return {"data": order}


@router.post("/verify", response_model=VerificationResponse, responses=_error_responses)
def verify_payment(
    payload: VerificationRequest,
    verifier: SignatureVerifier = Depends(get_signature_verifier),
):
    try:
        result = verifier.verify_payment(
            payload.razorpay_order_id,
            payload.razorpay_payment_id,
            payload.razorpay_signature,
        )
    except ValidationError as e:
        return _message(400, str(e))
    except SignatureMismatchError:
        return _message(400, INVALID_SIGNATURE_MESSAGE)
    except InternalError:
        return _message(500, SERVER_ERROR_MESSAGE)
    return {"success": result.success, "order_id": result.order_id}
