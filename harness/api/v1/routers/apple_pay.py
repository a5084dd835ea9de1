import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse

from harness.api.deps import get_apple_pay
from harness.core.errors import ConfigurationError, UpstreamTransportError
from harness.schemas.payments import ApplePayPaymentRequest, ApplePayValidateSessionRequest
from harness.services.payments.apple_pay import ApplePayClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["apple-pay"])


@router.get("/apple-pay-merchant-id", response_class=PlainTextResponse)
def merchant_id(client: ApplePayClient = Depends(get_apple_pay)):
    try:
        return client.merchant_id()
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/apple-pay-validate-session")
def validate_session(payload: ApplePayValidateSessionRequest, client: ApplePayClient = Depends(get_apple_pay)):
    try:
        status, body = client.validate_session(payload.validationURL)
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except UpstreamTransportError as e:
        logger.error(f"apple pay session validation failed: {e}")
        raise HTTPException(status_code=502, detail="Session validation request failed")
    return JSONResponse(status_code=status, content=body)


@router.post("/apple-pay-payment")
def apple_pay_payment(payload: ApplePayPaymentRequest, client: ApplePayClient = Depends(get_apple_pay)):
    try:
        status, body = client.pay(payload.payment)
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except UpstreamTransportError as e:
        logger.error(f"apple pay payment failed: {e}")
        raise HTTPException(status_code=502, detail="Payment request failed")
    return JSONResponse(status_code=status, content=body)
