import asyncio
import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from api.gateway import GatewayError, gateway
from core import sessions
from core.config import settings
from core.security import current_user
from routes.registrations import REGISTRATION
from schemas.payment import PaymentFailureReport, VerifyPaymentRequest
from schemas.user import CurrentUser
from utils.payment import PaymentVerificationError, failure_from_report
from utils.qrcode import generate_qr_code, upi_payment_link


log = structlog.get_logger()
router = APIRouter(prefix="/api/payments")


@router.post("/verify")
async def verify_payment(
    confirmation: VerifyPaymentRequest,
    user: CurrentUser = Depends(current_user),
):
    triple = confirmation.model_dump(exclude={"sessionId"})
    try:
        result = await asyncio.to_thread(gateway.verify_payment, triple, user.token)
    except GatewayError as e:
        # only a rejection by the API means the signature did not check out
        if not e.status_code or e.status_code >= 500:
            raise
        log.error("payment.verification_failed", order_id=confirmation.razorpay_order_id,
                  status_code=e.status_code, error=e.message)
        raise PaymentVerificationError(e.message, confirmation.razorpay_order_id)

    if confirmation.sessionId:
        await sessions.discard_session(REGISTRATION, confirmation.sessionId, user.id)
    log.info("payment.verified", order_id=confirmation.razorpay_order_id, user=user.id)
    return {
        "status": "PAID",
        "message": "Payment successful! Registration confirmed.",
        "result": result,
    }


@router.post("/failure")
async def report_failure(
    report: PaymentFailureReport,
    user: CurrentUser = Depends(current_user),
):
    raise failure_from_report(report)


@router.get("/qr")
async def payment_qr(
    order_id: str = Query(..., alias="orderId"),
    amount: float = Query(..., gt=0),
    user: CurrentUser = Depends(current_user),
):
    if not settings.UPI_VPA:
        raise HTTPException(404, "UPI payments are not enabled")
    link = upi_payment_link(settings.UPI_VPA, settings.CHECKOUT_NAME, amount, order_id,
                            settings.CURRENCY)
    return StreamingResponse(generate_qr_code(link), media_type="image/png")
