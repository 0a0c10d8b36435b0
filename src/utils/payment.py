import structlog

from core.config import settings
from schemas.event import EventInfo
from schemas.payment import OrderDescriptor, PaymentFailureReport
from utils.phone import checkout_contact
from utils.qrcode import qr_data_uri, upi_payment_link


log = structlog.get_logger()


class PaymentError(Exception):
    kind = "payment"

    def __init__(self, message: str, order_id: str = None):
        super().__init__(message)
        self.message = message
        self.order_id = order_id


class PaymentFailedError(PaymentError):
    """The checkout itself reported a failure (card declined, UPI timeout...)."""
    kind = "failed"


class PaymentVerificationError(PaymentError):
    """The charge went through but its signature could not be verified."""
    kind = "verification"


def registration_amount(event: EventInfo) -> float:
    # flat fee per registration, whatever the team size
    return event.feeAmount if event.requires_payment else 0


def checkout_options(event: EventInfo, order: OrderDescriptor, registration: dict) -> dict:
    """Options handed to the checkout widget's constructor."""
    return {
        "key": order.key,
        "amount": order.amount,
        "currency": order.currency,
        "name": settings.CHECKOUT_NAME,
        "description": f"Registration for {event.title}",
        "order_id": order.orderId,
        "prefill": {
            "name": registration.get("teamName") or "",
            "email": registration.get("alternateEmail") or "",
            "contact": checkout_contact(registration.get("phone") or ""),
        },
        "notes": {
            "eventId": event.id,
            "eventTitle": event.title,
        },
        "theme": {"color": settings.CHECKOUT_THEME_COLOR},
    }


def attach_qr_code(order: OrderDescriptor, event: EventInfo) -> OrderDescriptor:
    """Adds a UPI QR code to orders the API returned without one."""
    if order.qrCode or not settings.UPI_VPA:
        return order
    link = upi_payment_link(
        settings.UPI_VPA,
        settings.CHECKOUT_NAME,
        registration_amount(event),
        order.orderId,
        order.currency,
    )
    return order.model_copy(update={"qrCode": qr_data_uri(link)})


def failure_from_report(report: PaymentFailureReport) -> PaymentFailedError:
    log.warning("payment.failed", order_id=report.orderId, code=report.code,
                reason=report.reason, description=report.description)
    return PaymentFailedError(f"Payment failed: {report.description}", report.orderId)
