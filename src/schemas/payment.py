from pydantic import BaseModel, Field
from typing import Optional


class OrderDescriptor(BaseModel):
    orderId: str
    amount: int
    currency: str = "INR"
    key: str = ""
    qrCode: Optional[str] = None


class PaymentConfirmation(BaseModel):
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)


class PaymentFailureReport(BaseModel):
    orderId: Optional[str] = None
    code: Optional[str] = None
    description: str = "Payment was not completed"
    reason: Optional[str] = None


class VerifyPaymentRequest(PaymentConfirmation):
    sessionId: Optional[str] = None
