import phonenumbers
import structlog
from phonenumbers import NumberParseException

from core.config import settings


log = structlog.get_logger()


def format_to_e164(phone_number: str, region: str = None) -> str:
    """
    Formats a phone number as E.164.

    :raises ValueError: If the number is not a valid phone number.
    :raises NumberParseException: If the number cannot be parsed at all.
    """
    region = region or settings.DEFAULT_PHONE_REGION
    try:
        parsed = phonenumbers.parse(phone_number, region)
        if not phonenumbers.is_valid_number(parsed):
            raise ValueError("Invalid phone number")
        return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
    except NumberParseException as e:
        log.warning("phone.format_error", number=phone_number, error=str(e))
        raise


def checkout_contact(phone_number: str) -> str:
    """Best-effort E.164 for checkout prefill; falls back to the text as typed."""
    if not phone_number:
        return ""
    try:
        return format_to_e164(phone_number)
    except (ValueError, NumberParseException):
        return phone_number
