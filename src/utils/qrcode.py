import base64
import io
from urllib.parse import urlencode

import qrcode
import structlog


log = structlog.get_logger()


def upi_payment_link(vpa: str, payee: str, amount: float, order_id: str,
                     currency: str = "INR") -> str:
    """Builds the ``upi://pay`` deep link scanned by UPI apps."""
    params = {
        "pa": vpa,
        "pn": payee,
        "am": f"{amount:.2f}",
        "cu": currency,
        "tr": order_id,
        "tn": f"Order {order_id}",
    }
    return f"upi://pay?{urlencode(params)}"


def generate_qr_code(data: str) -> io.BytesIO:
    """
    Renders ``data`` as a QR code.

    :param data: Text or URL to encode.
    :return: BytesIO with the PNG, positioned at the start.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    img_bytes = io.BytesIO()
    img.save(img_bytes, format="PNG")
    img_bytes.seek(0)
    log.debug("qrcode.generated", size=img_bytes.getbuffer().nbytes)
    return img_bytes


def qr_data_uri(data: str) -> str:
    png = generate_qr_code(data).getvalue()
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
