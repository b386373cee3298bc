import base64
import io
from typing import Protocol

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_H
from starlette.concurrency import run_in_threadpool

PNG_MIME_TYPE = "image/png"
QR_WIDTH = 400
QR_BORDER = 1


class EncodingFailure(Exception):
    """Raised when the QR library cannot render a URL."""


class UrlEncoder(Protocol):
    async def encode(self, url: str) -> str:
        ...


def render_qr_png(url: str) -> bytes:
    """
    Render ``url`` as a high error-correction QR code PNG, QR_WIDTH pixels square.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_H,
        box_size=1,
        border=QR_BORDER,
    )
    qr.add_data(url)
    qr.make(fit=True)

    # one pixel per module, then scaled up so every module stays a crisp block
    modules = qr.modules_count + 2 * QR_BORDER
    qr.box_size = max(1, QR_WIDTH // modules)
    img = qr.make_image(fill_color="black", back_color="white").get_image()
    if img.size != (QR_WIDTH, QR_WIDTH):
        img = img.resize((QR_WIDTH, QR_WIDTH), Image.Resampling.NEAREST)

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def to_data_url(png: bytes) -> str:
    b64 = base64.b64encode(png).decode("ascii")
    return f"data:{PNG_MIME_TYPE};base64,{b64}"


class QrEncoder:
    async def encode(self, url: str) -> str:
        try:
            png = await run_in_threadpool(render_qr_png, url)
        except Exception as e:
            raise EncodingFailure(f"Could not encode {url!r}: {e}") from e

        return to_data_url(png)


def get_encoder() -> UrlEncoder:
    return QrEncoder()
