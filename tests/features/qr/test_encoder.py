import base64
import io

import pytest
from PIL import Image

from app.features.qr.services.encoder import (
    QR_WIDTH,
    EncodingFailure,
    QrEncoder,
    get_encoder,
    render_qr_png,
    to_data_url,
)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
DATA_URL_PREFIX = "data:image/png;base64,"


class TestRenderQrPng:

    def test_renders_png(self):
        png = render_qr_png("https://example.com")
        assert png.startswith(PNG_SIGNATURE)

    @pytest.mark.parametrize(
        "url", ["https://a.io", "https://example.com", "https://" + "x" * 500 + ".com"]
    )
    def test_fixed_width(self, url):
        img = Image.open(io.BytesIO(render_qr_png(url)))
        assert img.size == (QR_WIDTH, QR_WIDTH)

    def test_deterministic(self):
        assert render_qr_png("https://example.com") == render_qr_png("https://example.com")

    def test_different_urls_differ(self):
        assert render_qr_png("https://example.com") != render_qr_png("https://example.org")

    def test_quiet_zone_is_white(self):
        img = Image.open(io.BytesIO(render_qr_png("https://example.com"))).convert("L")
        assert img.getpixel((0, 0)) == 255
        assert img.getpixel((QR_WIDTH - 1, QR_WIDTH - 1)) == 255


def test_to_data_url():
    assert to_data_url(b"abc") == DATA_URL_PREFIX + base64.b64encode(b"abc").decode()


class TestQrEncoder:

    @pytest.mark.asyncio
    async def test_encode_returns_png_data_url(self):
        data_url = await QrEncoder().encode("https://example.com")

        assert data_url.startswith(DATA_URL_PREFIX)
        png = base64.b64decode(data_url[len(DATA_URL_PREFIX):])
        assert png == render_qr_png("https://example.com")

    @pytest.mark.asyncio
    async def test_payload_over_capacity_raises_encoding_failure(self):
        # version 40 with level H holds at most 1273 bytes
        with pytest.raises(EncodingFailure):
            await QrEncoder().encode("https://example.com/" + "a" * 4000)


def test_get_encoder_returns_qr_encoder():
    assert isinstance(get_encoder(), QrEncoder)
