"""
QR code rendering.

A thin wrapper over the ``qrcode`` package: URL + format/size in, image bytes
out. No I/O and no knowledge of slugs.
"""

from __future__ import annotations

import io
from typing import Dict

import qrcode
import qrcode.image.svg
from PIL import Image

SUPPORTED_FORMATS: Dict[str, str] = {
    "svg": "image/svg+xml",
    "png": "image/png",
}

MIN_QR_SIZE = 64
MAX_QR_SIZE = 2048


class UnsupportedQRFormat(ValueError):
    """Raised for an image format the renderer cannot produce."""


class QRRenderer:
    """Renders URLs as QR code images."""

    def __init__(self, border: int = 4, box_size: int = 10):
        self.border = border
        self.box_size = box_size

    def _build(self, url: str) -> qrcode.QRCode:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=self.box_size,
            border=self.border,
        )
        qr.add_data(url)
        qr.make(fit=True)
        return qr

    def render(self, url: str, fmt: str = "svg", size: int = 256) -> bytes:
        """Render ``url`` as a ``size`` x ``size`` QR image in ``fmt``."""
        fmt = fmt.lower()
        if fmt not in SUPPORTED_FORMATS:
            raise UnsupportedQRFormat(f"Unsupported QR format '{fmt}'")
        size = max(MIN_QR_SIZE, min(MAX_QR_SIZE, size))

        qr = self._build(url)

        if fmt == "svg":
            img = qr.make_image(image_factory=qrcode.image.svg.SvgPathImage)
            root = img.get_image()
            # viewBox keeps the drawing scalable; width/height pin the display size
            root.set("width", str(size))
            root.set("height", str(size))
            return img.to_string(encoding="UTF-8", xml_declaration=True)

        img = qr.make_image(fill_color="black", back_color="white")
        pil_img = img.get_image().convert("RGB").resize((size, size), Image.NEAREST)
        buffer = io.BytesIO()
        pil_img.save(buffer, format="PNG")
        return buffer.getvalue()

    @staticmethod
    def media_type(fmt: str) -> str:
        return SUPPORTED_FORMATS[fmt.lower()]


def get_qr_renderer() -> QRRenderer:
    """FastAPI dependency returning the QR renderer."""
    return QRRenderer()
