from __future__ import annotations

import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_H


def render_png(data: str, *, box_size: int = 10, border: int = 2) -> bytes:
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_H, box_size=box_size, border=border)
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_data_url(data: str) -> str:
    encoded = base64.b64encode(render_png(data)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
