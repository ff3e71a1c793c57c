"""QR code rendering for booking confirmations"""

import io

import qrcode


def encode_qr_png(text: str) -> bytes:
    """Render ``text`` as a PNG QR code; the same text always yields the same bytes"""
    qr = qrcode.QRCode(version=None, box_size=10, border=4)
    qr.add_data(text)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def get_qr_encoder():
    """Dependency injection for the QR encoder"""
    return encode_qr_png
