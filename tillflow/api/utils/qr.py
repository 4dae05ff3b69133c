import base64
import io

import qrcode


def qr_data_url(uri: str) -> str:
    """PNG QR code of ``uri`` as a data URL, ready for an <img src>"""
    image = qrcode.make(uri)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{encoded}"
