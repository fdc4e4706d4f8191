import base64
from io import BytesIO
from urllib.parse import urlencode

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from akeditz.config import QR_IMAGE_SERVICE_URL

PNG_DATA_URI_PREFIX = "data:image/png;base64,"

def qr_image_url(data: str, size: int = 200, service_url: str = QR_IMAGE_SERVICE_URL) -> str:
    """
    URL de l'image QR rendue par le service tiers (payload encodé dans l'URL).
    """
    query = urlencode({"size": f"{size}x{size}", "data": data})
    return f"{service_url}?{query}"

def render_qr_data_uri(data: str, box_size: int = 10, border: int = 4) -> str:
    """Rendu local du QR de paiement (sans service tiers), en data URI PNG."""
    image = qrcode.make(data, error_correction=ERROR_CORRECT_M, box_size=box_size, border=border)
    with BytesIO() as png:
        image.save(png, format="PNG")
        encoded = base64.b64encode(png.getvalue()).decode("ascii")
    return PNG_DATA_URI_PREFIX + encoded
