"""
QR Code Service
Check-in QR codes that point at an event's scan URL
"""

import base64
import io
from urllib.parse import urlencode

import qrcode

from app.config import settings
from app.services.event_service import event_service


class QRService:
    """Builds the PNG QR code students scan to check in"""

    BOX_SIZE = 20
    BORDER = 4

    @staticmethod
    def scan_url(secret: str) -> str:
        return f"{settings.APP_URL.rstrip('/')}/attendance/scan?{urlencode({'secret': secret})}"

    @staticmethod
    def render_png(data: str) -> bytes:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_Q,
            box_size=QRService.BOX_SIZE,
            border=QRService.BORDER,
        )
        qr.add_data(data)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()

    @staticmethod
    async def event_qr(event_id: str) -> dict:
        """QR code data for an event, creating its secret on first use"""
        event = await event_service.ensure_secret(event_id)
        url = QRService.scan_url(event["secret"])
        png = QRService.render_png(url)
        encoded = base64.b64encode(png).decode("utf-8")

        return {
            "event_id": str(event["id"]),
            "event_title": event["title"],
            "secret": event["secret"],
            "scan_url": url,
            "qr_code_base64": encoded,
            "qr_code_data_url": f"data:image/png;base64,{encoded}",
            "png": png
        }


qr_service = QRService()
