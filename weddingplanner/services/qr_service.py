"""
QR codes for guest RSVP links
"""

import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M

QR_BOX_SIZE = 10
QR_BORDER = 4

class QRService:

    @staticmethod
    def rsvp_qr_png(link: str, box_size: int = QR_BOX_SIZE) -> bytes:
        """PNG bytes for a QR code that opens the guest's RSVP page"""
        qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=box_size, border=QR_BORDER)
        qr.add_data(link)
        qr.make(fit=True)

        out = io.BytesIO()
        qr.make_image(fill_color="black", back_color="white").save(out, format="PNG")
        return out.getvalue()
