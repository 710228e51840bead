import base64
from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from teamsorter.core.settings import Settings, config_settings


class QrCodeService:
    def __init__(
        self,
        width: int = 400,
        margin: int = 2,
        dark_color: str = "#000000",
        light_color: str = "#FFFFFF",
    ):
        self.width = width
        self.margin = margin
        self.dark_color = dark_color
        self.light_color = light_color

    @classmethod
    def from_settings(cls, settings: Settings = config_settings) -> "QrCodeService":
        return cls(
            width=settings.QR_WIDTH,
            margin=settings.QR_MARGIN,
            dark_color=settings.QR_DARK_COLOR,
            light_color=settings.QR_LIGHT_COLOR,
        )

    def to_png(self, text: str) -> bytes:
        """Encodes text as a QR code PNG roughly `width` pixels wide."""
        qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, border=self.margin)
        qr.add_data(text)
        qr.make(fit=True)

        # Size the modules so the whole image, quiet zone included, fits the width
        total_modules = qr.modules_count + 2 * self.margin
        qr.box_size = max(1, self.width // total_modules)

        image = qr.make_image(fill_color=self.dark_color, back_color=self.light_color)
        buffer = BytesIO()
        image.save(buffer)
        return buffer.getvalue()

    def to_data_uri(self, text: str) -> str:
        encoded = base64.b64encode(self.to_png(text)).decode("ascii")
        return f"data:image/png;base64,{encoded}"


def get_qr_service() -> QrCodeService:
    return QrCodeService.from_settings()
