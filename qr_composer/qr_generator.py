"""Generate base QR code rasters for composition."""

import io
from abc import ABC, abstractmethod
from enum import Enum

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image

from qr_composer import MODULE_PIXEL_SIZE, QR_BORDER
from qr_composer.errors import EmptyPayloadError


class ErrorCorrection(Enum):
    """QR error-correction levels (share of codewords that can be restored)."""

    L = "L"  # ~7%
    M = "M"  # ~15%
    Q = "Q"  # ~25%
    H = "H"  # ~30%


# Level used by the application; not user-configurable.
DEFAULT_ERROR_CORRECTION = ErrorCorrection.Q

_QRCODE_LEVELS = {
    ErrorCorrection.L: qrcode.constants.ERROR_CORRECT_L,
    ErrorCorrection.M: qrcode.constants.ERROR_CORRECT_M,
    ErrorCorrection.Q: qrcode.constants.ERROR_CORRECT_Q,
    ErrorCorrection.H: qrcode.constants.ERROR_CORRECT_H,
}


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class BaseQREncoder(ABC):
    """Turns text into a black-on-white QR raster."""

    @abstractmethod
    def encode(
        self,
        text: str,
        ecc: ErrorCorrection = DEFAULT_ERROR_CORRECTION,
        box_size: int = MODULE_PIXEL_SIZE,
    ) -> Image.Image:
        """Encode text as a QR code.

        Args:
            text: The payload to encode.
            ecc: Error-correction level.
            box_size: Pixels per module side.

        Returns:
            RGB image with a quiet zone of QR_BORDER modules on each side.

        Raises:
            ValueError: If the payload does not fit in a QR code at this level.
        """
        ...

    @abstractmethod
    def name(self) -> str:
        ...


# ---------------------------------------------------------------------------
# python-qrcode backend
# ---------------------------------------------------------------------------

class QRCodeEncoder(BaseQREncoder):
    """Encoder backed by python-qrcode."""

    def name(self) -> str:
        return "qrcode"

    def encode(
        self,
        text: str,
        ecc: ErrorCorrection = DEFAULT_ERROR_CORRECTION,
        box_size: int = MODULE_PIXEL_SIZE,
    ) -> Image.Image:
        qr = qrcode.QRCode(
            error_correction=_QRCODE_LEVELS[ecc],
            box_size=box_size,
            border=QR_BORDER,
        )
        qr.add_data(text)
        # fit=True reports overflow as an "Invalid version" ValueError
        try:
            qr.make(fit=True)
        except (DataOverflowError, ValueError) as e:
            raise ValueError(
                f"QR data too long ({len(text)} chars) for error correction level {ecc.value}."
            ) from e

        qr_image = qr.make_image(fill_color="black", back_color="white")
        return qr_image.convert("RGB")


# ---------------------------------------------------------------------------
# segno backend
# ---------------------------------------------------------------------------

class SegnoEncoder(BaseQREncoder):
    """Encoder backed by segno. Produces the same geometry as QRCodeEncoder."""

    def name(self) -> str:
        return "segno"

    def encode(
        self,
        text: str,
        ecc: ErrorCorrection = DEFAULT_ERROR_CORRECTION,
        box_size: int = MODULE_PIXEL_SIZE,
    ) -> Image.Image:
        import segno

        # boost_error would silently raise the level; keep the one asked for
        try:
            qr = segno.make_qr(text, error=ecc.value.lower(), boost_error=False)
        except segno.DataOverflowError as e:
            raise ValueError(
                f"QR data too long ({len(text)} chars) for error correction level {ecc.value}."
            ) from e

        buf = io.BytesIO()
        qr.save(buf, kind="png", scale=box_size, border=QR_BORDER, dark="black", light="white")
        buf.seek(0)
        with Image.open(buf) as img:
            return img.convert("RGB")


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

ENCODERS = {
    "qrcode": QRCodeEncoder,
    "segno": SegnoEncoder,
}


def get_encoder(name: str = "qrcode") -> BaseQREncoder:
    """Factory function to get a QR encoder backend.

    Args:
        name: One of "qrcode" or "segno".

    Returns:
        An encoder instance.
    """
    if name not in ENCODERS:
        raise ValueError(f"Unknown encoder '{name}'. Choose from: {', '.join(ENCODERS.keys())}")

    return ENCODERS[name]()


def generate_qr_code(
    text: str,
    ecc: ErrorCorrection = DEFAULT_ERROR_CORRECTION,
    box_size: int = MODULE_PIXEL_SIZE,
    encoder: BaseQREncoder | None = None,
) -> Image.Image:
    """Generate the raw QR raster for a payload.

    Raises:
        EmptyPayloadError: If the text is empty or whitespace-only.
        ValueError: If the text exceeds QR capacity at the given level.
    """
    if not text or not text.strip():
        raise EmptyPayloadError("Enter some text to generate a QR code.")

    if encoder is None:
        encoder = QRCodeEncoder()
    return encoder.encode(text, ecc, box_size)
