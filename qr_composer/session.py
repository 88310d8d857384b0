"""Per-window composer state: the current QR image and the current logo."""

from PIL import Image

from qr_composer import DEFAULT_OUTPUT, MODULE_PIXEL_SIZE
from qr_composer.compositor import compose, load_subtitle_font
from qr_composer.errors import (
    EmptyPayloadError,
    GenerationError,
    NoImageError,
    QRComposerError,
)
from qr_composer.image_utils import load_image, save_image
from qr_composer.qr_generator import (
    DEFAULT_ERROR_CORRECTION,
    BaseQREncoder,
    ErrorCorrection,
    get_encoder,
)


class ComposerSession:
    """Owns the displayed image and the loaded logo.

    Each is replaced only after its successor is fully built, and the
    superseded image is closed right away. Failed actions leave both
    untouched. Use as a context manager, or call close() when done.
    """

    def __init__(
        self,
        encoder: BaseQREncoder | None = None,
        ecc: ErrorCorrection = DEFAULT_ERROR_CORRECTION,
        box_size: int = MODULE_PIXEL_SIZE,
        font_path: str | None = None,
    ):
        self._encoder = encoder if encoder is not None else get_encoder()
        self._ecc = ecc
        self._box_size = box_size
        self._font_path = font_path
        self._image: Image.Image | None = None
        self._logo: Image.Image | None = None

    def __enter__(self) -> "ComposerSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def current_image(self) -> Image.Image | None:
        return self._image

    @property
    def logo(self) -> Image.Image | None:
        return self._logo

    @property
    def encoder(self) -> BaseQREncoder:
        return self._encoder

    # ------------------------------------------------------------------
    # Logo
    # ------------------------------------------------------------------

    def import_logo(self, path: str) -> Image.Image:
        """Load a logo for subsequent generations.

        Raises:
            ImageLoadError: If the file can't be read. The previous logo stays.
        """
        logo = load_image(path)
        self._logo = _replace(self._logo, logo)
        return logo

    def clear_logo(self) -> None:
        self._logo = _replace(self._logo, None)

    # ------------------------------------------------------------------
    # Generate / save / preview
    # ------------------------------------------------------------------

    def generate(self, text: str, subtitle: str | None = None) -> Image.Image:
        """Encode text, compose it with the logo and subtitle, and display it.

        Raises:
            EmptyPayloadError: If text is blank. Nothing is generated.
            GenerationError: If encoding or composition fails. The previous
                image stays displayed.
        """
        if not text or not text.strip():
            raise EmptyPayloadError("Enter some text to generate a QR code.")

        try:
            font = None
            if subtitle and subtitle.strip():
                font = load_subtitle_font(path=self._font_path)
            qr = self._encoder.encode(text, self._ecc, self._box_size)
        except QRComposerError:
            raise
        except Exception as e:
            raise GenerationError(f"Could not generate QR code: {e}") from e

        try:
            composed = compose(qr, self._logo, subtitle, font=font)
        finally:
            qr.close()

        self._image = _replace(self._image, composed)
        return composed

    def save(self, path: str | None = None) -> str:
        """Save the displayed image. The format follows the file extension.

        Raises:
            NoImageError: If nothing has been generated yet.
            ImageSaveError: If writing fails.
        """
        if self._image is None:
            raise NoImageError("There is no image to save. Generate a QR code first.")
        return save_image(self._image, path or DEFAULT_OUTPUT)

    def preview(self) -> None:
        """Open the displayed image in the platform's image viewer."""
        if self._image is None:
            raise NoImageError("There is no image to preview. Generate a QR code first.")
        self._image.show(title="QR Composer")

    def close(self) -> None:
        """Release the displayed image and the logo."""
        self._image = _replace(self._image, None)
        self._logo = _replace(self._logo, None)


def _replace(old: Image.Image | None, new: Image.Image | None) -> Image.Image | None:
    """Close the superseded image and return its replacement."""
    if old is not None and old is not new:
        old.close()
    return new
