"""Compose a QR code with an optional center logo and subtitle caption.

The output keeps the QR's width. A subtitle adds a band below the QR sized
by the font's line height, so it does not depend on the letters typed; a
logo is scaled down (never up) to fit a box of LOGO_MAX_FRACTION of the QR
and drawn over a white rounded badge.
"""

import math
import os
from dataclasses import dataclass
from functools import lru_cache

from PIL import Image, ImageDraw, ImageFont

from qr_composer import (
    BADGE_PADDING,
    BADGE_RADIUS_DIVISOR,
    LOGO_MAX_FRACTION,
    SUBTITLE_FONT_SIZE,
    SUBTITLE_PADDING,
)
from qr_composer.errors import GenerationError

FONT_ENV_VAR = "QR_COMPOSER_FONT"

# Tried in order; Pillow resolves bare names against the system font dirs.
BOLD_FONT_CANDIDATES = (
    "DejaVuSans-Bold.ttf",
    "LiberationSans-Bold.ttf",
    "arialbd.ttf",
    "Arial Bold.ttf",
    "calibrib.ttf",
    "Helvetica-Bold.ttf",
)

BADGE_SUPERSAMPLE = 4


@dataclass(frozen=True)
class LogoPlacement:
    """Where and how large a logo is drawn over a QR code.

    Boxes are (left, top, right, bottom) with right/bottom exclusive.
    """

    scale: float
    box: tuple[int, int, int, int]
    badge: tuple[int, int, int, int]
    radius: int

    @property
    def size(self) -> tuple[int, int]:
        left, top, right, bottom = self.box
        return right - left, bottom - top

    @property
    def badge_size(self) -> tuple[int, int]:
        left, top, right, bottom = self.badge
        return right - left, bottom - top


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------

def load_subtitle_font(
    size: int = SUBTITLE_FONT_SIZE,
    path: str | None = None,
) -> ImageFont.FreeTypeFont:
    """Load the bold font used for subtitles.

    Resolution order: explicit path, the QR_COMPOSER_FONT environment
    variable, BOLD_FONT_CANDIDATES, then Pillow's bundled scalable font.

    Raises:
        OSError: If an explicitly requested font file cannot be loaded.
    """
    path = path or os.environ.get(FONT_ENV_VAR) or None
    return _resolve_font(size, path)


@lru_cache(maxsize=8)
def _resolve_font(size: int, path: str | None) -> ImageFont.FreeTypeFont:
    if path:
        return ImageFont.truetype(path, size)

    for name in BOLD_FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue

    return ImageFont.load_default(size=size)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

def _has_text(subtitle: str | None) -> bool:
    return bool(subtitle and subtitle.strip())


def _line_height(font) -> int:
    """Ascender-to-descender height of one line, independent of the glyphs."""
    ascent, descent = font.getmetrics()
    return ascent + descent


def _text_height(text: str, font) -> int:
    return _line_height(font) * len(text.splitlines())


def subtitle_band_height(subtitle: str | None, font=None) -> int:
    """Height of the caption band for a subtitle; 0 if it is absent or blank."""
    if not _has_text(subtitle):
        return 0
    if font is None:
        font = load_subtitle_font()

    return math.ceil(_text_height(subtitle, font)) + SUBTITLE_PADDING


def logo_placement(
    qr_size: tuple[int, int],
    logo_size: tuple[int, int],
    qr_x: int = 0,
) -> LogoPlacement | None:
    """Compute the scaled, centered logo box and its badge for a QR code.

    The logo keeps its aspect ratio, is never upscaled, and fits within
    LOGO_MAX_FRACTION of the QR's width and height. Returns None when that
    box is empty (QR narrower or shorter than 5 px), so no logo is drawn.
    """
    qr_w, qr_h = qr_size
    logo_w, logo_h = logo_size
    if logo_w <= 0 or logo_h <= 0:
        raise ValueError(f"Logo has no pixels ({logo_w}x{logo_h}).")

    max_w = int(qr_w * LOGO_MAX_FRACTION)
    max_h = int(qr_h * LOGO_MAX_FRACTION)
    if max_w == 0 or max_h == 0:
        return None

    scale = min(max_w / logo_w, max_h / logo_h, 1.0)
    draw_w = max(1, int(logo_w * scale))
    draw_h = max(1, int(logo_h * scale))

    left = qr_x + (qr_w - draw_w) // 2
    top = (qr_h - draw_h) // 2
    box = (left, top, left + draw_w, top + draw_h)

    badge = (
        left - BADGE_PADDING,
        top - BADGE_PADDING,
        left + draw_w + BADGE_PADDING,
        top + draw_h + BADGE_PADDING,
    )
    badge_w = badge[2] - badge[0]
    badge_h = badge[3] - badge[1]
    radius = min(badge_w, badge_h) // BADGE_RADIUS_DIVISOR

    return LogoPlacement(scale=scale, box=box, badge=badge, radius=radius)


# ---------------------------------------------------------------------------
# Drawing
# ---------------------------------------------------------------------------

def _draw_badge(canvas: Image.Image, placement: LogoPlacement) -> None:
    """Fill the rounded badge in white, antialiased by supersampling its mask."""
    badge_w, badge_h = placement.badge_size
    ss = BADGE_SUPERSAMPLE

    big = Image.new("L", (badge_w * ss, badge_h * ss), 0)
    ImageDraw.Draw(big).rounded_rectangle(
        (0, 0, badge_w * ss - 1, badge_h * ss - 1),
        radius=placement.radius * ss,
        fill=255,
    )
    mask = big.reduce(ss)
    big.close()
    try:
        canvas.paste((255, 255, 255), placement.badge, mask)
    finally:
        mask.close()


def _draw_logo(canvas: Image.Image, logo: Image.Image, placement: LogoPlacement) -> None:
    rgba = logo.convert("RGBA")
    try:
        scaled = rgba.resize(placement.size, Image.LANCZOS)
    finally:
        rgba.close()
    try:
        canvas.paste(scaled, placement.box[:2], scaled)
    finally:
        scaled.close()


def _draw_subtitle(
    canvas: Image.Image,
    subtitle: str,
    font,
    band_top: int,
    band_height: int,
) -> None:
    draw = ImageDraw.Draw(canvas)
    line_height = _line_height(font)
    lines = subtitle.splitlines()

    # Lines are stacked by font metrics and centered as a block in the band
    y = band_top + (band_height - line_height * len(lines)) / 2
    for line in lines:
        if line.strip():
            left, _, right, _ = draw.textbbox((0, y), line, font=font)
            x = (canvas.width - (right - left)) / 2 - left
            draw.text((x, y), line, fill="black", font=font)
        y += line_height


def compose(
    qr: Image.Image,
    logo: Image.Image | None = None,
    subtitle: str | None = None,
    font=None,
) -> Image.Image:
    """Compose the final image from a QR raster, an optional logo and subtitle.

    Args:
        qr: The QR code raster. Not modified.
        logo: Optional logo, drawn centered over the QR on a white badge.
        subtitle: Optional caption drawn below the QR. Blank text is ignored.
        font: Font for the caption. Defaults to load_subtitle_font().

    Returns:
        A new RGB image, as wide as the QR and taller by the caption band.

    Raises:
        ValueError: If qr is None.
        GenerationError: If drawing fails. No partial image is returned.
    """
    if qr is None:
        raise ValueError("A QR image is required.")

    canvas = None
    try:
        has_subtitle = _has_text(subtitle)
        if has_subtitle and font is None:
            font = load_subtitle_font()
        band_height = subtitle_band_height(subtitle, font) if has_subtitle else 0

        width = qr.width
        canvas = Image.new("RGB", (width, qr.height + band_height), "white")

        qr_x = (width - qr.width) // 2
        qr_rgb = qr if qr.mode == "RGB" else qr.convert("RGB")
        try:
            canvas.paste(qr_rgb, (qr_x, 0))
        finally:
            if qr_rgb is not qr:
                qr_rgb.close()

        if logo is not None:
            placement = logo_placement(qr.size, logo.size, qr_x)
            if placement is not None:
                _draw_badge(canvas, placement)
                _draw_logo(canvas, logo, placement)

        if has_subtitle:
            _draw_subtitle(canvas, subtitle, font, qr.height, band_height)
    except (OSError, ValueError, MemoryError) as e:
        if canvas is not None:
            canvas.close()
        raise GenerationError(f"Could not compose QR image: {e}") from e

    return canvas
