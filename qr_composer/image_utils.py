"""Image loading and saving for logos and composed QR codes."""

import os
from PIL import Image

from qr_composer.errors import ImageLoadError, ImageSaveError

# Logo import filter
IMAGE_FILE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".bmp", ".gif")

# Output format by extension; anything else is written as PNG
_SAVE_FORMATS = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".bmp": "BMP",
}

# Modes each format stores as-is; others are converted to RGB first
_STORABLE_MODES = {
    "JPEG": ("L", "RGB"),
    "BMP": ("1", "L", "P", "RGB"),
}


def load_image(path: str) -> Image.Image:
    """Load an image fully into memory, detached from the source file.

    The file handle is closed before returning, so the file is not kept
    open (or locked) while the image is in use.

    Args:
        path: Path to a PNG, JPEG, BMP or GIF file.

    Returns:
        The loaded PIL Image, in its original mode.

    Raises:
        ImageLoadError: If the file is missing, has an unsupported
            extension, or is not a valid image.
    """
    if not os.path.exists(path):
        raise ImageLoadError(f"Image not found: {path}")

    ext = os.path.splitext(path)[1].lower()
    if ext not in IMAGE_FILE_EXTENSIONS:
        raise ImageLoadError(
            f"Unsupported image type '{ext or path}'. "
            f"Use one of: {', '.join(IMAGE_FILE_EXTENSIONS)}"
        )

    try:
        with Image.open(path) as img:
            img.load()
            return img.copy()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise ImageLoadError(f"Could not open image '{path}': {e}") from e


def format_for_path(path: str) -> str:
    """Pick the Pillow save format from the file extension, defaulting to PNG."""
    ext = os.path.splitext(path)[1].lower()
    return _SAVE_FORMATS.get(ext, "PNG")


def save_image(image: Image.Image, path: str) -> str:
    """Write an image to disk in the format implied by its extension.

    Args:
        image: The image to save. Not modified.
        path: Destination path. Missing parent directories are created.

    Returns:
        The path the image was saved to.

    Raises:
        ImageSaveError: If the path is invalid or the write fails.
    """
    fmt = format_for_path(path)
    storable = _STORABLE_MODES.get(fmt)
    out = image
    if storable is not None and image.mode not in storable:
        out = image.convert("RGB")

    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        if fmt == "JPEG":
            out.save(path, fmt, quality=95)
        else:
            out.save(path, fmt)
    except (OSError, ValueError) as e:
        raise ImageSaveError(f"Could not save image to '{path}': {e}") from e
    finally:
        if out is not image:
            out.close()

    return path
