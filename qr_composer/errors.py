"""Exceptions raised by QR Composer."""


class QRComposerError(Exception):
    """Base class for all QR Composer errors."""


class EmptyPayloadError(QRComposerError, ValueError):
    """The text to encode is empty or whitespace-only."""


class ImageLoadError(QRComposerError, OSError):
    """An image could not be read from disk."""


class GenerationError(QRComposerError):
    """Encoding or composing the QR image failed."""


class ImageSaveError(QRComposerError, OSError):
    """An image could not be written to disk."""


class NoImageError(QRComposerError):
    """An action needs a generated image but none exists yet."""
