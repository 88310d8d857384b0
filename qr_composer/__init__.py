"""QR Composer — QR codes with an optional center logo and subtitle caption."""

__version__ = "1.0.0"

# Shared constants
MODULE_PIXEL_SIZE = 20  # Output pixels per QR module
QR_BORDER = 4  # Quiet zone, in modules

SUBTITLE_FONT_SIZE = 44
SUBTITLE_PADDING = 10

LOGO_MAX_FRACTION = 0.20  # Logo box relative to QR width/height
BADGE_PADDING = 6
BADGE_RADIUS_DIVISOR = 16

DEFAULT_OUTPUT = "qrcode.png"
