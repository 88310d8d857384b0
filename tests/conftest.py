"""Shared fixtures."""

import pytest
from PIL import Image

from qr_composer.qr_generator import generate_qr_code


@pytest.fixture
def hello_qr():
    """Raw QR raster for "HELLO" (version 1, 29 modules with quiet zone)."""
    img = generate_qr_code("HELLO")
    yield img
    img.close()


@pytest.fixture
def red_logo():
    img = Image.new("RGB", (10, 10), (255, 0, 0))
    yield img
    img.close()


@pytest.fixture
def logo_file(tmp_path):
    path = tmp_path / "logo.png"
    Image.new("RGBA", (400, 200), (0, 0, 255, 255)).save(path)
    return str(path)
