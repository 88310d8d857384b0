"""Tests for image loading and saving."""

import os

import pytest
from PIL import Image

from qr_composer.compositor import compose
from qr_composer.errors import ImageLoadError, ImageSaveError
from qr_composer.image_utils import format_for_path, load_image, save_image


@pytest.mark.parametrize(
    "path, expected",
    [
        ("out.png", "PNG"),
        ("out.PNG", "PNG"),
        ("out.jpg", "JPEG"),
        ("out.JPEG", "JPEG"),
        ("out.bmp", "BMP"),
        ("out", "PNG"),
        ("out.webp", "PNG"),
    ],
)
def test_format_for_path(path, expected):
    assert format_for_path(path) == expected


def test_composed_png_round_trip(tmp_path, hello_qr, red_logo):
    composed = compose(hello_qr, red_logo, "Scan me")
    path = save_image(composed, str(tmp_path / "qrcode.png"))

    loaded = load_image(path)
    assert loaded.size == composed.size


@pytest.mark.parametrize("name, fmt", [("qr.jpg", "JPEG"), ("qr.bmp", "BMP"), ("qr.png", "PNG")])
def test_saved_file_uses_extension_format(tmp_path, hello_qr, name, fmt):
    path = save_image(hello_qr, str(tmp_path / name))
    with Image.open(path) as img:
        assert img.format == fmt
        assert img.size == hello_qr.size


def test_rgba_saved_as_jpeg(tmp_path):
    img = Image.new("RGBA", (20, 20), (0, 0, 0, 128))
    path = save_image(img, str(tmp_path / "alpha.jpg"))
    with Image.open(path) as saved:
        assert saved.mode == "RGB"
    assert img.mode == "RGBA"


def test_save_creates_parent_dirs(tmp_path, hello_qr):
    path = str(tmp_path / "a" / "b" / "qr.png")
    assert save_image(hello_qr, path) == path
    assert os.path.isfile(path)


def test_save_to_invalid_path(tmp_path, hello_qr):
    blocker = tmp_path / "file.txt"
    blocker.write_text("not a directory")
    with pytest.raises(ImageSaveError):
        save_image(hello_qr, str(blocker / "qr.png"))


def test_load_missing_file(tmp_path):
    with pytest.raises(ImageLoadError, match="not found"):
        load_image(str(tmp_path / "missing.png"))


def test_load_unsupported_extension(tmp_path):
    path = tmp_path / "logo.tiff"
    Image.new("RGB", (4, 4)).save(path)
    with pytest.raises(ImageLoadError, match="Unsupported"):
        load_image(str(path))


def test_load_corrupt_file(tmp_path):
    path = tmp_path / "logo.png"
    path.write_bytes(b"definitely not a png")
    with pytest.raises(ImageLoadError, match="Could not open"):
        load_image(str(path))


def test_loaded_image_detached_from_file(logo_file):
    img = load_image(logo_file)
    os.remove(logo_file)
    assert img.size == (400, 200)
    assert img.getpixel((0, 0)) == (0, 0, 255, 255)


def test_load_errors_are_os_errors(tmp_path):
    with pytest.raises(OSError):
        load_image(str(tmp_path / "missing.png"))


def test_oversized_image_is_load_error(tmp_path, monkeypatch):
    path = tmp_path / "huge.png"
    Image.new("RGB", (100, 100), "white").save(path)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    with pytest.raises(ImageLoadError, match="Could not open"):
        load_image(str(path))
