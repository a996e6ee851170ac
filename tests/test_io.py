"""Tests for image loading and output encoding."""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from borderscan.export.image_writer import encoder_for, resolve_output_path, save_image
from borderscan.ingest.loader import load_image
from borderscan.ingest.pixel_source import PixelSource
from borderscan.shared.config import OutputConfig


def test_resolve_output_path_with_extension():
    """Format comes from the extension, lower-cased."""
    assert resolve_output_path("result.JPG") == (Path("result.JPG"), "jpg")
    assert resolve_output_path("dir/out.tiff") == (Path("dir/out.tiff"), "tiff")


def test_resolve_output_path_without_extension():
    """Missing extension defaults to png and is appended."""
    assert resolve_output_path("result") == (Path("result.png"), "png")


@pytest.mark.parametrize("fmt", ["png", "jpeg", "jpg", "gif", "tiff", "tif", "bmp", "PNG"])
def test_encoder_for_supported(fmt):
    """Every supported format has an encoder."""
    assert callable(encoder_for(fmt))


def test_encoder_for_unsupported():
    """Unknown formats are rejected."""
    with pytest.raises(ValueError, match="unsupported output format"):
        encoder_for("txt")


@pytest.mark.parametrize("name", ["out.png", "out.jpg", "out.gif", "out.tif", "out.bmp"])
def test_save_image_formats(tmp_path, name):
    """RGBA overlay is written in each format at the right size."""
    pixels = np.full((3, 5, 4), 255, dtype=np.uint8)
    pixels[1, 2] = (255, 0, 0, 255)

    written = save_image(PixelSource(pixels), tmp_path / name)

    assert written.exists()
    with Image.open(written) as image:
        assert image.size == (5, 3)


def test_save_image_png_roundtrip_pixels(tmp_path):
    """PNG keeps exact pixel values."""
    pixels = np.full((2, 2, 4), 255, dtype=np.uint8)
    pixels[0, 1] = (255, 0, 0, 255)

    written = save_image(PixelSource(pixels), tmp_path / "o.png")

    np.testing.assert_array_equal(np.array(Image.open(written)), pixels)


def test_save_image_appends_default_extension(tmp_path):
    """Extension-less output gets .png."""
    written = save_image(PixelSource(np.zeros((1, 1), dtype=np.uint8)), tmp_path / "result")

    assert written == tmp_path / "result.png"
    assert written.exists()


def test_save_image_jpeg_quality(tmp_path):
    """Configured JPEG quality is used."""
    pixels = np.random.default_rng(0).integers(0, 256, size=(32, 32, 3), dtype=np.uint8)
    source = PixelSource(pixels)

    low = save_image(source, tmp_path / "low.jpg", OutputConfig(jpeg_quality=5))
    high = save_image(source, tmp_path / "high.jpg", OutputConfig(jpeg_quality=95))

    assert low.stat().st_size < high.stat().st_size


def test_load_image_modes(tmp_path):
    """L, RGB and RGBA files load with matching channel counts."""
    for mode, channels in [("L", 1), ("RGB", 3), ("RGBA", 4)]:
        path = tmp_path / f"in_{mode}.png"
        Image.new(mode, (4, 2)).save(path)

        source = load_image(path)

        assert (source.width, source.height) == (4, 2)
        assert source.channels == channels


def test_load_image_palette_with_transparency(tmp_path):
    """Palette images with transparency become RGBA."""
    path = tmp_path / "pal.png"
    image = Image.new("P", (2, 2))
    image.info["transparency"] = 0
    image.save(path, transparency=0)

    assert load_image(path).channels == 4


def test_load_image_unsupported_extension(tmp_path):
    """Unknown input extensions are rejected."""
    path = tmp_path / "in.webp"
    path.write_bytes(b"")

    with pytest.raises(ValueError):
        load_image(path)


def test_load_image_missing(tmp_path):
    """Missing input raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / "missing.png")


def test_pixel_source_rejects_bad_arrays():
    """Only uint8 gray, RGB or RGBA arrays are accepted."""
    with pytest.raises(ValueError):
        PixelSource(np.zeros((2, 2), dtype=np.float32))
    with pytest.raises(ValueError):
        PixelSource(np.zeros((2, 2, 2), dtype=np.uint8))


def test_pixel_source_queries():
    """Bounds, color and luma queries use absolute coordinates."""
    pixels = np.zeros((2, 3, 3), dtype=np.uint8)
    pixels[1, 2] = (90, 90, 90)
    source = PixelSource(pixels, origin=(4, 7))

    assert source.bounds.min_x == 4 and source.bounds.max_x == 7
    assert source.bounds.min_y == 7 and source.bounds.max_y == 9
    assert source.at(6, 8) == (90, 90, 90)
    assert source.gray_at(6, 8) == 90
    assert source.bounds.contains(6, 8)
    assert not source.bounds.contains(7, 8)
    with pytest.raises(IndexError):
        source.at(0, 0)
    with pytest.raises(IndexError):
        source.gray_at(7, 8)


def test_gray_row_color_luma():
    """Color pixels use 16-bit luma weights with truncation."""
    pixels = np.array([[[255, 0, 0], [1, 2, 3], [255, 255, 255]]], dtype=np.uint8)

    np.testing.assert_array_equal(PixelSource(pixels).gray_row(0), [76, 1, 255])


def test_gray_row_premultiplies_alpha():
    """Transparent pixels are dark whatever their color."""
    pixels = np.array([[
        [255, 255, 255, 0],
        [255, 255, 255, 0],
        [255, 255, 255, 128],
        [255, 255, 255, 255],
    ]], dtype=np.uint8)
    source = PixelSource(pixels)

    np.testing.assert_array_equal(source.gray_row(0), [0, 0, 128, 255])
    assert source.gray_at(0, 0) == 0
