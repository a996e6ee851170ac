"""
Output image encoding.

The output format is inferred from the file extension; paths without one
get ".png".
"""

import logging
from pathlib import Path
from typing import Any, Callable, Optional, Union

from PIL import Image

from borderscan.ingest.pixel_source import PixelSource
from borderscan.shared.config import OutputConfig

logger = logging.getLogger(__name__)

Encoder = Callable[[Image.Image, Path], None]


def resolve_output_path(
    path: Union[str, Path],
    default_format: str = "png",
) -> tuple[Path, str]:
    """
    Split an output path into (path, format).

    Args:
        path: Requested output path
        default_format: Format (and appended extension) when path has none

    Returns:
        Final path and lower-cased format name
    """
    path = Path(path)
    if not path.suffix:
        return path.with_name(f"{path.name}.{default_format}"), default_format
    return path, path.suffix[1:].lower()


def _flatten(image: Image.Image) -> Image.Image:
    """Drop alpha for formats that cannot store it."""
    if image.mode in ("RGBA", "LA"):
        return image.convert("RGB")
    return image


def encoder_for(fmt: str, config: Optional[OutputConfig] = None) -> Encoder:
    """
    Get the encoder for a format name.

    Args:
        fmt: png, jpeg/jpg, gif, tiff/tif or bmp
        config: Output options (jpeg quality, tiff compression)

    Returns:
        Callable writing a Pillow image to a path
    """
    config = config or OutputConfig()
    name = fmt.lower()

    if name == "png":
        return lambda image, path: image.save(path, format="PNG")
    if name in ("jpeg", "jpg"):
        return lambda image, path: _flatten(image).save(
            path, format="JPEG", quality=config.jpeg_quality
        )
    if name == "gif":
        return lambda image, path: _flatten(image).save(path, format="GIF")
    if name in ("tiff", "tif"):
        return lambda image, path: image.save(
            path, format="TIFF", compression=config.tiff_compression
        )
    if name == "bmp":
        return lambda image, path: _flatten(image).save(path, format="BMP")

    raise ValueError(f"unsupported output format {fmt!r} (from file extension)")


def to_pil(source: PixelSource) -> Image.Image:
    """Wrap a PixelSource's pixels in a Pillow image."""
    return Image.fromarray(source.to_array())


def save_image(
    source: PixelSource,
    path: Union[str, Path],
    config: Optional[Any] = None,
) -> Path:
    """
    Encode and write an image, choosing the format from the extension.

    Args:
        source: Pixels to write
        path: Output path
        config: Optional OutputConfig

    Returns:
        Path actually written
    """
    config = config or OutputConfig()
    out_path, fmt = resolve_output_path(path, config.default_format)
    encode = encoder_for(fmt, config)

    out_path.parent.mkdir(parents=True, exist_ok=True)
    encode(to_pil(source), out_path)

    logger.info(f"Saved {out_path} ({fmt})", extra={"path": str(out_path)})
    return out_path
