"""
Image decoding for BorderScan.

Decodes image files with Pillow into PixelSource instances.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from borderscan.ingest.pixel_source import PixelSource

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".tif", ".tiff", ".bmp"}

# Modes passed through unchanged; everything else is converted
_DIRECT_MODES = {"L", "RGB", "RGBA"}


def detect_extension(path: Union[str, Path]) -> str:
    """Return the lower-cased extension, validating it is supported."""
    ext = Path(path).suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValueError(f"Unsupported input format: {ext or '(none)'} for {path}")
    return ext


def image_to_source(image: Image.Image) -> PixelSource:
    """
    Convert a Pillow image to a PixelSource.

    Palette images keep their transparency as RGBA, 16-bit and float
    grayscale are reduced to 8-bit L, anything else becomes RGB.
    """
    mode = image.mode
    if mode not in _DIRECT_MODES:
        if mode in ("P", "PA", "LA") and (
            "transparency" in image.info or mode in ("PA", "LA")
        ):
            image = image.convert("RGBA")
        elif mode.startswith("I") or mode == "F":
            # Scale 16-bit range down to 8 bits
            data = np.asarray(image, dtype=np.float64)
            if data.max(initial=0) > 255:
                data = data / 257.0
            image = Image.fromarray(np.clip(np.rint(data), 0, 255).astype(np.uint8))
        elif mode == "1":
            image = image.convert("L")
        else:
            image = image.convert("RGB")
        logger.debug(f"Converted image mode {mode} -> {image.mode}")

    return PixelSource(np.array(image))


def load_image(path: Union[str, Path]) -> PixelSource:
    """
    Decode an image file.

    Args:
        path: Image file path (png, jpg, jpeg, gif, tif, tiff, bmp)

    Returns:
        PixelSource over the decoded pixels
    """
    path = Path(path)
    detect_extension(path)
    if not path.exists():
        raise FileNotFoundError(f"Input image not found: {path}")

    with Image.open(path) as image:
        image.load()
        source = image_to_source(image)

    logger.info(f"Loaded {path.name}: {source.width}x{source.height}, {source.channels} channel(s)")
    return source
