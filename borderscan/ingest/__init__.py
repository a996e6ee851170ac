"""
Ingest module for BorderScan.

Pixel source abstraction and image decoding.
"""

from borderscan.ingest.pixel_source import PixelSource
from borderscan.ingest.loader import SUPPORTED_EXTENSIONS, image_to_source, load_image

__all__ = [
    "PixelSource",
    "SUPPORTED_EXTENSIONS",
    "image_to_source",
    "load_image",
]
