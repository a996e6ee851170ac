"""
Export module for BorderScan.
"""

from borderscan.export.image_writer import (
    encoder_for,
    resolve_output_path,
    save_image,
    to_pil,
)

__all__ = [
    "encoder_for",
    "resolve_output_path",
    "save_image",
    "to_pil",
]
