"""
Binarization module for BorderScan.

Converts images to two-level masks using Otsu's threshold.
"""

from borderscan.binarization.handler import OtsuBinarizer, binarize
from borderscan.binarization.histogram import Histogram, build_histogram
from borderscan.binarization.otsu import select_threshold
from borderscan.binarization.binarizer import BACKGROUND, FOREGROUND, apply_threshold
from borderscan.binarization.invert import invert

__all__ = [
    "OtsuBinarizer",
    "binarize",
    "Histogram",
    "build_histogram",
    "select_threshold",
    "BACKGROUND",
    "FOREGROUND",
    "apply_threshold",
    "invert",
]
