"""
Read-only pixel grid consumed by the binarization and tracing passes.
"""

from typing import Tuple

import numpy as np

from borderscan.shared.models import Rectangle

# 16-bit luma weights; they sum to 1 << 16
LUMA_WEIGHTS = np.array([19595, 38470, 7471], dtype=np.int64)


def luma(line: np.ndarray) -> np.ndarray:
    """
    8-bit luma of a run of RGB or RGBA pixels.

    Channels are widened to 16 bits and, when alpha is present,
    premultiplied by it, so a fully transparent pixel has luma 0.

    Args:
        line: uint8 array shaped (N, 3) or (N, 4)

    Returns:
        uint8 array of length N
    """
    rgb = line[:, :3].astype(np.int64) * 0x101
    if line.shape[1] == 4:
        alpha = line[:, 3:4].astype(np.int64) * 0x101
        rgb = rgb * alpha // 0xFFFF
    y = ((rgb * LUMA_WEIGHTS).sum(axis=1) + (1 << 15)) >> 24
    return y.astype(np.uint8)


class PixelSource:
    """
    Read-only view over a 2D grid of pixels.

    Wraps a uint8 array shaped (H, W) grayscale, (H, W, 3) RGB or
    (H, W, 4) RGBA. Coordinates passed to `at`, `gray_at` and `gray_row`
    are absolute, i.e. offset by `origin`.
    """

    def __init__(self, pixels: np.ndarray, origin: Tuple[int, int] = (0, 0)):
        """
        Initialize pixel source.

        Args:
            pixels: Image data
            origin: (x, y) of the top-left pixel
        """
        pixels = np.asarray(pixels)
        if pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {pixels.dtype}")
        if pixels.ndim == 3 and pixels.shape[2] == 1:
            pixels = pixels[:, :, 0]
        if not (pixels.ndim == 2 or (pixels.ndim == 3 and pixels.shape[2] in (3, 4))):
            raise ValueError(f"Unexpected image shape: {pixels.shape}")

        self._pixels = np.ascontiguousarray(pixels)
        self.origin = (int(origin[0]), int(origin[1]))

    @property
    def bounds(self) -> Rectangle:
        ox, oy = self.origin
        return Rectangle(
            min_x=ox,
            min_y=oy,
            max_x=ox + self.width,
            max_y=oy + self.height,
        )

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def channels(self) -> int:
        return 1 if self._pixels.ndim == 2 else int(self._pixels.shape[2])

    @property
    def is_grayscale(self) -> bool:
        return self._pixels.ndim == 2

    def to_array(self) -> np.ndarray:
        """Return a writable copy of the underlying pixels."""
        return self._pixels.copy()

    def _index(self, x: int, y: int) -> Tuple[int, int]:
        if not self.bounds.contains(x, y):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.bounds}")
        ox, oy = self.origin
        return y - oy, x - ox

    def at(self, x: int, y: int) -> tuple:
        """Color of the pixel at (x, y) as a tuple of channel values."""
        row, col = self._index(x, y)
        value = self._pixels[row, col]
        if self.is_grayscale:
            return (int(value),)
        return tuple(int(c) for c in value)

    def gray_at(self, x: int, y: int) -> int:
        """8-bit luma of the pixel at (x, y)."""
        _, col = self._index(x, y)
        return int(self.gray_row(y)[col])

    def gray_row(self, y: int) -> np.ndarray:
        """
        8-bit luma of one scanline.

        Args:
            y: Absolute row index

        Returns:
            1-D uint8 array of length `width`
        """
        row = y - self.origin[1]
        if not 0 <= row < self.height:
            raise IndexError(f"Row {y} outside {self.bounds}")

        line = self._pixels[row:row + 1]
        if self.width == 0:
            return np.zeros(0, dtype=np.uint8)
        if self.is_grayscale:
            return line[0]
        return luma(line[0])

    def __repr__(self) -> str:
        return f"PixelSource(shape={self._pixels.shape}, origin={self.origin})"
