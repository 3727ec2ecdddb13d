from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from ..errors import MalformedInputError


@dataclass
class RasterImage:
    """
    Simple data object: RGBA pixels, 8 bits per channel.
    No Pillow / OpenCV logic in this file.
    """
    pixels: np.ndarray  # Shape (H, W, 4), dtype uint8, RGBA order, row-major.

    def __post_init__(self):
        if not isinstance(self.pixels, np.ndarray):
            raise MalformedInputError("RasterImage pixels must be a numpy array")
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise MalformedInputError(f"Expected (H, W, 4) RGBA pixels, got shape {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise MalformedInputError(f"Expected uint8 pixels, got {self.pixels.dtype}")

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    @classmethod
    def from_buffer(cls, data: bytes, width: int, height: int) -> RasterImage:
        """Build from a flat row-major RGBA buffer of width*height*4 bytes."""
        if width < 0 or height < 0:
            raise MalformedInputError(f"Invalid dimensions {width}x{height}")
        expected = width * height * 4
        if len(data) != expected:
            raise MalformedInputError(
                f"Buffer length {len(data)} does not match {width}x{height}x4 = {expected}"
            )
        pixels = np.frombuffer(bytes(data), dtype=np.uint8).reshape(height, width, 4).copy()
        return cls(pixels)

    @classmethod
    def blank(cls, width: int, height: int) -> RasterImage:
        return cls(np.zeros((height, width, 4), dtype=np.uint8))

    def to_buffer(self) -> bytes:
        return np.ascontiguousarray(self.pixels).tobytes()

    def copy(self) -> RasterImage:
        return RasterImage(self.pixels.copy())
