import math
import cv2
import numpy as np


class MorphologyService:
    """
    Binary dilation / erosion with a disk structuring element.

    Masks are (H, W) uint8; any non-zero value counts as foreground and the
    output is always 0 / 255. Pixels outside the image never contribute:
    they cannot switch anything on when dilating and cannot switch anything
    off when eroding.
    """

    @staticmethod
    def disk_kernel(radius: int) -> np.ndarray:
        """Row dy covers |dx| <= floor(sqrt(radius² - dy²))."""
        if radius < 0:
            raise ValueError(f"radius must be >= 0, got {radius}")
        size = 2 * radius + 1
        kernel = np.zeros((size, size), dtype=np.uint8)
        r_squared = radius * radius
        for dy in range(-radius, radius + 1):
            dx_max = math.isqrt(r_squared - dy * dy)
            kernel[dy + radius, radius - dx_max:radius + dx_max + 1] = 1
        return kernel

    @staticmethod
    def _binarise(mask: np.ndarray) -> np.ndarray:
        return np.where(mask != 0, 255, 0).astype(np.uint8)

    def dilate(self, mask: np.ndarray, radius: int) -> np.ndarray:
        kernel = self.disk_kernel(radius)
        return cv2.dilate(self._binarise(mask), kernel,
                          borderType=cv2.BORDER_CONSTANT, borderValue=0)

    def erode(self, mask: np.ndarray, radius: int) -> np.ndarray:
        kernel = self.disk_kernel(radius)
        return cv2.erode(self._binarise(mask), kernel,
                         borderType=cv2.BORDER_CONSTANT, borderValue=255)

    def close(self, mask: np.ndarray, radius: int) -> np.ndarray:
        """Dilate then erode: fills holes narrower than the disk."""
        return self.erode(self.dilate(mask, radius), radius)
