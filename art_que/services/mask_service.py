import numpy as np

from ..errors import MalformedInputError
from ..models.raster_image import RasterImage


class MaskService:
    """Alpha-plane → binary visibility mask (0 / 255)."""

    VISIBLE = 255

    @staticmethod
    def alpha_to_mask(alpha: np.ndarray, alpha_threshold: int) -> np.ndarray:
        """
        Args:
            alpha (np.ndarray): (H, W) alpha plane, any integer dtype.
            alpha_threshold (int): pixels with alpha strictly above this are visible.

        Returns:
            (np.ndarray): (H, W) uint8 mask, 255 visible / 0 invisible.
        """
        if alpha.ndim != 2:
            raise MalformedInputError(f"Alpha plane must be 2-D, got shape {alpha.shape}")
        return np.where(alpha > alpha_threshold, MaskService.VISIBLE, 0).astype(np.uint8)

    def extract_visibility_mask(self, image: RasterImage, alpha_threshold: int) -> np.ndarray:
        return self.alpha_to_mask(image.alpha, alpha_threshold)

    @staticmethod
    def count_visible(mask: np.ndarray) -> int:
        return int(np.count_nonzero(mask))
