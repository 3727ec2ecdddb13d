import logging
import numpy as np

from ..models.pipeline_parameters import PipelineParameters
from ..models.raster_image import RasterImage
from .compositing_service import CompositingService
from .mask_service import MaskService
from .morphology_service import MorphologyService

logger = logging.getLogger(__name__)


class BorderService:
    """
    Die-cut sticker outline.

    • Closes small holes in the artwork silhouette.
    • Grows it by border_px into a solid white ring.
    • Puts the artwork back on top, so white only shows outside the art.
    """

    CLOSING_RADIUS = 3

    def __init__(self):
        self.mask_service = MaskService()
        self.morphology_service = MorphologyService()
        self.compositing_service = CompositingService()

    def silhouette_mask(self, canvas: RasterImage, alpha_threshold: int) -> np.ndarray:
        mask = self.mask_service.extract_visibility_mask(canvas, alpha_threshold)
        return self.morphology_service.close(mask, self.CLOSING_RADIUS)

    def border_layer(self, silhouette: np.ndarray, border_px: int) -> RasterImage:
        """White where the dilated silhouette is set, fully transparent elsewhere."""
        border_alpha = self.morphology_service.dilate(silhouette, border_px)
        height, width = border_alpha.shape
        pixels = np.zeros((height, width, 4), dtype=np.uint8)
        on = border_alpha != 0
        pixels[on] = (255, 255, 255, 255)
        return RasterImage(pixels)

    def add_white_border(self, canvas: RasterImage, params: PipelineParameters) -> RasterImage:
        silhouette = self.silhouette_mask(canvas, params.alpha_threshold)
        border = self.border_layer(silhouette, params.border_px)
        logger.debug(f"   Border covers {int(np.count_nonzero(border.alpha))} pixels")
        return self.compositing_service.alpha_over(canvas, border)
