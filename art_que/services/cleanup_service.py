import logging
import numpy as np

from ..models.raster_image import RasterImage
from .component_service import ComponentService
from .mask_service import MaskService

logger = logging.getLogger(__name__)


class CleanupService:
    """
    Removes background-removal speckle: keeps the largest connected region
    plus everything inside that region's bounding box.
    """

    def __init__(self):
        self.mask_service = MaskService()
        self.component_service = ComponentService()

    def remove_stray_pixels(self, image: RasterImage, alpha_threshold: int) -> RasterImage:
        """
        Returns a new RasterImage; pixels outside both the largest component and
        its bounding box become (0, 0, 0, 0). The input is never modified.
        """
        out = image.copy()

        mask = self.mask_service.extract_visibility_mask(image, alpha_threshold)
        labels, regions = self.component_service.label_components(mask)
        largest = self.component_service.largest_region(regions)
        if largest is None:
            logger.info("   No visible pixels, nothing to clean")
            return out

        keep = labels == largest.label
        keep[largest.min_y:largest.max_y + 1, largest.min_x:largest.max_x + 1] = True
        out.pixels[~keep] = 0

        logger.info(f"   Found {len(regions)} components, kept largest ({largest.area} pixels)")
        return out
