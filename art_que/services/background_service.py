from ..models.raster_image import RasterImage
from ..repositories.background_removal_repository import BackgroundRemovalRepository
from ..repositories.image_repository import ImageRepository


class BackgroundService:
    """
    Business-level wrapper around the remote background-removal model.
    Raises ExternalServiceError on any remote failure; there is no fallback.
    """

    def __init__(self, repo: BackgroundRemovalRepository = None):
        self.repo = repo or BackgroundRemovalRepository()
        self.image_repository = ImageRepository()

    def remove_background_bytes(self, image_bytes: bytes) -> bytes:
        return self.repo.remove_background(image_bytes)

    def remove_background(self, image: RasterImage) -> RasterImage:
        png = self.image_repository.encode_png(image)
        return self.image_repository.decode(self.remove_background_bytes(png))
