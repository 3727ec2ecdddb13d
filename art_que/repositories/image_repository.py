from io import BytesIO
from pathlib import Path
from typing import Union
import logging

import numpy as np
import requests
from PIL import Image as PILImage, UnidentifiedImageError

from .. import config
from ..errors import ExternalServiceError, MalformedInputError
from ..models.raster_image import RasterImage

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles byte / file / URL I/O for RasterImage entities.
    """
    PNG_COMPRESS_LEVEL = 6

    @staticmethod
    def decode(data: bytes) -> RasterImage:
        """Decode any Pillow-readable image into RGBA (alpha added when missing)."""
        if not data:
            raise MalformedInputError("Image bytes are empty")
        try:
            with PILImage.open(BytesIO(data)) as pil_img:
                pil_img.load()
                rgba = pil_img.convert("RGBA")
        except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError) as err:
            raise MalformedInputError(f"Unable to decode image: {err}") from err
        return RasterImage(np.array(rgba, dtype=np.uint8))

    @classmethod
    def encode_png(cls, image: RasterImage) -> bytes:
        pil_img = PILImage.fromarray(np.ascontiguousarray(image.pixels))
        buffer = BytesIO()
        pil_img.save(buffer, format="PNG", compress_level=cls.PNG_COMPRESS_LEVEL)
        return buffer.getvalue()

    @classmethod
    def load(cls, path: Union[str, Path]) -> RasterImage:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found or unreadable: {path}")
        return cls.decode(path.read_bytes())

    @classmethod
    def save(cls, image: RasterImage, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(cls.encode_png(image))
        return path

    @staticmethod
    def fetch(url: str, timeout: float = None) -> bytes:
        """Download raw bytes from a public URL."""
        timeout = config.DOWNLOAD_TIMEOUT_SECONDS if timeout is None else timeout
        logger.info(f"🔗 Downloading from URL: {url}")
        try:
            response = requests.get(url, timeout=timeout)
        except requests.RequestException as err:
            raise ExternalServiceError(f"Failed to download image from URL: {err}") from err
        if not response.ok:
            raise ExternalServiceError(
                f"Failed to download image from URL (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        return response.content
