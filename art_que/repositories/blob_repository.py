from datetime import datetime, timezone
from pathlib import Path
from typing import Union
import logging

from .. import config

logger = logging.getLogger(__name__)


class BlobRepository:
    """
    Local-disk sink for finished PNGs; returns the URL they are served under.
    """

    def __init__(self, root: Union[str, Path] = None, base_url: str = None) -> None:
        self.root = Path(root or config.RESULTS_FOLDER)
        self.base_url = config.PUBLIC_BASE_URL if base_url is None else base_url.rstrip("/")

    @staticmethod
    def timestamped_name(prefix: str = "postprocessed", ext: str = ".png") -> str:
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%f")
        return f"{prefix}-{stamp}{ext}"

    def url_for(self, filename: str) -> str:
        return f"{self.base_url}/api/image/{filename}"

    def path_for(self, filename: str) -> Path:
        return self.root / Path(filename).name

    def put(self, data: bytes, filename: str = None) -> str:
        filename = filename or self.timestamped_name()
        self.root.mkdir(parents=True, exist_ok=True)
        target = self.path_for(filename)
        target.write_bytes(data)
        url = self.url_for(target.name)
        logger.info(f"☁️ Stored {len(data)} bytes → {url}")
        return url
