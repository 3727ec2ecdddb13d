# repositories/background_removal_repository.py
import base64
import logging

import requests

from .. import config
from ..errors import ExternalServiceError

logger = logging.getLogger(__name__)


class BackgroundRemovalRepository:
    """
    Thin HTTP client for the FAL.ai background-removal model.

    • Sends the image inline as a data URI (no temporary upload).
    • Returns the background-stripped bytes exactly as FAL serves them.
    • Every failure becomes ExternalServiceError; nothing is retried here.
    """

    def __init__(self, api_key: str = None, endpoint: str = None,
                 timeout: float = None, session: requests.Session = None) -> None:
        self.api_key = api_key if api_key is not None else config.FAL_KEY
        self.endpoint = endpoint or config.FAL_RMBG_URL
        self.timeout = timeout if timeout is not None else config.FAL_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    # ---------- private helpers ----------
    @staticmethod
    def _to_data_uri(image_bytes: bytes, mime_type: str = "image/png") -> str:
        b64 = base64.b64encode(image_bytes).decode("utf-8")
        return f"data:{mime_type};base64,{b64}"

    @staticmethod
    def _decode_data_uri(data_uri: str) -> bytes:
        try:
            _, b64 = data_uri.split(",", 1)
            return base64.b64decode(b64)
        except ValueError as err:
            raise ExternalServiceError(f"FAL returned an unreadable data URI: {err}") from err

    def _download(self, url: str) -> bytes:
        if url.startswith("data:"):
            return self._decode_data_uri(url)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as err:
            raise ExternalServiceError(f"Failed to download background-removed image: {err}") from err
        if not response.ok:
            raise ExternalServiceError(
                f"Failed to download background-removed image (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        return response.content

    # ---------- public API ----------
    def remove_background(self, image_bytes: bytes) -> bytes:
        if not self.api_key:
            raise ExternalServiceError("FAL_KEY not configured")

        logger.info("🗑️ Removing background with FAL.ai...")
        headers = {"Authorization": f"Key {self.api_key}", "Content-Type": "application/json"}
        try:
            response = self.session.post(
                self.endpoint,
                headers=headers,
                json={"image_url": self._to_data_uri(image_bytes)},
                timeout=self.timeout,
            )
        except requests.RequestException as err:
            raise ExternalServiceError(f"FAL RMBG request failed: {err}") from err

        if not response.ok:
            raise ExternalServiceError(
                f"FAL RMBG request failed: HTTP {response.status_code} {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            data = {"raw": response.text}

        url = (data.get("image") or {}).get("url") if isinstance(data, dict) else None
        if not url:
            raise ExternalServiceError("Missing image URL in FAL response")

        out = self._download(url)
        logger.info("✅ Background removed")
        return out
