# art_que/errors.py
from typing import Optional


class ArtQueError(Exception):
    """Base class for every error raised by the post-processing package."""


class MalformedInputError(ArtQueError, ValueError):
    """Pixel buffer does not match its declared size, or bytes fail to decode."""


class ExternalServiceError(ArtQueError):
    """
    A remote collaborator (background removal, image download) failed.

    Never retried here; the caller decides what to do with it.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
