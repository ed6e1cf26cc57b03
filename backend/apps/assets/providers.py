"""
Storage provider for uploaded assets.
"""
import os
import logging
from abc import ABC, abstractmethod
from typing import BinaryIO
from dataclasses import dataclass
from django.conf import settings

logger = logging.getLogger(__name__)


@dataclass
class UploadResult:
    """Result of a file upload."""
    success: bool
    file_path: str = ''
    file_url: str = ''
    error: str = ''


class BaseStorageProvider(ABC):
    """Base class for storage providers."""

    @abstractmethod
    def upload(self, file: BinaryIO, path: str) -> UploadResult:
        """Store a file at `path`."""

    @abstractmethod
    def delete(self, path: str) -> bool:
        """Remove a stored file."""

    @abstractmethod
    def get_url(self, path: str) -> str:
        """URL the stored file is served from."""


class LocalStorageProvider(BaseStorageProvider):
    """Files under MEDIA_ROOT, served at MEDIA_URL (/uploads/)."""

    def __init__(self, base_path: str = None, base_url: str = None):
        self.base_path = os.path.realpath(base_path or settings.MEDIA_ROOT)
        self.base_url = base_url or settings.MEDIA_URL
        os.makedirs(self.base_path, exist_ok=True)

    def _get_full_path(self, path: str) -> str:
        full_path = os.path.realpath(os.path.join(self.base_path, path))
        if os.path.commonpath([full_path, self.base_path]) != self.base_path:
            raise ValueError(f"Path escapes storage root: {path}")
        return full_path

    def upload(self, file: BinaryIO, path: str) -> UploadResult:
        try:
            full_path = self._get_full_path(path)
            os.makedirs(os.path.dirname(full_path), exist_ok=True)

            with open(full_path, 'wb') as f:
                for chunk in iter(lambda: file.read(8192), b''):
                    f.write(chunk)

            return UploadResult(success=True, file_path=path, file_url=self.get_url(path))
        except (OSError, ValueError) as e:
            logger.error(f"Local upload error: {e}")
            return UploadResult(success=False, error=str(e))

    def delete(self, path: str) -> bool:
        try:
            full_path = self._get_full_path(path)
            if os.path.exists(full_path):
                os.remove(full_path)
            return True
        except (OSError, ValueError) as e:
            logger.error(f"Local delete error: {e}")
            return False

    def get_url(self, path: str) -> str:
        return self.base_url + path


def get_storage_provider() -> BaseStorageProvider:
    return LocalStorageProvider()
