"""
Object storage for generated certificates.

Two backends share one interface: the local static directory (served under
/static) and Cloudinary, where PDFs are uploaded as raw resources.
"""
import os
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import cloudinary
import cloudinary.uploader
from loguru import logger

from inspectcert.core.config import settings


STATIC_URL_PREFIX = "/static"


@dataclass
class UploadResult:
    storage_key: str
    public_url: str


class StorageService(ABC):
    @abstractmethod
    def upload(self, local_path: Path, remote_key: str) -> UploadResult:
        """Stores the file under `remote_key` and returns where it can be fetched."""


class LocalStorageService(StorageService):
    """Copies files below the static directory and returns their public URL."""

    def __init__(self, root: Path = settings.static_dir, public_url: str = settings.public_url):
        self.root = Path(root)
        self.public_url = public_url

    def upload(self, local_path: Path, remote_key: str) -> UploadResult:
        target = self.root / remote_key
        os.makedirs(target.parent, exist_ok=True)
        shutil.copyfile(local_path, target)
        logger.info(f"Stored {local_path} as {remote_key}")
        return UploadResult(
            storage_key=remote_key,
            public_url=f"{self.public_url}{STATIC_URL_PREFIX}/{remote_key}"
        )


class CloudinaryStorageService(StorageService):
    _configured: bool = False

    @classmethod
    def _configure(cls) -> None:
        """Configure Cloudinary with credentials from settings."""
        if cls._configured:
            return

        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True,
        )
        cls._configured = True

    def upload(self, local_path: Path, remote_key: str) -> UploadResult:
        self._configure()
        result = cloudinary.uploader.upload(
            str(local_path),
            public_id=remote_key,
            resource_type="raw",  # PDFs are not images
            overwrite=True,
            invalidate=True,
        )
        logger.info(f"Uploaded {local_path} to Cloudinary as {result['public_id']}")
        return UploadResult(storage_key=result["public_id"], public_url=result["secure_url"])


def get_storage_backend(name: str) -> StorageService:
    if name == "local":
        return LocalStorageService()
    if name == "cloudinary":
        return CloudinaryStorageService()
    raise ValueError(f"Unknown storage backend '{name}'.")
