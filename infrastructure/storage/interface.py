"""
Blob storage contract for listing media (product images, digital product files).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Optional


class StorageException(Exception):
    """The backend could not store or remove a blob."""


@dataclass
class StorageFile:
    key: str  # products/<uuid>-<ms><ext> or digital-products/...
    url: str
    size: int
    content_type: str
    bucket: Optional[str] = None


class StorageInterface(ABC):
    """
    Implementations:
        - S3StorageAdapter: S3 or MinIO through django-storages
        - PlaceholderStorageAdapter: keeps nothing, returns placeholder image URLs
    """

    @abstractmethod
    def upload(self, file: BinaryIO, path: str, content_type: str, original_name: str = "") -> StorageFile:
        """Store `file` under `path`. Raises StorageException on failure."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a blob; False when there was nothing to remove."""

    @abstractmethod
    def exists(self, key: str) -> bool: ...
