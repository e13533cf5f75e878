import logging
from typing import Optional

from django.conf import settings

from .interface import StorageInterface
from .placeholder_adapter import PlaceholderStorageAdapter
from .s3_adapter import S3StorageAdapter

logger = logging.getLogger(__name__)

BACKENDS = {
    "s3": S3StorageAdapter,
    "placeholder": PlaceholderStorageAdapter,
}


class StorageFactory:
    """Builds the backend named by settings.STORAGE_BACKEND ("s3" or "placeholder")."""

    @staticmethod
    def create(backend: Optional[str] = None) -> StorageInterface:
        name = backend or getattr(settings, "STORAGE_BACKEND", "s3")
        try:
            adapter_class = BACKENDS[name]
        except KeyError:
            raise ValueError(f"Invalid storage backend: {name}. Choose one of {', '.join(BACKENDS)}") from None
        logger.info(f"Using {name} storage backend")
        return adapter_class()

    @staticmethod
    def create_placeholder() -> PlaceholderStorageAdapter:
        return PlaceholderStorageAdapter()
