from .factory import StorageFactory
from .interface import StorageException, StorageFile, StorageInterface
from .placeholder_adapter import PlaceholderStorageAdapter
from .s3_adapter import S3StorageAdapter

__all__ = [
    "PlaceholderStorageAdapter",
    "S3StorageAdapter",
    "StorageException",
    "StorageFactory",
    "StorageFile",
    "StorageInterface",
]
