"""
Placeholder Storage Adapter
===========================

Stores nothing and hands back placeholder image URLs. Used in tests, and in
development when S3 is unreachable.
"""

import logging
from typing import BinaryIO
from urllib.parse import quote

from .interface import StorageFile, StorageInterface

logger = logging.getLogger(__name__)

PLACEHOLDER_URL = "https://via.placeholder.com/400x300?text={text}"


class PlaceholderStorageAdapter(StorageInterface):
    def __init__(self):
        self.keys = set()

    def upload(self, file: BinaryIO, path: str, content_type: str, original_name: str = "") -> StorageFile:
        size = getattr(file, "size", None)
        if size is None:
            size = len(file.read())
        self.keys.add(path)
        logger.info(f"[PLACEHOLDER STORAGE] {path} ({content_type}, {size} bytes)")
        return StorageFile(
            key=path,
            url=self.get_url(original_name or path),
            size=size,
            content_type=content_type,
        )

    def delete(self, key: str) -> bool:
        if key in self.keys:
            self.keys.discard(key)
            return True
        return False

    @staticmethod
    def get_url(key: str) -> str:
        return PLACEHOLDER_URL.format(text=quote(key.rsplit("/", 1)[-1]))

    def exists(self, key: str) -> bool:
        return key in self.keys
