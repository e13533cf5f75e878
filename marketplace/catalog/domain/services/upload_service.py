"""
UploadService - Listing Media Uploads

Validates product images and digital files against settings.UPLOAD_LIMITS and
stores them through the storage abstraction. When storage fails and the
placeholder fallback is enabled (development), placeholder URLs stand in for
the real ones; otherwise the upload fails.
"""

import logging
import os
import time
import uuid
from typing import Any, Dict, List, Optional

from django.conf import settings

from infrastructure.storage import PlaceholderStorageAdapter, StorageException, StorageInterface
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok


logger = logging.getLogger(__name__)

IMAGE_PREFIX = "products"
DIGITAL_PREFIX = "digital-products"


def build_key(prefix: str, filename: str) -> str:
    """<prefix>/<uuid>-<ms timestamp><ext>"""
    _, ext = os.path.splitext(filename or "")
    return f"{prefix}/{uuid.uuid4()}-{int(time.time() * 1000)}{ext.lower()}"


class UploadService(BaseService):
    """
    Dependencies:
    - StorageInterface: blob storage (injected via DI container)
    """

    def __init__(self, storage: StorageInterface, fallback: Optional[StorageInterface] = None):
        super().__init__()
        self.storage = storage
        self.fallback = fallback or PlaceholderStorageAdapter()

    @property
    def limits(self) -> Dict[str, Dict[str, Any]]:
        return settings.UPLOAD_LIMITS

    def validate(self, files: List, kind: str) -> Optional[str]:
        """Return an error message, or None when the files are acceptable."""
        limits = self.limits[kind]
        if len(files) > limits["max_files"]:
            return f"Too many files (max {limits['max_files']})"

        for upload in files:
            content_type = getattr(upload, "content_type", "") or ""
            if content_type not in limits["content_types"]:
                return f"Unsupported file type: {content_type or 'unknown'}"
            if (getattr(upload, "size", 0) or 0) > limits["max_size"]:
                return f"File too large (max {limits['max_size'] // (1024 * 1024)}MB)"
        return None

    def _store(self, upload, prefix: str):
        key = build_key(prefix, getattr(upload, "name", ""))
        content_type = getattr(upload, "content_type", "application/octet-stream")
        name = getattr(upload, "name", "")
        try:
            return self.storage.upload(upload, key, content_type, original_name=name)
        except StorageException as e:
            if not settings.STORAGE_PLACEHOLDER_FALLBACK:
                raise
            self.logger.warning(f"Storage failed for {key}, using placeholder: {e}")
            return self.fallback.upload(upload, key, content_type, original_name=name)

    @BaseService.log_performance
    def upload_images(self, images: List, title: str = "") -> ServiceResult[List[Dict[str, Any]]]:
        """
        Store listing images. The first one becomes the primary image.

        Returns:
            ServiceResult with [{url, alt, is_primary}]
        """
        error = self.validate(images, "image")
        if error:
            return service_err(ErrorCodes.VALIDATION_ERROR, error)

        try:
            stored = [self._store(image, IMAGE_PREFIX) for image in images]
        except StorageException as e:
            self.logger.error(f"Image upload failed: {e}", exc_info=True)
            return service_err(ErrorCodes.UPLOAD_FAILED, "Image upload failed")

        return service_ok(
            [{"url": item.url, "alt": title, "is_primary": index == 0} for index, item in enumerate(stored)]
        )

    @BaseService.log_performance
    def upload_digital_file(self, upload) -> ServiceResult[Dict[str, Any]]:
        """
        Store the downloadable file of a digital listing.

        Returns:
            ServiceResult with digital_details {file_url, file_type, file_size,
            download_limit, access_duration}
        """
        error = self.validate([upload], "digital")
        if error:
            return service_err(ErrorCodes.VALIDATION_ERROR, error)

        try:
            stored = self._store(upload, DIGITAL_PREFIX)
        except StorageException as e:
            self.logger.error(f"Digital file upload failed: {e}", exc_info=True)
            return service_err(ErrorCodes.UPLOAD_FAILED, "File upload failed")

        return service_ok(
            {
                "file_url": stored.url,
                "file_type": stored.content_type,
                "file_size": stored.size,
                "download_limit": -1,
                "access_duration": -1,
            }
        )
