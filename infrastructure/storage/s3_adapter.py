import logging
from typing import BinaryIO

from django.conf import settings
from storages.backends.s3boto3 import S3Boto3Storage

from .interface import StorageException, StorageFile, StorageInterface

logger = logging.getLogger(__name__)


class S3StorageAdapter(StorageInterface):
    """
    Listing media on S3 (or MinIO when AWS_S3_ENDPOINT_URL is set).

    Credentials, bucket and region come from the AWS_* settings read by
    django-storages. Returned URLs are signed when AWS_QUERYSTRING_AUTH is on.
    """

    def __init__(self):
        self.backend = S3Boto3Storage()
        self.bucket = getattr(settings, "AWS_STORAGE_BUCKET_NAME", "campus-marketplace")

    def upload(self, file: BinaryIO, path: str, content_type: str, original_name: str = "") -> StorageFile:
        if hasattr(file, "content_type"):
            # django-storages reads the object's ContentType from the upload
            file.content_type = content_type
        try:
            key = self.backend.save(path, file)
            stored = StorageFile(
                key=key,
                url=self.backend.url(key),
                size=self.backend.size(key),
                content_type=content_type,
                bucket=self.bucket,
            )
        except Exception as e:
            logger.error(f"Upload of {path} to bucket {self.bucket} failed: {e}")
            raise StorageException(f"S3 upload failed: {e}") from e

        logger.info(f"Stored {original_name or key} as s3://{self.bucket}/{key} ({stored.size} bytes)")
        return stored

    def delete(self, key: str) -> bool:
        if not self.exists(key):
            logger.warning(f"Nothing to delete at s3://{self.bucket}/{key}")
            return False
        try:
            self.backend.delete(key)
        except Exception as e:
            raise StorageException(f"S3 delete failed: {e}") from e
        logger.info(f"Deleted s3://{self.bucket}/{key}")
        return True

    def exists(self, key: str) -> bool:
        try:
            return self.backend.exists(key)
        except Exception as e:
            logger.warning(f"Existence check for {key} failed, treating as missing: {e}")
            return False
