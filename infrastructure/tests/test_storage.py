"""
Storage Infrastructure Tests
=============================

Unit tests for the blob storage abstraction used by listing uploads.
"""

from io import BytesIO
from unittest.mock import MagicMock, patch

from django.test import TestCase, override_settings

from infrastructure.storage import (
    PlaceholderStorageAdapter,
    S3StorageAdapter,
    StorageException,
    StorageFactory,
    StorageFile,
    StorageInterface,
)


class StorageInterfaceTest(TestCase):
    def test_interface_is_abstract(self):
        """StorageInterface should not be instantiable."""
        with self.assertRaises(TypeError):
            StorageInterface()


@override_settings(
    AWS_STORAGE_BUCKET_NAME="test-bucket",
    AWS_ACCESS_KEY_ID="test-key",
    AWS_SECRET_ACCESS_KEY="test-secret",
)
class S3StorageAdapterTest(TestCase):
    """Test S3StorageAdapter with django-storages mocked out."""

    def setUp(self):
        self.content = b"listing image bytes"

    @patch("infrastructure.storage.s3_adapter.S3Boto3Storage")
    def test_upload_success(self, mock_storage_class):
        mock_storage = MagicMock()
        mock_storage_class.return_value = mock_storage
        mock_storage.save.return_value = "products/abc-1.png"
        mock_storage.size.return_value = len(self.content)
        mock_storage.url.return_value = "https://test-bucket.s3.amazonaws.com/products/abc-1.png"

        result = S3StorageAdapter().upload(BytesIO(self.content), "products/abc-1.png", "image/png")

        self.assertIsInstance(result, StorageFile)
        self.assertEqual(result.key, "products/abc-1.png")
        self.assertEqual(result.size, len(self.content))
        self.assertEqual(result.bucket, "test-bucket")
        mock_storage.save.assert_called_once()

    @patch("infrastructure.storage.s3_adapter.S3Boto3Storage")
    def test_upload_failure_raises_storage_exception(self, mock_storage_class):
        mock_storage = MagicMock()
        mock_storage_class.return_value = mock_storage
        mock_storage.save.side_effect = Exception("Connection refused")

        with self.assertRaises(StorageException) as ctx:
            S3StorageAdapter().upload(BytesIO(self.content), "products/abc-1.png", "image/png")

        self.assertIn("S3 upload failed", str(ctx.exception))

    @patch("infrastructure.storage.s3_adapter.S3Boto3Storage")
    def test_delete_missing_key_returns_false(self, mock_storage_class):
        mock_storage = MagicMock()
        mock_storage_class.return_value = mock_storage
        mock_storage.exists.return_value = False

        self.assertFalse(S3StorageAdapter().delete("products/missing.png"))
        mock_storage.delete.assert_not_called()

    @patch("infrastructure.storage.s3_adapter.S3Boto3Storage")
    def test_exists_swallows_backend_errors(self, mock_storage_class):
        mock_storage = MagicMock()
        mock_storage_class.return_value = mock_storage
        mock_storage.exists.side_effect = Exception("timeout")

        self.assertFalse(S3StorageAdapter().exists("products/abc-1.png"))


class PlaceholderStorageAdapterTest(TestCase):
    def setUp(self):
        self.storage = PlaceholderStorageAdapter()

    def test_upload_returns_placeholder_url(self):
        result = self.storage.upload(BytesIO(b"12345"), "products/abc-1.png", "image/png", original_name="lamp.png")

        self.assertEqual(result.url, "https://via.placeholder.com/400x300?text=lamp.png")
        self.assertEqual(result.size, 5)
        self.assertTrue(self.storage.exists("products/abc-1.png"))

    def test_delete(self):
        self.storage.upload(BytesIO(b"x"), "products/a.png", "image/png")

        self.assertTrue(self.storage.delete("products/a.png"))
        self.assertFalse(self.storage.delete("products/a.png"))


class StorageFactoryTest(TestCase):
    @patch("infrastructure.storage.s3_adapter.S3Boto3Storage")
    def test_create_s3(self, mock_storage):
        self.assertIsInstance(StorageFactory.create("s3"), S3StorageAdapter)

    @override_settings(STORAGE_BACKEND="placeholder")
    def test_create_from_settings(self):
        self.assertIsInstance(StorageFactory.create(), PlaceholderStorageAdapter)

    def test_invalid_backend(self):
        with self.assertRaises(ValueError):
            StorageFactory.create("ftp")
