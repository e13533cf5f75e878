"""
Service Container Tests
========================

Unit tests for dependency injection container.
"""

from unittest.mock import MagicMock, patch

from django.test import TestCase, override_settings

from infrastructure.ai import AICompletionClient
from infrastructure.container import ServiceContainer, container, get_ai, get_storage
from infrastructure.storage import PlaceholderStorageAdapter, S3StorageAdapter, StorageInterface


class ServiceContainerTest(TestCase):
    """Test ServiceContainer implementation."""

    def setUp(self):
        container.reset()

    def tearDown(self):
        container.reset()

    def test_container_is_singleton(self):
        self.assertIs(ServiceContainer(), ServiceContainer())
        self.assertIs(ServiceContainer(), container)

    @override_settings(STORAGE_BACKEND="s3")
    @patch("infrastructure.storage.s3_adapter.S3Boto3Storage")
    def test_storage_is_cached(self, mock_storage):
        mock_storage.return_value = MagicMock()

        storage = container.storage()

        self.assertIsInstance(storage, StorageInterface)
        self.assertIsInstance(storage, S3StorageAdapter)
        self.assertIs(storage, container.storage())
        self.assertIs(storage, get_storage())

    @override_settings(OPENAI_API_KEY="", GEMINI_API_KEY="", AI_USE_MOCK=False)
    def test_ai_client_without_providers_is_unavailable(self):
        ai = container.ai()

        self.assertIsInstance(ai, AICompletionClient)
        self.assertFalse(ai.is_available)
        self.assertIs(ai, get_ai())

    def test_domain_services_share_dependencies(self):
        container.configure_for_testing()

        self.assertIs(container.cart_service().pricing_service, container.pricing_service())
        self.assertIs(container.order_service().pricing_service, container.pricing_service())
        self.assertIs(container.catalog_service().trust_service, container.trust_service())
        self.assertIs(container.moderation_service().trust_service, container.trust_service())
        self.assertIs(container.trust_service().ai_client, container.ai())
        self.assertIs(container.assistant_service().ai_client, container.ai())

    def test_configure_for_testing(self):
        fake_ai = MagicMock(spec=AICompletionClient)

        container.configure_for_testing(ai=fake_ai)

        self.assertIsInstance(container.storage(), PlaceholderStorageAdapter)
        self.assertIs(container.ai(), fake_ai)
        self.assertIs(container.review_analyzer().ai_client, fake_ai)

    def test_reset_drops_cached_services(self):
        container.configure_for_testing()
        catalog = container.catalog_service()

        container.reset()
        container.configure_for_testing()

        self.assertIsNot(container.catalog_service(), catalog)
