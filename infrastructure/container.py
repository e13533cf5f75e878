"""
Process-wide service locator.

Views ask the container for a service; it builds each one on first use, wires
in the shared infrastructure (blob storage, AI client) and keeps the instance
for the life of the process.

    from infrastructure.container import container

    result = container.cart_service().add_item(request.user, product_id, 2)
"""

import logging
from typing import Callable, Dict, Optional

from .ai import AICompletionClient, AIFactory
from .storage import StorageFactory, StorageInterface

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Singleton; `reset()` and `configure_for_testing()` drop every cached instance."""

    _instance: Optional["ServiceContainer"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._services = {}
            logger.info("Service container initialized")
        return cls._instance

    def _provide(self, name: str, build: Callable[[], object]):
        if name not in self._services:
            self._services[name] = build()
            logger.debug(f"Built {name}: {type(self._services[name]).__name__}")
        return self._services[name]

    # Infrastructure

    def storage(self) -> StorageInterface:
        return self._provide("storage", StorageFactory.create)

    def ai(self) -> AICompletionClient:
        return self._provide("ai", AIFactory.create)

    # Accounts

    def auth_service(self):
        from authentication.domain.services import AuthService

        return self._provide("auth", AuthService)

    def seller_service(self):
        from authentication.domain.services import SellerService

        return self._provide("seller", SellerService)

    # Cart and ordering

    def pricing_service(self):
        from marketplace.cart.domain.services import PricingService

        return self._provide("pricing", PricingService)

    def cart_service(self):
        from marketplace.cart.domain.services import CartService

        return self._provide("cart", lambda: CartService(pricing_service=self.pricing_service()))

    def order_service(self):
        from marketplace.ordering.domain.services import OrderService

        return self._provide("order", lambda: OrderService(pricing_service=self.pricing_service()))

    # Catalog

    def trust_service(self):
        from marketplace.catalog.domain.services import TrustService

        return self._provide("trust", lambda: TrustService(ai_client=self.ai()))

    def review_analyzer(self):
        from marketplace.catalog.domain.services import ReviewAnalyzer

        return self._provide("review_analyzer", lambda: ReviewAnalyzer(ai_client=self.ai()))

    def review_metrics_service(self):
        from marketplace.catalog.domain.services import ReviewMetricsService

        return self._provide("review_metrics", ReviewMetricsService)

    def review_service(self):
        from marketplace.catalog.domain.services import ReviewService

        return self._provide(
            "review",
            lambda: ReviewService(
                review_metrics_service=self.review_metrics_service(),
                review_analyzer=self.review_analyzer(),
            ),
        )

    def upload_service(self):
        from marketplace.catalog.domain.services import UploadService

        return self._provide("upload", lambda: UploadService(storage=self.storage()))

    def catalog_service(self):
        from marketplace.catalog.domain.services import CatalogService

        return self._provide(
            "catalog",
            lambda: CatalogService(
                upload_service=self.upload_service(),
                trust_service=self.trust_service(),
                review_analyzer=self.review_analyzer(),
            ),
        )

    # Moderation and chat

    def moderation_service(self):
        from marketplace.moderation.domain.services import ModerationService

        return self._provide(
            "moderation",
            lambda: ModerationService(seller_service=self.seller_service(), trust_service=self.trust_service()),
        )

    def assistant_service(self):
        from chat.domain.services import AssistantService

        return self._provide("assistant", lambda: AssistantService(ai_client=self.ai()))

    def reset(self):
        self._services = {}
        logger.info("Service container reset")

    def configure_for_testing(self, ai: Optional[AICompletionClient] = None):
        """Placeholder storage, and `ai` or a client whose only provider is unavailable."""
        self._services = {
            "storage": StorageFactory.create_placeholder(),
            "ai": ai or AIFactory.create_unavailable(),
        }
        logger.info("Service container configured for testing")


container = ServiceContainer()


def get_storage() -> StorageInterface:
    return container.storage()


def get_ai() -> AICompletionClient:
    return container.ai()
