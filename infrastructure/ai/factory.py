"""
AI Provider Factory
===================

Builds the provider chain from settings: OpenAI first, then Gemini, then the
mock provider when AI_USE_MOCK is on. With nothing configured the chain holds
only the unavailable provider.
"""

import logging
from typing import List

from django.conf import settings

from .client import AICompletionClient
from .interface import AIProviderInterface
from .mock_provider import MockAIProvider
from .unavailable_provider import UnavailableAIProvider

logger = logging.getLogger(__name__)


def _is_configured(key: str, placeholder_prefix: str) -> bool:
    return bool(key) and not key.startswith(placeholder_prefix)


class AIFactory:
    """
    Factory for the AI completion client.

    Usage:
        # In settings.py
        OPENAI_API_KEY = "sk-..."
        AI_USE_MOCK = True  # development only

        # In your code
        client = AIFactory.create()
    """

    @staticmethod
    def build_providers() -> List[AIProviderInterface]:
        providers: List[AIProviderInterface] = []

        openai_key = getattr(settings, "OPENAI_API_KEY", "") or ""
        if _is_configured(openai_key, "sk-your"):
            from .openai_provider import OpenAIProvider

            providers.append(OpenAIProvider(api_key=openai_key))
            logger.info("OpenAI provider initialized")

        gemini_key = getattr(settings, "GEMINI_API_KEY", "") or ""
        if _is_configured(gemini_key, "your-"):
            from .gemini_provider import GeminiProvider

            providers.append(GeminiProvider(api_key=gemini_key))
            logger.info("Gemini provider initialized")

        if getattr(settings, "AI_USE_MOCK", False):
            providers.append(MockAIProvider())
            logger.info("Mock AI provider enabled")

        if not providers:
            logger.warning(
                "No AI provider configured. AI features run in degraded mode "
                "(set OPENAI_API_KEY or GEMINI_API_KEY to enable)."
            )
            providers.append(UnavailableAIProvider())

        return providers

    @staticmethod
    def create() -> AICompletionClient:
        return AICompletionClient(AIFactory.build_providers())

    @staticmethod
    def create_mock() -> AICompletionClient:
        """Client backed only by the mock provider."""
        return AICompletionClient([MockAIProvider()])

    @staticmethod
    def create_unavailable() -> AICompletionClient:
        return AICompletionClient([UnavailableAIProvider()])
