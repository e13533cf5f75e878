"""
AI Provider Layer
=================

Text completion providers (OpenAI, Gemini, mock) behind one interface, with an
ordered fallback client.
"""

from .client import AICompletionClient
from .factory import AIFactory
from .interface import AIProviderError, AIProviderInterface, AIProviderUnavailable, CompletionRequest
from .mock_provider import MockAIProvider
from .unavailable_provider import UnavailableAIProvider

__all__ = [
    "AIProviderInterface",
    "AIProviderError",
    "AIProviderUnavailable",
    "CompletionRequest",
    "AICompletionClient",
    "AIFactory",
    "MockAIProvider",
    "UnavailableAIProvider",
]
