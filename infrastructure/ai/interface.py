"""
AI Provider Interface
=====================

Abstract base class defining the contract for text completion providers.
Every provider speaks the same single call: a prompt in, plain text out.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class CompletionRequest:
    """
    A single completion request.

    Attributes:
        prompt: Full prompt text sent to the model
        max_tokens: Upper bound on generated tokens
        temperature: Sampling temperature
    """

    prompt: str
    max_tokens: int = 500
    temperature: float = 0.7


class AIProviderInterface(ABC):
    """
    Abstract interface for language model providers.

    Concrete implementations:
        - OpenAIProvider: OpenAI chat completions
        - GeminiProvider: Google Gemini
        - MockAIProvider: canned responses for development
        - UnavailableAIProvider: explicit "no provider configured" variant
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short provider name used in logs and metrics."""
        pass

    @abstractmethod
    def complete(self, request: CompletionRequest) -> str:
        """
        Generate a completion for the request.

        Returns:
            Generated text

        Raises:
            AIProviderError: If the provider call fails
        """
        pass


class AIProviderError(Exception):
    """Base exception for AI provider operations."""

    pass


class AIProviderUnavailable(AIProviderError):
    """Raised when no provider is configured or every provider failed."""

    pass
