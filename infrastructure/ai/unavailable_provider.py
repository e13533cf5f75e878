"""
Unavailable AI Provider
=======================

Selected when no provider is configured. Every call raises
AIProviderUnavailable, so callers take their degraded path explicitly instead
of receiving made-up output.
"""

from .interface import AIProviderInterface, AIProviderUnavailable, CompletionRequest


class UnavailableAIProvider(AIProviderInterface):
    def __init__(self, reason: str = "No AI provider configured"):
        self.reason = reason

    @property
    def name(self) -> str:
        return "unavailable"

    def complete(self, request: CompletionRequest) -> str:
        raise AIProviderUnavailable(self.reason)
