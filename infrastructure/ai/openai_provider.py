"""
OpenAI Provider
===============

Concrete implementation of AIProviderInterface using the OpenAI chat
completions API.
"""

import logging

import openai
from django.conf import settings
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .interface import AIProviderError, AIProviderInterface, CompletionRequest

logger = logging.getLogger(__name__)


class OpenAIProvider(AIProviderInterface):
    """
    OpenAI provider implementation.

    Configuration (in settings.py):
        OPENAI_API_KEY: API key
        OPENAI_MODEL: Chat model name (default gpt-3.5-turbo)
        AI_REQUEST_TIMEOUT: Per-request timeout in seconds
    """

    def __init__(self, api_key=None, model=None):
        self.model = model or getattr(settings, "OPENAI_MODEL", "gpt-3.5-turbo")
        self.client = openai.OpenAI(
            api_key=api_key or getattr(settings, "OPENAI_API_KEY", ""),
            timeout=getattr(settings, "AI_REQUEST_TIMEOUT", 30),
            max_retries=0,
        )

    @property
    def name(self) -> str:
        return "openai"

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        retry=retry_if_exception_type(
            (
                openai.RateLimitError,
                openai.APIConnectionError,
                openai.APITimeoutError,
                openai.InternalServerError,
            )
        ),
        reraise=True,
    )
    def _create_completion(self, request: CompletionRequest):
        """Internal method to call the API with one retry on transient errors."""
        return self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": request.prompt}],
            max_tokens=request.max_tokens,
            temperature=request.temperature,
        )

    def complete(self, request: CompletionRequest) -> str:
        try:
            response = self._create_completion(request)
            return response.choices[0].message.content or ""
        except openai.OpenAIError as e:
            logger.error(f"OpenAI completion failed: {e}")
            raise AIProviderError(f"OpenAI error: {e}") from e
