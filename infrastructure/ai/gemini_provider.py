"""
Gemini Provider
===============

Concrete implementation of AIProviderInterface using google-generativeai.
"""

import logging

import google.generativeai as genai
from django.conf import settings
from google.api_core import exceptions as google_exceptions
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .interface import AIProviderError, AIProviderInterface, CompletionRequest

logger = logging.getLogger(__name__)


class GeminiProvider(AIProviderInterface):
    """
    Google Gemini provider implementation.

    Configuration (in settings.py):
        GEMINI_API_KEY: API key
        GEMINI_MODEL: Model name (default gemini-pro)
    """

    def __init__(self, api_key=None, model=None):
        genai.configure(api_key=api_key or getattr(settings, "GEMINI_API_KEY", ""))
        self.model_name = model or getattr(settings, "GEMINI_MODEL", "gemini-pro")
        self.model = genai.GenerativeModel(self.model_name)
        self.timeout = getattr(settings, "AI_REQUEST_TIMEOUT", 30)

    @property
    def name(self) -> str:
        return "gemini"

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        retry=retry_if_exception_type(
            (
                google_exceptions.ResourceExhausted,
                google_exceptions.ServiceUnavailable,
                google_exceptions.DeadlineExceeded,
            )
        ),
        reraise=True,
    )
    def _generate(self, request: CompletionRequest):
        return self.model.generate_content(
            request.prompt,
            generation_config={
                "max_output_tokens": request.max_tokens,
                "temperature": request.temperature,
            },
            request_options={"timeout": self.timeout},
        )

    def complete(self, request: CompletionRequest) -> str:
        try:
            return self._generate(request).text
        except (google_exceptions.GoogleAPIError, ValueError) as e:
            # ValueError: response blocked by safety filters has no text part
            logger.error(f"Gemini completion failed: {e}")
            raise AIProviderError(f"Gemini error: {e}") from e
