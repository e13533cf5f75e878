"""
AI Completion Client
====================

Fallback chain over the configured providers. The first provider that answers
wins; provider errors are logged and the next one is tried. When every
provider fails the caller gets AIProviderUnavailable.
"""

import json
import logging
import re
import time
from typing import Any, Dict, List, Optional

from .interface import AIProviderError, AIProviderInterface, AIProviderUnavailable, CompletionRequest
from .metrics import ai_json_parse_failures_total, ai_provider_calls_total, ai_provider_latency_seconds

logger = logging.getLogger(__name__)

JSON_INSTRUCTION = "Respond ONLY with valid JSON, no additional text."
JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


class AICompletionClient:
    """
    Ordered provider chain.

    Usage:
        client = container.ai()
        text = client.complete("Summarise this listing", max_tokens=200)
        data = client.complete_json("Analyse the sentiment of ...")
    """

    def __init__(self, providers: List[AIProviderInterface]):
        self.providers = list(providers)

    @property
    def provider_names(self) -> List[str]:
        return [provider.name for provider in self.providers]

    @property
    def is_available(self) -> bool:
        return any(provider.name != "unavailable" for provider in self.providers)

    def complete(self, prompt: str, max_tokens: int = 500, temperature: float = 0.7) -> str:
        """
        Get a completion from the first provider that answers.

        Raises:
            AIProviderUnavailable: If no provider produced a response
        """
        request = CompletionRequest(prompt=prompt, max_tokens=max_tokens, temperature=temperature)
        last_error: Optional[Exception] = None

        for provider in self.providers:
            start = time.time()
            try:
                text = provider.complete(request)
            except AIProviderUnavailable as e:
                ai_provider_calls_total.labels(provider=provider.name, status="unavailable").inc()
                last_error = e
                continue
            except AIProviderError as e:
                ai_provider_calls_total.labels(provider=provider.name, status="error").inc()
                logger.warning(f"AI provider {provider.name} failed, trying next: {e}")
                last_error = e
                continue

            ai_provider_latency_seconds.labels(provider=provider.name).observe(time.time() - start)
            ai_provider_calls_total.labels(provider=provider.name, status="success").inc()
            return text

        raise AIProviderUnavailable(str(last_error) if last_error else "No AI provider configured")

    def complete_json(self, prompt: str, max_tokens: int = 500, temperature: float = 0.7) -> Optional[Dict[str, Any]]:
        """
        Get a completion and parse it as a JSON object.

        The first {...} block in the response is parsed, so models that wrap
        JSON in prose or code fences still work.

        Returns:
            Parsed object, or None if the response is not valid JSON

        Raises:
            AIProviderUnavailable: If no provider produced a response
        """
        response = self.complete(f"{prompt}\n\n{JSON_INSTRUCTION}", max_tokens=max_tokens, temperature=temperature)

        match = JSON_OBJECT_PATTERN.search(response or "")
        candidate = match.group(0) if match else response

        try:
            parsed = json.loads(candidate)
        except (TypeError, ValueError) as e:
            ai_json_parse_failures_total.inc()
            logger.warning(f"AI response is not valid JSON: {e}")
            return None

        if not isinstance(parsed, dict):
            ai_json_parse_failures_total.inc()
            return None
        return parsed
