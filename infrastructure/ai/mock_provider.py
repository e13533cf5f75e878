"""
Mock AI Provider
================

Canned responses for development without API keys. Responses are picked by
keywords in the prompt so each caller gets output in the shape it parses.
"""

import json
import logging
from typing import List

from .interface import AIProviderInterface, CompletionRequest

logger = logging.getLogger(__name__)


class MockAIProvider(AIProviderInterface):
    """
    Mock provider for development and tests.

    Records every prompt it receives in `prompts` for verification.
    """

    def __init__(self):
        self.prompts: List[str] = []

    @property
    def name(self) -> str:
        return "mock"

    def complete(self, request: CompletionRequest) -> str:
        prompt = request.prompt
        self.prompts.append(prompt)
        logger.info(f"[MOCK AI] Prompt: {prompt[:100]}...")

        lowered = prompt.lower()

        if "compare these products" in lowered:
            return json.dumps(
                {
                    "comparison": "Both products are well reviewed; the first has more feedback.",
                    "winner": None,
                    "rankings": [],
                }
            )

        if "overallsentiment" in lowered:
            return json.dumps(
                {
                    "overallSentiment": "positive",
                    "summary": "Generally positive feedback with minor concerns.",
                    "pros": ["Good quality", "Fast delivery"],
                    "cons": ["Packaging could be better"],
                    "keyHighlights": ["Value for money"],
                    "recommendationRate": 85,
                    "averageSentimentScore": 0.6,
                }
            )

        if "sentiment" in lowered:
            return json.dumps(
                {
                    "sentiment": "positive",
                    "sentimentScore": 0.75,
                    "summary": "Generally positive feedback with minor concerns.",
                    "extractedPros": ["Good quality", "Fast delivery", "Value for money"],
                    "extractedCons": ["Packaging could be better"],
                    "isSpam": False,
                    "spamScore": 0,
                }
            )

        if "fake" in lowered or "suspicious" in lowered:
            return json.dumps(
                {
                    "isSuspicious": False,
                    "suspicionScore": 15,
                    "flags": [],
                    "descriptionAnalysis": {"qualityScore": 70, "issues": []},
                    "recommendation": "approve",
                    "confidenceLevel": 60,
                }
            )

        if "assistant" in lowered:
            return (
                "I'm your Campus Marketplace assistant! I can help you find products, track orders, "
                "and answer questions about our platform. What would you like to know?"
            )

        return "AI response placeholder"
