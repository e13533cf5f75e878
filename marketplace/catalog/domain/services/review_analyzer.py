"""
ReviewAnalyzer - AI review insights

Sentiment for a single review, a summary across a product's reviews, and a
comparison across products. Every call degrades to a fixed default when the
AI provider is unavailable or answers with something that is not JSON.
"""

import json
import logging
from typing import Any, Dict, List, Sequence

from django.utils import timezone

from infrastructure.ai import AICompletionClient, AIProviderError
from marketplace.services.base import BaseService


logger = logging.getLogger(__name__)

SENTIMENTS = ("positive", "negative", "neutral", "mixed")


def average_rating(reviews: Sequence) -> float:
    if not reviews:
        return 0
    return round(sum(review.rating or 0 for review in reviews) / len(reviews), 1)


def default_sentiment() -> Dict[str, Any]:
    return {
        "sentiment": "neutral",
        "sentiment_score": 0,
        "summary": "Unable to analyze review.",
        "extracted_pros": [],
        "extracted_cons": [],
        "is_spam": False,
        "spam_score": 0,
        "analyzed_at": timezone.now().isoformat(),
    }


def empty_summary() -> Dict[str, Any]:
    return {
        "overall_sentiment": "neutral",
        "summary": "No reviews available yet.",
        "pros": [],
        "cons": [],
        "key_highlights": [],
        "recommendation_rate": 0,
    }


def default_summary(reviews: Sequence) -> Dict[str, Any]:
    return {
        "overall_sentiment": "neutral",
        "summary": "Review analysis unavailable.",
        "pros": [],
        "cons": [],
        "key_highlights": [],
        "recommendation_rate": 50,
        "average_sentiment_score": 0,
        "review_count": len(reviews),
        "average_rating": average_rating(reviews),
        "analyzed_at": timezone.now().isoformat(),
    }


SENTIMENT_PROMPT = """
Analyze the following product review and provide sentiment analysis:

Review: "{content}"

Provide your analysis in the following JSON format:
{{
  "sentiment": "positive" | "negative" | "neutral" | "mixed",
  "sentimentScore": <number between -1 (very negative) and 1 (very positive)>,
  "summary": "<brief 1-sentence summary>",
  "extractedPros": ["<pro1>", "<pro2>"],
  "extractedCons": ["<con1>", "<con2>"],
  "isSpam": <boolean>,
  "spamScore": <number between 0 and 1>
}}"""

SUMMARY_PROMPT = """
Analyze these product reviews and provide a comprehensive summary:

{reviews}

Provide your analysis in the following JSON format:
{{
  "overallSentiment": "positive" | "negative" | "neutral" | "mixed",
  "summary": "<2-3 sentence summary of overall customer feedback>",
  "pros": ["<top 3-5 frequently mentioned positives>"],
  "cons": ["<top 3-5 frequently mentioned negatives>"],
  "keyHighlights": ["<notable points from reviews>"],
  "recommendationRate": <estimated percentage of customers who would recommend, 0-100>,
  "averageSentimentScore": <number between -1 and 1>
}}"""

COMPARE_PROMPT = """
Compare these products based on their reviews:

{products}

Provide your comparison in the following JSON format:
{{
  "comparison": "<detailed comparison paragraph>",
  "winner": "<product name with best overall reviews>",
  "rankings": [
    {{"product": "<name>", "rank": 1, "highlights": ["<key points>"]}}
  ]
}}"""


class ReviewAnalyzer(BaseService):
    def __init__(self, ai_client: AICompletionClient):
        super().__init__()
        self.ai_client = ai_client

    def _complete_json(self, prompt: str, max_tokens: int = 500):
        try:
            return self.ai_client.complete_json(prompt, max_tokens=max_tokens)
        except AIProviderError as e:
            self.logger.info(f"Review analysis degraded: {e}")
            return None

    def analyze_sentiment(self, content: str) -> Dict[str, Any]:
        """Sentiment of one review; the neutral default on any AI failure."""
        result = self._complete_json(SENTIMENT_PROMPT.format(content=content))
        if not result:
            return default_sentiment()

        sentiment = result.get("sentiment")
        return {
            "sentiment": sentiment if sentiment in SENTIMENTS else "neutral",
            "sentiment_score": result.get("sentimentScore") or 0,
            "summary": result.get("summary") or "Unable to analyze review.",
            "extracted_pros": result.get("extractedPros") or [],
            "extracted_cons": result.get("extractedCons") or [],
            "is_spam": bool(result.get("isSpam", False)),
            "spam_score": result.get("spamScore") or 0,
            "analyzed_at": timezone.now().isoformat(),
        }

    def summarize(self, reviews: Sequence) -> Dict[str, Any]:
        """Summary across a product's reviews."""
        reviews = list(reviews)
        if not reviews:
            return empty_summary()

        review_texts = "\n\n".join(
            f"Review {index} (Rating: {review.rating}/5): {review.content}"
            for index, review in enumerate(reviews, start=1)
        )
        result = self._complete_json(SUMMARY_PROMPT.format(reviews=review_texts), max_tokens=800)
        if not result:
            return default_summary(reviews)

        return {
            "overall_sentiment": result.get("overallSentiment") or "neutral",
            "summary": result.get("summary") or "Review summary unavailable.",
            "pros": result.get("pros") or [],
            "cons": result.get("cons") or [],
            "key_highlights": result.get("keyHighlights") or [],
            "recommendation_rate": result.get("recommendationRate") or 50,
            "average_sentiment_score": result.get("averageSentimentScore") or 0,
            "review_count": len(reviews),
            "average_rating": average_rating(reviews),
            "analyzed_at": timezone.now().isoformat(),
        }

    def compare(self, products_with_reviews: List[Dict]) -> Dict[str, Any]:
        """
        Compare products by their reviews.

        Args:
            products_with_reviews: [{"product_name": str, "reviews": [Review]}]
        """
        if len(products_with_reviews) < 2:
            return {"comparison": "Need at least 2 products to compare.", "winner": None}

        comparison_data = [
            {
                "name": entry["product_name"],
                "avgRating": average_rating(entry["reviews"]),
                "reviewCount": len(entry["reviews"]),
                "sampleReviews": [review.content for review in entry["reviews"][:3]],
            }
            for entry in products_with_reviews
        ]

        result = self._complete_json(COMPARE_PROMPT.format(products=json.dumps(comparison_data, indent=2)), 1000)
        return result or {"comparison": "Unable to generate comparison.", "winner": None}
