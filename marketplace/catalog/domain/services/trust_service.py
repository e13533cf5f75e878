"""
TrustService - Listing Trust Scoring

Scores a listing for fraud risk from three signals:

- market price deviation within the category
- near-duplicate descriptions among active listings
- an AI review of the listing text

verify_product() returns either Scored (all signals computed) or
ScoringUnavailable. When only the AI signal is missing (provider down or
unparsable output) the unavailable variant still carries the price and
duplicate verdict with a neutral AI score. An unexpected error yields the
neutral default, so listing creation is never blocked.
"""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Union

from django.db.models import Avg, Count, Max, Min
from django.utils import timezone

from infrastructure.tracing import get_tracer
from infrastructure.ai import AICompletionClient, AIProviderError
from marketplace.catalog.domain.models import Product
from marketplace.infra.observability.metrics import (
    trust_outcomes_total,
    trust_scoring_duration,
    trust_scoring_unavailable_total,
)
from marketplace.services.base import BaseService


logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

DUPLICATE_SAMPLE_LIMIT = 50
SIMILARITY_THRESHOLD = 0.5
DUPLICATE_SCORE_THRESHOLD = 80
MAX_SIMILAR_PRODUCTS = 5
ABNORMAL_PRICE_DEVIATION = 0.7

DUPLICATE_SCORE = 70
ABNORMAL_PRICE_SCORE = 60
FLAG_THRESHOLD = 50
REJECT_THRESHOLD = 70
REVIEW_THRESHOLD = 40


@dataclass(frozen=True)
class Scored:
    analysis: Dict[str, Any]
    degraded: bool = field(default=False, init=False)


@dataclass(frozen=True)
class ScoringUnavailable:
    reason: str
    analysis: Dict[str, Any]
    degraded: bool = field(default=True, init=False)


TrustResult = Union[Scored, ScoringUnavailable]


class AIAnalysisUnavailable(Exception):
    """The AI signal could not be computed."""


# --- Pure scoring helpers ---------------------------------------------------


def word_similarity(a: str, b: str) -> float:
    """|A ∩ B| / max(|A|, |B|) over lower-cased whitespace-split word sets."""
    words_a = set(a.lower().split())
    words_b = set(b.lower().split())
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / max(len(words_a), len(words_b))


def is_abnormal_price(price, market_data: Dict) -> bool:
    average = market_data.get("average_price")
    if not average:
        return False
    return abs(float(price) - float(average)) / float(average) > ABNORMAL_PRICE_DEVIATION


def calculate_deviation(price, average) -> int:
    """Signed percentage deviation from the average, 0 without an average."""
    if not average:
        return 0
    deviation = (Decimal(str(price)) - Decimal(str(average))) / Decimal(str(average)) * 100
    return int(deviation.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def recommendation_for(score: int) -> str:
    if score >= REJECT_THRESHOLD:
        return "reject"
    if score >= REVIEW_THRESHOLD:
        return "review"
    return "approve"


def generate_flag_reason(ai_result: Dict, duplicate_check: Dict, price, market_data: Dict) -> str:
    reasons = []

    if duplicate_check.get("is_duplicate"):
        reasons.append("Duplicate or very similar description found")

    if is_abnormal_price(price, market_data):
        deviation = calculate_deviation(price, market_data.get("average_price"))
        direction = "below" if deviation < 0 else "above"
        reasons.append(f"Price is {abs(deviation)}% {direction} market average")

    for flag in ai_result.get("flags") or []:
        if flag.get("description"):
            reasons.append(flag["description"])

    return "; ".join(reasons)


def combine_signals(ai_result: Dict, duplicate_check: Dict, price, market_data: Dict) -> Dict[str, Any]:
    """
    Combine the three signals into one analysis.

    score = max(ai score, 70 if duplicate, 60 if price is abnormal)
    """
    abnormal = is_abnormal_price(price, market_data)
    score = max(
        int(ai_result.get("suspicion_score") or 0),
        DUPLICATE_SCORE if duplicate_check.get("is_duplicate") else 0,
        ABNORMAL_PRICE_SCORE if abnormal else 0,
    )
    score = max(0, min(100, score))
    is_flagged = score >= FLAG_THRESHOLD

    return {
        "is_flagged": is_flagged,
        "flag_reason": generate_flag_reason(ai_result, duplicate_check, price, market_data) if is_flagged else None,
        "suspicion_score": score,
        "flags": ai_result.get("flags") or [],
        "price_analysis": {
            "is_abnormal": abnormal,
            "market_average": market_data.get("average_price"),
            "deviation": calculate_deviation(price, market_data.get("average_price")),
        },
        "description_analysis": {
            "is_duplicate": bool(duplicate_check.get("is_duplicate")),
            "similar_products": [match["product_id"] for match in duplicate_check.get("similar_products", [])],
            "quality_score": (ai_result.get("description_analysis") or {}).get("quality_score") or 100,
        },
        "recommendation": recommendation_for(score),
        "last_analyzed_at": timezone.now().isoformat(),
    }


def neutral_ai_result() -> Dict[str, Any]:
    """Stand-in for the AI signal when no provider answered: no score, no flags."""
    return {
        "is_suspicious": False,
        "suspicion_score": 0,
        "flags": [],
        "description_analysis": {"quality_score": 100, "issues": []},
        "recommendation": "approve",
        "confidence_level": 0,
    }


def default_analysis() -> Dict[str, Any]:
    """Neutral analysis: not flagged, score 0, approve."""
    return {
        "is_flagged": False,
        "flag_reason": None,
        "suspicion_score": 0,
        "flags": [],
        "price_analysis": {"is_abnormal": False, "market_average": None, "deviation": 0},
        "description_analysis": {"is_duplicate": False, "similar_products": [], "quality_score": 100},
        "recommendation": "approve",
        "last_analyzed_at": timezone.now().isoformat(),
    }


ANALYSIS_PROMPT = """
Analyze this product listing for potential fraud or suspicious characteristics:

Product Details:
- Title: {title}
- Description: {description}
- Price: ${price}
- Category: {category}
- Condition: {condition}

Market Context:
- Average market price for similar items: ${average_price}
- Price range: ${min_price} - ${max_price}

Analyze for:
1. Price anomalies (too low or suspiciously high)
2. Description quality (vague, copy-pasted, or misleading)
3. Common scam patterns
4. Listing completeness

Provide your analysis in JSON format:
{{
  "isSuspicious": <boolean>,
  "suspicionScore": <0-100>,
  "flags": [
    {{
      "type": "price" | "description" | "category" | "pattern",
      "severity": "low" | "medium" | "high",
      "description": "<explanation>"
    }}
  ],
  "priceAnalysis": {{
    "isAbnormal": <boolean>,
    "expectedRange": {{"min": <number>, "max": <number>}},
    "deviation": "<percentage from average>"
  }},
  "descriptionAnalysis": {{
    "qualityScore": <0-100>,
    "issues": ["<issue1>", "<issue2>"]
  }},
  "recommendation": "approve" | "review" | "reject",
  "confidenceLevel": <0-100>
}}"""


class TrustService(BaseService):
    """
    Listing trust scoring.

    Dependencies:
    - AICompletionClient: the AI signal (injected from the container)
    """

    def __init__(self, ai_client: AICompletionClient):
        super().__init__()
        self.ai_client = ai_client

    def get_market_data(self, category: str, exclude_id=None) -> Dict[str, Any]:
        """Price statistics over active listings in the category with price > 0."""
        queryset = Product.objects.filter(category=category, status=Product.STATUS_ACTIVE, price__gt=0)
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)

        stats = queryset.aggregate(
            average_price=Avg("price"), min_price=Min("price"), max_price=Max("price"), sample_size=Count("id")
        )
        if not stats["sample_size"]:
            return {"average_price": None, "min_price": None, "max_price": None, "sample_size": 0}

        return {
            "average_price": float(Decimal(str(stats["average_price"])).quantize(Decimal("0.01"), ROUND_HALF_UP)),
            "min_price": float(stats["min_price"]),
            "max_price": float(stats["max_price"]),
            "sample_size": stats["sample_size"],
        }

    def check_for_duplicates(self, description: str, category: str, exclude_id=None) -> Dict[str, Any]:
        """Compare the description against up to 50 active listings in the category."""
        queryset = Product.objects.filter(category=category, status=Product.STATUS_ACTIVE)
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)

        matches: List[Dict[str, Any]] = []
        for candidate in queryset.only("id", "title", "description")[:DUPLICATE_SAMPLE_LIMIT]:
            similarity = word_similarity(description, candidate.description)
            if similarity > SIMILARITY_THRESHOLD:
                matches.append(
                    {
                        "product_id": str(candidate.id),
                        "title": candidate.title,
                        "similarity_score": round(similarity * 100),
                    }
                )

        matches.sort(key=lambda match: match["similarity_score"], reverse=True)
        highest = matches[0]["similarity_score"] if matches else 0

        return {
            "is_duplicate": highest > DUPLICATE_SCORE_THRESHOLD,
            "similar_products": matches[:MAX_SIMILAR_PRODUCTS],
            "highest_similarity": highest,
        }

    def analyze_product(self, product: Product, market_data: Dict) -> Dict[str, Any]:
        """
        AI review of the listing.

        Raises:
            AIAnalysisUnavailable: provider unavailable or output not parsable
        """
        prompt = ANALYSIS_PROMPT.format(
            title=product.title,
            description=product.description,
            price=product.price,
            category=product.category,
            condition=product.condition or "Not specified",
            average_price=market_data.get("average_price") or "Unknown",
            min_price=market_data.get("min_price") or 0,
            max_price=market_data.get("max_price") or "Unknown",
        )

        try:
            result = self.ai_client.complete_json(prompt, max_tokens=800)
        except AIProviderError as e:
            raise AIAnalysisUnavailable(f"ai_unavailable: {e}") from e

        if result is None:
            raise AIAnalysisUnavailable("ai_unparsable")

        description_analysis = result.get("descriptionAnalysis") or {}
        return {
            "is_suspicious": bool(result.get("isSuspicious", False)),
            "suspicion_score": int(result.get("suspicionScore") or 0),
            "flags": [
                {
                    "type": flag.get("type"),
                    "severity": flag.get("severity"),
                    "description": flag.get("description"),
                }
                for flag in result.get("flags") or []
                if isinstance(flag, dict)
            ],
            "description_analysis": {
                "quality_score": description_analysis.get("qualityScore", 100),
                "issues": description_analysis.get("issues", []),
            },
            "recommendation": result.get("recommendation") or "approve",
            "confidence_level": result.get("confidenceLevel") or 50,
        }

    def verify_product(self, product: Product) -> TrustResult:
        """
        Run the full pipeline. Never raises.

        Without the AI signal the duplicate and price signals still decide the
        score, and the result is ScoringUnavailable so callers can see the
        degradation. Any other failure falls back to the neutral analysis.
        """
        with tracer.start_as_current_span("trust_verify_product") as span, trust_scoring_duration.time():
            span.set_attribute("product.id", str(product.pk))
            unavailable_reason = None
            try:
                market_data = self.get_market_data(product.category, exclude_id=product.pk)
                duplicate_check = self.check_for_duplicates(product.description, product.category, product.pk)
                try:
                    ai_result = self.analyze_product(product, market_data)
                except AIAnalysisUnavailable as e:
                    unavailable_reason = str(e).split(":")[0]
                    ai_result = neutral_ai_result()
                analysis = combine_signals(ai_result, duplicate_check, product.price, market_data)

            except Exception as e:
                self.logger.error(f"Trust scoring failed for product {product.pk}: {e}", exc_info=True)
                return self._unavailable(product, "error", default_analysis(), span)

            span.set_attribute("trust.score", analysis["suspicion_score"])
            if unavailable_reason is not None:
                return self._unavailable(product, unavailable_reason, analysis, span)

            trust_outcomes_total.labels(recommendation=analysis["recommendation"]).inc()
            self.logger.info(
                f"Product {product.pk} scored {analysis['suspicion_score']} ({analysis['recommendation']})"
            )
            return Scored(analysis=analysis)

    def _unavailable(self, product: Product, reason: str, analysis: Dict, span) -> ScoringUnavailable:
        trust_scoring_unavailable_total.labels(reason=reason).inc()
        span.set_attribute("trust.degraded", reason)
        self.logger.warning(
            f"Trust scoring degraded for product {product.pk} ({reason}): score {analysis['suspicion_score']}"
        )
        return ScoringUnavailable(reason=reason, analysis=analysis)

    def apply_result(self, product: Product, result: TrustResult, set_status: bool = True) -> Product:
        """
        Persist the analysis on the product.

        With set_status, the listing goes active on approve, flagged when
        flagged, and pending otherwise.

        Without it (admin re-verification) an active listing that comes back
        flagged is moved to flagged, and a flagged listing that comes back
        clean is released. A degraded result never releases a flag, so a
        flagged listing always keeps is_flagged set.
        """
        analysis = dict(result.analysis)
        analysis["degraded"] = result.degraded
        if isinstance(result, ScoringUnavailable):
            analysis["unavailable_reason"] = result.reason

        keep_flag = (
            not set_status
            and result.degraded
            and product.status == Product.STATUS_FLAGGED
            and not analysis["is_flagged"]
        )
        if keep_flag:
            analysis["is_flagged"] = True
            analysis["flag_reason"] = product.flag_reason or "Flagged before re-verification"

        product.ai_analysis = analysis
        product.is_flagged = analysis["is_flagged"]
        product.flag_reason = analysis["flag_reason"] or ""
        product.suspicion_score = analysis["suspicion_score"]
        product.last_analyzed_at = timezone.now()

        update_fields = ["ai_analysis", "is_flagged", "flag_reason", "suspicion_score", "last_analyzed_at", "updated_at"]

        if set_status:
            new_status = self.status_for(analysis)
            if new_status != product.status:
                product.record_status(new_status, reason=analysis["flag_reason"] or "Automated trust review")
                update_fields += ["status", "status_history"]
        elif analysis["is_flagged"] and product.status == Product.STATUS_ACTIVE:
            product.record_status(Product.STATUS_FLAGGED, reason=analysis["flag_reason"])
            update_fields += ["status", "status_history"]
        elif not analysis["is_flagged"] and product.status == Product.STATUS_FLAGGED:
            product.record_status(self.status_for(analysis), reason="Cleared by trust re-verification")
            update_fields += ["status", "status_history"]

        product.save(update_fields=update_fields)
        return product

    @staticmethod
    def status_for(analysis: Dict) -> str:
        if analysis["is_flagged"]:
            return Product.STATUS_FLAGGED
        if analysis["recommendation"] == "approve":
            return Product.STATUS_ACTIVE
        return Product.STATUS_PENDING
