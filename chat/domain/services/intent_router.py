"""
Keyword intent detection for the campus assistant.

Rules are checked in priority order and the first match wins, so a message
like "track my refund" is order tracking, not a refund question.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict

ORDER_TRACKING = "order_tracking"
REFUND_POLICY = "refund_policy"
SELLER_INQUIRY = "seller_inquiry"
PRODUCT_SEARCH = "product_search"
GENERAL = "general"

ORDER_NUMBER_PATTERN = re.compile(r"ORD-\w+(?:-\w+)*", re.IGNORECASE)

INTENT_KEYWORDS = (
    (ORDER_TRACKING, ("track", "order status", "where is my order")),
    (REFUND_POLICY, ("refund", "return", "money back")),
    (SELLER_INQUIRY, ("sell", "become a seller", "seller account")),
    (PRODUCT_SEARCH, ("find", "search", "looking for", "electronics", "textbook", "study material")),
)


@dataclass
class Intent:
    type: str
    params: Dict[str, Any] = field(default_factory=dict)


def detect_intent(message: str) -> Intent:
    lowered = message.lower()

    for intent_type, keywords in INTENT_KEYWORDS:
        if not any(keyword in lowered for keyword in keywords):
            continue

        if intent_type == ORDER_TRACKING:
            match = ORDER_NUMBER_PATTERN.search(message)
            return Intent(ORDER_TRACKING, {"order_number": match.group(0) if match else None})
        if intent_type == PRODUCT_SEARCH:
            return Intent(PRODUCT_SEARCH, {"query": message})
        return Intent(intent_type)

    return Intent(GENERAL)
