"""
AssistantService - Campus Assistant

Answers a chat message by intent: product search and order tracking query
the catalog and orders, refund and seller questions get static answers, and
everything else goes to the AI provider with a hardcoded fallback. Nothing
about the conversation is stored; the client sends its own history.
"""

import logging
import re
from dataclasses import dataclass, field
from functools import reduce
from operator import or_
from typing import Any, Dict, List, Optional

from django.db import DatabaseError
from django.db.models import Q

from infrastructure.ai import AICompletionClient, AIProviderError
from marketplace.catalog.domain.models import Product
from marketplace.ordering.domain.models import Order

from .intent_router import (
    GENERAL,
    ORDER_TRACKING,
    PRODUCT_SEARCH,
    REFUND_POLICY,
    SELLER_INQUIRY,
    Intent,
    detect_intent,
)


logger = logging.getLogger(__name__)

SEARCH_LIMIT = 5
HISTORY_TURNS = 5
SEARCH_NOISE = re.compile(r"find|search|looking for|show me|i want|i need", re.IGNORECASE)
MIN_TERM_LENGTH = 3
STOP_WORDS = {"the", "and", "for", "any", "some", "with", "please", "can", "you", "are", "have"}

SYSTEM_CONTEXT = """
You are a helpful customer support assistant for the Campus Marketplace, a trusted platform for college students to buy and sell products. Your name is "Campus Assistant".

You can help with:
1. Finding products (electronics, study materials, event passes, subscriptions)
2. Order tracking and status updates
3. Return and refund policies
4. General platform questions
5. Seller inquiries

Platform Policies:
- Returns are accepted within 14 days for physical products
- Digital products are non-refundable once accessed
- Seller applications are reviewed within 48 hours
- All sellers must be verified students

Be friendly, concise, and helpful. If you don't know something, say so honestly.
"""

STATUS_MESSAGES = {
    Order.STATUS_PENDING: "Your order is pending confirmation.",
    Order.STATUS_CONFIRMED: "Your order has been confirmed and is being processed.",
    Order.STATUS_PROCESSING: "Your order is being prepared for shipment.",
    Order.STATUS_SHIPPED: "Your order has been shipped and is on its way!",
    Order.STATUS_OUT_FOR_DELIVERY: "Your order is out for delivery today!",
    Order.STATUS_DELIVERED: "Your order has been delivered.",
    Order.STATUS_COMPLETED: "Your order is complete.",
    Order.STATUS_CANCELLED: "Your order has been cancelled.",
}

ORDER_NOT_FOUND = (
    "I couldn't find that order. Please provide a valid order number (e.g., ORD-2412-ABC123) "
    "or check your order history in your account."
)

SEARCH_FAILED = "I had trouble searching for products. Please try again or browse our categories directly."

REFUND_POLICY_TEXT = """📋 **Return & Refund Policy**

**Physical Products:**
• Returns accepted within 14 days of delivery
• Item must be in original condition
• Buyer pays return shipping unless item was defective
• Refund processed within 5-7 business days

**Digital Products:**
• Non-refundable once downloaded/accessed
• If file is corrupted or wrong, contact support
• Replacements available for technical issues

**Event Passes:**
• Refundable up to 24 hours before event
• 10% cancellation fee applies
• Transfer to another student is allowed

**How to Request a Return:**
1. Go to your Orders page
2. Select the order and item
3. Click "Request Return"
4. Provide reason and photos if applicable

Need help with a specific return? Let me know your order number!"""

SELLER_INFO_TEXT = """🏪 **Become a Seller on Campus Marketplace**

**Requirements:**
• Must be a verified student
• Valid student ID required
• Active email address

**Benefits:**
• 0% commission for first month
• Access to campus customer base
• Easy product listing tools
• Secure payments

**How to Apply:**
1. Complete your student verification
2. Go to Settings → Become a Seller
3. Fill out the application form
4. Wait for approval (usually 24-48 hours)

**What You Can Sell:**
• Electronics (new or used)
• Study materials & textbooks
• Event passes
• Digital products & subscriptions

Ready to start selling? Go to your profile settings to apply!"""

FALLBACK_TEXT = (
    "I'm here to help! You can ask me about:\n"
    "• Finding products\n"
    "• Order tracking\n"
    "• Returns & refunds\n"
    "• Selling on the platform\n\n"
    "What would you like to know?"
)


@dataclass
class AssistantReply:
    message: str
    type: str = "text"
    data: Any = None
    suggestions: List[str] = field(default_factory=list)
    intent: str = GENERAL

    def as_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "type": self.type,
            "data": self.data,
            "suggestions": self.suggestions,
            "intent": self.intent,
        }


def search_terms(message: str) -> str:
    return SEARCH_NOISE.sub("", message).strip()


def build_general_prompt(message: str, previous_messages: Optional[List[Dict]] = None) -> str:
    history = "\n".join(
        f"{turn.get('role')}: {turn.get('content')}" for turn in (previous_messages or [])[-HISTORY_TURNS:]
    )
    history_block = f"Previous conversation:\n{history}\n\n" if history else ""
    return f"{SYSTEM_CONTEXT}\n\n{history_block}\nUser's question: {message}\n\nProvide a helpful, concise response:"


class AssistantService:
    """
    Routes a chat message to its intent handler.

    Dependencies:
    - AICompletionClient: free-form answers
    """

    def __init__(self, ai_client: AICompletionClient):
        self.ai_client = ai_client

    def process_message(self, message: str, user=None, previous_messages: Optional[List[Dict]] = None) -> Dict:
        intent = detect_intent(message)
        logger.debug(f"Chat intent {intent.type}")

        if intent.type == PRODUCT_SEARCH:
            reply = self.handle_product_search(intent)
        elif intent.type == ORDER_TRACKING:
            reply = self.handle_order_tracking(intent, user)
        elif intent.type == REFUND_POLICY:
            reply = self.handle_refund_policy()
        elif intent.type == SELLER_INQUIRY:
            reply = self.handle_seller_inquiry()
        else:
            reply = self.handle_general_query(message, previous_messages)

        reply.intent = intent.type
        return reply.as_dict()

    def search_products(self, terms: str) -> List[Product]:
        words = [
            word for word in re.findall(r"\w+", terms.lower()) if len(word) >= MIN_TERM_LENGTH and word not in STOP_WORDS
        ]
        if not words:
            return []

        match_any = reduce(
            or_,
            (Q(title__icontains=word) | Q(description__icontains=word) | Q(tags__icontains=word) for word in words),
        )
        return list(
            Product.objects.filter(match_any, status=Product.STATUS_ACTIVE, is_published=True).order_by(
                "-rating_average", "-created_at"
            )[:SEARCH_LIMIT]
        )

    def handle_product_search(self, intent: Intent) -> AssistantReply:
        terms = search_terms(intent.params.get("query", ""))
        try:
            products = self.search_products(terms)
        except DatabaseError as e:
            logger.error(f"Assistant product search failed for {terms!r}: {e}", exc_info=True)
            return AssistantReply(
                message=SEARCH_FAILED,
                suggestions=["Electronics", "Study Materials", "Event Passes", "Subscriptions"],
            )

        if not products:
            return AssistantReply(
                message=f'I couldn\'t find any products matching "{terms}". Would you like me to search for something else?',
                suggestions=["Show electronics", "Show study materials", "Show event passes"],
            )

        product_list = "\n".join(f"• {p.title} - ${p.price} ({p.rating_average}⭐)" for p in products)
        return AssistantReply(
            message=(
                f"I found {len(products)} product(s) matching your search:\n\n{product_list}\n\n"
                "Would you like more details on any of these?"
            ),
            type="product_list",
            data=[
                {
                    "id": str(p.pk),
                    "title": p.title,
                    "slug": p.slug,
                    "price": str(p.price),
                    "category": p.category,
                    "image": p.primary_image,
                    "rating_average": float(p.rating_average),
                }
                for p in products
            ],
            suggestions=["Show more details", "Search for something else", "View all products"],
        )

    def find_order(self, order_number: Optional[str], user) -> Optional[Order]:
        if order_number:
            return Order.objects.filter(order_number__iexact=order_number).first()
        if user is not None and getattr(user, "is_authenticated", False):
            return Order.objects.filter(customer=user).order_by("-created_at").first()
        return None

    def handle_order_tracking(self, intent: Intent, user) -> AssistantReply:
        order = self.find_order(intent.params.get("order_number"), user)
        if order is None:
            return AssistantReply(message=ORDER_NOT_FOUND, suggestions=["View my orders", "Contact support"])

        latest = order.timeline.order_by("-timestamp", "-id").first()
        parts = [f"📦 Order: {order.order_number}", f"Status: {STATUS_MESSAGES.get(order.status, order.status)}"]
        if latest is not None:
            parts.append(f"Latest Update: {latest.title}\n{latest.description or ''}".rstrip())
        if order.tracking_number:
            parts.append(f"Tracking Number: {order.tracking_number}")

        return AssistantReply(
            message="\n\n".join(parts),
            type="order_status",
            data={
                "order_number": order.order_number,
                "status": order.status,
                "latest_update": latest.title if latest is not None else None,
                "tracking_number": order.tracking_number or None,
                "created_at": order.created_at.isoformat(),
            },
            suggestions=["Track another order", "Return policy", "Contact seller"],
        )

    def handle_refund_policy(self) -> AssistantReply:
        return AssistantReply(
            message=REFUND_POLICY_TEXT, suggestions=["Request a return", "Track my order", "Contact seller"]
        )

    def handle_seller_inquiry(self) -> AssistantReply:
        return AssistantReply(
            message=SELLER_INFO_TEXT, suggestions=["Apply now", "Seller commission rates", "Contact support"]
        )

    def handle_general_query(self, message: str, previous_messages: Optional[List[Dict]] = None) -> AssistantReply:
        prompt = build_general_prompt(message, previous_messages)
        try:
            answer = self.ai_client.complete(prompt, max_tokens=300)
        except AIProviderError as e:
            logger.info(f"Assistant falling back, AI unavailable: {e}")
            return AssistantReply(
                message=FALLBACK_TEXT,
                suggestions=["Search products", "Track order", "Refund policy", "Become a seller"],
            )

        return AssistantReply(message=answer, suggestions=["Search products", "Track order", "Contact support"])
