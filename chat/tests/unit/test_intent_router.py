from unittest.mock import MagicMock, patch

import pytest
from django.db import DatabaseError

from chat.domain.services.assistant_service import (
    FALLBACK_TEXT,
    SEARCH_FAILED,
    AssistantService,
    build_general_prompt,
    search_terms,
)
from chat.domain.services.intent_router import (
    GENERAL,
    ORDER_TRACKING,
    PRODUCT_SEARCH,
    REFUND_POLICY,
    SELLER_INQUIRY,
    detect_intent,
)
from infrastructure.ai import AIProviderUnavailable


@pytest.mark.unit
class TestDetectIntentUnit:
    @pytest.mark.parametrize(
        "message,expected",
        [
            ("Where is my order?", ORDER_TRACKING),
            ("Can you track ORD-2412-ABC123", ORDER_TRACKING),
            ("I want my money back", REFUND_POLICY),
            ("How do returns work?", REFUND_POLICY),
            ("How do I become a seller?", SELLER_INQUIRY),
            ("I'm looking for a calculator", PRODUCT_SEARCH),
            ("Do you have any textbook deals", PRODUCT_SEARCH),
            ("Hello there", GENERAL),
        ],
    )
    def test_intent_by_keyword(self, message, expected):
        assert detect_intent(message).type == expected

    def test_first_matching_rule_wins(self):
        # "track" outranks "refund"
        assert detect_intent("track my refund").type == ORDER_TRACKING

    def test_order_number_is_extracted_whole(self):
        intent = detect_intent("track order ord-2412-abc123 please")

        assert intent.params["order_number"] == "ord-2412-abc123"

    def test_order_tracking_without_number(self):
        assert detect_intent("order status?").params == {"order_number": None}

    def test_product_search_keeps_message_as_query(self):
        intent = detect_intent("Find a desk lamp")

        assert intent.params == {"query": "Find a desk lamp"}


@pytest.mark.unit
class TestAssistantHelpersUnit:
    def test_search_terms_strips_noise(self):
        assert search_terms("Show me cheap headphones") == "cheap headphones"
        assert search_terms("I need a Calculator") == "a Calculator"

    def test_general_prompt_keeps_last_five_turns(self):
        turns = [{"role": "user", "content": f"message {n}"} for n in range(7)]

        prompt = build_general_prompt("What now?", turns)

        assert "message 0" not in prompt
        assert "message 1" not in prompt
        assert "message 6" in prompt
        assert "User's question: What now?" in prompt

    def test_general_prompt_without_history(self):
        assert "Previous conversation" not in build_general_prompt("Hi")


@pytest.mark.unit
class TestAssistantServiceUnit:
    def setup_method(self):
        self.ai_client = MagicMock()
        self.service = AssistantService(ai_client=self.ai_client)

    def test_refund_reply_is_static(self):
        reply = self.service.process_message("Can I get a refund?")

        assert reply["intent"] == REFUND_POLICY
        assert "Return & Refund Policy" in reply["message"]
        self.ai_client.complete.assert_not_called()

    def test_seller_reply_is_static(self):
        reply = self.service.process_message("I want to sell my old books")

        assert reply["intent"] == SELLER_INQUIRY
        assert "Become a Seller" in reply["message"]
        assert reply["suggestions"][0] == "Apply now"

    def test_general_reply_comes_from_ai(self):
        self.ai_client.complete.return_value = "Campus pickup is on Fridays."

        reply = self.service.process_message("When is pickup?")

        assert reply["intent"] == GENERAL
        assert reply["type"] == "text"
        assert reply["message"] == "Campus pickup is on Fridays."
        assert self.ai_client.complete.call_args.kwargs["max_tokens"] == 300

    def test_general_reply_falls_back_when_ai_is_down(self):
        self.ai_client.complete.side_effect = AIProviderUnavailable("no provider")

        reply = self.service.process_message("Tell me a joke")

        assert reply["message"] == FALLBACK_TEXT
        assert "Become a seller" in reply["suggestions"]

    def test_anonymous_tracking_without_number_finds_nothing(self):
        assert self.service.find_order(None, None) is None

    def test_search_with_only_noise_returns_nothing(self):
        assert self.service.search_products("a an of") == []

    def test_search_database_error_gets_apology(self):
        with patch.object(AssistantService, "search_products", side_effect=DatabaseError("connection lost")):
            reply = self.service.process_message("Find a desk lamp")

        assert reply["intent"] == PRODUCT_SEARCH
        assert reply["message"] == SEARCH_FAILED
        assert reply["suggestions"] == ["Electronics", "Study Materials", "Event Passes", "Subscriptions"]
        self.ai_client.complete.assert_not_called()
