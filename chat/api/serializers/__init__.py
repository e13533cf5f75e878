from .assistant_serializers import ChatMessageSerializer, ChatReplySerializer, ChatTurnSerializer

__all__ = ["ChatMessageSerializer", "ChatReplySerializer", "ChatTurnSerializer"]
