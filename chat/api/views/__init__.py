from .assistant_views import AssistantChatView, ChatHealthView

__all__ = ["AssistantChatView", "ChatHealthView"]
