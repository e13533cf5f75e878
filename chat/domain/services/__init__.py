from .assistant_service import AssistantService
from .intent_router import Intent, detect_intent

__all__ = ["AssistantService", "Intent", "detect_intent"]
