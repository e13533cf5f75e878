from django.utils import timezone
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions
from rest_framework.views import APIView

from chat.api.serializers import ChatMessageSerializer, ChatReplySerializer
from infrastructure.container import container
from utils.responses import success_response, validation_error_response


class AssistantChatView(APIView):
    """POST /api/chat - stateless assistant turn, signed-in callers get order lookups"""

    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="chat_message",
        summary="Ask the campus assistant",
        description="""
        Routes the message by intent: order tracking, refund policy, selling,
        product search or a general AI answer. Nothing is stored; send the
        recent turns back in `previous_messages` for context.
        """,
        request=ChatMessageSerializer,
        responses={200: OpenApiResponse(response=ChatReplySerializer, description="Assistant reply")},
        tags=["Chat"],
    )
    def post(self, request):
        serializer = ChatMessageSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        user = request.user if request.user.is_authenticated else None
        reply = container.assistant_service().process_message(
            serializer.validated_data["message"],
            user=user,
            previous_messages=serializer.validated_data.get("previous_messages") or [],
        )
        return success_response(reply)


class ChatHealthView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(operation_id="chat_health", summary="Assistant liveness", tags=["Chat"])
    def get(self, request):
        return success_response({"status": "ok", "timestamp": timezone.now().isoformat()})
