from django.urls import path

from chat.api.views import AssistantChatView, ChatHealthView

app_name = "chat"

urlpatterns = [
    path("chat", AssistantChatView.as_view(), name="assistant"),
    path("chat/health", ChatHealthView.as_view(), name="health"),
]
