from rest_framework import serializers


class ChatTurnSerializer(serializers.Serializer):
    ROLE_CHOICES = [("user", "User"), ("assistant", "Assistant")]

    role = serializers.ChoiceField(choices=ROLE_CHOICES)
    content = serializers.CharField(max_length=2000, trim_whitespace=True)


class ChatMessageSerializer(serializers.Serializer):
    message = serializers.CharField(min_length=1, max_length=1000, trim_whitespace=True)
    previous_messages = ChatTurnSerializer(many=True, required=False)


class ChatReplySerializer(serializers.Serializer):
    message = serializers.CharField()
    type = serializers.ChoiceField(choices=["text", "product_list", "order_status"])
    data = serializers.JSONField(allow_null=True)
    suggestions = serializers.ListField(child=serializers.CharField())
    intent = serializers.CharField()
