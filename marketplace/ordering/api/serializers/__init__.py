from .order_serializers import (
    CreateOrderSerializer,
    OrderItemSerializer,
    OrderSerializer,
    OrderTimelineEventSerializer,
    UnlockDigitalSerializer,
    UpdateOrderStatusSerializer,
)

__all__ = [
    "CreateOrderSerializer",
    "OrderItemSerializer",
    "OrderSerializer",
    "OrderTimelineEventSerializer",
    "UnlockDigitalSerializer",
    "UpdateOrderStatusSerializer",
]
