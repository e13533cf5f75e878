from .order import Order, OrderItem, OrderTimelineEvent


__all__ = [
    "Order",
    "OrderItem",
    "OrderTimelineEvent",
]
