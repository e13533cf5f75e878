from marketplace.cart.domain.models import Cart, CartItem, SavedItem
from marketplace.catalog.domain.models import Product, Review, ReviewHelpfulVote
from marketplace.ordering.domain.models import Order, OrderItem, OrderTimelineEvent


__all__ = [
    "Product",
    "Review",
    "ReviewHelpfulVote",
    "Cart",
    "CartItem",
    "SavedItem",
    "Order",
    "OrderItem",
    "OrderTimelineEvent",
]
