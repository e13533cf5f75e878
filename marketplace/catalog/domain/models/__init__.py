from .catalog import Product
from .interaction import Review, ReviewHelpfulVote


__all__ = [
    "Product",
    "Review",
    "ReviewHelpfulVote",
]
