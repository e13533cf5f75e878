from .cart import Cart, CartItem, SavedItem


__all__ = ["Cart", "CartItem", "SavedItem"]
