"""API routes package"""

from . import health, ingredients, products

__all__ = ["health", "ingredients", "products"]
