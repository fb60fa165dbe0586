"""
Repositories package - Data access layer.
"""

from repositories.base import MongoRepository
from repositories.ingredient_repository import IngredientRepository
from repositories.product_repository import ProductRepository

__all__ = [
    "MongoRepository",
    "IngredientRepository",
    "ProductRepository",
]
