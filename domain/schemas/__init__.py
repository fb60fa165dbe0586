"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.common import CatalogModel
from domain.schemas.ingredient_schemas import (
    Rating,
    RatingCreate,
    RatingUpdate,
    Ingredient,
    IngredientCreate,
    IngredientUpdate,
    IngredientPush,
    PushManyByNames,
    SpeciesRating,
    IngredientFilter,
)
from domain.schemas.product_schemas import (
    Size,
    SizeCreate,
    SizeDetails,
    SizeUpdate,
    FeedingChartEntry,
    Product,
    ProductCreate,
    ProductUpdate,
    ProductFilter,
)

__all__ = [
    "CatalogModel",
    # Ingredient schemas
    "Rating",
    "RatingCreate",
    "RatingUpdate",
    "Ingredient",
    "IngredientCreate",
    "IngredientUpdate",
    "IngredientPush",
    "PushManyByNames",
    "SpeciesRating",
    "IngredientFilter",
    # Product schemas
    "Size",
    "SizeCreate",
    "SizeDetails",
    "SizeUpdate",
    "FeedingChartEntry",
    "Product",
    "ProductCreate",
    "ProductUpdate",
    "ProductFilter",
]
