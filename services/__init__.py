"""Services package - Business logic layer"""

from services.reconciliation_service import IngredientReconciler
from services.catalog_service import CatalogService

__all__ = [
    "IngredientReconciler",
    "CatalogService",
]
