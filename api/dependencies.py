"""
API dependencies for dependency injection
"""

from fastapi import Depends, HTTPException, status
from pymongo.asynchronous.database import AsyncDatabase

from adapters import mongo_adapter
from app.config import settings
from repositories import IngredientRepository, ProductRepository
from services import CatalogService, IngredientReconciler


def get_database() -> AsyncDatabase:
    """
    Shared database handle for FastAPI routes.

    Usage:
        @router.get("/example")
        async def example(db: AsyncDatabase = Depends(get_database)):
            # Use db here
            pass
    """
    try:
        return mongo_adapter.get_database()
    except RuntimeError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc


def get_ingredient_repository(
    db: AsyncDatabase = Depends(get_database),
) -> IngredientRepository:
    return IngredientRepository(db)


def get_reconciler(
    ingredients: IngredientRepository = Depends(get_ingredient_repository),
) -> IngredientReconciler:
    return IngredientReconciler(ingredients, strict=settings.strict_reconciliation)


def get_product_repository(
    db: AsyncDatabase = Depends(get_database),
    reconciler: IngredientReconciler = Depends(get_reconciler),
) -> ProductRepository:
    return ProductRepository(db, reconciler=reconciler)


def get_catalog_service(
    products: ProductRepository = Depends(get_product_repository),
    ingredients: IngredientRepository = Depends(get_ingredient_repository),
) -> CatalogService:
    return CatalogService(products, ingredients)
