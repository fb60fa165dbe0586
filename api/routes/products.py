"""Product catalog routes"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional, Union

from api.dependencies import get_catalog_service, get_product_repository
from domain.schemas.ingredient_schemas import SpeciesRating
from domain.schemas.product_schemas import (
    Product,
    ProductCreate,
    ProductUpdate,
    SizeDetails,
    SizeUpdate,
)
from repositories import ProductRepository
from services import CatalogService

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=Union[Product, List[Product]])
async def list_products(
    id: Optional[str] = Query(None, description="Product id; other filters are ignored"),
    brand: Optional[str] = Query(None),
    flavor: Optional[str] = Query(None),
    species: Optional[str] = Query(None, description="cat or dog"),
    life_stage: Optional[str] = Query(
        None, alias="lifeStage", description="adult, young or all; also matches 'all'"
    ),
    food_type: Optional[str] = Query(None, alias="foodType", description="dry or wet"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    List products matching the query parameters, or a single product when
    ``id`` is given.
    """
    result = await catalog.find_products(
        {
            "id": id,
            "brand": brand,
            "flavor": flavor,
            "species": species,
            "lifeStage": life_stage,
            "foodType": food_type,
        }
    )
    if id and result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return result


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(
    product: ProductCreate,
    products: ProductRepository = Depends(get_product_repository),
):
    """Create a product and register its ingredient names."""
    return await products.add(product)


@router.get("/{product_id}/ingredients", response_model=List[SpeciesRating])
async def product_ingredient_ratings(
    product_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Health ratings of the product's ingredients for the product's species."""
    return await catalog.product_ingredient_ratings(product_id)


@router.patch("/{product_id}", response_model=Product)
async def update_product(
    product_id: str,
    updates: ProductUpdate,
    products: ProductRepository = Depends(get_product_repository),
):
    return await products.update(product_id, updates)


@router.delete("/{product_id}", response_model=Product)
async def delete_product(
    product_id: str,
    products: ProductRepository = Depends(get_product_repository),
):
    return await products.delete(product_id)


@router.post(
    "/{product_id}/sizes", response_model=Product, status_code=status.HTTP_201_CREATED
)
async def add_size(
    product_id: str,
    size: SizeDetails,
    products: ProductRepository = Depends(get_product_repository),
):
    return await products.add_size(product_id, size)


@router.patch("/{product_id}/sizes/{size_id}", response_model=Product)
async def update_size(
    product_id: str,
    size_id: str,
    updates: SizeUpdate,
    products: ProductRepository = Depends(get_product_repository),
):
    return await products.update_size(product_id, size_id, updates)


@router.delete("/{product_id}/sizes/{size_id}", response_model=Product)
async def remove_size(
    product_id: str,
    size_id: str,
    products: ProductRepository = Depends(get_product_repository),
):
    return await products.remove_size(product_id, size_id)
