"""Ingredient curation routes"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional, Union

from api.dependencies import get_catalog_service, get_ingredient_repository
from domain.enums import Species
from domain.schemas.ingredient_schemas import (
    Ingredient,
    IngredientCreate,
    IngredientPush,
    IngredientUpdate,
    RatingCreate,
    RatingUpdate,
    SpeciesRating,
)
from repositories import IngredientRepository
from services import CatalogService

router = APIRouter(prefix="/ingredients", tags=["Ingredients"])


@router.get("", response_model=Union[Ingredient, List[Ingredient]])
async def list_ingredients(
    id: Optional[str] = Query(None, description="Ingredient id; other filters are ignored"),
    name: Optional[str] = Query(None, description="Case-insensitive substring"),
    species: Optional[str] = Query(None, description="cat or dog"),
    rating: Optional[str] = Query(
        None, description="Exact health rating; 'null' or empty matches unset ratings"
    ),
    min_rating: Optional[str] = Query(None, alias="minRating"),
    max_rating: Optional[str] = Query(None, alias="maxRating"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    result = await catalog.find_ingredients(
        {
            "id": id,
            "name": name,
            "species": species,
            "rating": rating,
            "minRating": min_rating,
            "maxRating": max_rating,
        }
    )
    if id and result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Ingredient not found"
        )
    return result


@router.get("/ratings", response_model=List[SpeciesRating])
async def ingredient_ratings(
    species: Species,
    names: List[str] = Query(..., description="Ingredient names, repeat the parameter"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Species view of the named ingredients; unrated names are omitted."""
    return await catalog.rate_ingredients(names, species)


@router.post("", response_model=Ingredient, status_code=status.HTTP_201_CREATED)
async def create_ingredient(
    ingredient: IngredientCreate,
    ingredients: IngredientRepository = Depends(get_ingredient_repository),
):
    return await ingredients.add(ingredient.name, ingredient.ratings)


@router.post("/push", response_model=Ingredient)
async def push_ingredient(
    entry: IngredientPush,
    ingredients: IngredientRepository = Depends(get_ingredient_repository),
):
    """Create the ingredient or merge the given rating fields into it."""
    results = await ingredients.push_many([entry])
    return results[0]


@router.post("/push-many", response_model=List[Ingredient])
async def push_ingredients(
    entries: List[IngredientPush],
    ingredients: IngredientRepository = Depends(get_ingredient_repository),
):
    return await ingredients.push_many(entries)


@router.patch("/{ingredient_id}", response_model=Ingredient)
async def update_ingredient(
    ingredient_id: str,
    updates: IngredientUpdate,
    ingredients: IngredientRepository = Depends(get_ingredient_repository),
):
    return await ingredients.update(ingredient_id, updates)


@router.delete("/{ingredient_id}", response_model=Ingredient)
async def delete_ingredient(
    ingredient_id: str,
    ingredients: IngredientRepository = Depends(get_ingredient_repository),
):
    return await ingredients.delete(ingredient_id)


@router.post(
    "/{ingredient_id}/ratings",
    response_model=Ingredient,
    status_code=status.HTTP_201_CREATED,
)
async def add_rating(
    ingredient_id: str,
    rating: RatingCreate,
    ingredients: IngredientRepository = Depends(get_ingredient_repository),
):
    return await ingredients.add_rating(ingredient_id, rating)


@router.patch("/{ingredient_id}/ratings/{species}", response_model=Ingredient)
async def update_rating(
    ingredient_id: str,
    species: Species,
    updates: RatingUpdate,
    ingredients: IngredientRepository = Depends(get_ingredient_repository),
):
    return await ingredients.update_rating(ingredient_id, species, updates)


@router.delete("/{ingredient_id}/ratings/{species}", response_model=Ingredient)
async def remove_rating(
    ingredient_id: str,
    species: Species,
    ingredients: IngredientRepository = Depends(get_ingredient_repository),
):
    return await ingredients.remove_rating(ingredient_id, species)


@router.post("/{primary_id}/merge/{duplicate_id}", response_model=Ingredient)
async def merge_ingredients(
    primary_id: str,
    duplicate_id: str,
    ingredients: IngredientRepository = Depends(get_ingredient_repository),
):
    """Fold the duplicate's ratings into the primary and delete the duplicate."""
    return await ingredients.merge_duplicates(primary_id, duplicate_id)
