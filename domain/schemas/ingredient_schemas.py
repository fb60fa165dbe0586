from pydantic import Field
from typing import Optional, List

from domain.enums import Species
from domain.schemas.common import CatalogModel

HEALTH_RATING_MIN = -10
HEALTH_RATING_MAX = 10


class RatingCreate(CatalogModel):
    """Schema for a per-species health rating supplied by a caller"""

    species: Species
    health_rating: Optional[int] = Field(
        None,
        ge=HEALTH_RATING_MIN,
        le=HEALTH_RATING_MAX,
        description="Health rating on a -10..10 scale, null when unknown",
    )
    notes: Optional[str] = None


class Rating(RatingCreate):
    """Stored rating sub-record"""

    id: str


class RatingUpdate(CatalogModel):
    """Partial rating update; only explicitly provided fields are applied"""

    health_rating: Optional[int] = Field(
        None, ge=HEALTH_RATING_MIN, le=HEALTH_RATING_MAX
    )
    notes: Optional[str] = None


class Ingredient(CatalogModel):
    """Ingredient record with its ratings"""

    id: str
    name: str
    ratings: List[Rating] = Field(default_factory=list)

    def rating_for(self, species: Species) -> Optional[Rating]:
        for rating in self.ratings:
            if rating.species == species:
                return rating
        return None


class IngredientCreate(CatalogModel):
    """Schema for creating a new ingredient"""

    name: str = Field(..., min_length=1)
    ratings: List[RatingCreate] = Field(default_factory=list)


class IngredientUpdate(CatalogModel):
    """Partial ingredient update. ``ratings`` replaces the whole collection."""

    name: Optional[str] = Field(None, min_length=1)
    ratings: Optional[List[RatingCreate]] = None


class IngredientPush(CatalogModel):
    """Upsert request for one ingredient rating.

    ``health_rating`` and ``notes`` left out of the payload are not touched on
    an existing rating; an explicit null clears them.
    """

    name: str = Field(..., min_length=1)
    species: Species
    health_rating: Optional[int] = Field(
        None, ge=HEALTH_RATING_MIN, le=HEALTH_RATING_MAX
    )
    notes: Optional[str] = None


class PushManyByNames(CatalogModel):
    """Batch upsert of bare ingredient names sharing one species"""

    names: List[str]
    species: Species


class SpeciesRating(CatalogModel):
    """Single-species projection of an ingredient"""

    id: str
    name: str
    species: Species
    health_rating: Optional[int] = None
    notes: Optional[str] = None


class IngredientFilter(CatalogModel):
    """Ingredient query; an absent field places no constraint.

    ``rating`` distinguishes "not given" from an explicit ``None`` (match
    unset ratings), so check :attr:`rating_is_set` rather than the value.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    species: Optional[Species] = None
    rating: Optional[int] = None
    min_rating: Optional[float] = None
    max_rating: Optional[float] = None

    @property
    def rating_is_set(self) -> bool:
        return "rating" in self.model_fields_set
