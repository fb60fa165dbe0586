from pydantic import AliasChoices, Field
from typing import Optional, List

from domain.enums import FoodType, LifeStage, Species, Unit
from domain.schemas.common import CatalogModel

# Fields a size must carry before it can be appended to a product
REQUIRED_SIZE_FIELDS = ("packaging", "price", "count", "unit")


class SizeCreate(CatalogModel):
    """Schema for a purchasable size of a product"""

    packaging: str = Field(
        ...,
        validation_alias=AliasChoices("packaging", "type"),
        description="Packaging, e.g. bag, case, can",
    )
    price: float = Field(..., ge=0)
    count: float = Field(..., ge=0, description="Units in this size")
    unit: Unit
    links: List[str] = Field(default_factory=list)
    image_urls: List[str] = Field(default_factory=list)


class Size(SizeCreate):
    """Stored size sub-record"""

    id: str


class SizeDetails(CatalogModel):
    """Loosely-typed size payload; completeness is checked by the repository"""

    packaging: Optional[str] = Field(
        None, validation_alias=AliasChoices("packaging", "type")
    )
    price: Optional[float] = Field(None, ge=0)
    count: Optional[float] = Field(None, ge=0)
    unit: Optional[Unit] = None
    links: Optional[List[str]] = None
    image_urls: Optional[List[str]] = None

    def missing_fields(self) -> List[str]:
        return [name for name in REQUIRED_SIZE_FIELDS if getattr(self, name) is None]


class SizeUpdate(SizeDetails):
    """Partial size update; only explicitly provided fields are applied"""


class FeedingChartEntry(CatalogModel):
    """One feeding chart row: age in years, weight in lbs, serving in cups or cans per day"""

    min_age: float = Field(..., ge=0)
    max_age: float = Field(..., ge=0)
    min_weight: float = Field(..., ge=0)
    max_weight: float = Field(..., ge=0)
    min_serving: float = Field(..., ge=0)
    max_serving: float = Field(..., ge=0)


class ProductCreate(CatalogModel):
    """Schema for creating a new product"""

    brand: str
    flavor: str
    species: Species
    life_stage: LifeStage
    food_type: FoodType
    ingredients: List[str] = Field(default_factory=list)
    sizes: List[SizeCreate] = Field(default_factory=list)
    feeding_chart: List[FeedingChartEntry] = Field(default_factory=list)


class Product(CatalogModel):
    """Product record"""

    id: str
    brand: str
    flavor: str
    species: Species
    life_stage: LifeStage
    food_type: FoodType
    ingredients: List[str] = Field(default_factory=list)
    sizes: List[Size] = Field(default_factory=list)
    feeding_chart: List[FeedingChartEntry] = Field(default_factory=list)

    def size(self, size_id: str) -> Optional[Size]:
        for size in self.sizes:
            if size.id == size_id:
                return size
        return None


class ProductUpdate(CatalogModel):
    """Partial product update; ``sizes`` and ``feeding_chart`` replace the stored lists"""

    brand: Optional[str] = None
    flavor: Optional[str] = None
    species: Optional[Species] = None
    life_stage: Optional[LifeStage] = None
    food_type: Optional[FoodType] = None
    ingredients: Optional[List[str]] = None
    sizes: Optional[List[SizeCreate]] = None
    feeding_chart: Optional[List[FeedingChartEntry]] = None


class ProductFilter(CatalogModel):
    """Product query; an absent field places no constraint"""

    id: Optional[str] = None
    brand: Optional[str] = None
    flavor: Optional[str] = None
    species: Optional[Species] = None
    life_stage: Optional[LifeStage] = None
    food_type: Optional[FoodType] = None
