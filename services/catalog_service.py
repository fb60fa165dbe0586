"""Catalog query façade - turns loosely-typed request parameters into repository filters."""

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Union
import logging

from pydantic import ValidationError

from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import Species
from domain.schemas.ingredient_schemas import Ingredient, IngredientFilter, SpeciesRating
from domain.schemas.product_schemas import Product, ProductFilter

if TYPE_CHECKING:
    from repositories.ingredient_repository import IngredientRepository
    from repositories.product_repository import ProductRepository

logger = logging.getLogger("healthybites.catalog")

# Request spellings that mean "filter on an unset rating"
NULL_RATING_VALUES = {"null", "none", ""}

PRODUCT_PARAMS = ("id", "brand", "flavor", "species", "lifeStage", "foodType")
INGREDIENT_PARAMS = ("id", "name", "species", "rating", "minRating", "maxRating")


def _snake(name: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in name)


def _collect(params: Mapping[str, Any], names) -> Dict[str, Any]:
    """Pick the known parameters, accepting camelCase or snake_case keys and dropping unset ones"""
    collected = {}
    for name in names:
        value = params.get(name, params.get(_snake(name)))
        if value is not None:
            collected[_snake(name)] = value
    return collected


def _coerce(name: str, value: Any, convert: Callable[[Any], Any]) -> Any:
    try:
        return convert(value)
    except (TypeError, ValueError) as exc:
        raise ServiceValidationError(
            f"Invalid value for '{name}': {value!r}", details={"parameter": name}
        ) from exc


def _rating(value: Any) -> Optional[int]:
    if isinstance(value, str):
        if value.strip().lower() in NULL_RATING_VALUES:
            return None
        value = value.strip()
    number = float(value)
    if not number.is_integer():
        raise ValueError("rating must be a whole number")
    return int(number)


def _build(model, values: Dict[str, Any]):
    try:
        return model(**values)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ServiceValidationError(
            f"Invalid filter parameters: {', '.join(fields)}",
            details={"parameters": fields},
        ) from exc


class CatalogService:
    """Type coercion and forwarding for catalog queries; no business rules live here."""

    def __init__(
        self,
        product_repository: "ProductRepository",
        ingredient_repository: "IngredientRepository",
    ):
        self.product_repository = product_repository
        self.ingredient_repository = ingredient_repository

    @staticmethod
    def build_product_filter(params: Mapping[str, Any]) -> ProductFilter:
        values = {key: str(value) for key, value in _collect(params, PRODUCT_PARAMS).items()}
        return _build(ProductFilter, values)

    @staticmethod
    def build_ingredient_filter(params: Mapping[str, Any]) -> IngredientFilter:
        values = _collect(params, INGREDIENT_PARAMS)
        for key in ("id", "name", "species"):
            if key in values:
                values[key] = str(values[key])
        if "rating" in values:
            values["rating"] = _coerce("rating", values["rating"], _rating)
        for key in ("min_rating", "max_rating"):
            if key in values:
                values[key] = _coerce(key, values[key], float)
        return _build(IngredientFilter, values)

    async def find_products(
        self, params: Mapping[str, Any]
    ) -> Union[Product, None, List[Product]]:
        filters = self.build_product_filter(params)
        logger.debug("Product filter: %s", filters.changes())
        return await self.product_repository.find(filters)

    async def find_ingredients(
        self, params: Mapping[str, Any]
    ) -> Union[Ingredient, None, List[Ingredient]]:
        filters = self.build_ingredient_filter(params)
        logger.debug("Ingredient filter: %s", filters.changes())
        return await self.ingredient_repository.find(filters)

    async def rate_ingredients(
        self, names: List[str], species: Species
    ) -> List[SpeciesRating]:
        """Species view of the named ingredients; unknown or unrated names are omitted"""
        ingredients = await self.ingredient_repository.find_by_names(names)
        return self.ingredient_repository.get_all(ingredients, species)

    async def product_ingredient_ratings(self, product_id: str) -> List[SpeciesRating]:
        """Ratings of a product's ingredients for the product's own species

        Raises:
            NotFoundError: If the product does not exist
        """
        product = await self.product_repository.find(ProductFilter(id=product_id))
        if product is None:
            raise NotFoundError("Product not found", details={"id": product_id})
        return await self.rate_ingredients(product.ingredients, product.species)
