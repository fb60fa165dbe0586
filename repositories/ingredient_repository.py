"""
Ingredient Repository - Data access layer for ingredients and their per-species ratings (MongoDB)
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Union
import logging
import re

from bson import ObjectId
from pymongo import ReturnDocument

from adapters.mongo_adapter import INGREDIENTS_COLLECTION
from app.exceptions import (
    AlreadyExistsError,
    NoUpdatesProvidedError,
    NotFoundError,
    RatingAlreadyExistsError,
    RatingNotFoundError,
    ServiceValidationError,
)
from domain.enums import Species
from domain.mappers import CatalogMapper
from domain.schemas.ingredient_schemas import (
    Ingredient,
    IngredientFilter,
    IngredientPush,
    IngredientUpdate,
    PushManyByNames,
    RatingCreate,
    RatingUpdate,
    SpeciesRating,
)
from repositories.base import MongoRepository

logger = logging.getLogger("healthybites.ingredients")


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# Marks a push() argument the caller did not supply, as opposed to an explicit None
UNSET: Any = _Unset()


def _ensure_unique_species(ratings: Iterable[RatingCreate]) -> None:
    seen = set()
    for rating in ratings:
        if rating.species in seen:
            raise RatingAlreadyExistsError(
                f"Rating for species '{rating.species.value}' already exists",
                details={"species": rating.species.value},
            )
        seen.add(rating.species)


def _find_rating(document: Dict[str, Any], species: Species) -> Optional[Dict[str, Any]]:
    for rating in document.get("ratings") or []:
        if rating.get("species") == species.value:
            return rating
    return None


def _rating_changes(update: RatingUpdate) -> Dict[str, Any]:
    return update.model_dump(mode="json", by_alias=True, exclude_unset=True)


class IngredientRepository(MongoRepository):
    """
    Repository for the ``ingredients`` collection.

    Ingredient names are a soft natural key: uniqueness is checked on write,
    not enforced by an index. Each ingredient holds at most one rating per
    species.
    """

    collection_name = INGREDIENTS_COLLECTION
    entity_name = "Ingredient"

    async def add(
        self, name: str, ratings: Optional[Sequence[RatingCreate]] = None
    ) -> Ingredient:
        """Create an ingredient

        Args:
            name: Ingredient name, matched case-sensitively against existing names
            ratings: Initial ratings, at most one per species

        Returns:
            The stored ingredient

        Raises:
            AlreadyExistsError: If an ingredient with this name exists
            RatingAlreadyExistsError: If ``ratings`` repeats a species
        """
        if await self.collection.find_one({"name": name}) is not None:
            raise AlreadyExistsError(
                "Ingredient already exists", details={"name": name}
            )

        ratings = list(ratings or [])
        _ensure_unique_species(ratings)

        document = {
            "name": name,
            "ratings": [CatalogMapper.rating_document(r) for r in ratings],
        }
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        logger.info("Created ingredient %r (%s)", name, result.inserted_id)
        return CatalogMapper.to_ingredient(document)

    async def get_by_name(self, name: str) -> Optional[Ingredient]:
        """Get ingredient by exact name"""
        document = await self.collection.find_one({"name": name})
        return CatalogMapper.to_ingredient(document) if document else None

    async def find_by_names(self, names: Sequence[str]) -> List[Ingredient]:
        """Get ingredients by exact name, ordered as ``names``; unknown names are skipped

        Same-named duplicates (not yet merged) resolve to the oldest document.
        """
        documents = await self._find_documents({"name": {"$in": list(names)}})
        by_name: Dict[str, Dict[str, Any]] = {}
        for document in sorted(documents, key=lambda d: d["_id"]):
            by_name.setdefault(document["name"], document)
        ordered = [by_name[n] for n in dict.fromkeys(names) if n in by_name]
        return [CatalogMapper.to_ingredient(d) for d in ordered]

    @staticmethod
    def build_query(filters: IngredientFilter) -> Dict[str, Any]:
        """Translate an ingredient filter into a MongoDB query.

        Species and rating constraints are matched against the same rating
        entry, so ``species=cat, rating=None`` finds ingredients whose cat
        rating is unset rather than ingredients with any unset rating.
        """
        query: Dict[str, Any] = {}

        if filters.name is not None:
            query["name"] = {"$regex": re.escape(filters.name), "$options": "i"}

        element: Dict[str, Any] = {}
        if filters.species is not None:
            element["species"] = filters.species.value

        if filters.rating_is_set:
            element["healthRating"] = filters.rating
        else:
            bounds: Dict[str, Any] = {}
            if filters.min_rating is not None:
                bounds["$gte"] = filters.min_rating
            if filters.max_rating is not None:
                bounds["$lte"] = filters.max_rating
            if bounds:
                element["healthRating"] = bounds

        if element:
            query["ratings"] = {"$elemMatch": element}

        return query

    async def find(
        self, filters: Optional[IngredientFilter] = None
    ) -> Union[Ingredient, None, List[Ingredient]]:
        """Find ingredients

        Args:
            filters: Optional constraints. ``id`` short-circuits every other field.

        Returns:
            The matching ingredient (or None) when ``id`` is given, otherwise
            every ingredient matching the remaining constraints
        """
        filters = filters or IngredientFilter()

        if filters.id:
            document = await self._find_document(filters.id)
            return CatalogMapper.to_ingredient(document) if document else None

        query = self.build_query(filters)
        logger.debug("Ingredient query: %s", query)
        documents = await self._find_documents(query)
        return [CatalogMapper.to_ingredient(d) for d in documents]

    @staticmethod
    def get_one(ingredient: Ingredient, species: Species) -> SpeciesRating:
        """Project one ingredient's rating for ``species``

        Raises:
            RatingNotFoundError: If the ingredient has no rating for ``species``
        """
        species = Species(species)
        rating = ingredient.rating_for(species)
        if rating is None:
            raise RatingNotFoundError(
                f"No rating found for species: {species.value}",
                details={"ingredient": ingredient.name, "species": species.value},
            )
        return SpeciesRating(
            id=ingredient.id,
            name=ingredient.name,
            species=rating.species,
            health_rating=rating.health_rating,
            notes=rating.notes,
        )

    @staticmethod
    def get_all(
        ingredients: Iterable[Ingredient], species: Species
    ) -> List[SpeciesRating]:
        """Project a batch of ingredients for ``species``, skipping those without a rating"""
        results = []
        for ingredient in ingredients:
            try:
                results.append(IngredientRepository.get_one(ingredient, species))
            except RatingNotFoundError:
                continue
        return results

    async def update(self, ingredient_id: str, updates: IngredientUpdate) -> Ingredient:
        """Rename an ingredient and/or replace its ratings

        Raises:
            NotFoundError: If the ingredient does not exist
            NoUpdatesProvidedError: If neither name nor ratings were given
            AlreadyExistsError: If the new name belongs to another ingredient
        """
        document = await self._get_document(ingredient_id)

        update: Dict[str, Any] = {}
        if updates.name is not None:
            if updates.name != document.get("name"):
                clash = await self.collection.find_one({"name": updates.name})
                if clash is not None:
                    raise AlreadyExistsError(
                        "Ingredient already exists", details={"name": updates.name}
                    )
            update["name"] = updates.name
        if updates.ratings is not None:
            _ensure_unique_species(updates.ratings)
            update["ratings"] = [
                CatalogMapper.rating_document(r) for r in updates.ratings
            ]

        if not update:
            raise NoUpdatesProvidedError()

        updated = await self.collection.find_one_and_update(
            {"_id": document["_id"]},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
        logger.info("Updated ingredient %s fields %s", ingredient_id, sorted(update))
        return CatalogMapper.to_ingredient(updated)

    async def push(
        self,
        name: str,
        species: Species,
        health_rating: Any = UNSET,
        notes: Any = UNSET,
    ) -> Ingredient:
        """Idempotently record a species rating for an ingredient name

        - Unknown name: create the ingredient with a single rating.
        - Known name with a rating for ``species``: merge-assign only the
          fields that were passed.
        - Known name without one: append a new rating.

        Never raises AlreadyExistsError.
        """
        species = Species(species)
        provided: Dict[str, Any] = {}
        if health_rating is not UNSET:
            provided["health_rating"] = health_rating
        if notes is not UNSET:
            provided["notes"] = notes
        changes = _rating_changes(RatingUpdate(**provided))

        document = await self.collection.find_one({"name": name})

        if document is None:
            document = {
                "name": name,
                "ratings": [self._new_rating(species, changes)],
            }
            result = await self.collection.insert_one(document)
            document["_id"] = result.inserted_id
            logger.info("Pushed new ingredient %r for %s", name, species.value)
            return CatalogMapper.to_ingredient(document)

        rating = _find_rating(document, species)
        if rating is not None:
            if not changes:
                return CatalogMapper.to_ingredient(document)
            rating.update(changes)
        else:
            document.setdefault("ratings", []).append(
                self._new_rating(species, changes)
            )

        await self._save(document)
        logger.debug("Pushed %s rating onto ingredient %r", species.value, name)
        return CatalogMapper.to_ingredient(document)

    async def push_many(
        self, entries: Union[Sequence[IngredientPush], PushManyByNames]
    ) -> List[Ingredient]:
        """Apply :meth:`push` to a batch

        Args:
            entries: Either full push records, or bare names sharing one species

        Returns:
            The pushed ingredients, in input order

        Pushes run one after another so repeated names in a batch resolve to
        a single ingredient.
        """
        results = []
        if isinstance(entries, PushManyByNames):
            for name in entries.names:
                results.append(await self.push(name, entries.species))
            return results

        for entry in entries:
            kwargs = {
                field: getattr(entry, field)
                for field in ("health_rating", "notes")
                if field in entry.model_fields_set
            }
            results.append(await self.push(entry.name, entry.species, **kwargs))
        return results

    async def add_rating(self, ingredient_id: str, rating: RatingCreate) -> Ingredient:
        """Append a rating for a species the ingredient does not rate yet

        Raises:
            NotFoundError: If the ingredient does not exist
            RatingAlreadyExistsError: If the species is already rated
        """
        document = await self._get_document(ingredient_id)

        if _find_rating(document, rating.species) is not None:
            raise RatingAlreadyExistsError(
                f"Rating for species '{rating.species.value}' already exists",
                details={"id": ingredient_id, "species": rating.species.value},
            )

        document.setdefault("ratings", []).append(CatalogMapper.rating_document(rating))
        await self._save(document)
        logger.info("Added %s rating to ingredient %s", rating.species.value, ingredient_id)
        return CatalogMapper.to_ingredient(document)

    async def update_rating(
        self, ingredient_id: str, species: Species, updates: RatingUpdate
    ) -> Ingredient:
        """Merge-assign the provided fields onto the rating for ``species``

        Raises:
            NotFoundError: If the ingredient does not exist
            RatingNotFoundError: If the species is not rated
            NoUpdatesProvidedError: If no field was provided
        """
        species = Species(species)
        document = await self._get_document(ingredient_id)

        rating = _find_rating(document, species)
        if rating is None:
            raise RatingNotFoundError(
                f"Rating for species '{species.value}' not found",
                details={"id": ingredient_id, "species": species.value},
            )

        changes = _rating_changes(updates)
        if not changes:
            raise NoUpdatesProvidedError()

        rating.update(changes)
        await self._save(document)
        logger.info("Updated %s rating on ingredient %s", species.value, ingredient_id)
        return CatalogMapper.to_ingredient(document)

    async def remove_rating(self, ingredient_id: str, species: Species) -> Ingredient:
        """Delete the rating for ``species``

        Raises:
            NotFoundError: If the ingredient does not exist
            RatingNotFoundError: If the species is not rated
        """
        species = Species(species)
        document = await self._get_document(ingredient_id)

        rating = _find_rating(document, species)
        if rating is None:
            raise RatingNotFoundError(
                f"Rating for species '{species.value}' not found",
                details={"id": ingredient_id, "species": species.value},
            )

        document["ratings"].remove(rating)
        await self._save(document)
        logger.info("Removed %s rating from ingredient %s", species.value, ingredient_id)
        return CatalogMapper.to_ingredient(document)

    async def merge_duplicates(self, primary_id: str, duplicate_id: str) -> Ingredient:
        """Fold a duplicate ingredient into the primary and delete the duplicate

        Ratings are copied only for species the primary does not rate; the
        primary's own ratings always win.

        Raises:
            NotFoundError: If either ingredient does not exist
            ServiceValidationError: If both ids name the same ingredient
        """
        primary = await self._find_document(primary_id)
        duplicate = await self._find_document(duplicate_id)

        if primary is None or duplicate is None:
            raise NotFoundError(
                "One or both ingredients not found",
                details={"primary_id": primary_id, "duplicate_id": duplicate_id},
            )
        if primary["_id"] == duplicate["_id"]:
            raise ServiceValidationError("Cannot merge an ingredient into itself")

        primary_ratings = primary.setdefault("ratings", [])
        rated = {r.get("species") for r in primary_ratings}
        for rating in duplicate.get("ratings") or []:
            if rating.get("species") not in rated:
                primary_ratings.append(dict(rating, _id=ObjectId()))
                rated.add(rating.get("species"))

        await self._save(primary)
        await self.collection.delete_one({"_id": duplicate["_id"]})
        logger.info(
            "Merged ingredient %s (%r) into %s (%r)",
            duplicate_id,
            duplicate.get("name"),
            primary_id,
            primary.get("name"),
        )
        return CatalogMapper.to_ingredient(primary)

    async def delete(self, ingredient_id: str) -> Ingredient:
        """Delete an ingredient and return the removed record

        Products referencing it by name are left untouched.

        Raises:
            NotFoundError: If the ingredient does not exist
        """
        document = await self._delete_document(ingredient_id)
        logger.info("Deleted ingredient %s (%r)", ingredient_id, document.get("name"))
        return CatalogMapper.to_ingredient(document)

    @staticmethod
    def _new_rating(species: Species, changes: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "_id": ObjectId(),
            "species": species.value,
            "healthRating": changes.get("healthRating"),
            "notes": changes.get("notes"),
        }
