"""
Product Repository - Data access layer for the product catalog (MongoDB)
"""

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union
import logging

from pymongo import ReturnDocument

from adapters.mongo_adapter import PRODUCTS_COLLECTION
from app.exceptions import (
    AlreadyExistsError,
    IncompleteSizeDetailsError,
    NoUpdatesProvidedError,
    SizeNotFoundError,
)
from domain.enums import FoodType, LifeStage, Species
from domain.mappers import CatalogMapper
from domain.schemas.product_schemas import (
    Product,
    ProductCreate,
    ProductFilter,
    ProductUpdate,
    SizeCreate,
    SizeDetails,
    SizeUpdate,
)
from repositories.base import MongoRepository, to_object_id

if TYPE_CHECKING:
    from services.reconciliation_service import IngredientReconciler

logger = logging.getLogger("healthybites.products")

NATURAL_KEY_FIELDS = ("brand", "flavor", "species", "lifeStage", "foodType")


def natural_key(
    brand: str,
    flavor: str,
    species: Species,
    life_stage: LifeStage,
    food_type: FoodType,
) -> Dict[str, Any]:
    """The (brand, flavor, species, lifeStage, foodType) tuple as a document query"""
    return {
        "brand": brand,
        "flavor": flavor,
        "species": Species(species).value,
        "lifeStage": LifeStage(life_stage).value,
        "foodType": FoodType(food_type).value,
    }


def _find_size(document: Dict[str, Any], size_id: Any) -> Optional[Dict[str, Any]]:
    object_id = to_object_id(size_id)
    if object_id is None:
        return None
    for size in document.get("sizes") or []:
        if size.get("_id") == object_id:
            return size
    return None


class ProductRepository(MongoRepository):
    """
    Repository for the ``products`` collection.

    Writes that carry an ingredient list hand the names to the
    IngredientReconciler after the product itself has been stored.
    """

    collection_name = PRODUCTS_COLLECTION
    entity_name = "Product"

    def __init__(self, db, reconciler: Optional["IngredientReconciler"] = None):
        super().__init__(db)
        self.reconciler = reconciler

    async def add(self, product: ProductCreate) -> Product:
        """Create a product

        Args:
            product: Product details; sizes receive their own ids on insert

        Returns:
            The stored product

        Raises:
            AlreadyExistsError: If a product with the same brand, flavor,
                species, lifeStage and foodType exists
        """
        key = natural_key(
            product.brand,
            product.flavor,
            product.species,
            product.life_stage,
            product.food_type,
        )
        if await self.collection.find_one(key) is not None:
            raise AlreadyExistsError("Product already exists", details=key)

        document = CatalogMapper.to_document(product)
        document["sizes"] = [CatalogMapper.size_document(s) for s in product.sizes]
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        logger.info(
            "Created product %s %s/%s (%s)",
            product.brand,
            product.flavor,
            product.species.value,
            result.inserted_id,
        )

        await self._reconcile(product.ingredients, product.species)
        return CatalogMapper.to_product(document)

    @staticmethod
    def build_query(filters: ProductFilter) -> Dict[str, Any]:
        """Translate a product filter into a MongoDB query.

        A ``life_stage`` filter also matches products stored with ``all``;
        filtering on ``all`` itself only matches ``all``.
        """
        query: Dict[str, Any] = {}

        if filters.brand is not None:
            query["brand"] = filters.brand
        if filters.flavor is not None:
            query["flavor"] = filters.flavor
        if filters.species is not None:
            query["species"] = filters.species.value
        if filters.life_stage is not None:
            query["lifeStage"] = {
                "$in": list(dict.fromkeys([filters.life_stage.value, LifeStage.ALL.value]))
            }
        if filters.food_type is not None:
            query["foodType"] = filters.food_type.value

        return query

    async def find(
        self, filters: Optional[ProductFilter] = None
    ) -> Union[Product, None, List[Product]]:
        """Find products

        Args:
            filters: Optional constraints. ``id`` short-circuits every other field.

        Returns:
            The matching product (or None) when ``id`` is given, otherwise
            every product matching the remaining constraints
        """
        filters = filters or ProductFilter()

        if filters.id:
            document = await self._find_document(filters.id)
            return CatalogMapper.to_product(document) if document else None

        query = self.build_query(filters)
        logger.debug("Product query: %s", query)
        documents = await self._find_documents(query)
        return [CatalogMapper.to_product(d) for d in documents]

    async def update(self, product_id: str, updates: ProductUpdate) -> Product:
        """Apply the fields present in ``updates``

        ``sizes`` and ``feeding_chart`` replace the stored lists. A new
        ingredient list is reconciled against the new species if one is
        given, else the stored species.

        Raises:
            NotFoundError: If the product does not exist
            NoUpdatesProvidedError: If no field was provided
            AlreadyExistsError: If the change collides with another product's natural key
        """
        document = await self._get_document(product_id)

        update = updates.model_dump(mode="json", by_alias=True, exclude_none=True)
        if updates.sizes is not None:
            update["sizes"] = [CatalogMapper.size_document(s) for s in updates.sizes]

        if not update:
            raise NoUpdatesProvidedError()

        if any(field in update for field in NATURAL_KEY_FIELDS):
            key = {field: update.get(field, document.get(field)) for field in NATURAL_KEY_FIELDS}
            clash = await self.collection.find_one({**key, "_id": {"$ne": document["_id"]}})
            if clash is not None:
                raise AlreadyExistsError("Product already exists", details=key)

        updated = await self.collection.find_one_and_update(
            {"_id": document["_id"]},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
        logger.info("Updated product %s fields %s", product_id, sorted(update))

        if updates.ingredients is not None:
            species = updates.species or Species(document["species"])
            await self._reconcile(updates.ingredients, species)

        return CatalogMapper.to_product(updated)

    async def add_size(
        self, product_id: str, size_details: Union[SizeDetails, Mapping[str, Any]]
    ) -> Product:
        """Append a size to a product

        Args:
            product_id: Product id
            size_details: packaging (or ``type``), price, count and unit are
                required; links and imageUrls default to empty lists

        Raises:
            NotFoundError: If the product does not exist
            IncompleteSizeDetailsError: If a required field is missing
        """
        document = await self._get_document(product_id)

        if not isinstance(size_details, SizeDetails):
            size_details = SizeDetails.model_validate(size_details)

        missing = size_details.missing_fields()
        if missing:
            raise IncompleteSizeDetailsError(details={"missing": missing})

        size = SizeCreate(
            packaging=size_details.packaging,
            price=size_details.price,
            count=size_details.count,
            unit=size_details.unit,
            links=size_details.links or [],
            image_urls=size_details.image_urls or [],
        )
        document.setdefault("sizes", []).append(CatalogMapper.size_document(size))
        await self._save(document)
        logger.info("Added %s size to product %s", size.packaging, product_id)
        return CatalogMapper.to_product(document)

    async def update_size(
        self, product_id: str, size_id: str, updates: SizeUpdate
    ) -> Product:
        """Merge-assign the provided fields onto one size

        Raises:
            NotFoundError: If the product does not exist
            SizeNotFoundError: If the product has no such size
            NoUpdatesProvidedError: If no field was provided
        """
        document = await self._get_document(product_id)

        size = _find_size(document, size_id)
        if size is None:
            raise SizeNotFoundError(details={"product_id": product_id, "size_id": size_id})

        changes = updates.model_dump(
            mode="json", by_alias=True, exclude_unset=True, exclude_none=True
        )
        if not changes:
            raise NoUpdatesProvidedError()

        size.update(changes)
        await self._save(document)
        logger.info("Updated size %s on product %s", size_id, product_id)
        return CatalogMapper.to_product(document)

    async def remove_size(self, product_id: str, size_id: str) -> Product:
        """Delete one size from a product

        Raises:
            NotFoundError: If the product does not exist
            SizeNotFoundError: If the product has no such size
        """
        document = await self._get_document(product_id)

        size = _find_size(document, size_id)
        if size is None:
            raise SizeNotFoundError(details={"product_id": product_id, "size_id": size_id})

        document["sizes"].remove(size)
        await self._save(document)
        logger.info("Removed size %s from product %s", size_id, product_id)
        return CatalogMapper.to_product(document)

    async def delete(self, product_id: str) -> Product:
        """Delete a product and return the removed record

        Raises:
            NotFoundError: If the product does not exist
        """
        document = await self._delete_document(product_id)
        logger.info("Deleted product %s", product_id)
        return CatalogMapper.to_product(document)

    async def _reconcile(self, names: List[str], species: Species) -> None:
        if self.reconciler is None:
            return
        await self.reconciler.reconcile(names, species)
