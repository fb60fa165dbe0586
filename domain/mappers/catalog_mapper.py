"""
Catalog domain mappers.
Handles transformation between MongoDB documents and catalog schemas.
"""

from typing import Any, Dict, Mapping

from bson import ObjectId

from domain.schemas.common import CatalogModel
from domain.schemas.ingredient_schemas import Ingredient, RatingCreate
from domain.schemas.product_schemas import Product, SizeCreate


def _with_string_id(document: Mapping[str, Any]) -> Dict[str, Any]:
    data = {key: value for key, value in document.items() if key != "_id"}
    data["id"] = str(document["_id"])
    return data


class CatalogMapper:
    """Mapper for ingredient and product documents."""

    @staticmethod
    def to_document(model: CatalogModel) -> Dict[str, Any]:
        """Dump a schema the way it is stored: camelCase keys, enum values as strings."""
        return model.model_dump(mode="json", by_alias=True, exclude={"id"})

    @staticmethod
    def rating_document(rating: RatingCreate) -> Dict[str, Any]:
        """Build a rating sub-document with a freshly generated id."""
        return {"_id": ObjectId(), **CatalogMapper.to_document(rating)}

    @staticmethod
    def size_document(size: SizeCreate) -> Dict[str, Any]:
        """Build a size sub-document with a freshly generated id."""
        return {"_id": ObjectId(), **CatalogMapper.to_document(size)}

    @staticmethod
    def to_ingredient(document: Mapping[str, Any]) -> Ingredient:
        """
        Convert an ingredient document to the Ingredient schema.

        Args:
            document: raw document from the ``ingredients`` collection

        Returns:
            Ingredient with string ids on the record and on each rating
        """
        data = _with_string_id(document)
        data["ratings"] = [_with_string_id(r) for r in document.get("ratings") or []]
        return Ingredient.model_validate(data)

    @staticmethod
    def to_product(document: Mapping[str, Any]) -> Product:
        """
        Convert a product document to the Product schema.

        Args:
            document: raw document from the ``products`` collection

        Returns:
            Product with string ids on the record and on each size
        """
        data = _with_string_id(document)
        data["sizes"] = [_with_string_id(s) for s in document.get("sizes") or []]
        return Product.model_validate(data)
