"""
Base repository for the MongoDB-backed catalog.
This follows the Repository pattern to separate business logic from data access.
"""

from typing import Any, Dict, List, Optional
from abc import ABC

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase

from app.exceptions import NotFoundError


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id coming from a caller; ``None`` when it cannot be an ObjectId."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


class MongoRepository(ABC):
    """
    Base repository providing common document operations.
    All catalog repositories should inherit from this class.
    """

    collection_name: str = ""
    entity_name: str = "Document"

    def __init__(self, db: AsyncDatabase):
        self.db = db

    @property
    def collection(self) -> AsyncCollection:
        return self.db[self.collection_name]

    async def _find_document(self, entity_id: Any) -> Optional[Dict[str, Any]]:
        """Get a raw document by id, or None if the id is malformed or unknown"""
        object_id = to_object_id(entity_id)
        if object_id is None:
            return None
        return await self.collection.find_one({"_id": object_id})

    async def _get_document(self, entity_id: Any) -> Dict[str, Any]:
        """
        Get a raw document by id.

        Raises:
            NotFoundError: If the id does not resolve
        """
        document = await self._find_document(entity_id)
        if document is None:
            raise NotFoundError(
                f"{self.entity_name} not found", details={"id": str(entity_id)}
            )
        return document

    async def _find_documents(self, query: Dict[str, Any]) -> List[Dict[str, Any]]:
        return await self.collection.find(query).to_list(length=None)

    async def _save(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the stored document with ``document`` (single-document read-modify-write)"""
        await self.collection.replace_one({"_id": document["_id"]}, document)
        return document

    async def _delete_document(self, entity_id: Any) -> Dict[str, Any]:
        """
        Delete a document by id and return what was removed.

        Raises:
            NotFoundError: If the id does not resolve
        """
        object_id = to_object_id(entity_id)
        document = None
        if object_id is not None:
            document = await self.collection.find_one_and_delete({"_id": object_id})
        if document is None:
            raise NotFoundError(
                f"{self.entity_name} not found", details={"id": str(entity_id)}
            )
        return document
