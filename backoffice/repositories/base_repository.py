"""
Base repository with generic operations for MongoDB.
Entity repositories inherit from this and work on documents without ``_id``.
"""
from typing import Optional, List, Dict, Any
from motor.motor_asyncio import AsyncIOMotorCollection
import logging

logger = logging.getLogger(__name__)

# Business identifiers are used instead of ObjectIds.
NO_OBJECT_ID = {"_id": 0}


class BaseRepository:
    """
    Generic repository for MongoDB collections.

    Provides standard methods: insert, find_one, find_all, count, delete_one, exists.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize repository with MongoDB collection.

        Args:
            collection: Motor AsyncIOMotorCollection instance
        """
        self.collection = collection

    async def insert(self, document: Dict[str, Any]) -> None:
        """
        Insert a new document.

        Args:
            document: Document data (not modified)
        """
        await self.collection.insert_one(dict(document))
        logger.info(f"Created document in {self.collection.name}")

    async def find_one(self, filter_query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Find single document matching filter.

        Args:
            filter_query: MongoDB filter query

        Returns:
            Document data or None if not found
        """
        return await self.collection.find_one(filter_query, NO_OBJECT_ID)

    async def find_all(
        self,
        filter_query: Optional[Dict[str, Any]] = None,
        sort: Optional[List[tuple]] = None
    ) -> List[Dict[str, Any]]:
        """
        Find all documents matching filter.

        Args:
            filter_query: MongoDB filter query (None for all documents)
            sort: List of (field, direction) tuples for sorting

        Returns:
            List of documents
        """
        cursor = self.collection.find(filter_query or {}, NO_OBJECT_ID)
        if sort:
            cursor = cursor.sort(sort)
        return await cursor.to_list(length=None)

    async def count(self, filter_query: Optional[Dict[str, Any]] = None) -> int:
        """
        Count documents matching filter.

        Args:
            filter_query: MongoDB filter query

        Returns:
            Number of matching documents
        """
        return await self.collection.count_documents(filter_query or {})

    async def delete_one(self, filter_query: Dict[str, Any]) -> bool:
        """
        Delete the first document matching filter.

        Args:
            filter_query: MongoDB filter query

        Returns:
            True if a document was deleted, False otherwise
        """
        result = await self.collection.delete_one(filter_query)
        if result.deleted_count > 0:
            logger.info(f"Deleted document from {self.collection.name}: {filter_query}")
            return True
        return False

    async def exists(self, filter_query: Dict[str, Any]) -> bool:
        """
        Check if document exists matching filter.

        Args:
            filter_query: MongoDB filter query

        Returns:
            True if exists, False otherwise
        """
        count = await self.collection.count_documents(filter_query, limit=1)
        return count > 0
