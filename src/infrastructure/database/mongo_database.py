"""
MongoDB Database - Infrastructure Layer

This module provides a MongoDB database client for interacting with MongoDB.
It handles connection, collections, and the read/append operations used by
the order, prediction and training record repositories.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pymongo.errors
import structlog
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

logger = structlog.get_logger(__name__)

SortSpec = Union[str, Sequence[Tuple[str, int]]]


class MongoDatabase:
    """MongoDB database client."""

    def __init__(
        self,
        mongo_uri: str,
        db_name: str,
        orders_collection: str = "orders",
        predictions_collection: str = "delivery_predictions",
        training_collection: str = "prediction_training_data",
    ):
        """
        Initialize the MongoDB database client.

        Args:
            mongo_uri: MongoDB connection URI
            db_name: Name of the database to use
            orders_collection: Collection holding the external order store
            predictions_collection: Collection receiving predictions
            training_collection: Collection receiving training records
        """
        self.client: MongoClient = MongoClient(mongo_uri)
        self.db: Database = self.client[db_name]
        self.orders_collection = orders_collection
        self.predictions_collection = predictions_collection
        self.training_collection = training_collection

    def get_collection(self, collection_name: str) -> Collection:
        """
        Get a collection from the database.

        Args:
            collection_name: Name of the collection

        Returns:
            MongoDB collection
        """
        return self.db[collection_name]

    async def find_one(
        self, collection_name: str, query: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """
        Find a single document in a collection.

        Args:
            collection_name: Name of the collection
            query: Query to match documents

        Returns:
            The document if found, None otherwise
        """
        return self.db[collection_name].find_one(query)

    async def find_many(
        self,
        collection_name: str,
        query: Dict[str, Any],
        sort_by: Optional[SortSpec] = None,
        sort_direction: int = 1,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """
        Find multiple documents in a collection.

        Args:
            collection_name: Name of the collection
            query: Query to match documents
            sort_by: Field to sort by, or a list of ``(field, direction)`` pairs
            sort_direction: Sort direction when ``sort_by`` is a single field
            skip: Number of documents to skip
            limit: Maximum number of documents to return

        Returns:
            List of documents
        """
        cursor = self.db[collection_name].find(query)

        if isinstance(sort_by, str):
            cursor = cursor.sort(sort_by, sort_direction)
        elif sort_by:
            cursor = cursor.sort(list(sort_by))

        cursor = cursor.skip(skip).limit(limit)

        return list(cursor)

    async def insert_one(
        self, collection_name: str, document: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Insert a document into a collection.

        Args:
            collection_name: Name of the collection
            document: Document to insert

        Returns:
            The inserted document with any generated fields

        Raises:
            Exception: If the insert fails
        """
        result = self.db[collection_name].insert_one(document)
        if not result.acknowledged:
            raise Exception(f"Failed to insert document in {collection_name}")
        return document

    async def insert_many(
        self, collection_name: str, documents: Sequence[Dict[str, Any]]
    ) -> int:
        """
        Insert documents into a collection in a single batched write.

        Args:
            collection_name: Name of the collection
            documents: Documents to insert

        Returns:
            Number of inserted documents

        Raises:
            Exception: If the insert fails
        """
        if not documents:
            return 0
        result = self.db[collection_name].insert_many(list(documents), ordered=False)
        if not result.acknowledged:
            raise Exception(f"Failed to insert documents in {collection_name}")
        return len(result.inserted_ids)

    def ping(self) -> None:
        """Round-trip to the server; raises when it is unreachable."""
        self.client.admin.command("ping")

    def close(self) -> None:
        """Close the database connection."""
        self.client.close()

    def _safe_drop_index(self, collection_name: str, index_name: str) -> None:
        """
        Safely drop an index if it exists.

        Args:
            collection_name: Name of the collection
            index_name: Name of the index to drop
        """
        try:
            self.db[collection_name].drop_index(index_name)
        except pymongo.errors.OperationFailure:
            # Index doesn't exist, nothing to do
            pass

    async def create_indexes(self) -> None:
        """
        Create all necessary indexes for the application.
        This is an async method to be called during application startup.
        """
        orders = self.orders_collection
        self._safe_drop_index(orders, "order_id_idx")
        self._safe_drop_index(orders, "delivered_created_idx")

        try:
            self.db[orders].create_index("id", name="order_id_idx")
            self.db[orders].create_index(
                [("actual_delivery", 1), ("created_at", 1), ("id", 1)],
                name="delivered_created_idx",
                background=True,
            )
        except pymongo.errors.OperationFailure as e:
            logger.warning("mongo.indexes.orders_failed", error=str(e))

        predictions = self.predictions_collection
        self._safe_drop_index(predictions, "prediction_id_idx")
        self._safe_drop_index(predictions, "prediction_order_idx")
        self._safe_drop_index(predictions, "prediction_created_at_idx")

        try:
            self.db[predictions].create_index(
                "id", name="prediction_id_idx", unique=True
            )
            self.db[predictions].create_index("order_id", name="prediction_order_idx")
            self.db[predictions].create_index(
                "created_at", name="prediction_created_at_idx", background=True
            )
        except pymongo.errors.OperationFailure as e:
            logger.warning("mongo.indexes.predictions_failed", error=str(e))

        training = self.training_collection
        self._safe_drop_index(training, "training_id_idx")
        self._safe_drop_index(training, "training_created_at_idx")

        try:
            self.db[training].create_index("id", name="training_id_idx", unique=True)
            self.db[training].create_index(
                "created_at", name="training_created_at_idx", background=True
            )
        except pymongo.errors.OperationFailure as e:
            logger.warning("mongo.indexes.training_failed", error=str(e))
