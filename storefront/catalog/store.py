"""Product store backends.

The catalog service talks to a :class:`ProductStore`. Production uses
:class:`MongoProductStore`; when no MongoDB URI is configured the service runs
on :class:`InMemoryProductStore`, which is also what the test suite uses.

Records returned by every backend are plain dicts with a string ``_id``.
"""

import copy
import logging
import random
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient, ReturnDocument
from pymongo.collection import Collection

# Configure module logger
logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "products"


class ProductStore(ABC):
    """Contract of the persistent product collection."""

    @abstractmethod
    def find_all(self, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Return every record matching an equality filter."""

    @abstractmethod
    def find_by_id(self, product_id: str) -> Optional[Dict[str, Any]]:
        """Return the record with this id, or None."""

    @abstractmethod
    def sample(self, size: int, fields: Iterable[str]) -> List[Dict[str, Any]]:
        """Return up to ``size`` random distinct records projected to ``fields``."""

    @abstractmethod
    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a record and return it with its assigned id."""

    @abstractmethod
    def update_by_id(
        self, product_id: str, fields: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Set ``fields`` on a record and return the updated record, or None."""

    @abstractmethod
    def delete_by_id(self, product_id: str) -> bool:
        """Delete a record. Returns False when it did not exist."""

    def ping(self) -> bool:
        return True


def _object_id(product_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(product_id)
    except (InvalidId, TypeError):
        return None


def _to_record(document: Dict[str, Any]) -> Dict[str, Any]:
    record = dict(document)
    if "_id" in record:
        record["_id"] = str(record["_id"])
    return record


class MongoProductStore(ProductStore):
    """MongoDB-backed product collection.

    Ids that are not valid ObjectIds are treated as absent records rather than
    errors.
    """

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    @classmethod
    def from_uri(
        cls, uri: str, db_name: str, collection_name: str = DEFAULT_COLLECTION
    ) -> "MongoProductStore":
        """Connect to MongoDB and bind to the product collection."""
        client: MongoClient = MongoClient(uri)
        logger.info(f"Using MongoDB collection {db_name}.{collection_name}")
        return cls(client[db_name][collection_name])

    def find_all(self, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return [_to_record(doc) for doc in self._collection.find(filter or {})]

    def find_by_id(self, product_id: str) -> Optional[Dict[str, Any]]:
        oid = _object_id(product_id)
        if oid is None:
            return None
        document = self._collection.find_one({"_id": oid})
        return _to_record(document) if document else None

    def sample(self, size: int, fields: Iterable[str]) -> List[Dict[str, Any]]:
        pipeline = [
            {"$sample": {"size": size}},
            {"$project": {field: 1 for field in fields}},
        ]
        return [_to_record(doc) for doc in self._collection.aggregate(pipeline)]

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        document = dict(fields)
        result = self._collection.insert_one(document)
        document["_id"] = result.inserted_id
        return _to_record(document)

    def update_by_id(
        self, product_id: str, fields: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        oid = _object_id(product_id)
        if oid is None:
            return None
        document = self._collection.find_one_and_update(
            {"_id": oid},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        return _to_record(document) if document else None

    def delete_by_id(self, product_id: str) -> bool:
        oid = _object_id(product_id)
        if oid is None:
            return False
        return self._collection.delete_one({"_id": oid}).deleted_count == 1

    def ping(self) -> bool:
        try:
            self._collection.database.client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False


class InMemoryProductStore(ProductStore):
    """Dict-backed product collection for local development and tests.

    Records are copied on the way in and out so callers can never mutate
    stored state directly.
    """

    def __init__(self, products: Optional[Iterable[Dict[str, Any]]] = None) -> None:
        self._products: Dict[str, Dict[str, Any]] = {}
        for product in products or []:
            self.create(product)

    def __len__(self) -> int:
        return len(self._products)

    def find_all(self, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        criteria = filter or {}
        return [
            copy.deepcopy(record)
            for record in self._products.values()
            if all(record.get(key) == value for key, value in criteria.items())
        ]

    def find_by_id(self, product_id: str) -> Optional[Dict[str, Any]]:
        record = self._products.get(product_id)
        return copy.deepcopy(record) if record is not None else None

    def sample(self, size: int, fields: Iterable[str]) -> List[Dict[str, Any]]:
        fields = list(fields)
        records = list(self._products.values())
        chosen = random.sample(records, min(size, len(records)))
        return [
            {field: record[field] for field in fields if field in record}
            for record in chosen
        ]

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        record = copy.deepcopy(fields)
        record["_id"] = str(record.get("_id") or uuid.uuid4().hex)
        self._products[record["_id"]] = record
        return copy.deepcopy(record)

    def update_by_id(
        self, product_id: str, fields: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        record = self._products.get(product_id)
        if record is None:
            return None
        record.update(copy.deepcopy(fields))
        return copy.deepcopy(record)

    def delete_by_id(self, product_id: str) -> bool:
        return self._products.pop(product_id, None) is not None
