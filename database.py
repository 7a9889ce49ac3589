"""
MongoDB access for the Dukaan backend.

The connection is configured from the environment at import time. Routes get
a DataStore through the get_store dependency; tests override that dependency
with a store built over an in-process database.
"""
import os
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from errors import StoreFailure
from logger import get_logger

_logger = get_logger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL") or os.getenv("MONGODB_URI")
DATABASE_NAME = os.getenv("DATABASE_NAME", "dukaan")

db: Optional[Database] = None
if DATABASE_URL:
    db = MongoClient(DATABASE_URL)[DATABASE_NAME]
    _logger.info(f"Using MongoDB database '{DATABASE_NAME}'")
else:
    _logger.warning("DATABASE_URL is not set, store-backed routes will fail")


# ---------------------- Helpers ----------------------

def object_id(value: Any) -> ObjectId:
    """Coerce a path/body id into an ObjectId. Raises InvalidId when malformed."""
    if isinstance(value, ObjectId):
        return value
    return ObjectId(str(value))


def serialize(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not doc:
        return doc
    d = {}
    for k, v in doc.items():
        if k == "_id":
            k = "id"
        if isinstance(v, ObjectId):
            v = str(v)
        elif isinstance(v, datetime):
            v = v.isoformat()
        d[k] = v
    return d


def _projection(fields: Optional[Iterable[str]]) -> Optional[Dict[str, int]]:
    if fields is None:
        return None
    return {f: 1 for f in fields}


@contextmanager
def _guard(action: str):
    try:
        yield
    except (PyMongoError, InvalidId) as e:
        _logger.exception(f"Store failure while trying to {action}: {e}")
        raise StoreFailure() from e


# ---------------------- Store ----------------------

class DataStore:
    """CRUD and query operations over the marketplace collections."""

    def __init__(self, database: Database):
        self.database = database

    def insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        with _guard(f"insert into {collection}"):
            doc = dict(document)
            doc["_id"] = self.database[collection].insert_one(doc).inserted_id
        return doc

    def find_by_id(self, collection: str, id: Any, fields: Optional[Sequence[str]] = None) -> Optional[Dict[str, Any]]:
        with _guard(f"read {collection} {id}"):
            return self.database[collection].find_one({"_id": object_id(id)}, _projection(fields))

    def find_one(self, collection: str, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with _guard(f"read {collection}"):
            return self.database[collection].find_one(filter)

    def find(
        self,
        collection: str,
        filter: Optional[Dict[str, Any]] = None,
        fields: Optional[Sequence[str]] = None,
        sort: Optional[List[Tuple[str, int]]] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        with _guard(f"query {collection}"):
            cursor = self.database[collection].find(filter or {}, _projection(fields))
            if sort:
                cursor = cursor.sort(sort)
            if limit:
                cursor = cursor.limit(limit)
            return list(cursor)

    def update_by_id(self, collection: str, id: Any, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with _guard(f"update {collection} {id}"):
            if not changes:
                return self.database[collection].find_one({"_id": object_id(id)})
            return self.database[collection].find_one_and_update(
                {"_id": object_id(id)},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )

    def delete_by_id(self, collection: str, id: Any) -> bool:
        with _guard(f"delete from {collection} {id}"):
            res = self.database[collection].delete_one({"_id": object_id(id)})
        return res.deleted_count > 0

    def populate(
        self,
        documents: Iterable[Dict[str, Any]],
        field: str,
        collection: str,
        fields: Sequence[str],
    ) -> Dict[ObjectId, Dict[str, Any]]:
        """Resolve the reference `field` of every document in one lookup.

        Returns referenced documents keyed by id. References that point at
        nothing are absent from the result.
        """
        ids = list({doc[field] for doc in documents if doc.get(field) is not None})
        if not ids:
            return {}
        referenced = self.find(collection, {"_id": {"$in": ids}}, fields)
        return {doc["_id"]: doc for doc in referenced}

    def collection_names(self) -> List[str]:
        with _guard("list collections"):
            return self.database.list_collection_names()


def get_store() -> DataStore:
    if db is None:
        _logger.error("No store configured, set DATABASE_URL")
        raise StoreFailure()
    return DataStore(db)
