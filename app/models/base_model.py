# app/models/base_model.py

from datetime import datetime

from bson.objectid import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..extensions.db import db
from ..utils.errors import StoreFailure
from ..utils.logger import Log # import logging


def _now():
    return datetime.utcnow()


def to_object_id(value):
    """ObjectId for `value`, or None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    if value is None or not ObjectId.is_valid(str(value)):
        return None
    return ObjectId(str(value))


def serialize(value):
    """Make a Mongo document JSON friendly (ObjectId -> str, datetime -> ISO 8601)."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: serialize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [serialize(item) for item in value]
    return value


class BaseModel:
    """
    A base class for models providing the resource store operations.

    Every pymongo failure is re-raised as StoreFailure so callers never see
    driver internals.
    """
    collection_name = None

    STORE_NAME = "resource store"

    def __init__(self, **kwargs):
        self.created_at = _now()
        self.updated_at = self.created_at

        for key, value in kwargs.items():
            setattr(self, key, value)

    def to_dict(self):
        """
        Convert the model object to a dictionary representation.
        """
        return {key: getattr(self, key) for key in self.__dict__}

    def save(self):
        return self.__class__.insert(self.to_dict())

    # ------------------------------------------------------------------
    # store interface
    # ------------------------------------------------------------------
    @classmethod
    def get_collection(cls):
        return db.get_collection(cls.collection_name)

    @classmethod
    def _store_call(cls, operation, fn):
        try:
            return fn()
        except DuplicateKeyError:
            # unique-index violations are reported by the owning model
            raise
        except PyMongoError as e:
            Log.error(f"[base_model.py][{cls.__name__}][{operation}] {e}")
            raise StoreFailure(cls.STORE_NAME, f"{cls.collection_name}.{operation}: {e}") from e

    @classmethod
    def insert(cls, record):
        """Insert a document and return its id as a string."""
        result = cls._store_call("insert", lambda: cls.get_collection().insert_one(record))
        return str(result.inserted_id)

    @classmethod
    def find_by_id(cls, record_id, **scope):
        """
        Retrieve a document by id, optionally scoped by extra equality filters
        (e.g. vendor_id). Invalid ids simply find nothing.
        """
        record_oid = to_object_id(record_id)
        if record_oid is None:
            return None
        query = {"_id": record_oid}
        query.update(cls._scope_filter(scope))
        return cls._store_call("find_by_id", lambda: cls.get_collection().find_one(query))

    @classmethod
    def find_one(cls, query):
        return cls._store_call("find_one", lambda: cls.get_collection().find_one(query))

    @classmethod
    def count(cls, query):
        return cls._store_call("count", lambda: cls.get_collection().count_documents(query))

    @classmethod
    def find_by_filter(cls, query, sort=None, limit=10, offset=0):
        """
        Paginated lookup. `sort` is a list of (field, direction) pairs.

        Returns {"docs": [...], "total": n, "limit": limit, "offset": offset}.
        """
        def _run():
            cursor = cls.get_collection().find(query)
            if sort:
                cursor = cursor.sort(sort)
            cursor = cursor.skip(offset).limit(limit)
            return list(cursor), cls.get_collection().count_documents(query)

        docs, total = cls._store_call("find_by_filter", _run)
        return {"docs": docs, "total": total, "limit": limit, "offset": offset}

    @classmethod
    def update_fields(cls, record_id, fields, **scope):
        """
        Set `fields` on one document (and bump updated_at).

        Returns True when a document matched the id (and scope).
        """
        record_oid = to_object_id(record_id)
        if record_oid is None:
            return False
        query = {"_id": record_oid}
        query.update(cls._scope_filter(scope))
        updates = dict(fields)
        updates["updated_at"] = _now()
        result = cls._store_call(
            "update_fields",
            lambda: cls.get_collection().update_one(query, {"$set": updates}),
        )
        return result.matched_count > 0

    @classmethod
    def delete_matching(cls, query):
        """Delete every document matching `query`; returns the deleted count."""
        result = cls._store_call("delete_matching", lambda: cls.get_collection().delete_many(query))
        return result.deleted_count

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _scope_filter(scope):
        query = {}
        for key, value in scope.items():
            if key.endswith("_id"):
                oid = to_object_id(value)
                # an unparsable scope id can never match
                query[key] = oid if oid is not None else str(value)
            else:
                query[key] = value
        return query

    @staticmethod
    def parse_sort(sort_expression):
        """'-created_at,name' -> [("created_at", DESCENDING), ("name", ASCENDING)]"""
        if not sort_expression:
            return None
        sort = []
        for token in sort_expression.split(","):
            token = token.strip()
            if not token:
                continue
            if token.startswith("-"):
                sort.append((token[1:], DESCENDING))
            else:
                sort.append((token.lstrip("+"), ASCENDING))
        return sort or None

    @classmethod
    def serialize(cls, record):
        if record is None:
            return None
        return serialize(record)
