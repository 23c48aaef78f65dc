# products_api/database.py
"""Document-store layer.

``ProductStore`` is the interface the service logic talks to. Two
implementations exist: ``MongoProductStore`` (pymongo's asyncio client)
and ``InMemoryProductStore`` (a process-local dict, used by the tests and
for running without a database). Documents are handed back as plain
dicts with ``id``, ``name``, ``price``, ``category``, ``createdAt`` and
``updatedAt`` keys.

The process keeps a single store handle, opened by the application
lifespan and served to routes by the ``get_store`` dependency.
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from .config import Settings
from .errors import StoreError

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


def utc_now() -> datetime:
    """Current UTC time truncated to the millisecond precision MongoDB keeps."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond - now.microsecond % 1000)


def to_object_id(product_id: str) -> ObjectId:
    try:
        return ObjectId(product_id)
    except (InvalidId, TypeError) as exc:
        raise StoreError(
            f'Cast to ObjectId failed for value "{product_id}" at path "_id" for model "Product"'
        ) from exc


def update_pipeline(fields: Document, now: datetime) -> List[Document]:
    """Aggregation-pipeline update setting ``fields`` and advancing ``updatedAt``.

    Values go through ``$literal`` so strings such as ``"$price"`` are stored
    as given. ``updatedAt`` becomes ``max(now, updatedAt + 1ms)``, so it moves
    forward even when the write lands in the same millisecond as the last one.
    """
    new_values: Document = {key: {"$literal": value} for key, value in fields.items()}
    new_values["updatedAt"] = {"$max": [now, {"$add": ["$updatedAt", 1]}]}
    return [{"$set": new_values}]


def from_document(doc: Document) -> Document:
    """Convert a raw MongoDB document into the API's product shape."""
    return {
        "id": str(doc["_id"]),
        "name": doc.get("name"),
        "price": doc.get("price"),
        "category": doc.get("category"),
        "createdAt": doc.get("createdAt"),
        "updatedAt": doc.get("updatedAt"),
    }


class ProductStore:
    """Per-document atomic persistence for products."""

    name = "store"

    async def ping(self) -> None:
        raise NotImplementedError

    async def insert(self, fields: Document) -> Document:
        raise NotImplementedError

    async def find_all(self) -> List[Document]:
        raise NotImplementedError

    async def find_by_id(self, product_id: str) -> Optional[Document]:
        raise NotImplementedError

    async def update_by_id(self, product_id: str, fields: Document) -> Optional[Document]:
        raise NotImplementedError

    async def delete_by_id(self, product_id: str) -> Optional[Document]:
        raise NotImplementedError

    async def close(self) -> None:
        return None


# ---------------------------
# In-memory store
# ---------------------------
class InMemoryProductStore(ProductStore):
    name = "memory"

    def __init__(self) -> None:
        self.products: Dict[str, Document] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _get_lock(self, key: str) -> asyncio.Lock:
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    async def ping(self) -> None:
        return None

    async def insert(self, fields: Document) -> Document:
        now = utc_now()
        pid = str(ObjectId())
        self.products[pid] = {"id": pid, **fields, "createdAt": now, "updatedAt": now}
        return dict(self.products[pid])

    async def find_all(self) -> List[Document]:
        return [dict(p) for p in self.products.values()]

    async def find_by_id(self, product_id: str) -> Optional[Document]:
        pid = str(to_object_id(product_id))
        p = self.products.get(pid)
        return dict(p) if p else None

    async def update_by_id(self, product_id: str, fields: Document) -> Optional[Document]:
        pid = str(to_object_id(product_id))
        async with self._get_lock(f"product:{pid}"):
            p = self.products.get(pid)
            if p is None:
                return None
            # updatedAt moves forward even when two writes land in the same millisecond
            now = max(utc_now(), p["updatedAt"] + timedelta(milliseconds=1))
            p.update(fields)
            p["updatedAt"] = now
            return dict(p)

    async def delete_by_id(self, product_id: str) -> Optional[Document]:
        pid = str(to_object_id(product_id))
        async with self._get_lock(f"product:{pid}"):
            p = self.products.pop(pid, None)
        self._locks.pop(f"product:{pid}", None)
        return p


# ---------------------------
# MongoDB store
# ---------------------------
class MongoProductStore(ProductStore):
    name = "mongodb"

    def __init__(
        self,
        url: str,
        database: Optional[str] = None,
        collection: str = "products",
        timeout_ms: int = 5000,
    ) -> None:
        # connects on first use; open_store pings right away
        self.client: AsyncMongoClient = AsyncMongoClient(
            url, tz_aware=True, serverSelectionTimeoutMS=timeout_ms, connect=False
        )
        if database:
            db = self.client[database]
        else:
            db = self.client.get_default_database(default="productDB")
        self.collection = db[collection]

    async def ping(self) -> None:
        try:
            await self.client.admin.command("ping")
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    async def insert(self, fields: Document) -> Document:
        now = utc_now()
        doc = {**fields, "createdAt": now, "updatedAt": now}
        try:
            result = await self.collection.insert_one(doc)
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc
        doc["_id"] = result.inserted_id
        return from_document(doc)

    async def find_all(self) -> List[Document]:
        try:
            return [from_document(doc) async for doc in self.collection.find()]
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    async def find_by_id(self, product_id: str) -> Optional[Document]:
        oid = to_object_id(product_id)
        try:
            doc = await self.collection.find_one({"_id": oid})
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc
        return from_document(doc) if doc else None

    async def update_by_id(self, product_id: str, fields: Document) -> Optional[Document]:
        oid = to_object_id(product_id)
        try:
            doc = await self.collection.find_one_and_update(
                {"_id": oid},
                update_pipeline(fields, utc_now()),
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc
        return from_document(doc) if doc else None

    async def delete_by_id(self, product_id: str) -> Optional[Document]:
        oid = to_object_id(product_id)
        try:
            doc = await self.collection.find_one_and_delete({"_id": oid})
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc
        return from_document(doc) if doc else None

    async def close(self) -> None:
        await self.client.close()


# ---------------------------
# Process-wide handle
# ---------------------------
_STORE: Optional[ProductStore] = None


def build_store(settings: Settings) -> ProductStore:
    backend = settings.store_backend.lower()
    if backend == "memory":
        return InMemoryProductStore()
    if backend == "mongodb":
        return MongoProductStore(
            settings.mongodb_url,
            database=settings.mongodb_database,
            collection=settings.mongodb_collection,
            timeout_ms=settings.mongodb_timeout_ms,
        )
    raise ValueError(f"unknown store backend: {settings.store_backend!r}")


async def open_store(settings: Settings) -> ProductStore:
    """Create the shared store and check connectivity.

    The outcome of the ping is logged. A failed ping only aborts startup
    when ``settings.store_fail_fast`` is set.
    """
    global _STORE
    store = build_store(settings)
    try:
        await store.ping()
    except StoreError as exc:
        logger.error("MongoDB connection error: %s", exc)
        if settings.store_fail_fast:
            await store.close()
            raise
    else:
        if store.name == "mongodb":
            logger.info("MongoDB connected")
        else:
            logger.info("Using %s product store", store.name)
    _STORE = store
    return store


async def close_store() -> None:
    global _STORE
    if _STORE is not None:
        await _STORE.close()
        _STORE = None


def get_store() -> ProductStore:
    """FastAPI dependency returning the shared store handle."""
    if _STORE is None:
        raise StoreError("product store is not connected")
    return _STORE
