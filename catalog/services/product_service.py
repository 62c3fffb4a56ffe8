import logging
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from fastapi import Request

from catalog.exceptions import InvalidProductIdError, ProductNotFoundError

logger = logging.getLogger(__name__)

# never overwritten by an update
PROTECTED_FIELDS = ("_id", "createdAt")


def _object_id(product_id: str) -> ObjectId:
    if not ObjectId.is_valid(product_id):
        raise InvalidProductIdError()
    return ObjectId(product_id)


def serialize_product(doc: dict) -> dict:
    """Make a stored document JSON friendly (ObjectId -> hex string)."""
    out = dict(doc)
    if isinstance(out.get("_id"), ObjectId):
        out["_id"] = str(out["_id"])
    return out


class ProductStore:
    """
    Product operations over a single async collection.

    Every call is one independent store operation; concurrent writes to
    the same product are last-write-wins.
    """

    def __init__(self, collection):
        self.collection = collection

    async def get_by_id(self, product_id: str) -> dict:
        doc = await self.collection.find_one({"_id": _object_id(product_id)})
        if not doc:
            raise ProductNotFoundError()
        return doc

    async def list_all(self) -> list[dict]:
        cursor = self.collection.find().sort("createdAt", -1)
        return await cursor.to_list(None)

    async def create(self, product: dict) -> dict:
        now = datetime.now(timezone.utc)
        doc = {**product, "createdAt": now, "updatedAt": now}
        result = await self.collection.insert_one(doc)
        logger.info(f"Created product {result.inserted_id}")
        return {"acknowledged": result.acknowledged, "insertedId": str(result.inserted_id)}

    async def update(self, product_id: str, fields: dict[str, Any]) -> None:
        oid = _object_id(product_id)
        changes = {k: v for k, v in fields.items() if k not in PROTECTED_FIELDS}
        if not changes:
            raise ProductNotFoundError("Product not found or no changes made")

        # updatedAt is left as-is, callers may set it explicitly
        result = await self.collection.update_one({"_id": oid}, {"$set": changes})
        # a missing product and an unchanged one both report 0 here
        if result.modified_count == 0:
            raise ProductNotFoundError("Product not found or no changes made")
        logger.info(f"Updated product {product_id}: {sorted(changes)}")

    async def delete(self, product_id: str) -> None:
        result = await self.collection.delete_one({"_id": _object_id(product_id)})
        if result.deleted_count == 0:
            raise ProductNotFoundError()
        logger.info(f"Deleted product {product_id}")


def get_product_store(request: Request) -> ProductStore:
    return request.app.state.product_store
