# products_api/sdk.py
from typing import Any, Dict, List

from .core import validate_create, validate_update
from .database import ProductStore
from .errors import NotFoundError

# This file contains the core logic for all product endpoints.
# Every function is a single attempt against the store; errors propagate
# to the exception handlers registered in main.py.

DELETED_MESSAGE = "Product deleted successfully"


async def create_product_logic(store: ProductStore, payload: Any) -> Dict[str, Any]:
    fields = validate_create(payload)
    return await store.insert(fields)


async def list_products_logic(store: ProductStore) -> List[Dict[str, Any]]:
    return await store.find_all()


async def get_product_logic(store: ProductStore, product_id: str) -> Dict[str, Any]:
    product = await store.find_by_id(product_id)
    if product is None:
        raise NotFoundError()
    return product


async def update_product_logic(store: ProductStore, product_id: str, payload: Any) -> Dict[str, Any]:
    # validate before touching the store so a bad body never writes
    fields = validate_update(payload)
    product = await store.update_by_id(product_id, fields)
    if product is None:
        raise NotFoundError()
    return product


async def delete_product_logic(store: ProductStore, product_id: str) -> Dict[str, str]:
    product = await store.delete_by_id(product_id)
    if product is None:
        raise NotFoundError()
    return {"message": DELETED_MESSAGE}
