# products_sdk/client.py
import os
from typing import Any, Dict, List, Optional

import httpx
import requests

DEFAULT_BASE_URL = os.getenv("PRODUCTS_API_URL", "http://127.0.0.1:3000")


class ProductAPIError(Exception):
    """Non-2xx answer from the product service."""

    def __init__(self, status_code: int, payload: Any):
        self.status_code = status_code
        self.payload = payload
        if isinstance(payload, dict):
            detail = payload.get("error") or payload.get("message") or payload
        else:
            detail = payload
        super().__init__(f"HTTP {status_code}: {detail}")


def _unwrap(r) -> Any:
    try:
        body = r.json()
    except ValueError:
        body = r.text
    if r.status_code >= 400:
        raise ProductAPIError(r.status_code, body)
    return body


class ProductClient:
    """Thin client over the /api/products endpoints.

    ``session`` defaults to a ``requests.Session``; anything with the same
    get/post/put/delete surface (an ``httpx.Client``, FastAPI's
    ``TestClient``) works as well.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: int = 10, session=None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _url(self, product_id: Optional[str] = None) -> str:
        url = f"{self.base_url}/api/products"
        return f"{url}/{product_id}" if product_id else url

    def create_product(self, name: str, price: float, category: str) -> Dict[str, Any]:
        r = self.session.post(self._url(), json={
            "name": name, "price": price, "category": category
        }, timeout=self.timeout)
        return _unwrap(r)

    def list_products(self) -> List[Dict[str, Any]]:
        r = self.session.get(self._url(), timeout=self.timeout)
        return _unwrap(r)

    def get_product(self, product_id: str) -> Dict[str, Any]:
        r = self.session.get(self._url(product_id), timeout=self.timeout)
        return _unwrap(r)

    def update_product(self, product_id: str, **fields: Any) -> Dict[str, Any]:
        r = self.session.put(self._url(product_id), json=fields, timeout=self.timeout)
        return _unwrap(r)

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        r = self.session.delete(self._url(product_id), timeout=self.timeout)
        return _unwrap(r)

    # Async create (used by the concurrency demo)
    async def create_product_async(self, name: str, price: float, category: str) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(self._url(), json={"name": name, "price": price, "category": category})
            return _unwrap(r)


def main(argv: Optional[List[str]] = None) -> None:
    import argparse

    parser = argparse.ArgumentParser(description="Product service client")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="Service base URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-products", help="List all products")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True, help="ID of the product")

    cp = subparsers.add_parser("create-product", help="Create a new product")
    cp.add_argument("--name", required=True, help="Product name")
    cp.add_argument("--price", type=float, required=True, help="Product price")
    cp.add_argument("--category", required=True, help="Product category")

    up = subparsers.add_parser("update-product", help="Update fields of a product")
    up.add_argument("--product-id", required=True, help="ID of the product")
    up.add_argument("--name", help="New name")
    up.add_argument("--price", type=float, help="New price")
    up.add_argument("--category", help="New category")

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--product-id", required=True, help="ID of the product")

    args = parser.parse_args(argv)
    c = ProductClient(base_url=args.base_url)

    try:
        if args.command == "list-products":
            print(c.list_products())
        elif args.command == "get-product":
            print(c.get_product(args.product_id))
        elif args.command == "create-product":
            print(c.create_product(args.name, args.price, args.category))
        elif args.command == "update-product":
            fields = {k: v for k, v in (("name", args.name), ("price", args.price), ("category", args.category)) if v is not None}
            print(c.update_product(args.product_id, **fields))
        elif args.command == "delete-product":
            print(c.delete_product(args.product_id))
    except ProductAPIError as e:
        parser.exit(1, f"{e}\n")


if __name__ == "__main__":
    main()
