#!/usr/bin/env python
from products_sdk.client import ProductClient, ProductAPIError


def main():
    c = ProductClient()

    # -----------------------------
    # Create
    # -----------------------------
    print("Creating product...")
    pen = c.create_product("Pen", 1.5, "Stationery")
    print(pen)
    pid = pen["id"]

    # -----------------------------
    # List
    # -----------------------------
    print("\nListing products...")
    print(c.list_products())

    # -----------------------------
    # Validation failure
    # -----------------------------
    print("\nCreating an invalid product (negative price)...")
    try:
        c.create_product("Broken", -1, "Stationery")
    except ProductAPIError as e:
        print(e)

    # -----------------------------
    # Update
    # -----------------------------
    print("\nUpdating price...")
    print(c.update_product(pid, price=2.0))

    # -----------------------------
    # Delete, then look it up again
    # -----------------------------
    print("\nDeleting product...")
    print(c.delete_product(pid))
    try:
        c.get_product(pid)
    except ProductAPIError as e:
        print(e)


if __name__ == "__main__":
    main()
