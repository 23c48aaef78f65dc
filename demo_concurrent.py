import asyncio

from products_sdk.client import ProductClient, ProductAPIError


async def create(client, name, price):
    try:
        product = await client.create_product_async(name, price, "demo")
        print(f"✅ created {product['name']} ({product['id']})")
        return product
    except ProductAPIError as e:
        print(f"❌ {name} failed: {e}")
        return None


async def main():
    c = ProductClient()

    # Fire creates concurrently; one of them is invalid on purpose
    print("\n⚡ Creating products concurrently...")
    results = await asyncio.gather(
        create(c, "Notebook", 3.0),
        create(c, "Stapler", 7.25),
        create(c, "Eraser", -1),
        create(c, "Marker", 1.1),
    )
    created = [p for p in results if p]

    print(f"\n📦 {len(created)} created, store now holds {len(c.list_products())} products")

    for p in created:
        c.delete_product(p["id"])
    print("🧹 cleaned up")


if __name__ == "__main__":
    asyncio.run(main())
