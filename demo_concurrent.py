import asyncio
from sdk.inventory_client import InventoryClient

PRODUCT_ID = 900

async def simulate_sale(client, buyer, qty):
    r = await client.apply_transaction_async(PRODUCT_ID, qty, "deduct", timestamp=f"sale-{buyer}")
    if r.status_code == 200:
        print(f"✅ buyer {buyer} took {qty} (stock now {r.json()['quantity']})")
    elif r.status_code == 400:
        print(f"❌ buyer {buyer} rejected: {r.json().get('error')}")
    else:
        print(f"⚠️  buyer {buyer} got HTTP {r.status_code}: {r.text}")

async def main():
    c = InventoryClient(base_url="http://127.0.0.1:5000/api")

    c.create_product(PRODUCT_ID, "Limited Edition Console", 499.0, 5, category="electronics")
    print(f"\n🖥️  Stocked product {PRODUCT_ID} with 5 units")

    print("\n⚡ Ten buyers asking for one unit each, all at once...")
    await asyncio.gather(*(simulate_sale(c, i, 1) for i in range(10)))

    print("\n📦 Final product state:", c.get_product(PRODUCT_ID))
    sales = [t for t in c.list_transactions() if t["productId"] == PRODUCT_ID]
    print(f"🧾 {len(sales)} deducts recorded for product {PRODUCT_ID}")

    c.delete_product(PRODUCT_ID)

if __name__ == "__main__":
    asyncio.run(main())
