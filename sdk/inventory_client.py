# sdk/inventory_client.py
import requests
import httpx
from datetime import datetime, timezone
from typing import Optional, Any, Dict


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class InventoryClient:
    def __init__(self, base_url: str = "http://localhost:5000/api", timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    # Products
    def list_products(self):
        r = self.session.get(f"{self.base_url}/products", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_product(self, product_id: int):
        r = self.session.get(f"{self.base_url}/products/{product_id}", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def create_product(self, product_id: int, name: str, price: float, quantity: int,
                       description: str = "", category: str = ""):
        r = self.session.post(f"{self.base_url}/products", json={
            "id": product_id, "name": name, "description": description,
            "category": category, "price": price, "quantity": quantity
        }, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def update_product(self, product_id: int, name: str, price: float, quantity: int,
                       description: str = "", category: str = ""):
        # full replacement: omitted fields are reset to their defaults
        r = self.session.put(f"{self.base_url}/products/{product_id}", json={
            "name": name, "description": description,
            "category": category, "price": price, "quantity": quantity
        }, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def delete_product(self, product_id: int) -> None:
        r = self.session.delete(f"{self.base_url}/products/{product_id}", timeout=self.timeout)
        r.raise_for_status()

    # Customers
    def list_customers(self):
        r = self.session.get(f"{self.base_url}/customers", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_customer(self, customer_id: int):
        r = self.session.get(f"{self.base_url}/customers/{customer_id}", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def create_customer(self, customer_id: int, name: str, email: str, phone: str = ""):
        r = self.session.post(f"{self.base_url}/customers", json={
            "id": customer_id, "name": name, "email": email, "phone": phone
        }, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def update_customer(self, customer_id: int, name: str, email: str, phone: str = ""):
        r = self.session.put(f"{self.base_url}/customers/{customer_id}", json={
            "name": name, "email": email, "phone": phone
        }, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def delete_customer(self, customer_id: int) -> None:
        r = self.session.delete(f"{self.base_url}/customers/{customer_id}", timeout=self.timeout)
        r.raise_for_status()

    # Stock movements
    def _transaction_payload(self, product_id: int, quantity: int, type: str,
                             customer_id: Optional[int], timestamp: Optional[str]) -> Dict[str, Any]:
        return {
            "productId": product_id,
            "customerId": customer_id,
            "quantity": quantity,
            "type": type,
            "timestamp": timestamp or _now_iso(),
        }

    def apply_transaction(self, product_id: int, quantity: int, type: str,
                          customer_id: Optional[int] = None, timestamp: Optional[str] = None):
        payload = self._transaction_payload(product_id, quantity, type, customer_id, timestamp)
        r = self.session.post(f"{self.base_url}/transactions", json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def add_stock(self, product_id: int, quantity: int, customer_id: Optional[int] = None):
        return self.apply_transaction(product_id, quantity, "add", customer_id)

    def deduct_stock(self, product_id: int, quantity: int, customer_id: Optional[int] = None):
        return self.apply_transaction(product_id, quantity, "deduct", customer_id)

    # Async variant; returns the raw response so callers can inspect 400/404
    async def apply_transaction_async(self, product_id: int, quantity: int, type: str,
                                      customer_id: Optional[int] = None, timestamp: Optional[str] = None):
        payload = self._transaction_payload(product_id, quantity, type, customer_id, timestamp)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(f"{self.base_url}/transactions", json=payload)

    def list_transactions(self):
        r = self.session.get(f"{self.base_url}/transactions", timeout=self.timeout)
        r.raise_for_status()
        return r.json()


if __name__ == "__main__":
    import argparse
    from rich import print

    parser = argparse.ArgumentParser(description="Inventory API client")
    parser.add_argument("--base-url", default="http://127.0.0.1:5000/api")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-products", help="List all products")
    subparsers.add_parser("list-customers", help="List all customers")
    subparsers.add_parser("list-transactions", help="Show the transaction log")

    cp = subparsers.add_parser("create-product", help="Create a product")
    cp.add_argument("--id", type=int, required=True, help="Product ID")
    cp.add_argument("--name", required=True, help="Product name")
    cp.add_argument("--price", type=float, required=True, help="Unit price")
    cp.add_argument("--quantity", type=int, required=True, help="Quantity in stock")
    cp.add_argument("--description", default="", help="Description")
    cp.add_argument("--category", default="", help="Category")

    cc = subparsers.add_parser("create-customer", help="Create a customer")
    cc.add_argument("--id", type=int, required=True, help="Customer ID")
    cc.add_argument("--name", required=True, help="Customer name")
    cc.add_argument("--email", required=True, help="Email")
    cc.add_argument("--phone", default="", help="Phone")

    tx = subparsers.add_parser("transaction", help="Record a stock movement")
    tx.add_argument("--product-id", type=int, required=True, help="Product ID")
    tx.add_argument("--qty", type=int, required=True, help="Quantity")
    tx.add_argument("--type", choices=["add", "deduct"], required=True, help="Movement type")
    tx.add_argument("--customer-id", type=int, help="Customer ID (optional)")

    args = parser.parse_args()
    c = InventoryClient(base_url=args.base_url)

    if args.command == "list-products":
        print(c.list_products())
    elif args.command == "list-customers":
        print(c.list_customers())
    elif args.command == "list-transactions":
        print(c.list_transactions())
    elif args.command == "create-product":
        print(c.create_product(args.id, args.name, args.price, args.quantity, args.description, args.category))
    elif args.command == "create-customer":
        print(c.create_customer(args.id, args.name, args.email, args.phone))
    elif args.command == "transaction":
        print(c.apply_transaction(args.product_id, args.qty, args.type, args.customer_id))
