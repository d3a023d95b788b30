#!/usr/bin/env python
from sdk.inventory_client import InventoryClient

def main():
    c = InventoryClient(base_url="http://127.0.0.1:5000/api")

    # -----------------------------
    # Products and customers
    # -----------------------------
    print("Creating products...")
    print(c.create_product(101, "Laptop", 1499.0, 3, "14 inch, 16GB", "electronics"))
    print(c.create_product(102, "Mouse", 19.5, 10, "Wireless", "electronics"))

    print("\nCreating a customer...")
    print(c.create_customer(1, "Alice", "alice@example.com", "555-0100"))

    print("\nListing products...")
    print(c.list_products())

    # -----------------------------
    # Stock movements
    # -----------------------------
    print("\nRestocking 5 mice...")
    print(c.add_stock(102, 5))

    print("\nSelling 2 laptops to Alice...")
    print(c.deduct_stock(101, 2, customer_id=1))

    print("\nTransaction log...")
    print(c.list_transactions())

    # -----------------------------
    # Update and clean up
    # -----------------------------
    print("\nRepricing the mouse...")
    print(c.update_product(102, "Mouse", 17.0, 15, "Wireless", "electronics"))

    print("\nDeleting products and customer...")
    c.delete_product(101)
    c.delete_product(102)
    c.delete_customer(1)
    print(c.list_products())

if __name__ == "__main__":
    main()
