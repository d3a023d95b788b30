# inventory_api/models.py
from pydantic import BaseModel
from typing import Any, Literal, Optional

# Shapes of the records as they are persisted. Field order here is the key
# order written to db.json.

class Product(BaseModel):
    id: int
    name: str
    description: str = ""
    category: str = ""
    price: float
    quantity: int

class Customer(BaseModel):
    id: int
    name: str
    email: str
    phone: str = ""

class Transaction(BaseModel):
    id: int
    productId: int
    customerId: Optional[int] = None
    quantity: int
    type: Literal["add", "deduct"]
    timestamp: Any = None
