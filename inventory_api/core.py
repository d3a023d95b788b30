# inventory_api/core.py
import math
import re
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from typing import Optional, Dict, Any

from .errors import ValidationError
from .models import Customer, Product

# Request bodies and the helpers that turn them into stored records.

class ProductIn(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: Optional[int] = None
    name: str
    description: Optional[str] = ""
    category: Optional[str] = ""
    price: float
    quantity: int

class CustomerIn(BaseModel):
    id: Optional[int] = None
    name: str
    email: str
    phone: Optional[str] = ""

class TransactionIn(BaseModel):
    # Raw values; the transaction processor does its own parsing so that
    # each bad field maps to its own error.
    productId: Any = None
    customerId: Any = None
    quantity: Any = None
    type: Any = None
    timestamp: Any = None

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")

def _parse_int(value: Any) -> Optional[int]:
    """Loose integer parsing: 7, 7.9, "7", " 7abc" all give 7; junk gives None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        m = _INT_PREFIX.match(value)
        return int(m.group(1)) if m else None
    return None

def _make_product_dict(product_id: int, p: ProductIn) -> Dict[str, Any]:
    return Product(
        id=product_id,
        name=p.name,
        description=p.description or "",
        category=p.category or "",
        price=p.price,
        quantity=p.quantity,
    ).model_dump()

def _make_customer_dict(customer_id: int, c: CustomerIn) -> Dict[str, Any]:
    return Customer(
        id=customer_id,
        name=c.name,
        email=c.email,
        phone=c.phone or "",
    ).model_dump()

def _format_errors(errors) -> str:
    parts = []
    for err in errors:
        field = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"

def _validate(schema, body: Dict[str, Any]):
    """Check a raw request body against a schema, as a 400 on failure."""
    try:
        return schema.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(_format_errors(e.errors()))
