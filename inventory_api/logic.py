# inventory_api/logic.py
import logging
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from .core import (
    ProductIn, CustomerIn, TransactionIn,
    _make_product_dict, _make_customer_dict, _parse_int, _validate
)
from .database import StoreHandle
from .errors import (
    CustomerNotFound, InsufficientStock, InvalidQuantity,
    InvalidTransactionType, NotFound, ProductNotFound, ValidationError
)
from .models import Transaction

logger = logging.getLogger(__name__)

# This file contains the logic behind the API endpoints. Every operation is
# one read-modify-write cycle on the store, done under the store lock.


def _index_of(records: List[Dict[str, Any]], record_id: Optional[int]) -> int:
    if record_id is None:
        return -1
    for i, r in enumerate(records):
        if r.get("id") == record_id:
            return i
    return -1


class RecordRepository:
    """CRUD over one collection of the store.

    Ids come from the caller and are not checked for collisions. Updates
    replace the whole record, keeping the id from the path.
    """

    def __init__(self, store: StoreHandle, collection: str,
                 schema: Type[BaseModel],
                 make_record: Callable[[int, Any], Dict[str, Any]],
                 not_found: Type[NotFound]):
        self.store = store
        self.collection = collection
        self.schema = schema
        self.make_record = make_record
        self.not_found = not_found

    async def list(self) -> List[Dict[str, Any]]:
        db = await self.store.read()
        return db[self.collection]

    async def get(self, record_id: Any) -> Dict[str, Any]:
        db = await self.store.read()
        records = db[self.collection]
        idx = _index_of(records, _parse_int(record_id))
        if idx == -1:
            raise self.not_found()
        return records[idx]

    async def create(self, payload: Any) -> Dict[str, Any]:
        if payload.id is None:
            raise ValidationError("id is required")
        record = self.make_record(payload.id, payload)
        async with self.store.cycle() as tx:
            db = await tx.read()
            db[self.collection].append(record)
            await tx.write(db)
        return record

    async def update(self, record_id: Any, body: Dict[str, Any]) -> Dict[str, Any]:
        parsed_id = _parse_int(record_id)
        async with self.store.cycle() as tx:
            db = await tx.read()
            records = db[self.collection]
            idx = _index_of(records, parsed_id)
            if idx == -1:
                raise self.not_found()
            # the body is only checked once the record is known to exist
            payload = _validate(self.schema, body)
            record = self.make_record(parsed_id, payload)
            records[idx] = record
            await tx.write(db)
        return record

    async def delete(self, record_id: Any) -> None:
        parsed_id = _parse_int(record_id)
        async with self.store.cycle() as tx:
            db = await tx.read()
            records = db[self.collection]
            idx = _index_of(records, parsed_id)
            if idx == -1:
                raise self.not_found()
            del records[idx]
            await tx.write(db)


def products(store: StoreHandle) -> RecordRepository:
    return RecordRepository(store, "products", ProductIn, _make_product_dict, ProductNotFound)

def customers(store: StoreHandle) -> RecordRepository:
    return RecordRepository(store, "customers", CustomerIn, _make_customer_dict, CustomerNotFound)


# ---------------------------
# Stock movements
# ---------------------------
def _next_transaction_id(transactions: List[Dict[str, Any]]) -> int:
    ids = [t.get("id") for t in transactions]
    return max((i for i in ids if isinstance(i, int) and not isinstance(i, bool)), default=0) + 1


def _customer_given(value: Any) -> bool:
    # null, "" and 0 all mean "no customer"
    return value not in (None, "", 0)


async def apply_transaction_logic(store: StoreHandle, req: TransactionIn) -> Dict[str, Any]:
    """Apply an add/deduct to a product and log it. Returns the product.

    Everything is checked before anything is touched, so a rejected request
    leaves the store as it was.
    """
    async with store.cycle() as tx:
        db = await tx.read()

        product_id = _parse_int(req.productId)
        pidx = _index_of(db["products"], product_id)
        if pidx == -1:
            raise ProductNotFound()
        product = db["products"][pidx]

        customer_id = None
        if _customer_given(req.customerId):
            customer_id = _parse_int(req.customerId)
            if _index_of(db["customers"], customer_id) == -1:
                raise CustomerNotFound()

        qty = _parse_int(req.quantity)
        if qty is None or qty <= 0:
            raise InvalidQuantity()

        if req.type == "add":
            product["quantity"] += qty
        elif req.type == "deduct":
            if product["quantity"] < qty:
                raise InsufficientStock()
            product["quantity"] -= qty
        else:
            raise InvalidTransactionType()

        transaction = Transaction(
            id=_next_transaction_id(db["transactions"]),
            productId=product_id,
            customerId=customer_id,
            quantity=qty,
            type=req.type,
            timestamp=req.timestamp,
        ).model_dump()
        db["transactions"].append(transaction)
        await tx.write(db)

    logger.info("Transaction %s: %s %d of product %s (stock now %s)",
                transaction["id"], req.type, qty, product_id, product["quantity"])
    return product


async def list_transactions_logic(store: StoreHandle) -> List[Dict[str, Any]]:
    db = await store.read()
    return db["transactions"]
