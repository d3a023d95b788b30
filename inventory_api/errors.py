# inventory_api/errors.py
from typing import Optional

# Errors raised by the store and the logic layer. main.py turns them into
# JSON responses; nothing below the handlers knows about HTTP.


class InventoryError(Exception):
    """Base class for all inventory API errors."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class NotFound(InventoryError):
    status_code = 404


class ProductNotFound(NotFound):
    def __init__(self, message: str = "Product not found"):
        super().__init__(message)


class CustomerNotFound(NotFound):
    def __init__(self, message: str = "Customer not found"):
        super().__init__(message)


class ValidationError(InventoryError):
    status_code = 400


class InvalidQuantity(ValidationError):
    def __init__(self, message: str = "Invalid quantity"):
        super().__init__(message)


class InvalidTransactionType(ValidationError):
    def __init__(self, message: str = "Invalid transaction type"):
        super().__init__(message)


class InsufficientStock(ValidationError):
    def __init__(self, message: str = "Insufficient stock"):
        super().__init__(message)


class StoreCorrupt(InventoryError):
    """The persisted store is missing, empty or not parseable."""


class LockTimeout(InventoryError):
    """The store lock could not be acquired in time."""
