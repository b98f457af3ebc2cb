"""
Storage Services Package

Provides abstract interfaces and concrete implementations of the record
store: in-memory (tests, embedding) and JSON files on disk.
"""

from splitbill.storage.interface import (
    BillStorageInterface,
    DuplicateError,
    NotFoundError,
    PaymentStatusStorageInterface,
    PersonStorageInterface,
    StorageError,
)
from splitbill.storage.json_file import (
    JsonDocument,
    JsonFileBillStorage,
    JsonFilePaymentStatusStorage,
    JsonFilePersonStorage,
)
from splitbill.storage.memory import (
    InMemoryBillStorage,
    InMemoryPaymentStatusStorage,
    InMemoryPersonStorage,
)

__all__ = [
    # Interfaces
    "BillStorageInterface",
    "PaymentStatusStorageInterface",
    "PersonStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryBillStorage",
    "InMemoryPaymentStatusStorage",
    "InMemoryPersonStorage",
    # JSON file implementation
    "JsonDocument",
    "JsonFileBillStorage",
    "JsonFilePaymentStatusStorage",
    "JsonFilePersonStorage",
]
