"""
JSON File Storage Implementation

One JSON document per collection inside a data directory:

    <data_dir>/people.json          [ {id, name}, ... ]
    <data_dir>/bills.json           [ {id, split_type, ...}, ... ]
    <data_dir>/payment_status.json  [ {from_id, to_id, status}, ... ]

Documents are (de)serialized with pydantic, so a malformed record fails
loudly at load time with a StorageError instead of reaching the engine
half-parsed. Writes go to a temporary file that is then renamed over the
document, so a crash mid-write leaves the previous version intact.

Each operation reads and rewrites the whole document. That is fine for
the size of one expense event and keeps the files hand-editable.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from splitbill.config import StorageSettings, get_settings
from splitbill.logger import get_logger
from splitbill.models.bill import Bill, BillItem, Person
from splitbill.models.payment import PaymentKey, PaymentStatus
from splitbill.storage.interface import (
    AnyBill,
    BillStorageInterface,
    DuplicateError,
    NotFoundError,
    PaymentStatusStorageInterface,
    PersonStorageInterface,
    StorageError,
)

logger = get_logger(__name__)


class _PaymentStatusRecord(BaseModel):
    from_id: str
    to_id: str
    status: PaymentStatus


class JsonDocument:
    """A list of records persisted as one JSON file."""

    def __init__(self, path: Path, adapter: TypeAdapter):
        self._path = path
        self._adapter = adapter

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list:
        """Read all records. A missing file is an empty collection."""
        if not self._path.exists():
            return []
        try:
            return self._adapter.validate_json(self._path.read_bytes())
        except ValidationError as e:
            logger.error("json_document_invalid", path=str(self._path), error=str(e))
            raise StorageError(f"Invalid records in {self._path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not read {self._path}: {e}") from e

    def save(self, records: list) -> None:
        """Atomically replace the document with `records`."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            payload = self._encode(records)
            fd, tmp = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(payload)
                os.replace(tmp, self._path)
            except BaseException:
                os.unlink(tmp)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {self._path}: {e}") from e
        logger.debug("json_document_saved", path=str(self._path), records=len(records))

    @staticmethod
    def _encode(records: list) -> bytes:
        # Per-record dump keeps each model's ser_json_inf_nan setting
        body = ",\n".join(r.model_dump_json(indent=2) for r in records)
        return f"[\n{body}\n]".encode()

    def clear(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not remove {self._path}: {e}") from e


class JsonFilePersonStorage(PersonStorageInterface):

    def __init__(self, settings: Optional[StorageSettings] = None):
        settings = settings or get_settings().storage
        self._doc = JsonDocument(
            settings.data_path / settings.people_file,
            TypeAdapter(list[Person]),
        )

    async def list_people(self) -> list[Person]:
        return self._doc.load()

    async def get_person(self, person_id: str) -> Optional[Person]:
        return next((p for p in self._doc.load() if p.id == person_id), None)

    async def add_person(self, person: Person) -> Person:
        people = self._doc.load()
        if any(p.id == person.id for p in people):
            raise DuplicateError(f"Person {person.id!r} already exists")
        self._doc.save(people + [person])
        return person

    async def update_person(self, person: Person) -> Person:
        people = self._doc.load()
        if not any(p.id == person.id for p in people):
            raise NotFoundError(f"Person {person.id!r} not found")
        self._doc.save([person if p.id == person.id else p for p in people])
        return person

    async def delete_person(self, person_id: str) -> bool:
        people = self._doc.load()
        remaining = [p for p in people if p.id != person_id]
        if len(remaining) == len(people):
            return False
        self._doc.save(remaining)
        return True

    async def clear_people(self) -> None:
        self._doc.clear()


class JsonFileBillStorage(BillStorageInterface):

    def __init__(self, settings: Optional[StorageSettings] = None):
        settings = settings or get_settings().storage
        self._doc = JsonDocument(
            settings.data_path / settings.bills_file,
            TypeAdapter(list[Bill]),
        )

    async def list_bills(self) -> list[AnyBill]:
        return self._doc.load()

    async def get_bill(self, bill_id: str) -> Optional[AnyBill]:
        return next((b for b in self._doc.load() if b.id == bill_id), None)

    async def add_bill(self, bill: AnyBill) -> AnyBill:
        bills = self._doc.load()
        if any(b.id == bill.id for b in bills):
            raise DuplicateError(f"Bill {bill.id!r} already exists")
        self._doc.save(bills + [bill])
        return bill

    async def update_bill_items(
        self,
        bill_id: str,
        items: list[BillItem],
        tax: Optional[float] = None,
        service_charge: Optional[float] = None,
    ) -> AnyBill:
        bills = self._doc.load()
        for index, bill in enumerate(bills):
            if bill.id == bill_id:
                bills[index] = bill.with_items(items, tax, service_charge)
                self._doc.save(bills)
                return bills[index]
        raise NotFoundError(f"Bill {bill_id!r} not found")

    async def delete_bill(self, bill_id: str) -> bool:
        bills = self._doc.load()
        remaining = [b for b in bills if b.id != bill_id]
        if len(remaining) == len(bills):
            return False
        self._doc.save(remaining)
        return True

    async def clear_bills(self) -> None:
        self._doc.clear()


class JsonFilePaymentStatusStorage(PaymentStatusStorageInterface):

    def __init__(self, settings: Optional[StorageSettings] = None):
        settings = settings or get_settings().storage
        self._doc = JsonDocument(
            settings.data_path / settings.payment_status_file,
            TypeAdapter(list[_PaymentStatusRecord]),
        )

    async def all_statuses(self) -> dict[PaymentKey, PaymentStatus]:
        return {
            PaymentKey(from_id=r.from_id, to_id=r.to_id): r.status
            for r in self._doc.load()
        }

    async def set_status(self, key: PaymentKey, status: PaymentStatus) -> None:
        statuses = await self.all_statuses()
        statuses[key] = status
        self._doc.save([
            _PaymentStatusRecord(from_id=k.from_id, to_id=k.to_id, status=v)
            for k, v in statuses.items()
        ])

    async def clear_statuses(self) -> None:
        self._doc.clear()
