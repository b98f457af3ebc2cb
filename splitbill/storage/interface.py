"""
Abstract Storage Interface

DESIGN DECISION: The record store is an external collaborator of the
engine. We define abstract interfaces so that:
1. Tests and embedders can use in-memory storage
2. The JSON-file store can be swapped for a database later
3. The engine never touches storage at all; callers read a snapshot
   and hand it over

The interfaces are CRUD only. No computation happens here except the one
the data model demands: editing a bill's items recomputes its total.
"""

from abc import ABC, abstractmethod
from typing import Optional, Union

from splitbill.models.bill import BillItem, CustomBill, EqualBill, Person
from splitbill.models.payment import PaymentKey, PaymentStatus

AnyBill = Union[EqualBill, CustomBill]


class PersonStorageInterface(ABC):
    """Participant list, in registration order."""

    @abstractmethod
    async def list_people(self) -> list[Person]:
        """Return every participant, in registration order."""
        pass

    @abstractmethod
    async def get_person(self, person_id: str) -> Optional[Person]:
        pass

    @abstractmethod
    async def add_person(self, person: Person) -> Person:
        """
        Register a participant.

        Raises:
            DuplicateError: If the id is already taken
        """
        pass

    @abstractmethod
    async def update_person(self, person: Person) -> Person:
        """
        Replace a participant record (e.g. rename).

        Raises:
            NotFoundError: If the person doesn't exist
        """
        pass

    @abstractmethod
    async def delete_person(self, person_id: str) -> bool:
        """
        Remove a participant.

        Bills referencing them are NOT deleted; the engine reports those
        as missing-payer / unknown-share-holder.

        Returns:
            True if a record was removed
        """
        pass

    @abstractmethod
    async def clear_people(self) -> None:
        pass


class BillStorageInterface(ABC):
    """Bill list, in creation order."""

    @abstractmethod
    async def list_bills(self) -> list[AnyBill]:
        """Return every bill, in creation order."""
        pass

    @abstractmethod
    async def get_bill(self, bill_id: str) -> Optional[AnyBill]:
        pass

    @abstractmethod
    async def add_bill(self, bill: AnyBill) -> AnyBill:
        """
        Store a new bill.

        Raises:
            DuplicateError: If the id is already taken
        """
        pass

    @abstractmethod
    async def update_bill_items(
        self,
        bill_id: str,
        items: list[BillItem],
        tax: Optional[float] = None,
        service_charge: Optional[float] = None,
    ) -> AnyBill:
        """
        Replace a bill's items, tax and service charge; total is recomputed.

        Raises:
            NotFoundError: If the bill doesn't exist
        """
        pass

    @abstractmethod
    async def delete_bill(self, bill_id: str) -> bool:
        """Returns True if a record was removed."""
        pass

    @abstractmethod
    async def clear_bills(self) -> None:
        pass

    async def list_bills_by_payer(self, person_id: str) -> list[AnyBill]:
        """Bills fronted by `person_id`, in creation order."""
        return [b for b in await self.list_bills() if b.payer_person_id == person_id]


class PaymentStatusStorageInterface(ABC):
    """
    Paid/unpaid overlay for suggested transfers.

    Keyed by (from_id, to_id) person ids. Absent keys read as UNPAID.
    """

    @abstractmethod
    async def all_statuses(self) -> dict[PaymentKey, PaymentStatus]:
        pass

    @abstractmethod
    async def set_status(self, key: PaymentKey, status: PaymentStatus) -> None:
        pass

    @abstractmethod
    async def clear_statuses(self) -> None:
        pass

    async def get_status(self, key: PaymentKey) -> PaymentStatus:
        return (await self.all_statuses()).get(key, PaymentStatus.UNPAID)

    async def toggle_status(self, key: PaymentKey) -> PaymentStatus:
        """Flip paid <-> unpaid and return the new status."""
        current = await self.get_status(key)
        new = (
            PaymentStatus.UNPAID
            if current == PaymentStatus.PAID
            else PaymentStatus.PAID
        )
        await self.set_status(key, new)
        return new


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
