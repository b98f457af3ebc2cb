"""
In-Memory Storage Implementation

Dict-backed stores that keep insertion order. Used by the tests and by
anyone embedding the engine who already holds the records in memory.

Records are pydantic models and are replaced, never mutated in place,
so handing one out does not expose the store's internals.
"""

from typing import Optional

from splitbill.models.bill import BillItem, Person
from splitbill.models.payment import PaymentKey, PaymentStatus
from splitbill.storage.interface import (
    AnyBill,
    BillStorageInterface,
    DuplicateError,
    NotFoundError,
    PaymentStatusStorageInterface,
    PersonStorageInterface,
)


class InMemoryPersonStorage(PersonStorageInterface):

    def __init__(self, people: Optional[list[Person]] = None):
        self._people: dict[str, Person] = {}
        for person in people or []:
            self._people[person.id] = person

    async def list_people(self) -> list[Person]:
        return list(self._people.values())

    async def get_person(self, person_id: str) -> Optional[Person]:
        return self._people.get(person_id)

    async def add_person(self, person: Person) -> Person:
        if person.id in self._people:
            raise DuplicateError(f"Person {person.id!r} already exists")
        self._people[person.id] = person
        return person

    async def update_person(self, person: Person) -> Person:
        if person.id not in self._people:
            raise NotFoundError(f"Person {person.id!r} not found")
        self._people[person.id] = person
        return person

    async def delete_person(self, person_id: str) -> bool:
        return self._people.pop(person_id, None) is not None

    async def clear_people(self) -> None:
        self._people.clear()


class InMemoryBillStorage(BillStorageInterface):

    def __init__(self, bills: Optional[list[AnyBill]] = None):
        self._bills: dict[str, AnyBill] = {}
        for bill in bills or []:
            self._bills[bill.id] = bill

    async def list_bills(self) -> list[AnyBill]:
        return list(self._bills.values())

    async def get_bill(self, bill_id: str) -> Optional[AnyBill]:
        return self._bills.get(bill_id)

    async def add_bill(self, bill: AnyBill) -> AnyBill:
        if bill.id in self._bills:
            raise DuplicateError(f"Bill {bill.id!r} already exists")
        self._bills[bill.id] = bill
        return bill

    async def update_bill_items(
        self,
        bill_id: str,
        items: list[BillItem],
        tax: Optional[float] = None,
        service_charge: Optional[float] = None,
    ) -> AnyBill:
        bill = self._bills.get(bill_id)
        if bill is None:
            raise NotFoundError(f"Bill {bill_id!r} not found")
        updated = bill.with_items(items, tax, service_charge)
        self._bills[bill_id] = updated
        return updated

    async def delete_bill(self, bill_id: str) -> bool:
        return self._bills.pop(bill_id, None) is not None

    async def clear_bills(self) -> None:
        self._bills.clear()


class InMemoryPaymentStatusStorage(PaymentStatusStorageInterface):

    def __init__(self):
        self._statuses: dict[PaymentKey, PaymentStatus] = {}

    async def all_statuses(self) -> dict[PaymentKey, PaymentStatus]:
        return dict(self._statuses)

    async def set_status(self, key: PaymentKey, status: PaymentStatus) -> None:
        self._statuses[key] = status

    async def clear_statuses(self) -> None:
        self._statuses.clear()
