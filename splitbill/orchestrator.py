"""
Main Orchestrator for Split Bill

Ties the record store to the engine and defines the settlement flow:

    read people + bills -> compute_settlement -> merge paid/unpaid overlay

DESIGN DECISION: The orchestrator enforces the boundaries:
- The engine only ever sees a snapshot; it never reads or writes storage
- The payment overlay is merged after computation, never fed into it
- Storage errors propagate to the caller unchanged

Everything here is async because the stores are; the engine call itself
is synchronous and has no suspension points.
"""

from typing import Optional

from splitbill.config import EngineSettings, Settings, get_settings
from splitbill.engine import compute_settlement
from splitbill.logger import configure_logging, get_logger
from splitbill.models.bill import Person
from splitbill.models.payment import (
    PaymentKey,
    PaymentStatus,
    SettlementView,
    SettlementWithStatus,
)
from splitbill.models.settlement import Settlement, SettlementResult
from splitbill.storage import (
    BillStorageInterface,
    InMemoryBillStorage,
    InMemoryPaymentStatusStorage,
    InMemoryPersonStorage,
    JsonFileBillStorage,
    JsonFilePaymentStatusStorage,
    JsonFilePersonStorage,
    PaymentStatusStorageInterface,
    PersonStorageInterface,
)

logger = get_logger(__name__)


class SettlementFlow:
    """
    Orchestrates a settlement run for one expense event.

    Flow:
    1. Snapshot → read people and bills from their stores
    2. Compute → pure engine call
    3. Merge → attach paid/unpaid status to each suggested transfer
    """

    def __init__(
        self,
        person_storage: PersonStorageInterface,
        bill_storage: BillStorageInterface,
        payment_storage: PaymentStatusStorageInterface,
        engine_settings: Optional[EngineSettings] = None,
    ):
        self._people = person_storage
        self._bills = bill_storage
        self._payments = payment_storage
        self._engine_settings = engine_settings or get_settings().engine

    async def compute_result(self) -> SettlementResult:
        """Run the engine on the current store snapshot."""
        people = await self._people.list_people()
        bills = await self._bills.list_bills()
        return compute_settlement(people, bills, self._engine_settings)

    async def compute(self) -> SettlementView:
        """Run the engine and merge the payment overlay into its transfers."""
        result = await self.compute_result()
        statuses = await self._payments.all_statuses()
        merged = [
            SettlementWithStatus(
                settlement=s,
                status=statuses.get(PaymentKey.for_settlement(s), PaymentStatus.UNPAID),
            )
            for s in result.settlements
        ]
        return SettlementView(result=result, settlements=merged)

    async def mark_paid(self, settlement: Settlement, paid: bool = True) -> None:
        status = PaymentStatus.PAID if paid else PaymentStatus.UNPAID
        await self._payments.set_status(PaymentKey.for_settlement(settlement), status)
        logger.info(
            "payment_status_updated",
            from_id=settlement.from_id,
            to_id=settlement.to_id,
            status=status.value,
        )

    async def toggle_payment(self, settlement: Settlement) -> PaymentStatus:
        status = await self._payments.toggle_status(PaymentKey.for_settlement(settlement))
        logger.info(
            "payment_status_updated",
            from_id=settlement.from_id,
            to_id=settlement.to_id,
            status=status.value,
        )
        return status

    async def register_person(self, person: Person) -> Person:
        return await self._people.add_person(person)

    async def clear_all_bills(self) -> None:
        """Start a new event: drop every bill and the overlay, keep people."""
        await self._bills.clear_bills()
        await self._payments.clear_statuses()
        logger.info("bills_cleared")


def create_app_components(
    settings: Optional[Settings] = None,
) -> SettlementFlow:
    """
    Factory function to build a SettlementFlow from configuration.

    Applies the app logging settings, then lets `storage.backend` pick
    in-memory or JSON-file stores.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level, app_settings.log_json)
    storage_settings = settings.storage

    if storage_settings.backend == "json":
        person_storage = JsonFilePersonStorage(storage_settings)
        bill_storage = JsonFileBillStorage(storage_settings)
        payment_storage = JsonFilePaymentStatusStorage(storage_settings)
    else:
        person_storage = InMemoryPersonStorage()
        bill_storage = InMemoryBillStorage()
        payment_storage = InMemoryPaymentStatusStorage()

    logger.info("components_created", backend=storage_settings.backend)

    return SettlementFlow(
        person_storage=person_storage,
        bill_storage=bill_storage,
        payment_storage=payment_storage,
        engine_settings=settings.engine,
    )
