"""
Consumption Calculator

First stage of the settlement pipeline. For every participant it derives
two independent quantities from the bill list:

- consumption: the value of what they ate/used, whoever paid for it
- amount fronted: the totals of the bills they paid upfront

A bill's payer is an explicit attribute of the bill. Paying a bill and
consuming from it are separate axes: a payer fronts the full total whether
or not they also consumed part of it.

Data-integrity problems never stop the calculation. Malformed amounts are
clamped to 0, missing shares count as 0, and every such case is recorded
as a Diagnostic.
"""

import math
from typing import Optional, Sequence, Union

from splitbill.config import EngineSettings, get_settings
from splitbill.logger import get_logger
from splitbill.models.bill import CustomBill, EqualBill, Person
from splitbill.models.settlement import (
    ConsumptionResult,
    Diagnostic,
    DiagnosticKind,
    PersonLedger,
)
from splitbill.money import clamp_amount, is_valid_amount

logger = get_logger(__name__)

AnyBill = Union[EqualBill, CustomBill]


class ConsumptionCalculator:
    """
    Derives per-person consumption and amount fronted from the bill list.

    Stateless apart from its settings; safe to share between callers.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self._settings = settings or get_settings().engine

    def unique_people(
        self,
        people: Sequence[Person],
    ) -> tuple[list[Person], list[Diagnostic]]:
        """
        Drop repeated person ids, keeping the first occurrence.

        Returns: (people_in_order, diagnostics)
        """
        seen: set[str] = set()
        unique = []
        diagnostics = []
        for person in people:
            if person.id in seen:
                diagnostics.append(Diagnostic(
                    kind=DiagnosticKind.DUPLICATE_PERSON,
                    person_id=person.id,
                    detail=f"Person id {person.id!r} ({person.name}) is listed more than once",
                ))
                continue
            seen.add(person.id)
            unique.append(person)
        return unique, diagnostics

    def bill_total(self, bill: AnyBill) -> float:
        """The bill's total, clamped."""
        return clamp_amount(bill.total)

    def bill_shares(
        self,
        bill: AnyBill,
        people: Sequence[Person],
    ) -> dict[str, float]:
        """
        How much each current participant consumed from `bill`.

        Equal bills divide the total by the current participant count. A
        payer who only fronted an equal bill is left out of the divisor,
        provided someone else is there to carry the cost. Custom bills use
        their explicit shares; anyone without one consumed 0.

        Returns:
            person_id -> share, for every id in `people` (in order)
        """
        if isinstance(bill, CustomBill):
            return {
                p.id: clamp_amount(bill.person_shares.get(p.id))
                for p in people
            }

        ids = [p.id for p in people]
        consumers = set(ids)
        if (
            not bill.payer_consumes
            and bill.payer_person_id in consumers
            and len(consumers) > 1
        ):
            consumers.discard(bill.payer_person_id)
        if not consumers:
            return {}
        per_head = self.bill_total(bill) / len(consumers)
        return {pid: (per_head if pid in consumers else 0.0) for pid in ids}

    def check_bill(
        self,
        bill: AnyBill,
        people: Sequence[Person],
    ) -> list[Diagnostic]:
        """
        Collect every data-integrity warning for one bill.

        Checks:
        - Malformed amounts (total, tax, service charge, items, shares)
        - Total vs items + tax + service charge
        - Payer present in the people list
        - Custom shares: sum vs total, unknown holders, payer conflict
        """
        eps = self._settings.epsilon
        known_ids = {p.id for p in people}
        issues = []

        def invalid(field: str, value) -> None:
            issues.append(Diagnostic(
                kind=DiagnosticKind.INVALID_AMOUNT,
                bill_id=bill.id,
                detail=f"{field} has invalid value {value!r}; treated as 0",
            ))

        for field in ("total", "tax", "service_charge"):
            value = getattr(bill, field)
            if not is_valid_amount(value):
                invalid(field, value)

        for index, item in enumerate(bill.items):
            if not is_valid_amount(item.quantity):
                invalid(f"items[{index}].quantity", item.quantity)
            if not is_valid_amount(item.unit_price):
                invalid(f"items[{index}].unit_price", item.unit_price)

        if bill.items and abs(self.bill_total(bill) - bill.expected_total) > eps:
            issues.append(Diagnostic(
                kind=DiagnosticKind.TOTAL_MISMATCH,
                bill_id=bill.id,
                detail=(
                    f"Total {self.bill_total(bill)} does not match items + tax + "
                    f"service charge ({bill.expected_total})"
                ),
            ))

        if bill.payer_person_id not in known_ids:
            issues.append(Diagnostic(
                kind=DiagnosticKind.MISSING_PAYER,
                bill_id=bill.id,
                person_id=bill.payer_person_id,
                detail=(
                    f"Payer {bill.payer_person_id!r} is not a current participant; "
                    f"the {self.bill_total(bill)} fronted is credited to no one"
                ),
            ))

        if isinstance(bill, CustomBill):
            issues.extend(self._check_shares(bill, known_ids))

        return issues

    def _check_shares(
        self,
        bill: CustomBill,
        known_ids: set[str],
    ) -> list[Diagnostic]:
        eps = self._settings.epsilon
        issues = []

        for person_id, share in bill.person_shares.items():
            if not is_valid_amount(share):
                issues.append(Diagnostic(
                    kind=DiagnosticKind.INVALID_AMOUNT,
                    bill_id=bill.id,
                    person_id=person_id,
                    detail=f"person_shares[{person_id!r}] has invalid value {share!r}; treated as 0",
                ))
            if person_id not in known_ids and clamp_amount(share) > 0:
                issues.append(Diagnostic(
                    kind=DiagnosticKind.UNKNOWN_SHARE_HOLDER,
                    bill_id=bill.id,
                    person_id=person_id,
                    detail=f"Share of {share} belongs to {person_id!r}, who is not a current participant",
                ))

        total = self.bill_total(bill)
        if abs(bill.shares_total - total) > eps:
            issues.append(Diagnostic(
                kind=DiagnosticKind.SHARE_MISMATCH,
                bill_id=bill.id,
                detail=f"Shares sum to {bill.shares_total} but bill total is {total}",
            ))

        payer_share = clamp_amount(bill.person_shares.get(bill.payer_person_id))
        if not bill.payer_consumes and payer_share > 0:
            issues.append(Diagnostic(
                kind=DiagnosticKind.PAYER_SHARE_CONFLICT,
                bill_id=bill.id,
                person_id=bill.payer_person_id,
                detail=(
                    f"Payer is marked as not consuming but holds a share of "
                    f"{payer_share}; the explicit share is used"
                ),
            ))

        return issues

    def compute(
        self,
        people: Sequence[Person],
        bills: Sequence[AnyBill],
    ) -> ConsumptionResult:
        """
        Compute consumption and amount fronted for every participant.

        Args:
            people: Current participants, in display order
            bills: Every bill of the event, in store order

        Returns:
            ConsumptionResult with one ledger per unique person id
        """
        people, diagnostics = self.unique_people(people)
        ledgers = {p.id: PersonLedger() for p in people}

        for bill in bills:
            diagnostics.extend(self.check_bill(bill, people))

            payer = ledgers.get(bill.payer_person_id)
            if payer is not None:
                payer.amount_fronted += self.bill_total(bill)

            for person_id, share in self.bill_shares(bill, people).items():
                ledgers[person_id].consumption += share

        for person_id, ledger in ledgers.items():
            for field in ("amount_fronted", "consumption"):
                if not math.isfinite(getattr(ledger, field)):
                    diagnostics.append(Diagnostic(
                        kind=DiagnosticKind.INVALID_AMOUNT,
                        person_id=person_id,
                        detail=(
                            f"{field} for {person_id!r} overflowed while summing bills; "
                            f"it is treated as 0"
                        ),
                    ))
            logger.debug(
                "consumption_computed",
                person_id=person_id,
                consumption=ledger.consumption,
                amount_fronted=ledger.amount_fronted,
            )

        return ConsumptionResult(ledgers=ledgers, diagnostics=diagnostics)
