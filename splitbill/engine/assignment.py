"""
Bill Builders

Turns the output of the item-assignment flow (who had which receipt line)
into stored bill records.

Each assigned item is split evenly among its assignees. Tax and service
charge are spread in proportion to each person's assigned subtotal, so a
person who had 40% of the food also carries 40% of the tax.

Items nobody was assigned stay unattributed. The resulting bill's shares
then fall short of its total, which the engine reports as a
share-mismatch rather than silently spreading the leftover.
"""

from typing import Optional, Sequence

from pydantic import BaseModel, Field

from splitbill.models.bill import BillItem, CustomBill, EqualBill
from splitbill.money import clamp_amount


class ItemAssignment(BaseModel):
    """Which people had receipt line `item_index`."""

    item_index: int = Field(..., ge=0)
    person_ids: list[str] = Field(default_factory=list)


def compute_custom_shares(
    items: Sequence[BillItem],
    assignments: Sequence[ItemAssignment],
    tax: Optional[float] = None,
    service_charge: Optional[float] = None,
) -> dict[str, float]:
    """
    Compute each person's share of a receipt from item assignments.

    Assignments pointing past the end of `items`, or with no assignees,
    are ignored.

    Returns:
        person_id -> share, in order of first appearance
    """
    assigned: dict[str, float] = {}
    for assignment in assignments:
        if assignment.item_index >= len(items) or not assignment.person_ids:
            continue
        assignees = list(dict.fromkeys(assignment.person_ids))
        portion = items[assignment.item_index].line_total / len(assignees)
        for person_id in assignees:
            assigned[person_id] = assigned.get(person_id, 0.0) + portion

    subtotal = sum(item.line_total for item in items)
    extras = clamp_amount(tax) + clamp_amount(service_charge)
    if subtotal <= 0 or extras == 0:
        return assigned

    return {
        person_id: amount + extras * amount / subtotal
        for person_id, amount in assigned.items()
    }


def build_custom_bill(
    bill_id: str,
    payer_person_id: str,
    items: Sequence[BillItem],
    assignments: Sequence[ItemAssignment],
    tax: Optional[float] = None,
    service_charge: Optional[float] = None,
    payer_name: Optional[str] = None,
    payer_consumes: bool = True,
) -> CustomBill:
    """
    Build a CustomBill from an assignment flow.

    `payer_consumes` records what the payer said at creation time. It is
    never inferred from whether the payer happened to be assigned items.
    """
    shares = compute_custom_shares(items, assignments, tax, service_charge)

    bill = CustomBill(
        id=bill_id,
        payer_person_id=payer_person_id,
        payer_name=payer_name,
        payer_consumes=payer_consumes,
        person_shares=shares,
        total=0.0,
    )
    return bill.with_items(list(items), tax, service_charge)


def build_equal_bill(
    bill_id: str,
    payer_person_id: str,
    items: Sequence[BillItem],
    tax: Optional[float] = None,
    service_charge: Optional[float] = None,
    payer_name: Optional[str] = None,
    payer_consumes: bool = True,
) -> EqualBill:
    """Build an EqualBill whose total is computed from its items."""
    bill = EqualBill(
        id=bill_id,
        payer_person_id=payer_person_id,
        payer_name=payer_name,
        payer_consumes=payer_consumes,
        total=0.0,
    )
    return bill.with_items(list(items), tax, service_charge)
