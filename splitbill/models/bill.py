"""
Core Data Models for Split Bill

These models define the schemas for the records the engine reads from the
record store: participants and their bills.

DESIGN DECISION: Bills are a tagged union. An `EqualBill` has no shares at
all; a `CustomBill` cannot be constructed without them. The tag is the
`split_type` field, so a raw store record picks its own variant.

Monetary fields are deliberately loose (NaN, infinities and negatives pass
model validation). The engine clamps them and reports each one as a
diagnostic instead of refusing the whole record.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
)

from splitbill.money import clamp_amount


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================

class SplitType(str, Enum):
    """How a bill's cost is divided among participants."""
    EQUAL = "equal"    # total / number of current participants
    CUSTOM = "custom"  # explicit per-person shares


# =============================================================================
# PARTICIPANTS
# =============================================================================

class Person(BaseModel):
    """
    A participant in the expense event.

    `id` is the only key anything should ever be joined on.
    Names are for display and may repeat.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Stable participant identifier"
    )
    name: str = Field(
        ...,
        max_length=100,
        description="Display name"
    )


# =============================================================================
# BILLS
# =============================================================================

class BillItem(BaseModel):
    """A single line on a receipt."""
    model_config = ConfigDict(str_strip_whitespace=True, ser_json_inf_nan="constants")

    name: str = Field(
        ...,
        max_length=200,
        description="Item description as printed on the receipt"
    )
    quantity: int = Field(
        default=1,
        description="Number of units"
    )
    unit_price: float = Field(
        default=0.0,
        description="Price of one unit"
    )

    @property
    def line_total(self) -> float:
        """quantity * unit_price, with malformed values counted as 0."""
        return clamp_amount(self.quantity) * clamp_amount(self.unit_price)


class _BillBase(BaseModel):
    """Fields shared by every bill variant."""
    model_config = ConfigDict(str_strip_whitespace=True, ser_json_inf_nan="constants")

    id: str = Field(
        ...,
        min_length=1,
        description="Unique bill ID"
    )
    payer_person_id: str = Field(
        ...,
        description="Person who paid this bill upfront"
    )
    payer_name: Optional[str] = Field(
        default=None,
        description="Payer display name at upload time (display only)"
    )
    payer_consumes: bool = Field(
        default=True,
        description="False if the payer only fronted the bill and consumed none of it"
    )
    items: list[BillItem] = Field(default_factory=list)
    tax: Optional[float] = None
    service_charge: Optional[float] = None
    total: float = Field(
        ...,
        description="Amount actually paid; items + tax + service charge"
    )
    created_at: datetime = Field(
        default_factory=_utcnow,
        description="When the bill was recorded"
    )

    @property
    def subtotal(self) -> float:
        """Sum of line totals."""
        return sum(item.line_total for item in self.items)

    @property
    def expected_total(self) -> float:
        """What `total` should be given the items, tax and service charge."""
        return (
            self.subtotal
            + clamp_amount(self.tax)
            + clamp_amount(self.service_charge)
        )

    def with_items(
        self,
        items: list[BillItem],
        tax: Optional[float] = None,
        service_charge: Optional[float] = None,
    ):
        """
        Return a copy with new items/tax/service charge and a recomputed total.

        This is the only edit path for the total.
        """
        updated = self.model_copy(update={
            "items": list(items),
            "tax": tax,
            "service_charge": service_charge,
        })
        return updated.model_copy(update={"total": updated.expected_total})


class EqualBill(_BillBase):
    """
    A bill divided evenly across everyone currently in the group.

    The divisor is the participant count at evaluation time, so adding a
    person later changes every equal bill's per-head share.
    """
    split_type: Literal["equal"] = "equal"


class CustomBill(_BillBase):
    """
    A bill divided by explicit per-person amounts.

    People missing from `person_shares` consumed nothing from this bill.
    """
    split_type: Literal["custom"] = "custom"
    person_shares: dict[str, float] = Field(
        ...,
        description="person_id -> amount consumed from this bill"
    )

    @property
    def shares_total(self) -> float:
        return sum(clamp_amount(v) for v in self.person_shares.values())


Bill = Annotated[
    Union[EqualBill, CustomBill],
    Field(discriminator="split_type"),
]

BILL_ADAPTER: TypeAdapter = TypeAdapter(Bill)
_BILL_LIST_ADAPTER: TypeAdapter = TypeAdapter(list[Bill])


def parse_bill(data: Any) -> Union[EqualBill, CustomBill]:
    """Validate a raw store record into the right bill variant."""
    return BILL_ADAPTER.validate_python(data)


def parse_bills(data: Any) -> list[Union[EqualBill, CustomBill]]:
    """Validate a list of raw store records, preserving order."""
    return _BILL_LIST_ADAPTER.validate_python(data)
