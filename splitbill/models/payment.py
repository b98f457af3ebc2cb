"""
Payment Status Overlay Models

Whether a suggested transfer has actually been paid is tracked separately
from the bills. The overlay is keyed by the (from, to) pair of person ids
and is merged into displayed settlements after the engine has run. The
engine itself never reads it.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from splitbill.models.settlement import Settlement, SettlementResult


class PaymentStatus(str, Enum):
    """Payment status for a suggested transfer."""
    UNPAID = "unpaid"
    PAID = "paid"


class PaymentKey(BaseModel):
    """Composite overlay key. Hashable, so it can key a dict."""
    model_config = ConfigDict(frozen=True)

    from_id: str = Field(..., min_length=1)
    to_id: str = Field(..., min_length=1)

    @classmethod
    def for_settlement(cls, settlement: Settlement) -> "PaymentKey":
        return cls(from_id=settlement.from_id, to_id=settlement.to_id)


class SettlementWithStatus(BaseModel):
    """A settlement as displayed: the transfer plus its paid/unpaid flag."""

    settlement: Settlement
    status: PaymentStatus = PaymentStatus.UNPAID

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.PAID


class SettlementView(BaseModel):
    """Engine result merged with the payment overlay."""

    result: SettlementResult
    settlements: list[SettlementWithStatus] = Field(default_factory=list)

    @property
    def outstanding(self) -> list[SettlementWithStatus]:
        """Transfers not yet marked paid."""
        return [s for s in self.settlements if not s.is_paid]

    @property
    def all_paid(self) -> bool:
        return all(s.is_paid for s in self.settlements)
