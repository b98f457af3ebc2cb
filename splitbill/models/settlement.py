"""
Settlement Result Models

These are the shapes the engine hands back: intermediate results of each
stage (ledgers, balance sheet, matching) and the assembled SettlementResult.

Every stage returns its diagnostics alongside its data. Nothing in the
engine raises for bad domain data, so diagnostics are the only channel
through which problems surface.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from splitbill.models.bill import BillItem, Person, SplitType


# =============================================================================
# DIAGNOSTICS
# =============================================================================

class DiagnosticKind(str, Enum):
    """Kinds of data-integrity warnings. None of them stop the computation."""
    SHARE_MISMATCH = "share-mismatch"              # custom shares != total
    MISSING_PAYER = "missing-payer"                # payer not in people list
    INVALID_AMOUNT = "invalid-amount"              # NaN/inf/negative, clamped to 0
    TOTAL_MISMATCH = "total-mismatch"              # total != items + tax + service
    UNKNOWN_SHARE_HOLDER = "unknown-share-holder"  # share for an unknown person
    PAYER_SHARE_CONFLICT = "payer-share-conflict"  # fronting-only payer has a share
    DUPLICATE_PERSON = "duplicate-person"          # same id listed twice
    UNBALANCED = "unbalanced"                      # balances do not sum to ~0
    UNMATCHED_BALANCE = "unmatched-balance"        # residual left after matching


class Diagnostic(BaseModel):
    """A single data-integrity warning."""
    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    detail: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    bill_id: Optional[str] = Field(
        default=None,
        description="Bill the issue was found on, if any"
    )
    person_id: Optional[str] = Field(
        default=None,
        description="Person the issue concerns, if any"
    )


# =============================================================================
# STAGE RESULTS
# =============================================================================

class PersonLedger(BaseModel):
    """What one person consumed and what they fronted, before netting."""

    consumption: float = 0.0
    amount_fronted: float = 0.0


class ConsumptionResult(BaseModel):
    """Output of ConsumptionCalculator.compute()."""

    ledgers: dict[str, PersonLedger] = Field(
        default_factory=dict,
        description="person_id -> ledger, in people-list order"
    )
    diagnostics: list[Diagnostic] = Field(default_factory=list)


class BalanceSheet(BaseModel):
    """
    Output of BalanceResolver.resolve().

    Frozen: the summary snapshot and the debt matching both read from this
    one object, and neither may change it.
    """
    model_config = ConfigDict(frozen=True)

    balances: dict[str, float] = Field(
        default_factory=dict,
        description="person_id -> fronted - consumed, rounded once"
    )
    total_fronted: float = 0.0
    diagnostics: tuple[Diagnostic, ...] = ()


class Settlement(BaseModel):
    """One transfer instruction: `from_id` pays `to_id` `amount`."""
    model_config = ConfigDict(frozen=True)

    from_id: str
    to_id: str
    amount: float = Field(..., gt=0)
    from_name: Optional[str] = None
    to_name: Optional[str] = None


class MatchResult(BaseModel):
    """Output of DebtMinimizer.minimize()."""

    settlements: list[Settlement] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)


# =============================================================================
# REPORT
# =============================================================================

class BillShare(BaseModel):
    """One bill as seen from one participant's side."""

    bill_id: str
    split_type: SplitType
    total: float
    created_at: datetime
    payer_person_id: str
    payer_name: Optional[str] = None
    consumption_share: float = Field(
        ...,
        description="How much this participant consumed from this bill"
    )
    items: list[BillItem] = Field(default_factory=list)


class PersonExpense(BaseModel):
    """Per-person breakdown for transparent display."""

    person: Person
    consumption: float
    amount_fronted: float
    net_balance: float
    bills: list[BillShare] = Field(default_factory=list)


class PersonSummary(BaseModel):
    """Pre-matching snapshot of one participant's position."""

    paid: float
    owes: float
    receives: float
    net_balance: float


class SettlementResult(BaseModel):
    """
    Everything computed for one settlement run.

    `per_person_share` is total_expenses / number of people. It is only a
    meaningful figure when every bill is equally split; with any custom
    bill present treat it as advisory.
    """

    total_expenses: float = 0.0
    per_person_share: float = 0.0
    person_expenses: list[PersonExpense] = Field(default_factory=list)
    settlements: list[Settlement] = Field(default_factory=list)
    summary: dict[str, PersonSummary] = Field(
        default_factory=dict,
        description="person_id -> summary, in people-list order"
    )
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def has_diagnostics(self) -> bool:
        return bool(self.diagnostics)

    def diagnostics_of(self, kind: DiagnosticKind) -> list[Diagnostic]:
        """Diagnostics of one kind, in the order they were raised."""
        return [d for d in self.diagnostics if d.kind == kind]
