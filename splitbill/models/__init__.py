"""
Data Models Package

This package contains all Pydantic models used by the settlement engine.
Records coming out of the store and results going back to callers all
conform to these schemas.
"""

from splitbill.models.bill import (
    BILL_ADAPTER,
    Bill,
    BillItem,
    CustomBill,
    EqualBill,
    Person,
    SplitType,
    parse_bill,
    parse_bills,
)
from splitbill.models.payment import (
    PaymentKey,
    PaymentStatus,
    SettlementView,
    SettlementWithStatus,
)
from splitbill.models.settlement import (
    BalanceSheet,
    BillShare,
    ConsumptionResult,
    Diagnostic,
    DiagnosticKind,
    MatchResult,
    PersonExpense,
    PersonLedger,
    PersonSummary,
    Settlement,
    SettlementResult,
)

__all__ = [
    # Bill models
    "BILL_ADAPTER",
    "Bill",
    "BillItem",
    "CustomBill",
    "EqualBill",
    "Person",
    "SplitType",
    "parse_bill",
    "parse_bills",
    # Settlement models
    "BalanceSheet",
    "BillShare",
    "ConsumptionResult",
    "Diagnostic",
    "DiagnosticKind",
    "MatchResult",
    "PersonExpense",
    "PersonLedger",
    "PersonSummary",
    "Settlement",
    "SettlementResult",
    # Payment overlay
    "PaymentKey",
    "PaymentStatus",
    "SettlementView",
    "SettlementWithStatus",
]
