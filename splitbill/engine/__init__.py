"""
Settlement Engine Package

Pure, synchronous computation: people + bills in, SettlementResult out.
"""

from splitbill.engine.assignment import (
    ItemAssignment,
    build_custom_bill,
    build_equal_bill,
    compute_custom_shares,
)
from splitbill.engine.balance import BalanceResolver
from splitbill.engine.consumption import ConsumptionCalculator
from splitbill.engine.minimizer import DebtMinimizer
from splitbill.engine.report import SettlementReport, compute_settlement

__all__ = [
    "BalanceResolver",
    "ConsumptionCalculator",
    "DebtMinimizer",
    "ItemAssignment",
    "SettlementReport",
    "build_custom_bill",
    "build_equal_bill",
    "compute_custom_shares",
    "compute_settlement",
]
