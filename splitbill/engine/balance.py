"""
Balance Resolver

Reduces each participant's ledger to one signed number:

    balance = round(amount_fronted - consumption)

Positive means the group owes them money, negative means they owe the
group. Rounding happens exactly once, here, so the matching stage works
on clean figures.

Balances are expected to sum to ~0 (every unit fronted is consumed by
someone). When they don't, the inputs are inconsistent; we report that
and leave the numbers as they are.
"""

import math
from typing import Optional

from splitbill.config import EngineSettings, get_settings
from splitbill.logger import get_logger
from splitbill.models.settlement import (
    BalanceSheet,
    ConsumptionResult,
    Diagnostic,
    DiagnosticKind,
)
from splitbill.money import round_money

logger = get_logger(__name__)


class BalanceResolver:
    """Turns ledgers into a frozen BalanceSheet."""

    def __init__(self, settings: Optional[EngineSettings] = None):
        self._settings = settings or get_settings().engine

    def resolve(self, consumption: ConsumptionResult) -> BalanceSheet:
        places = self._settings.money_places
        balances = {
            person_id: round_money(ledger.amount_fronted - ledger.consumption, places)
            for person_id, ledger in consumption.ledgers.items()
        }
        raw_total = sum(ledger.amount_fronted for ledger in consumption.ledgers.values())
        total_fronted = round_money(raw_total, places)

        diagnostics = []
        if not math.isfinite(raw_total):
            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.INVALID_AMOUNT,
                detail="Total fronted overflowed while summing; it is treated as 0",
            ))
        drift = sum(balances.values())
        tolerance = len(balances) * self._settings.rounding_slack
        if abs(drift) > tolerance:
            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.UNBALANCED,
                detail=(
                    f"Balances sum to {round_money(drift, places)} instead of 0 "
                    f"(tolerance {tolerance:g}); check the bills flagged above"
                ),
            ))

        logger.debug(
            "balances_resolved",
            balances=balances,
            total_fronted=total_fronted,
            drift=drift,
        )

        return BalanceSheet(
            balances=balances,
            total_fronted=total_fronted,
            diagnostics=tuple(diagnostics),
        )
