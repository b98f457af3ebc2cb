"""
Debt Minimizer

Turns signed balances into pairwise transfers that zero them out.

ALGORITHM (greedy largest-magnitude matching):
1. Debtors are balances below -epsilon, creditors above +epsilon.
   Anything in between is already settled.
2. Debtors sorted most-negative first, creditors largest first. The sort
   is stable, so ties keep input order and output is deterministic.
3. Match the head debtor with the head creditor for the smaller of the
   two amounts; move past whichever side drops under epsilon.

GUARANTEES:
- At most (debtors + creditors - 1) transfers
- Every amount > 0, and from_id != to_id
- Sum of amounts == sum of positive balances (within rounding)

This is a heuristic for keeping the transfer count low. It is not a
proven global minimum (that problem is NP-hard in general).

If the balances do not sum to zero, matching still terminates but one
side is left with a residual. Each residual is returned as an
`unmatched-balance` diagnostic.
"""

from typing import Mapping, Optional

from splitbill.config import EngineSettings, get_settings
from splitbill.logger import get_logger
from splitbill.models.settlement import (
    Diagnostic,
    DiagnosticKind,
    MatchResult,
    Settlement,
)
from splitbill.money import round_money

logger = get_logger(__name__)


class DebtMinimizer:
    """Greedy matcher between debtors and creditors."""

    def __init__(self, settings: Optional[EngineSettings] = None):
        self._settings = settings or get_settings().engine

    def minimize(
        self,
        balances: Mapping[str, float],
        names: Optional[Mapping[str, str]] = None,
    ) -> MatchResult:
        """
        Compute transfers that settle `balances`.

        Args:
            balances: person_id -> signed balance. Read only; never mutated.
            names: Optional person_id -> display name, copied onto transfers

        Returns:
            MatchResult with transfers in emission order
        """
        eps = self._settings.epsilon
        places = self._settings.money_places
        names = names or {}

        # Working copies: [person_id, remaining magnitude]
        debtors = [
            [pid, -bal]
            for pid, bal in sorted(balances.items(), key=lambda kv: kv[1])
            if bal < -eps
        ]
        creditors = [
            [pid, bal]
            for pid, bal in sorted(balances.items(), key=lambda kv: -kv[1])
            if bal > eps
        ]

        settlements = []
        i = j = 0
        while i < len(debtors) and j < len(creditors):
            debtor, creditor = debtors[i], creditors[j]
            transfer = min(debtor[1], creditor[1])
            amount = round_money(transfer, places)

            if amount > 0:
                settlements.append(Settlement(
                    from_id=debtor[0],
                    to_id=creditor[0],
                    amount=amount,
                    from_name=names.get(debtor[0]),
                    to_name=names.get(creditor[0]),
                ))

            debtor[1] -= transfer
            creditor[1] -= transfer

            if debtor[1] < eps:
                i += 1
            if creditor[1] < eps:
                j += 1

        # Leftovers within the accumulated rounding slack are not a defect
        slack = max(eps, len(balances) * self._settings.rounding_slack)
        diagnostics = [
            self._residual(pid, -remaining, "owes")
            for pid, remaining in debtors[i:]
            if remaining > slack
        ] + [
            self._residual(pid, remaining, "is owed")
            for pid, remaining in creditors[j:]
            if remaining > slack
        ]

        logger.debug(
            "debts_minimized",
            debtors=len(debtors),
            creditors=len(creditors),
            transfers=len(settlements),
            residuals=len(diagnostics),
        )

        return MatchResult(settlements=settlements, diagnostics=diagnostics)

    def _residual(self, person_id: str, balance: float, verb: str) -> Diagnostic:
        amount = round_money(abs(balance), self._settings.money_places)
        return Diagnostic(
            kind=DiagnosticKind.UNMATCHED_BALANCE,
            person_id=person_id,
            detail=f"{person_id} still {verb} {amount} after matching; balances do not net to zero",
        )
