"""
Settlement Report

Runs the pipeline end to end and assembles the SettlementResult:

    people, bills
      -> ConsumptionCalculator   (consumption, amount fronted)
      -> BalanceResolver         (frozen BalanceSheet)
           |-> summary           (snapshot read)
           '-> DebtMinimizer     (transfers, from its own working copy)

The summary and the matching both read the same BalanceSheet. The
minimizer copies what it needs, so the summary always shows the
pre-matching positions.

The whole thing is a pure function of its inputs: no I/O, no shared
state, identical inputs give identical (byte-for-byte) output.
"""

from typing import Optional, Sequence

from splitbill.config import EngineSettings, get_settings
from splitbill.engine.balance import BalanceResolver
from splitbill.engine.consumption import AnyBill, ConsumptionCalculator
from splitbill.engine.minimizer import DebtMinimizer
from splitbill.logger import get_logger
from splitbill.models.bill import CustomBill, Person, SplitType
from splitbill.models.settlement import (
    BalanceSheet,
    BillShare,
    ConsumptionResult,
    PersonExpense,
    PersonSummary,
    SettlementResult,
)
from splitbill.money import round_money

logger = get_logger(__name__)


class SettlementReport:
    """
    Assembles a SettlementResult from people and bills.

    The three stages can be injected for testing; by default they share
    this report's settings.
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        calculator: Optional[ConsumptionCalculator] = None,
        resolver: Optional[BalanceResolver] = None,
        minimizer: Optional[DebtMinimizer] = None,
    ):
        self._settings = settings or get_settings().engine
        self._calculator = calculator or ConsumptionCalculator(self._settings)
        self._resolver = resolver or BalanceResolver(self._settings)
        self._minimizer = minimizer or DebtMinimizer(self._settings)

    def assemble(
        self,
        people: Sequence[Person],
        bills: Sequence[AnyBill],
    ) -> SettlementResult:
        """
        Compute the full settlement for one snapshot of the record store.

        Never raises for bad domain data; problems come back in
        `diagnostics`.
        """
        if not people:
            # Nobody to settle between. Bill checks still run so that a
            # store full of orphaned bills does not go unnoticed.
            consumption = self._calculator.compute([], bills)
            return SettlementResult(diagnostics=self._log_all(consumption.diagnostics))

        unique, _ = self._calculator.unique_people(people)
        consumption = self._calculator.compute(people, bills)
        sheet = self._resolver.resolve(consumption)
        names = {p.id: p.name for p in unique}
        matched = self._minimizer.minimize(sheet.balances, names)

        diagnostics = self._log_all(
            list(consumption.diagnostics)
            + list(sheet.diagnostics)
            + list(matched.diagnostics)
        )

        result = SettlementResult(
            total_expenses=sheet.total_fronted,
            per_person_share=round_money(
                sheet.total_fronted / len(unique), self._settings.money_places
            ),
            person_expenses=self._person_expenses(unique, bills, consumption, sheet),
            settlements=matched.settlements,
            summary=self._summary(unique, consumption, sheet),
            diagnostics=diagnostics,
        )

        logger.info(
            "settlement_computed",
            people=len(unique),
            bills=len(bills),
            total_expenses=result.total_expenses,
            transfers=len(result.settlements),
            diagnostics=len(diagnostics),
        )
        return result

    def _person_expenses(
        self,
        people: list[Person],
        bills: Sequence[AnyBill],
        consumption: ConsumptionResult,
        sheet: BalanceSheet,
    ) -> list[PersonExpense]:
        """
        Per-person breakdown.

        A person's bill list holds the bills they paid, every equal bill,
        and any custom bill where they hold a nonzero share.
        """
        places = self._settings.money_places
        shares_by_bill = [
            (bill, self._calculator.bill_shares(bill, people)) for bill in bills
        ]

        expenses = []
        for person in people:
            ledger = consumption.ledgers[person.id]
            relevant = []
            for bill, shares in shares_by_bill:
                share = shares.get(person.id, 0.0)
                if not (
                    bill.payer_person_id == person.id
                    or not isinstance(bill, CustomBill)
                    or share > 0
                ):
                    continue
                relevant.append(BillShare(
                    bill_id=bill.id,
                    split_type=SplitType(bill.split_type),
                    total=self._calculator.bill_total(bill),
                    created_at=bill.created_at,
                    payer_person_id=bill.payer_person_id,
                    payer_name=bill.payer_name,
                    consumption_share=round_money(share, places),
                    items=list(bill.items),
                ))

            expenses.append(PersonExpense(
                person=person,
                consumption=round_money(ledger.consumption, places),
                amount_fronted=round_money(ledger.amount_fronted, places),
                net_balance=sheet.balances[person.id],
                bills=relevant,
            ))
        return expenses

    def _summary(
        self,
        people: list[Person],
        consumption: ConsumptionResult,
        sheet: BalanceSheet,
    ) -> dict[str, PersonSummary]:
        places = self._settings.money_places
        summary = {}
        for person in people:
            balance = sheet.balances[person.id]
            summary[person.id] = PersonSummary(
                paid=round_money(consumption.ledgers[person.id].amount_fronted, places),
                owes=max(0.0, -balance),
                receives=max(0.0, balance),
                net_balance=balance,
            )
        return summary

    def _log_all(self, diagnostics: list) -> list:
        for diagnostic in diagnostics:
            logger.warning(
                "settlement_diagnostic",
                kind=diagnostic.kind.value,
                bill_id=diagnostic.bill_id,
                person_id=diagnostic.person_id,
                detail=diagnostic.detail,
            )
        return diagnostics


def compute_settlement(
    people: Sequence[Person],
    bills: Sequence[AnyBill],
    settings: Optional[EngineSettings] = None,
) -> SettlementResult:
    """
    The engine's public query.

    Args:
        people: Current participants, in display order
        bills: Every bill of the event, in store order
        settings: Engine tolerances; defaults to configured EngineSettings

    Returns:
        SettlementResult with totals, breakdown, transfers, summary
        and diagnostics
    """
    return SettlementReport(settings).assemble(people, bills)
