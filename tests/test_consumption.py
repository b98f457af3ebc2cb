"""Tests for ConsumptionCalculator."""

import pytest

from splitbill.engine import ConsumptionCalculator
from splitbill.models.bill import BillItem, Person
from splitbill.models.settlement import DiagnosticKind

from factories import custom_bill, equal_bill


def kinds(result):
    return [d.kind for d in result.diagnostics]


class TestConsumption:
    """Consumption and amount fronted."""
    
    def test_equal_bill_split_by_head_count(self, engine_settings, alice, bob):
        """Test an equal bill is divided across everyone."""
        result = ConsumptionCalculator(engine_settings).compute(
            [alice, bob], [equal_bill("b1", alice.id, 100000)]
        )
        assert result.ledgers[alice.id].consumption == 50000
        assert result.ledgers[bob.id].consumption == 50000
        assert result.ledgers[alice.id].amount_fronted == 100000
        assert result.ledgers[bob.id].amount_fronted == 0
        assert result.diagnostics == []
    
    def test_equal_bill_follows_current_head_count(self, engine_settings, trio):
        """Test adding a person later dilutes existing equal bills."""
        calc = ConsumptionCalculator(engine_settings)
        bills = [equal_bill("b1", trio[0].id, 90000)]
        two = calc.compute(trio[:2], bills)
        three = calc.compute(trio, bills)
        assert two.ledgers[trio[1].id].consumption == 45000
        assert three.ledgers[trio[1].id].consumption == 30000
    
    def test_custom_bill_uses_shares(self, engine_settings, trio):
        """Test custom shares, with a missing entry counting as 0."""
        alice, bob, carol = trio
        bill = custom_bill("b1", alice.id, 50000, {alice.id: 20000, bob.id: 30000})
        result = ConsumptionCalculator(engine_settings).compute(trio, [bill])
        assert result.ledgers[alice.id].consumption == 20000
        assert result.ledgers[bob.id].consumption == 30000
        assert result.ledgers[carol.id].consumption == 0
        assert result.ledgers[alice.id].amount_fronted == 50000
    
    def test_payer_fronts_full_total_even_when_consuming(self, engine_settings, alice, bob):
        """Test fronting and consumption are independent."""
        bill = custom_bill("b1", alice.id, 100, {alice.id: 60, bob.id: 40})
        result = ConsumptionCalculator(engine_settings).compute([alice, bob], [bill])
        assert result.ledgers[alice.id].amount_fronted == 100
        assert result.ledgers[alice.id].consumption == 60
    
    def test_fronting_only_payer_excluded_from_equal_split(self, engine_settings, trio):
        """Test payer_consumes=False removes the payer from the divisor."""
        alice, bob, carol = trio
        bill = equal_bill("b1", alice.id, 60000, payer_consumes=False)
        result = ConsumptionCalculator(engine_settings).compute(trio, [bill])
        assert result.ledgers[alice.id].consumption == 0
        assert result.ledgers[bob.id].consumption == 30000
        assert result.ledgers[carol.id].consumption == 30000
    
    def test_fronting_only_payer_alone_still_consumes(self, engine_settings, alice):
        """Test a lone payer cannot push the bill onto nobody."""
        bill = equal_bill("b1", alice.id, 100, payer_consumes=False)
        result = ConsumptionCalculator(engine_settings).compute([alice], [bill])
        assert result.ledgers[alice.id].consumption == 100
    
    def test_empty_people(self, engine_settings):
        """Test no people means no ledgers."""
        result = ConsumptionCalculator(engine_settings).compute([], [])
        assert result.ledgers == {}
        assert result.diagnostics == []
    
    def test_duplicate_person_ids_are_collapsed(self, engine_settings, alice, bob):
        """Test a repeated id is counted once and reported."""
        twin = Person(id=alice.id, name="Alice again")
        result = ConsumptionCalculator(engine_settings).compute(
            [alice, bob, twin], [equal_bill("b1", bob.id, 100)]
        )
        assert list(result.ledgers) == [alice.id, bob.id]
        assert result.ledgers[alice.id].consumption == 50
        assert kinds(result) == [DiagnosticKind.DUPLICATE_PERSON]


class TestConsumptionDiagnostics:
    """Data-integrity warnings raised while computing consumption."""
    
    def test_share_mismatch_flagged(self, engine_settings, trio):
        """Test shares not summing to total are flagged, not raised."""
        alice, bob, carol = trio
        bill = custom_bill("b1", alice.id, 90000, {alice.id: 40000, bob.id: 40000})
        result = ConsumptionCalculator(engine_settings).compute(trio, [bill])
        assert kinds(result) == [DiagnosticKind.SHARE_MISMATCH]
        assert result.diagnostics[0].bill_id == "b1"
    
    def test_share_within_epsilon_is_fine(self, engine_settings, alice, bob):
        bill = custom_bill("b1", alice.id, 100, {alice.id: 50.004, bob.id: 50})
        result = ConsumptionCalculator(engine_settings).compute([alice, bob], [bill])
        assert result.diagnostics == []
    
    def test_missing_payer_flagged(self, engine_settings, alice, bob):
        """Test a bill whose payer was deleted credits no one."""
        bill = equal_bill("b1", "ghost", 100)
        result = ConsumptionCalculator(engine_settings).compute([alice, bob], [bill])
        assert kinds(result) == [DiagnosticKind.MISSING_PAYER]
        assert result.ledgers[alice.id].amount_fronted == 0
        assert result.ledgers[alice.id].consumption == 50
    
    def test_invalid_amounts_clamped(self, engine_settings, alice, bob):
        """Test NaN/negative values are treated as 0 and reported."""
        bill = equal_bill("b1", alice.id, float("nan"), tax=-10)
        result = ConsumptionCalculator(engine_settings).compute([alice, bob], [bill])
        assert result.ledgers[alice.id].amount_fronted == 0
        assert result.ledgers[bob.id].consumption == 0
        assert kinds(result) == [DiagnosticKind.INVALID_AMOUNT, DiagnosticKind.INVALID_AMOUNT]
    
    def test_invalid_share_clamped(self, engine_settings, alice, bob):
        bill = custom_bill("b1", alice.id, 100, {alice.id: 100, bob.id: float("inf")})
        result = ConsumptionCalculator(engine_settings).compute([alice, bob], [bill])
        assert result.ledgers[bob.id].consumption == 0
        assert kinds(result) == [DiagnosticKind.INVALID_AMOUNT]
    
    def test_total_mismatch_flagged(self, engine_settings, alice, bob):
        """Test a total that disagrees with its items is flagged."""
        bill = equal_bill(
            "b1", alice.id, 500,
            items=[BillItem(name="Soto", quantity=2, unit_price=200)],
        )
        result = ConsumptionCalculator(engine_settings).compute([alice, bob], [bill])
        assert kinds(result) == [DiagnosticKind.TOTAL_MISMATCH]
    
    def test_unknown_share_holder_flagged(self, engine_settings, alice, bob):
        bill = custom_bill("b1", alice.id, 100, {alice.id: 50, "gone": 50})
        result = ConsumptionCalculator(engine_settings).compute([alice, bob], [bill])
        assert kinds(result) == [DiagnosticKind.UNKNOWN_SHARE_HOLDER]
    
    def test_payer_share_conflict_flagged(self, engine_settings, alice, bob):
        """Test the explicit share wins over payer_consumes=False."""
        bill = custom_bill(
            "b1", alice.id, 100, {alice.id: 30, bob.id: 70}, payer_consumes=False,
        )
        result = ConsumptionCalculator(engine_settings).compute([alice, bob], [bill])
        assert kinds(result) == [DiagnosticKind.PAYER_SHARE_CONFLICT]
        assert result.ledgers[alice.id].consumption == 30
    
    def test_overflowing_sum_flagged(self, engine_settings, alice, bob):
        """Test finite totals that sum past the float range are reported."""
        bills = [equal_bill("b1", alice.id, 1e308), equal_bill("b2", alice.id, 1e308)]
        result = ConsumptionCalculator(engine_settings).compute([alice, bob], bills)
        assert kinds(result) == [DiagnosticKind.INVALID_AMOUNT]
        assert result.diagnostics[0].person_id == alice.id
        assert "amount_fronted" in result.diagnostics[0].detail


class TestBillShares:
    
    def test_bill_shares_cover_every_person(self, engine_settings, trio):
        calc = ConsumptionCalculator(engine_settings)
        shares = calc.bill_shares(custom_bill("b1", trio[0].id, 10, {trio[1].id: 10}), trio)
        assert shares == {trio[0].id: 0.0, trio[1].id: 10.0, trio[2].id: 0.0}
    
    def test_equal_bill_shares_with_no_people(self, engine_settings):
        calc = ConsumptionCalculator(engine_settings)
        assert calc.bill_shares(equal_bill("b1", "x", 10), []) == {}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
