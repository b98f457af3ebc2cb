"""
Tests for the record stores.

Both implementations run through the same contract tests; async methods
are driven with asyncio.run.
"""

import asyncio
import math

import pytest
from pydantic import TypeAdapter

from splitbill.config import StorageSettings
from splitbill.models.bill import BillItem, CustomBill, EqualBill, Person
from splitbill.models.payment import PaymentKey, PaymentStatus
from splitbill.storage import (
    DuplicateError,
    InMemoryBillStorage,
    InMemoryPaymentStatusStorage,
    InMemoryPersonStorage,
    JsonDocument,
    JsonFileBillStorage,
    JsonFilePaymentStatusStorage,
    JsonFilePersonStorage,
    NotFoundError,
    StorageError,
)

from factories import custom_bill, equal_bill

run = asyncio.run


@pytest.fixture(params=["memory", "json"])
def stores(request, tmp_path):
    if request.param == "memory":
        return (
            InMemoryPersonStorage(),
            InMemoryBillStorage(),
            InMemoryPaymentStatusStorage(),
        )
    settings = StorageSettings(backend="json", data_dir=str(tmp_path))
    return (
        JsonFilePersonStorage(settings),
        JsonFileBillStorage(settings),
        JsonFilePaymentStatusStorage(settings),
    )


class TestPersonStorage:

    def test_add_and_list_in_order(self, stores):
        people, _, _ = stores
        run(people.add_person(Person(id="2", name="Dewi")))
        run(people.add_person(Person(id="1", name="Eko")))
        assert [p.id for p in run(people.list_people())] == ["2", "1"]
        assert run(people.get_person("1")).name == "Eko"
        assert run(people.get_person("nope")) is None

    def test_duplicate_id_rejected(self, stores):
        people, _, _ = stores
        run(people.add_person(Person(id="1", name="Eko")))
        with pytest.raises(DuplicateError):
            run(people.add_person(Person(id="1", name="Other")))

    def test_update_person(self, stores):
        people, _, _ = stores
        run(people.add_person(Person(id="1", name="Eko")))
        run(people.update_person(Person(id="1", name="Eko P.")))
        assert run(people.get_person("1")).name == "Eko P."
        with pytest.raises(NotFoundError):
            run(people.update_person(Person(id="9", name="Ghost")))

    def test_delete_does_not_touch_bills(self, stores):
        """Test deleting a person leaves their bills in place."""
        people, bills, _ = stores
        run(people.add_person(Person(id="1", name="Eko")))
        run(bills.add_bill(equal_bill("b1", "1", 100)))
        assert run(people.delete_person("1")) is True
        assert run(people.delete_person("1")) is False
        assert [b.id for b in run(bills.list_bills())] == ["b1"]

    def test_clear_people(self, stores):
        people, _, _ = stores
        run(people.add_person(Person(id="1", name="Eko")))
        run(people.clear_people())
        assert run(people.list_people()) == []


class TestBillStorage:

    def test_round_trip_keeps_variant(self, stores):
        """Test both bill variants come back as themselves."""
        _, bills, _ = stores
        run(bills.add_bill(equal_bill("b1", "1", 100, payer_consumes=False)))
        run(bills.add_bill(custom_bill("b2", "2", 50, {"1": 20, "2": 30})))
        loaded = run(bills.list_bills())
        assert isinstance(loaded[0], EqualBill)
        assert loaded[0].payer_consumes is False
        assert isinstance(loaded[1], CustomBill)
        assert loaded[1].person_shares == {"1": 20, "2": 30}

    def test_duplicate_bill_rejected(self, stores):
        _, bills, _ = stores
        run(bills.add_bill(equal_bill("b1", "1", 100)))
        with pytest.raises(DuplicateError):
            run(bills.add_bill(equal_bill("b1", "1", 100)))

    def test_update_items_recomputes_total(self, stores):
        _, bills, _ = stores
        run(bills.add_bill(equal_bill("b1", "1", 100)))
        updated = run(bills.update_bill_items(
            "b1",
            [BillItem(name="Bakso", quantity=2, unit_price=15000)],
            tax=3000,
        ))
        assert updated.total == 33000
        assert run(bills.get_bill("b1")).total == 33000

    def test_update_missing_bill(self, stores):
        _, bills, _ = stores
        with pytest.raises(NotFoundError):
            run(bills.update_bill_items("nope", []))

    def test_delete_and_clear(self, stores):
        _, bills, _ = stores
        run(bills.add_bill(equal_bill("b1", "1", 100)))
        run(bills.add_bill(equal_bill("b2", "2", 100)))
        assert run(bills.delete_bill("b1")) is True
        assert run(bills.delete_bill("b1")) is False
        run(bills.clear_bills())
        assert run(bills.list_bills()) == []

    def test_list_bills_by_payer(self, stores):
        _, bills, _ = stores
        run(bills.add_bill(equal_bill("b1", "1", 100)))
        run(bills.add_bill(equal_bill("b2", "2", 100)))
        run(bills.add_bill(equal_bill("b3", "1", 100)))
        assert [b.id for b in run(bills.list_bills_by_payer("1"))] == ["b1", "b3"]


class TestPaymentStatusStorage:

    def test_absent_key_is_unpaid(self, stores):
        _, _, payments = stores
        assert run(payments.get_status(PaymentKey(from_id="a", to_id="b"))) == PaymentStatus.UNPAID

    def test_toggle(self, stores):
        _, _, payments = stores
        key = PaymentKey(from_id="a", to_id="b")
        assert run(payments.toggle_status(key)) == PaymentStatus.PAID
        assert run(payments.get_status(key)) == PaymentStatus.PAID
        assert run(payments.toggle_status(key)) == PaymentStatus.UNPAID

    def test_keys_are_directional(self, stores):
        _, _, payments = stores
        run(payments.set_status(PaymentKey(from_id="a", to_id="b"), PaymentStatus.PAID))
        assert run(payments.get_status(PaymentKey(from_id="b", to_id="a"))) == PaymentStatus.UNPAID

    def test_clear(self, stores):
        _, _, payments = stores
        run(payments.set_status(PaymentKey(from_id="a", to_id="b"), PaymentStatus.PAID))
        run(payments.clear_statuses())
        assert run(payments.all_statuses()) == {}


class TestJsonFileStorage:
    """Behaviour specific to the on-disk store."""

    def test_data_survives_new_instance(self, tmp_path):
        settings = StorageSettings(backend="json", data_dir=str(tmp_path))
        run(JsonFilePersonStorage(settings).add_person(Person(id="1", name="Eko")))
        assert run(JsonFilePersonStorage(settings).list_people()) == [Person(id="1", name="Eko")]
        assert (tmp_path / "people.json").exists()

    def test_missing_directory_is_empty(self, tmp_path):
        settings = StorageSettings(backend="json", data_dir=str(tmp_path / "not-yet"))
        assert run(JsonFileBillStorage(settings).list_bills()) == []

    def test_corrupt_document_raises_storage_error(self, tmp_path):
        (tmp_path / "bills.json").write_text('[{"id": "b1", "split_type": "custom"}]')
        settings = StorageSettings(backend="json", data_dir=str(tmp_path))
        with pytest.raises(StorageError):
            run(JsonFileBillStorage(settings).list_bills())

    def test_non_finite_amounts_survive_reload(self, tmp_path):
        """Test NaN and infinite amounts are written so the file stays loadable."""
        settings = StorageSettings(backend="json", data_dir=str(tmp_path))
        storage = JsonFileBillStorage(settings)
        run(storage.add_bill(equal_bill(
            "b1", "a", float("nan"),
            items=[BillItem(name="Kopi", quantity=1, unit_price=float("inf"))],
        )))
        run(storage.add_bill(custom_bill("b2", "a", 10, {"a": float("nan")})))

        bills = run(JsonFileBillStorage(settings).list_bills())
        assert [b.id for b in bills] == ["b1", "b2"]
        assert math.isnan(bills[0].total)
        assert math.isinf(bills[0].items[0].unit_price)
        assert math.isnan(bills[1].person_shares["a"])
        assert b"NaN" in (tmp_path / "bills.json").read_bytes()

        assert run(storage.delete_bill("b2")) is True
        assert [b.id for b in run(storage.list_bills())] == ["b1"]

    def test_save_leaves_no_temp_files(self, tmp_path):
        doc = JsonDocument(tmp_path / "x.json", TypeAdapter(list[Person]))
        doc.save([Person(id="1", name="Eko")])
        assert [p.name for p in tmp_path.iterdir()] == ["x.json"]


class TestStorageSettings:

    def test_rejects_path_in_file_name(self):
        with pytest.raises(ValueError):
            StorageSettings(people_file="../people.json")
