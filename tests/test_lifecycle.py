"""Tests for work order status transitions, completion and material snapshots."""

import pytest

from spartec.services.lifecycle import (
    WorkOrderLifecycle, InvalidTransition, check_transition, is_terminal,
)


@pytest.fixture
def lifecycle(storage):
    return WorkOrderLifecycle(storage)


@pytest.fixture
def strict_lifecycle(storage):
    return WorkOrderLifecycle(storage, strict=True)


@pytest.fixture
def customer(make_customer):
    return make_customer()


class TestCheckTransition:
    def test_lenient_allows_anything_known(self):
        check_transition("Voltooid", "Ingepland")
        check_transition("Geannuleerd", "In uitvoering")

    def test_unknown_status_always_rejected(self):
        with pytest.raises(InvalidTransition):
            check_transition("Ingepland", "Gepauzeerd")

    @pytest.mark.parametrize("current, target", [
        ("Ingepland", "In uitvoering"),
        ("Ingepland", "Voltooid"),
        ("Ingepland", "Geannuleerd"),
        ("In uitvoering", "Voltooid"),
        ("In uitvoering", "Geannuleerd"),
        ("Voltooid", "Voltooid"),
    ])
    def test_strict_allowed(self, current, target):
        check_transition(current, target, strict=True)

    @pytest.mark.parametrize("current, target", [
        ("Voltooid", "In uitvoering"),
        ("Geannuleerd", "Ingepland"),
        ("In uitvoering", "Ingepland"),
    ])
    def test_strict_rejected(self, current, target):
        with pytest.raises(InvalidTransition) as exc:
            check_transition(current, target, strict=True)
        assert exc.value.current == current
        assert exc.value.target == target

    def test_terminal(self):
        assert is_terminal("Voltooid")
        assert is_terminal("Geannuleerd")
        assert not is_terminal("Ingepland")


class TestComplete:
    def test_complete_sets_fields(self, lifecycle, make_work_order, customer):
        work_order = make_work_order(customer["id"])
        done = lifecycle.complete(
            work_order["id"], labor_hours=3.5, notes="Ketel vervangen", photos=["aGVsbG8="]
        )
        assert done["status"] == "Voltooid"
        assert done["labor_hours"] == 3.5
        assert done["notes"] == "Ketel vervangen"
        assert done["photos"] == ["aGVsbG8="]
        assert done["order_number"] == work_order["order_number"]

    def test_complete_unknown_id(self, lifecycle):
        assert lifecycle.complete(999, labor_hours=1) is None

    def test_complete_requires_hours(self, lifecycle, make_work_order, customer):
        work_order = make_work_order(customer["id"])
        with pytest.raises(ValueError):
            lifecycle.complete(work_order["id"], labor_hours=None)
        with pytest.raises(ValueError):
            lifecycle.complete(work_order["id"], labor_hours=-1)

    def test_strict_cannot_complete_cancelled(self, strict_lifecycle, make_work_order, customer):
        work_order = make_work_order(customer["id"], status="Geannuleerd")
        with pytest.raises(InvalidTransition):
            strict_lifecycle.complete(work_order["id"], labor_hours=2)


class TestStatusChanges:
    def test_change_status(self, lifecycle, make_work_order, customer):
        work_order = make_work_order(customer["id"])
        updated = lifecycle.change_status(work_order["id"], "In uitvoering")
        assert updated["status"] == "In uitvoering"

    def test_change_status_unknown_id(self, lifecycle):
        assert lifecycle.change_status(999, "Voltooid") is None

    def test_lenient_reopen(self, lifecycle, make_work_order, customer):
        work_order = make_work_order(customer["id"], status="Voltooid")
        assert lifecycle.update(work_order["id"], {"status": "Ingepland"})["status"] == "Ingepland"

    def test_strict_reopen_rejected(self, strict_lifecycle, storage, make_work_order, customer):
        work_order = make_work_order(customer["id"], status="Voltooid")
        with pytest.raises(InvalidTransition):
            strict_lifecycle.update(work_order["id"], {"status": "Ingepland"})
        assert storage.work_orders.get_by_id(work_order["id"])["status"] == "Voltooid"


class TestMaterialSnapshot:
    def test_create_fills_name_and_price(self, lifecycle, make_material, customer):
        material = make_material(name="Expansievat", price=59.0)
        work_order = lifecycle.create({
            "title": "Expansievat vervangen",
            "customer_id": customer["id"],
            "materials": [{"material_id": material["id"], "quantity": 1}],
        })
        assert work_order["materials"] == [
            {"material_id": material["id"], "name": "Expansievat", "quantity": 1, "price": 59.0}
        ]
        assert work_order["date"] is not None

    def test_price_change_does_not_alter_work_order(self, lifecycle, storage, make_material, customer):
        material = make_material(price=10.0)
        work_order = lifecycle.create({
            "title": "Kraan vervangen",
            "customer_id": customer["id"],
            "materials": [{"material_id": material["id"], "quantity": 2}],
        })
        storage.materials.update(material["id"], {"price": 12.5})

        line = storage.work_orders.get_by_id(work_order["id"])["materials"][0]
        assert line["price"] == 10.0

    def test_explicit_price_kept(self, lifecycle, make_material, customer):
        material = make_material(price=10.0)
        work_order = lifecycle.create({
            "title": "Kraan vervangen",
            "customer_id": customer["id"],
            "materials": [{"material_id": material["id"], "quantity": 1, "price": 8.0}],
        })
        assert work_order["materials"][0]["price"] == 8.0

    def test_photos_not_set_on_create(self, lifecycle, customer):
        work_order = lifecycle.create({
            "title": "Inspectie",
            "customer_id": customer["id"],
            "photos": ["aGVsbG8="],
        })
        assert work_order["photos"] == []
