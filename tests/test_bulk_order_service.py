"""Tests for the multi-store bulk order grid."""

from decimal import Decimal

import pytest

from domain.errors import CheckoutInProgress, KitConflict, ValidationError
from domain.models import CartLine, Store
from services.bulk_order_service import BulkOrderGrid
from services.checkout_service import CheckoutState


@pytest.fixture
def grid(product, sized_product, kit, other_kit):
    return BulkOrderGrid(
        stores=[Store(id="s1", name="Montreal"), Store(id="s2", name="Laval")],
        items=[product, sized_product, kit, other_kit],
        selected_store_ids=["s1", "s2"],
    )


class TestGridEditing:
    def test_rows_expand_sizes(self, grid):
        rows = [(item.id, size) for item, size in grid.rows()]
        assert rows == [("p1", None), ("p3", "S"), ("p3", "M"), ("p3", "L"), ("k1", None), ("k2", None)]

    def test_set_and_clear_quantity(self, grid):
        grid.set_quantity("p1", "s1", 3)
        grid.set_quantity("p3", "s2", 2, size="M")
        assert grid.get_quantity("p1", "s1") == 3
        assert grid.get_quantity("p3", "s2", size="M") == 2
        assert grid.line_count == 2

        grid.set_quantity("p1", "s1", 0)
        assert grid.get_quantity("p1", "s1") == 0
        assert grid.line_count == 1

    def test_unselected_store_is_rejected(self, grid):
        grid.toggle_store("s2")
        with pytest.raises(ValueError):
            grid.set_quantity("p1", "s2", 1)

    def test_deselecting_store_drops_its_cells(self, grid):
        grid.set_quantity("p1", "s1", 1)
        grid.set_quantity("p1", "s2", 1)

        grid.toggle_store("s2")

        assert grid.selected_store_ids == ["s1"]
        assert [s.name for s in grid.selected_stores] == ["Montreal"]
        assert list(grid.cells) == [("p1", None, "s1")]

    def test_unknown_store_cannot_be_selected(self, grid):
        grid.toggle_store("s9")
        assert "s9" not in grid.selected_store_ids

    def test_second_kit_cell_conflicts(self, grid):
        assert grid.set_quantity("k1", "s1", 1) is None

        conflict = grid.set_quantity("k1", "s2", 1)
        other = grid.set_quantity("k2", "s1", 1)

        assert isinstance(conflict, KitConflict)
        assert isinstance(other, KitConflict)
        assert list(grid.cells) == [("k1", None, "s1")]

    def test_same_kit_cell_can_be_changed(self, grid):
        grid.set_quantity("k1", "s1", 1)
        assert grid.set_quantity("k1", "s1", 2) is None
        assert grid.get_quantity("k1", "s1") == 2

    def test_grouped_preview(self, grid):
        grid.set_quantity("p1", "s1", 2)
        grid.set_quantity("k1", "s2", 1)

        groups = grid.grouped()

        assert list(groups) == ["s1", "s2"]
        assert groups["s1"][0].extended_price == Decimal("10.00")


class TestGridValidation:
    def test_requires_a_store(self, grid):
        grid.selected_store_ids = []
        with pytest.raises(ValidationError) as exc:
            grid.validate()
        assert exc.value.message_key == "error.selectStore"

    def test_requires_a_quantity(self, grid):
        with pytest.raises(ValidationError) as exc:
            grid.validate()
        assert exc.value.message_key == "error.emptyBulk"


class TestGridToCart:
    def test_add_to_cart_moves_cells(self, grid, cart):
        grid.set_quantity("p1", "s1", 2)
        grid.set_quantity("p3", "s2", 1, size="L")

        results = grid.add_to_cart(cart)

        assert all(r.ok for r in results)
        assert grid.cells == {}
        assert {(ln.item.id, ln.size, ln.store_id) for ln in cart.lines} == {
            ("p1", None, "s1"),
            ("p3", "L", "s2"),
        }

    def test_kit_already_in_cart_stays_in_grid(self, grid, cart, other_kit):
        cart.add_item(CartLine(item=other_kit, quantity=1))
        grid.set_quantity("k1", "s1", 1)
        grid.set_quantity("p1", "s1", 1)

        results = grid.add_to_cart(cart)

        assert [r.ok for r in results] == [False, True]
        assert isinstance(results[0].error, KitConflict)
        assert list(grid.cells) == [("k1", None, "s1")]


class TestGridSubmit:
    def test_submit_creates_order_per_store(self, grid, signed_in_client):
        grid.set_quantity("p1", "s1", 2)
        grid.set_quantity("k1", "s2", 1)

        result = grid.submit(signed_in_client)

        assert result.status == CheckoutState.SUCCEEDED
        assert [o["store_id"] for o in signed_in_client.inserted("orders")] == ["s1", "s2"]
        assert grid.cells == {}

    def test_failed_store_cells_are_kept(self, grid, signed_in_client):
        grid.set_quantity("p1", "s1", 2)
        grid.set_quantity("p1", "s2", 1)
        signed_in_client.fail("orders", "insert", when=lambda payload, _: payload["store_id"] == "s2")

        result = grid.submit(signed_in_client)

        assert result.status == CheckoutState.PARTIALLY_FAILED
        assert grid.cells == {("p1", None, "s2"): 1}

    def test_second_submit_while_submitting_is_rejected(self, grid, signed_in_client):
        grid.set_quantity("p1", "s1", 2)
        rejected = []

        def resubmit(table, op, payload):
            if table == "orders" and op == "insert" and not rejected:
                with pytest.raises(CheckoutInProgress):
                    grid.submit(signed_in_client)
                rejected.append(True)

        signed_in_client.before_execute = resubmit

        result = grid.submit(signed_in_client)

        assert rejected == [True]
        assert result.status == CheckoutState.SUCCEEDED
        assert len(signed_in_client.inserted("orders")) == 1

    def test_grid_can_be_submitted_again_after_a_submit(self, grid, signed_in_client):
        grid.set_quantity("p1", "s1", 1)
        grid.submit(signed_in_client)

        grid.set_quantity("p1", "s2", 1)
        assert grid.submit(signed_in_client).status == CheckoutState.SUCCEEDED
