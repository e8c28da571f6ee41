"""Tests for reading order history back from Supabase."""

from decimal import Decimal

import pytest

from domain.models import OrderStatus, PaymentStatus
from services.order_service import (
    ORDER_STATUS_COLORS,
    get_order_detail,
    list_orders_for_user,
    order_item_from_row,
)
from services.store_service import load_user_stores


@pytest.fixture
def history_client(signed_in_client):
    signed_in_client.tables["orders"] = [
        {"id": "o1", "order_number": "ORD-1", "user_id": "user-1", "store_id": "s1",
         "kit_subtotal": "0.00", "individual_subtotal": "10.00", "shipping_amount": "9.99",
         "tax_amount": "2.60", "total": "22.59", "order_status": "shipped",
         "payment_status": "paid", "created_at": "2025-01-02T10:00:00+00:00",
         "stores": {"name": "Montreal"}},
        {"id": "o2", "order_number": "ORD-2", "user_id": "user-1", "store_id": "s2",
         "kit_subtotal": 0, "individual_subtotal": 0, "shipping_amount": 0,
         "tax_amount": 0, "total": 0, "order_status": "pending",
         "payment_status": "pending", "created_at": "2025-03-01T08:30:00+00:00",
         "stores": {"name": "Laval"}},
        {"id": "o3", "order_number": "ORD-3", "user_id": "someone-else", "store_id": "s9",
         "total": "1.00", "created_at": "2025-04-01T00:00:00+00:00"},
    ]
    signed_in_client.tables["order_items"] = [
        {"id": "i1", "order_id": "o1", "product_id": "p1", "kit_id": None, "quantity": 2,
         "unit_price": "5.00", "extended_price": "10.00", "size": None, "is_kit": False,
         "products": {"name_en": "Apron", "name_fr": "Tablier", "images": ["a.png"]},
         "kits": None},
        {"id": "i2", "order_id": "o2", "product_id": None, "kit_id": "k1", "quantity": 1,
         "unit_price": "0.00", "extended_price": "0.00", "size": None, "is_kit": True,
         "products": None,
         "kits": {"name_en": "Opening Kit", "name_fr": "Ensemble", "images": []}},
    ]
    return signed_in_client


class TestOrderHistory:
    def test_lists_own_orders_newest_first(self, history_client):
        ok, _, orders = list_orders_for_user(history_client, "user-1")

        assert ok
        assert [o.order_number for o in orders] == ["ORD-2", "ORD-1"]
        assert orders[1].total == Decimal("22.59")
        assert orders[1].order_status == OrderStatus.SHIPPED
        assert orders[1].payment_status == PaymentStatus.PAID
        assert orders[1].store_name == "Montreal"

    def test_read_failure_is_reported(self, history_client):
        history_client.fail("orders", "select")

        ok, msg, orders = list_orders_for_user(history_client, "user-1")

        assert not ok
        assert "orders select failed" in msg
        assert orders == []


class TestOrderDetail:
    def test_detail_includes_item_snapshots(self, history_client):
        ok, _, order = get_order_detail(history_client, "o1", "user-1")

        assert ok
        assert order.store_name == "Montreal"
        assert len(order.items) == 1
        item = order.items[0]
        assert item.name("fr") == "Tablier"
        assert item.extended_price == Decimal("10.00")

    def test_kit_item_uses_kit_join(self, history_client):
        _, _, order = get_order_detail(history_client, "o2", "user-1")

        assert order.items[0].is_kit
        assert order.items[0].name() == "Opening Kit"

    def test_other_users_order_is_not_found(self, history_client):
        ok, msg, order = get_order_detail(history_client, "o3", "user-1")

        assert not ok
        assert msg == "Order not found"
        assert order is None

    def test_item_without_join_has_blank_name(self):
        item = order_item_from_row({"id": 1, "quantity": "3", "unit_price": 1, "extended_price": 3})

        assert item.quantity == 3
        assert item.name() == ""
        assert item.images == []

    def test_every_status_has_a_colour(self):
        assert set(ORDER_STATUS_COLORS) == set(OrderStatus)


class TestUserStores:
    def test_stores_sorted_by_name(self, signed_in_client):
        ok, _, stores = load_user_stores(signed_in_client, "user-1")

        assert ok
        assert [s.name for s in stores] == ["Laval", "Montreal"]

    def test_no_assignments(self, signed_in_client):
        ok, _, stores = load_user_stores(signed_in_client, "user-2")
        assert ok
        assert stores == []
