# services/order_service.py

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from supabase import Client

from data_integrator import get_order, list_order_items, list_orders
from domain.models import Order, OrderItem, OrderStatus, PaymentStatus

logger = logging.getLogger(__name__)

ORDER_STATUS_COLORS = {
    OrderStatus.DRAFT: "gray",
    OrderStatus.PENDING: "orange",
    OrderStatus.APPROVED: "blue",
    OrderStatus.PROCESSING: "violet",
    OrderStatus.SHIPPED: "blue",
    OrderStatus.DELIVERED: "green",
    OrderStatus.CANCELLED: "red",
}


def _money(val: Any) -> Decimal:
    return Decimal(str(val)) if val is not None else Decimal("0")


def order_from_row(row: Dict[str, Any]) -> Order:
    store = row.get("stores") or {}
    return Order(
        id=str(row["id"]),
        order_number=row["order_number"],
        user_id=str(row["user_id"]),
        store_id=str(row["store_id"]),
        kit_subtotal=_money(row.get("kit_subtotal")),
        individual_subtotal=_money(row.get("individual_subtotal")),
        shipping_amount=_money(row.get("shipping_amount")),
        tax_amount=_money(row.get("tax_amount")),
        total=_money(row.get("total")),
        order_status=OrderStatus(row.get("order_status") or OrderStatus.PENDING.value),
        payment_status=PaymentStatus(row.get("payment_status") or PaymentStatus.PENDING.value),
        created_at=row.get("created_at"),
        notes=row.get("notes"),
        store_name=store.get("name"),
    )


def order_item_from_row(row: Dict[str, Any]) -> OrderItem:
    # joined catalog row: products(...) for individual items, kits(...) for kits
    source = (row.get("kits") if row.get("is_kit") else row.get("products")) or {}
    return OrderItem(
        id=str(row["id"]) if row.get("id") is not None else None,
        product_id=row.get("product_id"),
        kit_id=row.get("kit_id"),
        quantity=int(row["quantity"]),
        unit_price=_money(row.get("unit_price")),
        extended_price=_money(row.get("extended_price")),
        size=row.get("size"),
        is_kit=bool(row.get("is_kit")),
        name_en=source.get("name_en") or "",
        name_fr=source.get("name_fr") or "",
        images=list(source.get("images") or []),
    )


def list_orders_for_user(client: Client, user_id: str) -> Tuple[bool, str, List[Order]]:
    ok, msg, rows = list_orders(client, user_id)
    if not ok:
        logger.warning("Loading orders failed: %s", msg)
        return False, msg, []
    return True, msg, [order_from_row(r) for r in rows]


def get_order_detail(client: Client, order_id: str, user_id: str) -> Tuple[bool, str, Optional[Order]]:
    """
    Order header plus its items.
    Returns (ok, message, order_or_none)
    """
    ok, msg, row = get_order(client, order_id, user_id)
    if not ok:
        logger.warning("Loading order %s failed: %s", order_id, msg)
        return False, msg, None

    order = order_from_row(row)

    ok_items, msg_items, item_rows = list_order_items(client, order_id)
    if not ok_items:
        logger.warning("Loading items of order %s failed: %s", order_id, msg_items)
        return False, msg_items, None

    order.items = [order_item_from_row(r) for r in item_rows]
    return True, "Fetched", order
