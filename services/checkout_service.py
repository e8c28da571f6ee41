# services/checkout_service.py

import logging
import random
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from supabase import Client

from data_integrator import (
    create_order,
    create_order_items,
    delete_order,
    get_current_user,
    list_user_stores,
)
from domain.errors import (
    CheckoutInProgress,
    CheckoutPartialFailure,
    StorefrontError,
    Unauthenticated,
    ValidationError,
)
from domain.models import CartLine, CurrentUser, OrderStatus, PaymentStatus
from services.cart_service import CartStore
from services.grouping_service import fallback_resolver, group_by_store
from services.pricing_service import CartTotals, calculate_totals

logger = logging.getLogger(__name__)


class CheckoutState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    PARTIALLY_FAILED = "partially_failed"
    FAILED = "failed"


@dataclass
class CreatedOrder:
    store_id: str
    order_id: str
    order_number: str
    totals: CartTotals


@dataclass
class CheckoutResult:
    status: CheckoutState
    orders: List[CreatedOrder] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)  # store_id -> reason
    error: Optional[StorefrontError] = None

    @property
    def order_ids(self) -> List[str]:
        return [o.order_id for o in self.orders]

    @property
    def succeeded_stores(self) -> List[str]:
        return [o.store_id for o in self.orders]


def generate_order_number() -> str:
    """ORD-<epoch ms>-<000..999>"""
    return f"ORD-{int(time.time() * 1000)}-{random.randint(0, 999):03d}"


def build_order_row(
        order_number: str,
        user_id: str,
        store_id: str,
        totals: CartTotals,
) -> Dict[str, Any]:
    return {
        "order_number": order_number,
        "user_id": user_id,
        "store_id": store_id,
        "kit_subtotal": totals.kit_subtotal,
        "individual_subtotal": totals.individual_subtotal,
        "shipping_amount": totals.shipping_amount,
        "tax_amount": totals.tax_amount,
        "total": totals.charge_total,
        "order_status": OrderStatus.PENDING.value,
        "payment_status": PaymentStatus.PENDING.value,
    }


def build_order_item_row(line: CartLine) -> Dict[str, Any]:
    """Snapshot a cart line so later catalog changes don't touch the order."""
    return {
        "product_id": None if line.is_kit else line.item.id,
        "kit_id": line.item.id if line.is_kit else None,
        "quantity": line.quantity,
        "unit_price": line.unit_price,
        "extended_price": line.extended_price,
        "size": line.size,
        "is_kit": line.is_kit,
    }


class CheckoutService:
    """
    Turns the cart into one order per destination store.

    Only one checkout runs at a time per service; a second call while one is
    submitting raises CheckoutInProgress.
    """

    def __init__(
            self,
            client: Client,
            cart: CartStore,
            order_number_factory: Callable[[], str] = generate_order_number,
    ):
        self.client = client
        self.cart = cart
        self.order_number_factory = order_number_factory
        self._state = CheckoutState.IDLE
        self._lock = threading.Lock()

    @property
    def state(self) -> CheckoutState:
        return self._state

    @property
    def is_submitting(self) -> bool:
        return self._state == CheckoutState.SUBMITTING

    def _default_store(self, user: CurrentUser, default_store_id: Optional[str]) -> str:
        if default_store_id:
            return default_store_id

        ok, msg, stores = list_user_stores(self.client, user.id)
        if not ok:
            raise ValidationError(f"Could not load your stores: {msg}")
        if not stores:
            raise ValidationError("No store is assigned to your account", message_key="error.noStore")

        return str(stores[0]["id"])

    def _next_order_number(self, used: set) -> str:
        number = self.order_number_factory()
        while number in used:
            number = self.order_number_factory()
        used.add(number)
        return number

    def _materialize_store_order(
            self,
            user: CurrentUser,
            store_id: str,
            lines: List[CartLine],
            order_number: str,
    ) -> CreatedOrder:
        """
        Create the order row, then its items. If the items can't be written the
        order is deleted again. Raises StorefrontError with the reason.
        """
        totals = calculate_totals(lines)

        ok, msg, order = create_order(
            self.client, build_order_row(order_number, user.id, store_id, totals)
        )
        if not ok:
            raise StorefrontError(msg, message_key="error.orderCreate")

        order_id = str(order["id"])

        ok_items, msg_items, _ = create_order_items(
            self.client, order_id, [build_order_item_row(ln) for ln in lines]
        )
        if not ok_items:
            ok_del, msg_del = delete_order(self.client, order_id)
            if not ok_del:
                logger.error(
                    "Order %s (%s) for store %s has no items and could not be removed: %s",
                    order_number, order_id, store_id, msg_del,
                )
                raise StorefrontError(
                    f"{msg_items}; order {order_number} was left without items ({msg_del})",
                    message_key="error.orderDangling",
                )
            raise StorefrontError(msg_items, message_key="error.orderCreate")

        logger.info("Created order %s for store %s", order_number, store_id)
        return CreatedOrder(
            store_id=store_id,
            order_id=order_id,
            order_number=order_number,
            totals=totals,
        )

    def checkout(self, default_store_id: Optional[str] = None) -> CheckoutResult:
        """
        Submit the cart.

        Raises Unauthenticated, ValidationError or CheckoutInProgress before
        anything is written. Otherwise returns a CheckoutResult; on partial
        failure the cart keeps only the lines of the stores that failed.
        """
        if not self._lock.acquire(blocking=False):
            raise CheckoutInProgress("A checkout is already being submitted")

        created: List[CreatedOrder] = []
        try:
            self._state = CheckoutState.SUBMITTING
            try:
                user = get_current_user(self.client)
                if user is None:
                    raise Unauthenticated("Sign in to place an order")

                lines = self.cart.lines
                if not lines:
                    raise ValidationError("Your cart is empty", message_key="error.emptyCart")

                fallback = None
                if any(ln.store_id is None for ln in lines):
                    fallback = self._default_store(user, default_store_id)
            except StorefrontError:
                self._state = CheckoutState.IDLE
                raise

            groups = group_by_store(lines, resolve=fallback_resolver(fallback))

            failures: Dict[str, str] = {}
            used_numbers: set = set()

            for store_id, store_lines in groups.items():
                try:
                    created.append(
                        self._materialize_store_order(
                            user, store_id, store_lines, self._next_order_number(used_numbers)
                        )
                    )
                    self.cart.discard_lines(store_lines)
                except StorefrontError as e:
                    logger.warning("Checkout for store %s failed: %s", store_id, e.message)
                    failures[store_id] = e.message

            if not failures:
                self.cart.clear_cart()
                self._state = CheckoutState.SUCCEEDED
                logger.info("Checkout created %d order(s)", len(created))
                return CheckoutResult(status=self._state, orders=created)

            if created:
                self._state = CheckoutState.PARTIALLY_FAILED
                error: StorefrontError = CheckoutPartialFailure(
                    succeeded=[o.store_id for o in created], failed=failures
                )
            else:
                self._state = CheckoutState.FAILED
                error = StorefrontError(
                    "; ".join(f"{s}: {m}" for s, m in failures.items()),
                    message_key="error.checkoutFailed",
                )

            return CheckoutResult(status=self._state, orders=created, failures=failures, error=error)

        finally:
            if self._state == CheckoutState.SUBMITTING:
                logger.error(
                    "Checkout aborted by an unexpected error after creating %s",
                    [o.order_number for o in created] or "no orders",
                )
                self._state = CheckoutState.FAILED
            self._lock.release()
