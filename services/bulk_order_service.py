# services/bulk_order_service.py

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from supabase import Client

from domain.errors import CheckoutInProgress, KitConflict, ValidationError
from domain.models import CartLine, Item, Store
from services.cart_service import AddItemResult, CartStore
from services.cart_storage import MemoryCartStorage
from services.checkout_service import CheckoutResult, CheckoutService
from services.grouping_service import group_by_store

logger = logging.getLogger(__name__)

# (item_id, size, store_id)
CellKey = Tuple[str, Optional[str], str]


@dataclass
class BulkOrderGrid:
    """
    Quantities for several stores at once: one cell per (item, size, store).

    Follows the cart's rule that only one kit may be ordered at a time.
    """
    stores: List[Store]
    items: List[Item]
    selected_store_ids: List[str] = field(default_factory=list)
    cells: Dict[CellKey, int] = field(default_factory=dict)
    _submitting: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def _item(self, item_id: str) -> Item:
        item = next((i for i in self.items if i.id == item_id), None)
        if item is None:
            raise KeyError(item_id)
        return item

    @property
    def selected_stores(self) -> List[Store]:
        return [s for s in self.stores if s.id in self.selected_store_ids]

    def toggle_store(self, store_id: str) -> None:
        if store_id in self.selected_store_ids:
            self.selected_store_ids.remove(store_id)
            # quantities for a deselected store are no longer part of the order
            self.cells = {k: q for k, q in self.cells.items() if k[2] != store_id}
        elif any(s.id == store_id for s in self.stores):
            self.selected_store_ids.append(store_id)

    def rows(self) -> List[Tuple[Item, Optional[str]]]:
        """One grid row per item, or per item size for sized items."""
        result: List[Tuple[Item, Optional[str]]] = []
        for item in self.items:
            if item.sizes:
                result.extend((item, size) for size in item.sizes)
            else:
                result.append((item, None))
        return result

    def get_quantity(self, item_id: str, store_id: str, size: Optional[str] = None) -> int:
        return self.cells.get((item_id, size, store_id), 0)

    def set_quantity(
            self,
            item_id: str,
            store_id: str,
            quantity: int,
            size: Optional[str] = None,
    ) -> Optional[KitConflict]:
        """
        Set one cell; 0 or less clears it. Returns KitConflict, without
        changing anything, when a different kit cell is already filled.
        """
        key = (item_id, size, store_id)
        if quantity <= 0:
            self.cells.pop(key, None)
            return None

        if store_id not in self.selected_store_ids:
            raise ValueError(f"Store {store_id} is not selected")

        item = self._item(item_id)
        if item.is_kit:
            other_kit = any(
                k != key and self._item(k[0]).is_kit for k in self.cells
            )
            if other_kit:
                return KitConflict("Only one kit can be ordered at a time")

        self.cells[key] = quantity
        return None

    @property
    def line_count(self) -> int:
        return len(self.cells)

    def to_cart_lines(self) -> List[CartLine]:
        return [
            CartLine(item=self._item(item_id), quantity=qty, size=size, store_id=store_id)
            for (item_id, size, store_id), qty in self.cells.items()
        ]

    def grouped(self) -> Dict[str, List[CartLine]]:
        return group_by_store(self.to_cart_lines())

    def validate(self) -> None:
        if not self.selected_store_ids:
            raise ValidationError("Select at least one store", message_key="error.selectStore")
        if not self.cells:
            raise ValidationError("Add items to your order", message_key="error.emptyBulk")

    def add_to_cart(self, cart: CartStore) -> List[AddItemResult]:
        """Move the grid into the session cart; successful cells are cleared."""
        self.validate()
        results = []
        for line in self.to_cart_lines():
            result = cart.add_item(line)
            if result.ok:
                self.cells.pop(line.key, None)
            results.append(result)
        return results

    def submit(self, client: Client) -> CheckoutResult:
        """
        Create the orders straight from the grid. Cells of stores whose order
        failed are kept so the user can retry them. Raises CheckoutInProgress
        while another submit of this grid is running.
        """
        if not self._submitting.acquire(blocking=False):
            raise CheckoutInProgress("These bulk orders are already being submitted")

        try:
            self.validate()
            cart = CartStore(MemoryCartStorage())
            for line in self.to_cart_lines():
                added = cart.add_item(line)
                if not added.ok:
                    raise added.error

            result = CheckoutService(client, cart).checkout()
            self.cells = {ln.key: ln.quantity for ln in cart.lines}
        finally:
            self._submitting.release()

        logger.info(
            "Bulk order for %d store(s): %s", len(self.selected_store_ids), result.status.value
        )
        return result
