# services/cart_service.py

import json
import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from domain.errors import KitConflict, StorageCorruption, StorefrontError, ValidationError
from domain.models import CartLine, Item
from services.cart_storage import storage_for_user
from services.grouping_service import fallback_resolver, group_by_store
from services.pricing_service import CartTotals, calculate_store_totals, calculate_totals

logger = logging.getLogger(__name__)


class _Any:
    def __repr__(self) -> str:
        return "ANY"


# Wildcard for remove/update filters. None is a real value (no size / no store).
ANY: Any = _Any()


@dataclass
class AddItemResult:
    ok: bool
    line: Optional[CartLine] = None
    error: Optional[StorefrontError] = None


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def _item_to_dict(item: Item) -> Dict[str, Any]:
    return {
        "id": item.id,
        "name_en": item.name_en,
        "name_fr": item.name_fr,
        "description_en": item.description_en,
        "description_fr": item.description_fr,
        "category": item.category,
        "images": item.images,
        "price": str(item.price),
        "sizes": item.sizes,
        "is_kit": item.is_kit,
        "products": item.products,
    }


def _item_from_dict(d: Dict[str, Any]) -> Item:
    return Item(
        id=str(d["id"]),
        name_en=d["name_en"],
        name_fr=d["name_fr"],
        description_en=d.get("description_en") or "",
        description_fr=d.get("description_fr") or "",
        category=d["category"],
        images=list(d.get("images") or []),
        price=Decimal(d["price"]),
        sizes=d.get("sizes"),
        is_kit=bool(d["is_kit"]),
        products=d.get("products"),
    )


def serialize_lines(lines: Iterable[CartLine]) -> str:
    return json.dumps(
        [
            {
                "item": _item_to_dict(ln.item),
                "quantity": ln.quantity,
                "size": ln.size,
                "store_id": ln.store_id,
            }
            for ln in lines
        ]
    )


def deserialize_lines(raw: str) -> List[CartLine]:
    """
    Parse a stored cart. Raises ValueError (or KeyError/TypeError) when the
    payload is not a well-formed cart.
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("Stored cart is not a list")

    lines: List[CartLine] = []
    for entry in data:
        quantity = int(entry["quantity"])
        if quantity < 1:
            raise ValueError(f"Stored quantity {quantity} is below 1")
        lines.append(
            CartLine(
                item=_item_from_dict(entry["item"]),
                quantity=quantity,
                size=entry.get("size"),
                store_id=entry.get("store_id"),
            )
        )

    if sum(1 for ln in lines if ln.is_kit) > 1:
        raise ValueError("Stored cart holds more than one kit")

    return lines


# ---------------------------------------------------------------------------
# Cart store
# ---------------------------------------------------------------------------

class CartStore:
    """
    The session's cart. Every mutation is written to `storage` before the
    method returns; construction rehydrates from it.
    """

    def __init__(self, storage):
        self.storage = storage
        self._lines: List[CartLine] = self._load()

    def _load(self) -> List[CartLine]:
        try:
            raw = self.storage.read()
        except UnicodeDecodeError as e:
            logger.warning("%s", StorageCorruption(f"Discarding undecodable stored cart: {e}"))
            self._purge()
            return []
        except OSError as e:
            logger.warning("%s", StorageCorruption(f"Cart storage unreadable: {e}"))
            return []

        if raw is None:
            return []

        try:
            return deserialize_lines(raw)
        except (ValueError, KeyError, TypeError, ArithmeticError) as e:
            logger.warning("%s", StorageCorruption(f"Discarding corrupt stored cart: {e}"))
            self._purge()
            return []

    def _persist(self) -> None:
        try:
            self.storage.write(serialize_lines(self._lines))
        except OSError as e:
            logger.warning("Could not persist cart: %s", e)

    def _purge(self) -> None:
        try:
            self.storage.purge()
        except OSError as e:
            logger.warning("Could not purge cart storage: %s", e)

    # -- reads ---------------------------------------------------------------

    @property
    def lines(self) -> List[CartLine]:
        return [replace(ln) for ln in self._lines]

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(ln.quantity for ln in self._lines)

    def kit_line(self) -> Optional[CartLine]:
        return next((replace(ln) for ln in self._lines if ln.is_kit), None)

    @property
    def totals(self) -> CartTotals:
        return calculate_totals(self._lines)

    @property
    def kit_subtotal(self) -> Decimal:
        return self.totals.kit_subtotal

    @property
    def individual_subtotal(self) -> Decimal:
        return self.totals.individual_subtotal

    @property
    def total(self) -> Decimal:
        return self.totals.charge_total

    def store_totals(self, default_store_id: Optional[str] = None) -> CartTotals:
        """
        Totals billed when each destination store gets its own order.
        Store-less lines are counted with `default_store_id`, as checkout does.
        """
        return calculate_store_totals(
            group_by_store(self._lines, resolve=fallback_resolver(default_store_id))
        )

    # -- mutations -----------------------------------------------------------

    def add_item(self, line: CartLine) -> AddItemResult:
        if line.quantity < 1:
            return AddItemResult(ok=False, error=ValidationError("Quantity must be at least 1"))

        if line.item.sizes and line.size not in line.item.sizes:
            return AddItemResult(
                ok=False,
                error=ValidationError("Select a size", message_key="error.selectSize"),
            )

        if not line.item.sizes and line.size is not None:
            return AddItemResult(
                ok=False,
                error=ValidationError(f"{line.item.id} has no size {line.size!r}"),
            )

        if line.is_kit and any(ln.is_kit for ln in self._lines):
            return AddItemResult(
                ok=False,
                error=KitConflict("Only one kit can be ordered per cart"),
            )

        existing = next((ln for ln in self._lines if ln.key == line.key), None)
        if existing:
            existing.quantity += line.quantity
            merged = existing
        else:
            merged = replace(line)
            self._lines.append(merged)

        self._persist()
        return AddItemResult(ok=True, line=replace(merged))

    def _matches(self, line: CartLine, item_id: str, size: Any, store_id: Any) -> bool:
        return (
            line.item.id == item_id
            and (size is ANY or line.size == size)
            and (store_id is ANY or line.store_id == store_id)
        )

    def remove_item(self, item_id: str, size: Any = ANY, store_id: Any = ANY) -> int:
        """Drop every matching line. Returns how many were removed."""
        kept = [ln for ln in self._lines if not self._matches(ln, item_id, size, store_id)]
        removed = len(self._lines) - len(kept)
        if removed:
            self._lines = kept
            self._persist()
        return removed

    def update_quantity(self, item_id: str, quantity: int, size: Any = ANY, store_id: Any = ANY) -> int:
        """Set quantity on matching lines; 0 or less removes them."""
        if quantity <= 0:
            return self.remove_item(item_id, size=size, store_id=store_id)

        updated = 0
        for ln in self._lines:
            if self._matches(ln, item_id, size, store_id):
                ln.quantity = quantity
                updated += 1

        if updated:
            self._persist()
        return updated

    def discard_lines(self, lines: Iterable[CartLine]) -> None:
        keys = {ln.key for ln in lines}
        self._lines = [ln for ln in self._lines if ln.key not in keys]
        self._persist()

    def clear_cart(self) -> None:
        self._lines = []
        self._purge()

    def merge_lines(self, lines: Iterable[CartLine]) -> List[AddItemResult]:
        """Add each line as add_item would; used to carry a guest cart into a user's cart."""
        return [self.add_item(ln) for ln in lines]


def open_user_cart(
        directory: str,
        user_id: Optional[str],
        guest_cart: Optional[CartStore] = None,
) -> CartStore:
    """
    The cart owned by `user_id`, or an in-memory cart when nobody is signed in.
    Lines of `guest_cart` are carried into a signed-in user's cart; lines
    refused by the cart rules (a second kit) are dropped with a warning.
    """
    cart = CartStore(storage_for_user(directory, user_id))
    if user_id and guest_cart is not None and not guest_cart.is_empty:
        for result in cart.merge_lines(guest_cart.lines):
            if not result.ok:
                logger.warning("Guest cart line not carried over: %s", result.error.message)
    return cart
