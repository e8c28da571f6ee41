# services/grouping_service.py

from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from domain.models import CartLine
from services.pricing_service import individual_subtotal

NO_STORE = "no-store"


def group_by_store(
        lines: Iterable[CartLine],
        resolve: Optional[Callable[[CartLine], Optional[str]]] = None,
) -> Dict[str, List[CartLine]]:
    """
    Partition lines by destination store, in order of first appearance.

    `resolve` maps a line to its store id; by default the line's own
    store_id. Lines that resolve to nothing land in the NO_STORE bucket.
    """
    groups: Dict[str, List[CartLine]] = {}
    for line in lines:
        store_id = resolve(line) if resolve else line.store_id
        groups.setdefault(store_id or NO_STORE, []).append(line)
    return groups


def store_subtotals(lines: Iterable[CartLine]) -> Dict[str, Decimal]:
    """Individual (non-kit) subtotal per store bucket, for display."""
    return {
        store_id: individual_subtotal(group)
        for store_id, group in group_by_store(lines).items()
    }


def fallback_resolver(default_store_id: Optional[str]) -> Callable[[CartLine], Optional[str]]:
    """Resolver sending store-less lines to `default_store_id`."""
    return lambda line: line.store_id or default_store_id
