# services/catalog_service.py

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from supabase import Client

from data_integrator import list_active
from domain.errors import CatalogLoadFailure
from domain.models import Item

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"


@dataclass
class Catalog:
    products: List[Item] = field(default_factory=list)
    kits: List[Item] = field(default_factory=list)
    error: Optional[CatalogLoadFailure] = None

    @property
    def items(self) -> List[Item]:
        return [*self.products, *self.kits]

    def categories(self) -> List[str]:
        seen: List[str] = []
        for item in self.items:
            if item.category not in seen:
                seen.append(item.category)
        return [ALL_CATEGORIES, *seen]

    def filter(self, category: str = ALL_CATEGORIES) -> List[Item]:
        if category == ALL_CATEGORIES:
            return self.items
        return [item for item in self.items if item.category == category]

    def find(self, item_id: str) -> Optional[Item]:
        return next((item for item in self.items if item.id == item_id), None)


def _to_decimal(val: Any) -> Decimal:
    if val is None:
        return Decimal("0")
    return Decimal(str(val))


def _clean_list(val: Any) -> Optional[List[str]]:
    # empty arrays and NULLs both mean "not applicable"
    if not val:
        return None
    return [str(v) for v in val]


def normalize_product_row(row: Dict[str, Any]) -> Item:
    return Item(
        id=str(row["id"]),
        name_en=row.get("name_en") or "",
        name_fr=row.get("name_fr") or row.get("name_en") or "",
        description_en=row.get("description_en") or "",
        description_fr=row.get("description_fr") or "",
        category=row.get("category") or "",
        images=list(row.get("images") or []),
        price=_to_decimal(row.get("price")),
        sizes=_clean_list(row.get("sizes")),
        is_kit=False,
    )


def normalize_kit_row(row: Dict[str, Any]) -> Item:
    """
    Kits are billed to head office, so whatever price the row carries the
    storefront item is priced at 0.
    """
    return Item(
        id=str(row["id"]),
        name_en=row.get("name_en") or "",
        name_fr=row.get("name_fr") or row.get("name_en") or "",
        description_en=row.get("description_en") or "",
        description_fr=row.get("description_fr") or "",
        category=row.get("category") or "",
        images=list(row.get("images") or []),
        price=Decimal("0"),
        sizes=_clean_list(row.get("sizes")),
        is_kit=True,
        products=_clean_list(row.get("products")),
    )


def load_catalog(client: Client) -> Catalog:
    """
    Load active products and kits.

    Never raises: on any read failure an empty catalog is returned with
    `error` set so the page can offer a retry.
    """
    ok_p, msg_p, product_rows = list_active(client, "products")
    if not ok_p:
        logger.warning("Loading products failed: %s", msg_p)
        return Catalog(error=CatalogLoadFailure(msg_p))

    ok_k, msg_k, kit_rows = list_active(client, "kits")
    if not ok_k:
        logger.warning("Loading kits failed: %s", msg_k)
        return Catalog(error=CatalogLoadFailure(msg_k))

    try:
        products = [normalize_product_row(r) for r in product_rows]
        kits = [normalize_kit_row(r) for r in kit_rows]
    except (KeyError, TypeError, ArithmeticError) as e:
        logger.warning("Catalog rows could not be normalized: %s", e)
        return Catalog(error=CatalogLoadFailure(f"Malformed catalog row: {e}"))

    logger.info("Loaded catalog: %d products, %d kits", len(products), len(kits))
    return Catalog(products=products, kits=kits)
