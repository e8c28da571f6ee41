# services/store_service.py

import logging
from typing import List, Tuple

from supabase import Client

from data_integrator import list_user_stores
from domain.models import Store

logger = logging.getLogger(__name__)


def load_user_stores(client: Client, user_id: str) -> Tuple[bool, str, List[Store]]:
    """
    Stores the user may order for, sorted by name.
    Returns (ok, message, stores)
    """
    ok, msg, rows = list_user_stores(client, user_id)
    if not ok:
        logger.warning("Loading stores for %s failed: %s", user_id, msg)
        return False, msg, []

    stores = [
        Store(
            id=str(r["id"]),
            name=r.get("name") or "",
            address=r.get("address"),
            city=r.get("city"),
            province=r.get("province"),
        )
        for r in rows
    ]
    return True, msg, sorted(stores, key=lambda s: s.name.lower())
