import logging
from decimal import Decimal
from typing import Dict, List, Any, Tuple, Optional

from supabase import Client

from domain.models import CurrentUser
from supabase_client import get_schema

logger = logging.getLogger(__name__)

schema: str = get_schema()

CATALOG_TABLES = ("products", "kits")


def _to_json_value(val: Any) -> Any:
    # PostgREST casts numeric strings, which keeps cents exact
    if isinstance(val, Decimal):
        return str(val)
    return val


def _to_json_row(row: Dict[str, Any]) -> Dict[str, Any]:
    return {k: _to_json_value(v) for k, v in row.items()}


def list_active(client: Client, table_name: str) -> Tuple[bool, str, List[Dict[str, Any]]]:
    """
    Fetch all active rows from `products` or `kits`.
    Returns (ok, message, rows)
    """
    if table_name not in CATALOG_TABLES:
        return False, f"Unknown catalog table: {table_name}", []

    try:
        resp = (
            client.schema(schema)
            .table(table_name)
            .select("*")
            .eq("is_active", True)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Fetch failed: {resp.error}", []

        return True, "Fetched", resp.data or []

    except Exception as e:
        return False, f"Unexpected error: {e}", []


def list_user_stores(client: Client, user_id: str) -> Tuple[bool, str, List[Dict[str, Any]]]:
    """
    Stores assigned to a user through user_stores.
    Returns (ok, message, [store_row, ...])
    """
    try:
        resp = (
            client.schema(schema)
            .table("user_stores")
            .select("store_id, stores(id, name, address, city, province)")
            .eq("user_id", user_id)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Fetch stores failed: {resp.error}", []

        stores = [row["stores"] for row in (resp.data or []) if row.get("stores")]
        return True, "Fetched", stores

    except Exception as e:
        return False, f"Unexpected error: {e}", []


def create_order(client: Client, row: Dict[str, Any]) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    """
    Insert a single order row.
    Returns (ok, message, inserted_row)
    """
    try:
        resp = (
            client.schema(schema)
            .table("orders")
            .insert(_to_json_row(row))
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Insert order failed: {resp.error}", None

        if not resp.data:
            return False, "Insert order failed: no data returned", None

        return True, "Inserted", resp.data[0]

    except Exception as e:
        return False, str(e), None


def create_order_items(
        client: Client,
        order_id: str,
        rows: List[Dict[str, Any]],
) -> Tuple[bool, str, List[Dict[str, Any]]]:
    """
    Insert all order_items for one order in a single request.
    Returns (ok, message, inserted_rows)
    """
    if not rows:
        return False, "No order items to insert", []

    payload = [_to_json_row({**r, "order_id": order_id}) for r in rows]

    try:
        resp = (
            client.schema(schema)
            .table("order_items")
            .insert(payload)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Insert order items failed: {resp.error}", []

        return True, "Inserted", resp.data or []

    except Exception as e:
        return False, str(e), []


def delete_order(client: Client, order_id: str) -> Tuple[bool, str]:
    """
    Remove an order whose items could not be written.
    Returns (ok, message)
    """
    try:
        resp = (
            client.schema(schema)
            .table("orders")
            .delete()
            .eq("id", order_id)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Delete order failed: {resp.error}"

        return True, "Deleted"

    except Exception as e:
        return False, str(e)


def get_order(
        client: Client,
        order_id: str,
        user_id: str,
) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    """
    Fetch one order of `user_id` together with its store name.
    Returns (ok, message, order_row_or_none)
    """
    try:
        resp = (
            client.schema(schema)
            .table("orders")
            .select("*, stores(name)")
            .eq("id", order_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Fetch order failed: {resp.error}", None

        if not resp.data:
            return False, "Order not found", None

        return True, "Fetched", resp.data[0]

    except Exception as e:
        return False, str(e), None


def list_order_items(client: Client, order_id: str) -> Tuple[bool, str, List[Dict[str, Any]]]:
    """
    Returns (ok, message, item_rows) with product/kit names embedded.
    """
    try:
        resp = (
            client.schema(schema)
            .table("order_items")
            .select("*, products(name_en, name_fr, images), kits(name_en, name_fr, images)")
            .eq("order_id", order_id)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Fetch order items failed: {resp.error}", []

        return True, "Fetched", resp.data or []

    except Exception as e:
        return False, str(e), []


def list_orders(client: Client, user_id: str) -> Tuple[bool, str, List[Dict[str, Any]]]:
    """
    All orders of a user, newest first.
    Returns (ok, message, order_rows)
    """
    try:
        resp = (
            client.schema(schema)
            .table("orders")
            .select("*, stores(name)")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Fetch orders failed: {resp.error}", []

        return True, "Fetched", resp.data or []

    except Exception as e:
        return False, str(e), []


def get_current_user(client: Client) -> Optional[CurrentUser]:
    """
    The signed-in user of this client's auth session, or None.
    """
    try:
        resp = client.auth.get_user()
    except Exception as e:
        logger.warning("Could not read auth session: %s", e)
        return None

    user = getattr(resp, "user", None)
    if user is None:
        return None

    return CurrentUser(id=user.id, email=user.email or "")


def sign_in(client: Client, email: str, password: str) -> Tuple[bool, str]:
    try:
        client.auth.sign_in_with_password({"email": email, "password": password})
        return True, "Signed in"
    except Exception as e:
        return False, str(e)


def sign_out(client: Client) -> Tuple[bool, str]:
    try:
        client.auth.sign_out()
        return True, "Signed out"
    except Exception as e:
        return False, str(e)
