import streamlit as st
import pandas as pd

from domain.errors import StorefrontError
from element_component import (
    cart_badge,
    init_session,
    language_selector,
    show_error,
    sign_in_sidebar,
)
from services.bulk_order_service import BulkOrderGrid
from services.catalog_service import ALL_CATEGORIES, load_catalog
from services.checkout_service import CheckoutState
from services.grouping_service import store_subtotals
from services.store_service import load_user_stores
from utils.formatting import format_price
from utils.i18n import t

st.set_page_config(page_title="Bulk Order", page_icon="📦", layout="wide")

client, cart, _ = init_session()
language = language_selector()
user = sign_in_sidebar(client, language)
cart_badge(cart, language)

st.title(f"📦 {t('bulk.title', language)}")
st.caption(t("bulk.subtitle", language))

if user is None:
    st.warning(t("error.unauthenticated", language))
    st.stop()

# -----------------------------------------------------------------------------
# Load stores + catalog once per session
# -----------------------------------------------------------------------------
if "bulk_grid" not in st.session_state:
    ok, msg, stores = load_user_stores(client, user.id)
    if not ok:
        st.error(msg)
        st.stop()

    catalog = load_catalog(client)
    if catalog.error:
        show_error(catalog.error, language)
        st.stop()

    st.session_state["bulk_grid"] = BulkOrderGrid(stores=stores, items=catalog.items)

grid: BulkOrderGrid = st.session_state["bulk_grid"]

# -----------------------------------------------------------------------------
# 1) Stores
# -----------------------------------------------------------------------------
st.subheader(t("bulk.selectStores", language))
store_cols = st.columns(max(len(grid.stores), 1))
for col, store in zip(store_cols, grid.stores):
    with col:
        checked = st.checkbox(store.name, value=store.id in grid.selected_store_ids, key=f"store_{store.id}")
        if checked != (store.id in grid.selected_store_ids):
            grid.toggle_store(store.id)

if not grid.selected_store_ids:
    st.info(t("bulk.pickStore", language))
    st.stop()

# -----------------------------------------------------------------------------
# 2) Quantity grid: one row per item (per size), one column per store
# -----------------------------------------------------------------------------
categories = [ALL_CATEGORIES] + sorted({i.category for i in grid.items})
category = st.radio(
    "Category",
    categories,
    format_func=lambda c: t("store.allItems", language) if c == ALL_CATEGORIES else c,
    horizontal=True,
    label_visibility="collapsed",
)

rows = [(item, size) for item, size in grid.rows() if category == ALL_CATEGORIES or item.category == category]
selected = grid.selected_stores

records = []
for item, size in rows:
    record = {
        "_item_id": item.id,
        "_size": size,
        "Item": item.name(language) + (f" ({size})" if size else ""),
        "Kit": item.is_kit,
        "Price": t("cart.billedToHO", language) if item.is_kit else format_price(item.price, language),
    }
    for store in selected:
        record[store.name] = grid.get_quantity(item.id, store.id, size)
    records.append(record)

df = pd.DataFrame(records)
edited = st.data_editor(
    df,
    hide_index=True,
    width="stretch",
    disabled=["Item", "Kit", "Price"],
    column_order=["Item", "Kit", "Price", *[s.name for s in selected]],
    column_config={
        s.name: st.column_config.NumberColumn(s.name, min_value=0, step=1) for s in selected
    },
    key=f"bulk_editor_{category}",
)

conflict = None
for _, row in edited.iterrows():
    size = row["_size"] if pd.notnull(row["_size"]) else None
    for store in selected:
        qty = int(row[store.name] or 0)
        if qty != grid.get_quantity(row["_item_id"], store.id, size):
            conflict = grid.set_quantity(row["_item_id"], store.id, qty, size) or conflict

if conflict:
    show_error(conflict, language)

# -----------------------------------------------------------------------------
# 3) Per-store preview + submit
# -----------------------------------------------------------------------------
store_names = {s.id: s.name for s in grid.stores}
subtotals = store_subtotals(grid.to_cart_lines())
for store_id, lines in grid.grouped().items():
    st.caption(
        f"🏬 {store_names.get(store_id, store_id)}: {len(lines)} line(s), "
        f"{format_price(subtotals[store_id], language)}"
    )

col_cart, col_submit = st.columns(2)

with col_cart:
    if st.button(t("bulk.addToCart", language), disabled=grid.line_count == 0):
        try:
            failed = [added for added in grid.add_to_cart(cart) if not added.ok]
        except StorefrontError as e:
            show_error(e, language)
        else:
            for added in failed:
                show_error(added.error, language)
            if not failed:
                st.rerun()

with col_submit:
    label = f"{t('bulk.createOrders', language)} ({grid.line_count})"
    if st.button(label, type="primary", disabled=grid.line_count == 0):
        with st.spinner("..."):
            try:
                result = grid.submit(client)
            except StorefrontError as e:
                show_error(e, language)
            else:
                if result.orders:
                    st.success(f"{len(result.orders)} {t('orders.created', language)}")
                if result.status != CheckoutState.SUCCEEDED:
                    show_error(result.error, language)
                    for store_id, reason in result.failures.items():
                        st.caption(f"{store_names.get(store_id, store_id)}: {reason}")
                else:
                    st.page_link("pages/3_My_Orders.py", label=t("nav.orders", language), icon="📋")
