import streamlit as st
import pandas as pd

from element_component import (
    cart_badge,
    confirmation_dialog_checkout,
    init_session,
    language_selector,
    show_error,
    sign_in_sidebar,
)
from services.checkout_service import CheckoutState
from services.grouping_service import NO_STORE, group_by_store, store_subtotals
from services.store_service import load_user_stores
from utils.formatting import format_price
from utils.i18n import t

st.set_page_config(page_title="Cart", page_icon="🛒")

client, cart, _ = init_session()
language = language_selector()
user = sign_in_sidebar(client, language)
cart_badge(cart, language)

st.title(f"🛒 {t('cart.title', language)}")

# -----------------------------------------------------------------------------
# Outcome of the last checkout (set by the confirmation dialog)
# -----------------------------------------------------------------------------
result = st.session_state.pop("checkout_result", None)
error = st.session_state.pop("checkout_error", None)

if error:
    show_error(error, language)

if result:
    if result.orders:
        st.success(f"{len(result.orders)} {t('orders.created', language)}")
        for order in result.orders:
            st.caption(f"{order.order_number}: {format_price(order.totals.charge_total, language)}")
    if result.status != CheckoutState.SUCCEEDED:
        show_error(result.error, language)
        for store_id, reason in result.failures.items():
            st.caption(f"{store_id}: {reason}")

if cart.is_empty:
    st.info(t("cart.empty", language))
    st.page_link("Storefront.py", label=t("nav.store", language), icon="🛍️")
    st.stop()

stores = []
if user:
    ok, msg, stores = load_user_stores(client, user.id)
    if not ok:
        st.warning(msg)
store_names = {s.id: s.name for s in stores}

# -----------------------------------------------------------------------------
# Lines by destination store
# -----------------------------------------------------------------------------
groups = group_by_store(cart.lines)
subtotals = store_subtotals(cart.lines)

for store_id, lines in groups.items():
    label = t("store.noStore", language) if store_id == NO_STORE else store_names.get(store_id, store_id)
    st.subheader(f"🏬 {label}")

    for line in lines:
        item = line.item
        key = f"{item.id}_{line.size}_{line.store_id}"
        col_img, col_info, col_qty, col_price = st.columns([1, 3, 2, 1.5])

        with col_img:
            if item.image:
                st.image(item.image, width=64)
        with col_info:
            st.markdown(f"**{item.name(language)}**")
            if line.size:
                st.caption(f"Size: {line.size}")
            if item.is_kit:
                st.caption(t("cart.billedToHO", language))
            else:
                st.caption(format_price(item.price, language))
        with col_qty:
            minus, count, plus, trash = st.columns(4)
            if minus.button("−", key=f"minus_{key}"):
                cart.update_quantity(item.id, line.quantity - 1, size=line.size, store_id=line.store_id)
                st.rerun()
            count.write(line.quantity)
            if plus.button("+", key=f"plus_{key}"):
                cart.update_quantity(item.id, line.quantity + 1, size=line.size, store_id=line.store_id)
                st.rerun()
            if trash.button("🗑️", key=f"remove_{key}"):
                cart.remove_item(item.id, size=line.size, store_id=line.store_id)
                st.rerun()
        with col_price:
            if not item.is_kit:
                st.markdown(f"**{format_price(line.extended_price, language)}**")

    st.caption(f"{t('cart.storeSubtotal', language)}: {format_price(subtotals[store_id], language)}")
    st.divider()

# -----------------------------------------------------------------------------
# Summary: store-less lines are billed with the store chosen here
# -----------------------------------------------------------------------------
default_store = None
if NO_STORE in groups and stores:
    default_store = st.selectbox(
        t("store.selectStore", language),
        options=[s.id for s in stores],
        format_func=lambda sid: store_names.get(sid, sid),
    )

totals = cart.store_totals(default_store)

summary = pd.DataFrame(
    [
        (t("cart.kitSubtotal", language), t("cart.billedToHO", language)),
        (t("cart.individualSubtotal", language), format_price(totals.individual_subtotal, language)),
        (t("cart.shipping", language), format_price(totals.shipping_amount, language)),
        (t("cart.tax", language), format_price(totals.tax_amount, language)),
        (t("cart.total", language), format_price(totals.charge_total, language)),
    ],
    columns=["", " "],
)
st.dataframe(summary, hide_index=True, width="stretch")
st.metric(t("cart.cardCharge", language), format_price(totals.charge_total, language))

col_checkout, col_clear = st.columns(2)

with col_checkout:
    if st.button(t("cart.checkout", language), type="primary", disabled=user is None):
        confirmation_dialog_checkout(language, default_store)
    if user is None:
        st.caption(t("error.unauthenticated", language))

with col_clear:
    if st.button(t("cart.clear", language)):
        cart.clear_cart()
        st.rerun()
