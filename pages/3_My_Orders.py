import streamlit as st
import pandas as pd

from element_component import (
    cart_badge,
    init_session,
    language_selector,
    sign_in_sidebar,
)
from services.order_service import ORDER_STATUS_COLORS, get_order_detail, list_orders_for_user
from utils.formatting import format_datetime, format_price
from utils.i18n import t

st.set_page_config(page_title="My Orders", page_icon="📋")

client, cart, _ = init_session()
language = language_selector()
user = sign_in_sidebar(client, language)
cart_badge(cart, language)

st.title(f"📋 {t('orders.title', language)}")

if user is None:
    st.warning(t("error.unauthenticated", language))
    st.stop()

ok, msg, orders = list_orders_for_user(client, user.id)
if not ok:
    st.error(msg)
    st.stop()

if not orders:
    st.info(t("orders.none", language))
    st.stop()

# -----------------------------------------------------------------------------
# Order list
# -----------------------------------------------------------------------------
df_orders = pd.DataFrame(
    [
        {
            t("orders.number", language): o.order_number,
            t("orders.store", language): o.store_name or o.store_id,
            t("orders.date", language): format_datetime(o.created_at) if o.created_at else "-",
            t("orders.status", language): o.order_status.value,
            t("orders.payment", language): o.payment_status.value,
            t("cart.total", language): format_price(o.total, language),
        }
        for o in orders
    ]
)
st.dataframe(df_orders, hide_index=True, width="stretch")

st.divider()

# -----------------------------------------------------------------------------
# Order detail
# -----------------------------------------------------------------------------
by_number = {o.order_number: o for o in orders}
selected_number = st.selectbox(t("orders.number", language), options=list(by_number))
selected = by_number[selected_number]

ok, msg, order = get_order_detail(client, selected.id, user.id)
if not ok:
    st.error(msg)
    st.stop()

color = ORDER_STATUS_COLORS.get(order.order_status, "gray")
st.subheader(order.order_number)
st.markdown(f":{color}-badge[{order.order_status.value}] · {order.store_name or order.store_id}")
if order.created_at:
    st.caption(format_datetime(order.created_at))

df_items = pd.DataFrame(
    [
        {
            t("orders.items", language): it.name(language) or (it.kit_id if it.is_kit else it.product_id),
            "Size": it.size or "-",
            t("product.quantity", language): it.quantity,
            "Unit": t("cart.billedToHO", language) if it.is_kit else format_price(it.unit_price, language),
            t("cart.total", language): "-" if it.is_kit else format_price(it.extended_price, language),
        }
        for it in order.items
    ]
)
st.dataframe(df_items, hide_index=True, width="stretch")

col_a, col_b = st.columns(2)
with col_a:
    st.metric(t("cart.individualSubtotal", language), format_price(order.individual_subtotal, language))
    st.metric(t("cart.shipping", language), format_price(order.shipping_amount, language))
with col_b:
    st.metric(t("cart.tax", language), format_price(order.tax_amount, language))
    st.metric(t("cart.total", language), format_price(order.total, language))

if order.notes:
    st.info(order.notes)
