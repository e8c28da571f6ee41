import streamlit as st

from domain.models import CartLine
from element_component import (
    cart_badge,
    init_session,
    language_selector,
    show_error,
    sign_in_sidebar,
)
from services.catalog_service import ALL_CATEGORIES, load_catalog
from services.store_service import load_user_stores
from utils.formatting import format_price
from utils.i18n import t

st.set_page_config(page_title="Franchise Storefront", page_icon="🛍️", layout="wide")

client, cart, _ = init_session()
language = language_selector()
user = sign_in_sidebar(client, language)
cart_badge(cart, language)

st.title(f"🛍️ {t('nav.store', language)}")

# -----------------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------------
if "catalog" not in st.session_state or st.session_state["catalog"].error:
    st.session_state["catalog"] = load_catalog(client)

catalog = st.session_state["catalog"]

if catalog.error:
    show_error(catalog.error, language)
    if st.button("↻"):
        st.rerun()
    st.stop()

# -----------------------------------------------------------------------------
# Destination store + category
# -----------------------------------------------------------------------------
stores = []
if user:
    ok, msg, stores = load_user_stores(client, user.id)
    if not ok:
        st.warning(msg)

store_options = [None] + [s.id for s in stores]
store_names = {s.id: s.name for s in stores}

col_store, col_cat = st.columns([1, 2])
with col_store:
    selected_store = st.selectbox(
        t("store.selectStore", language),
        options=store_options,
        format_func=lambda sid: store_names.get(sid, t("store.noStore", language)),
    )
with col_cat:
    category = st.radio(
        "Category",
        catalog.categories(),
        format_func=lambda c: t("store.allItems", language) if c == ALL_CATEGORIES else c,
        horizontal=True,
        label_visibility="collapsed",
    )

st.divider()

# -----------------------------------------------------------------------------
# Product cards
# -----------------------------------------------------------------------------
items = catalog.filter(category)
cols = st.columns(3)

for idx, item in enumerate(items):
    with cols[idx % 3]:
        with st.container(border=True):
            if item.image:
                st.image(item.image, width="stretch")

            st.markdown(f"**{item.name(language)}**")
            st.caption(item.category)

            if item.is_kit:
                st.markdown(f":blue-badge[{t('product.kit', language)}] {t('cart.billedToHO', language)}")
                if item.products:
                    st.caption(f"{t('product.includes', language)}: " + ", ".join(item.products))
            else:
                st.markdown(f"**{format_price(item.price, language)}**")

            if item.description(language):
                with st.expander("ℹ️"):
                    st.write(item.description(language))

            size = None
            if item.sizes:
                size = st.selectbox(
                    t("product.selectSize", language),
                    options=item.sizes,
                    index=None,
                    key=f"size_{item.id}",
                )

            qty = st.number_input(
                t("product.quantity", language),
                min_value=1,
                step=1,
                value=1,
                key=f"qty_{item.id}",
            )

            if st.button(t("product.addToCart", language), key=f"add_{item.id}"):
                result = cart.add_item(
                    CartLine(item=item, quantity=int(qty), size=size, store_id=selected_store)
                )
                if result.ok:
                    st.toast(f"{item.name(language)} {t('product.added', language)}")
                else:
                    show_error(result.error, language)
