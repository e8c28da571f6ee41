import logging
import os
from typing import Optional

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

from data_integrator import get_current_user, sign_in, sign_out
from domain.errors import StorefrontError
from domain.models import CurrentUser
from services.cart_service import CartStore, open_user_cart
from services.checkout_service import CheckoutService
from supabase_client import get_supabase_client
from utils.formatting import format_price
from utils.i18n import LANGUAGES, default_language, t


def configure_logging() -> None:
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def init_session():
    """
    One Supabase client, cart and checkout service per browser session.
    Returns (client, cart, language)
    """
    configure_logging()

    if "client" not in st.session_state:
        st.session_state["client"] = get_supabase_client()

    if "language" not in st.session_state:
        st.session_state["language"] = default_language()

    user = get_current_user(st.session_state["client"])
    owner = user.id if user else None

    # a new cart whenever the signed-in user changes; a guest cart follows its user in
    if "cart" not in st.session_state or st.session_state.get("cart_owner") != owner:
        guest_cart = st.session_state.get("cart") if st.session_state.get("cart_owner") is None else None
        st.session_state["cart"] = open_user_cart(os.getenv("CART_STORAGE_DIR", ".cart"), owner, guest_cart)
        st.session_state["cart_owner"] = owner
        st.session_state["checkout"] = CheckoutService(
            st.session_state["client"], st.session_state["cart"]
        )

    return st.session_state["client"], st.session_state["cart"], st.session_state["language"]


def language_selector() -> str:
    lang = st.sidebar.radio(
        "Language / Langue",
        LANGUAGES,
        index=LANGUAGES.index(st.session_state.get("language", "en")),
        format_func=lambda code: "English" if code == "en" else "Français",
        horizontal=True,
    )
    st.session_state["language"] = lang
    return lang


def sign_in_sidebar(client, language: str) -> Optional[CurrentUser]:
    user = get_current_user(client)

    if user:
        st.sidebar.caption(f"{t('auth.signedInAs', language)} **{user.email}**")
        if st.sidebar.button(t("auth.signout", language)):
            ok, msg = sign_out(client)
            if not ok:
                st.sidebar.error(msg)
            st.rerun()
        return user

    with st.sidebar.form("sign_in_form", enter_to_submit=True):
        st.subheader(t("auth.login", language))
        email = st.text_input(t("auth.email", language))
        password = st.text_input(t("auth.password", language), type="password")
        if st.form_submit_button(t("auth.signin", language)):
            ok, msg = sign_in(client, email, password)
            if ok:
                st.rerun()
            st.error(msg)
    return None


def show_error(error: StorefrontError, language: str) -> None:
    st.error(t(error.message_key, language))
    if error.message and error.message != t(error.message_key, language):
        st.caption(error.message)


def cart_badge(cart: CartStore, language: str) -> None:
    st.sidebar.metric(t("nav.cart", language), cart.item_count)


@st.dialog("Confirmation")
def confirmation_dialog_checkout(language: str, default_store_id: Optional[str] = None):
    cart: CartStore = st.session_state["cart"]
    checkout: CheckoutService = st.session_state["checkout"]
    totals = cart.store_totals(default_store_id)

    rows = [
        (t("cart.individualSubtotal", language), format_price(totals.individual_subtotal, language)),
        (t("cart.shipping", language), format_price(totals.shipping_amount, language)),
        (t("cart.tax", language), format_price(totals.tax_amount, language)),
        (t("cart.cardCharge", language), format_price(totals.charge_total, language)),
    ]
    df = pd.DataFrame(rows, columns=["", "$"])
    st.write(t("cart.confirm", language))
    st.dataframe(df, hide_index=True)

    col_yes, col_no = st.columns(2)

    with col_yes:
        if st.button(t("cart.yes", language), type="primary", key="confirm_yes",
                     disabled=checkout.is_submitting):
            try:
                st.session_state["checkout_result"] = checkout.checkout(default_store_id)
            except StorefrontError as e:
                st.session_state["checkout_error"] = e
            st.rerun()
    with col_no:
        if st.button(t("cart.no", language), key="confirm_no"):
            st.rerun()
