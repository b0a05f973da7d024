"""Calculator input form"""
from typing import List, Optional

import streamlit as st

from core.calculator import resolve_loan_defaults
from data_manager.schema import LoanProduct, LoanRequest


def render_product_picker(products: List[LoanProduct], key_prefix: str = "calc") -> Optional[LoanProduct]:
    if not products:
        return None
    names = [p.product_name for p in products]
    selected = st.selectbox("Loan product", names, key=f"{key_prefix}_product")
    return products[names.index(selected)]


def render_loan_inputs(
    product: LoanProduct,
    loan_defaults: Optional[dict] = None,
    key_prefix: str = "calc",
) -> LoanRequest:
    """Term / amortization / existing balance inputs seeded from the product"""
    term_default, amortization_default, balance_default = resolve_loan_defaults(product, loan_defaults)
    # re-seed when a different product is picked
    suffix = f"{key_prefix}_{product.product_id}"

    max_term = product.max_term_months or None
    c1, c2, c3 = st.columns(3)
    with c1:
        term_months = st.number_input(
            "Term (months)", min_value=1, max_value=max_term,
            value=max(1, min(term_default, max_term) if max_term else term_default),
            step=1, key=f"{suffix}_term")
    with c2:
        amortization = st.number_input(
            "Amortization (₱)", min_value=0.0, value=float(amortization_default),
            step=1000.0, format="%.2f", key=f"{suffix}_amort")
    with c3:
        existing_balance = st.number_input(
            "Existing balance (₱)", min_value=0.0, value=float(balance_default),
            step=1000.0, format="%.2f", key=f"{suffix}_balance",
            help="Shown for reference; renewal amounts are already net of it.")

    return LoanRequest(int(term_months), float(amortization), float(existing_balance))
