"""Quote metric cards"""
import streamlit as st

from data_manager.schema import LoanQuote
from utils.formatters import fmt_amount, fmt_months, fmt_rate


def render_quote_metrics(quote: LoanQuote, effective_rate: float, nominal_rate: float):
    """Headline figures, then the deductions"""
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.metric("Monthly payment", fmt_amount(quote.monthly_payment))
    with c2:
        st.metric("Net proceeds", fmt_amount(quote.estimated_net_proceeds))
    with c3:
        st.metric("Term", fmt_months(quote.term_months) if quote.term_months else "-")
    with c4:
        st.metric("Effective rate", fmt_rate(effective_rate),
                  delta=f"{effective_rate - nominal_rate:+.2f} pts vs nominal" if effective_rate else None,
                  delta_color="inverse")

    c5, c6, c7, c8, c9 = st.columns(5)
    with c5:
        st.metric("Service fee", fmt_amount(quote.service_fee))
    with c6:
        st.metric("LRF", fmt_amount(quote.lrf))
    with c7:
        st.metric("Document stamp", fmt_amount(quote.document_stamp))
    with c8:
        st.metric("Mortgage + notarial", fmt_amount(quote.mort_plus_notarial))
    with c9:
        st.metric("Total deductions", fmt_amount(quote.total_deductions))

    if quote.existing_balance:
        st.caption(f"Existing balance {fmt_amount(quote.existing_balance)} is already netted out of the amortization.")
