"""Cooperative Loan Calculator - main entry"""
import streamlit as st

from config.settings import PAGE_TITLE, PAGE_ICON, LAYOUT, EXCEL_FILE
from data_manager.excel_handler import init_excel, get_all_products

st.set_page_config(
    page_title=PAGE_TITLE,
    page_icon=PAGE_ICON,
    layout=LAYOUT,
    initial_sidebar_state="expanded",
)

init_excel()

st.title(f"{PAGE_ICON} {PAGE_TITLE}")

st.markdown("""
Quote a cooperative loan before applying.

| Page | What it does |
|------|--------------|
| 🧮 **Loan calculator** | Pick a product, enter the term and amount, see deductions, net proceeds and the monthly payment |

### How the quote is computed

- **Monthly payment**: standard fixed-payment amortization; straight-line when the product has no interest
- **Service fee / LRF**: percent of the amortization
- **Document stamp**: flat when configured above 100, otherwise a percent of the amortization
- **Mortgage + notarial**: flat fee
- **Net proceeds**: amortization less all deductions, never below zero
""")

with st.sidebar:
    st.markdown("### About")
    st.markdown(f"{len(get_all_products(active_only=True))} active loan products")
    st.markdown(f"Data is stored in `{EXCEL_FILE.name}`")
