"""Loan calculator"""
from datetime import date

import streamlit as st

from components.charts import create_deductions_pie, create_remaining_balance_line
from components.forms import render_product_picker, render_loan_inputs
from components.metrics import render_quote_metrics
from components.tables import render_schedule_table
from config.settings import DEFAULT_PAGE_SIZE, DEFAULT_MAX_VISIBLE_PAGES
from core.calculator import calc_loan_quote, calc_effective_rate, generate_schedule
from core.max_amortization import validate_amortization, validate_term_months, with_computed_result
from data_manager.excel_handler import get_all_products, get_salary, get_config


def _int_config(key: str, default: int) -> int:
    value = get_config(key)
    try:
        return int(float(value)) if value is not None else default
    except ValueError:
        return default


st.set_page_config(page_title="Loan calculator", page_icon="🧮", layout="wide")
st.title("🧮 Loan calculator")

products = get_all_products(active_only=True)
if not products:
    st.info("No active loan products yet. Add one with `python cli.py add-product`.")
    st.stop()

with st.sidebar:
    acctno = st.text_input("Member account no.", help="Used for salary-based amortization caps")

product = render_product_picker(products)
basic_salary = get_salary(acctno) if acctno else None
product = with_computed_result(product, basic_salary)

if product.terms:
    with st.expander("Terms"):
        st.markdown(product.terms)

request = render_loan_inputs(product)

for message in (validate_term_months(product, request.term_months),
                validate_amortization(product, request.amortization, basic_salary)):
    if message:
        st.warning(message)

quote = calc_loan_quote(product, request)
render_quote_metrics(quote, calc_effective_rate(quote), product.interest_rate or 0)

schedule = generate_schedule(request.amortization, request.term_months, product.interest_rate, date.today())

c1, c2 = st.columns(2)
with c1:
    st.plotly_chart(create_deductions_pie(quote), width='stretch')
with c2:
    if not schedule.empty:
        st.plotly_chart(create_remaining_balance_line(schedule), width='stretch')

st.subheader("Amortization schedule")
render_schedule_table(
    schedule,
    page_size=_int_config("page_size", DEFAULT_PAGE_SIZE),
    max_visible=_int_config("max_visible_pages", DEFAULT_MAX_VISIBLE_PAGES),
)
