"""Schedule table with page controls"""
import pandas as pd
import streamlit as st

from utils.pagination import build_pagination_window, page_count

COLUMN_LABELS = {
    "period": "Period",
    "due_date": "Due date",
    "monthly_payment": "Payment (₱)",
    "principal": "Principal (₱)",
    "interest": "Interest (₱)",
    "remaining_principal": "Balance (₱)",
    "cumulative_principal": "Principal paid (₱)",
    "cumulative_interest": "Interest paid (₱)",
}

MONEY_COLUMNS = [label for key, label in COLUMN_LABELS.items() if key not in ("period", "due_date")]


def format_schedule(schedule: pd.DataFrame) -> pd.DataFrame:
    display_cols = [c for c in COLUMN_LABELS if c in schedule.columns]
    display_df = schedule[display_cols].rename(columns=COLUMN_LABELS)
    for col in MONEY_COLUMNS:
        if col in display_df.columns:
            display_df[col] = display_df[col].apply(lambda x: f"{x:,.2f}")
    return display_df


def render_schedule_table(schedule: pd.DataFrame, page_size: int, max_visible: int, key: str = "schedule"):
    """Render one page of the schedule and the page-number buttons"""
    if schedule.empty:
        st.info("No schedule: enter a term and an amortization amount.")
        return

    total_pages = page_count(len(schedule), page_size)
    page_key = f"{key}_page"
    current = min(st.session_state.get(page_key, 1), total_pages)

    start = (current - 1) * page_size
    st.dataframe(format_schedule(schedule.iloc[start:start + page_size]), width='stretch', hide_index=True)

    window = build_pagination_window(current, total_pages, max_visible)
    cols = st.columns(len(window) + 2)
    if cols[0].button("«", key=f"{key}_first", disabled=current == 1):
        st.session_state[page_key] = 1
        st.rerun()
    for col, page in zip(cols[1:-1], window):
        if col.button(str(page), key=f"{key}_p{page}", type="primary" if page == current else "secondary"):
            st.session_state[page_key] = page
            st.rerun()
    if cols[-1].button("»", key=f"{key}_last", disabled=current == total_pages):
        st.session_state[page_key] = total_pages
        st.rerun()
