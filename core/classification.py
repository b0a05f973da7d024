"""Member loan classification by days past maturity"""
from datetime import date
from typing import Iterable, Optional

import pandas as pd

from config.constants import LoanClass, LOAN_STATUS_MATURED, THRESHOLD_CLASS_B, THRESHOLD_CLASS_C
from utils.date_utils import days_between

_PRIORITY = {LoanClass.A: 1, LoanClass.B: 2, LoanClass.C: 3, LoanClass.D: 4}
_BY_PRIORITY = {v: k for k, v in _PRIORITY.items()}


def loan_priority(loan: dict, today: date) -> Optional[int]:
    """Priority of one loan row; None when it should not count"""
    if loan.get("loan_status") != LOAN_STATUS_MATURED:
        return _PRIORITY[LoanClass.A]

    date_end = loan.get("date_end")
    if date_end is None or pd.isna(date_end):
        return None

    overdue = days_between(pd.to_datetime(date_end).date(), today)
    if overdue <= 0:
        return None
    if overdue < THRESHOLD_CLASS_B:
        return _PRIORITY[LoanClass.B]
    if overdue < THRESHOLD_CLASS_C:
        return _PRIORITY[LoanClass.C]
    return _PRIORITY[LoanClass.D]


def classify_loans(loans: Iterable[dict], today: Optional[date] = None) -> Optional[str]:
    """Worst class across a member's loans: "A".."D", or None without loans"""
    loans = list(loans or [])
    if not loans:
        return None

    today = today or date.today()
    priorities = [p for p in (loan_priority(loan, today) for loan in loans) if p is not None]
    worst = max(priorities) if priorities else _PRIORITY[LoanClass.D]
    return _BY_PRIORITY[worst].value
