"""Loan classification tests"""
from datetime import date

from core.classification import classify_loans

TODAY = date(2026, 1, 1)


def _matured(date_end):
    return {"loan_status": "MATURED", "date_end": date_end}


class TestClassifyLoans:

    def test_no_loans(self):
        assert classify_loans([], TODAY) is None
        assert classify_loans(None, TODAY) is None

    def test_current_loan(self):
        assert classify_loans([{"loan_status": "ACTIVE"}], TODAY) == "A"

    def test_days_past_maturity(self):
        assert classify_loans([_matured("2025-12-01")], TODAY) == "B"
        assert classify_loans([_matured("2025-10-15")], TODAY) == "C"
        assert classify_loans([_matured(date(2025, 6, 1))], TODAY) == "D"

    def test_thresholds(self):
        assert classify_loans([_matured(date(2025, 11, 3))], TODAY) == "B"  # 59 days
        assert classify_loans([_matured(date(2025, 11, 2))], TODAY) == "C"  # 60 days
        assert classify_loans([_matured(date(2025, 10, 3))], TODAY) == "D"  # 90 days

    def test_worst_loan_wins(self):
        loans = [{"loan_status": "ACTIVE"}, _matured("2025-12-01")]
        assert classify_loans(loans, TODAY) == "B"

    def test_not_yet_past_maturity_is_ignored(self):
        loans = [{"loan_status": "ACTIVE"}, _matured("2026-03-01")]
        assert classify_loans(loans, TODAY) == "A"

    def test_only_ignored_loans(self):
        assert classify_loans([_matured("2026-03-01")], TODAY) == "D"
        assert classify_loans([_matured(None)], TODAY) == "D"
