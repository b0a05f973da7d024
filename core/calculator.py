"""Core calculation: monthly payment, fee deductions, net proceeds, schedule"""
import math
import numbers
from datetime import date
from typing import Optional, Tuple

import numpy as np
import pandas as pd
from scipy import optimize

from config.constants import AMORTIZATION_SCHEDULE_COLUMNS, DOCUMENT_STAMP_FLAT_THRESHOLD
from config.settings import RATE_PRECISION
from data_manager.schema import LoanProduct, LoanQuote, LoanRequest
from utils.date_utils import get_due_date


def _num(value) -> float:
    """Absent or blank configuration values count as 0."""
    if value is None:
        return 0.0
    value = float(value)
    return 0.0 if math.isnan(value) else value


def _is_finite_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (numbers.Real, np.number)):
        return False
    return math.isfinite(float(value))


def calc_monthly_payment(
    amortization: float,
    term_months: int,
    interest_rate: Optional[float],
) -> float:
    """Fixed monthly payment of an amortizing loan (unrounded)"""
    if term_months == 0 or amortization == 0:
        return 0.0

    rate = _num(interest_rate)
    if rate == 0:
        return amortization / term_months

    r = rate / 12 / 100
    try:
        factor = (1 + r) ** term_months
    except OverflowError:
        # payment tends to the pure interest charge as the factor grows
        return amortization * r
    if factor == 1:
        return amortization / term_months
    return amortization * r * factor / (factor - 1)


def calc_fee_breakdown(product: LoanProduct, amortization: float) -> dict:
    """Deductions and net proceeds for one amortization amount"""
    service_fee = _num(product.service_fee) / 100 * amortization
    lrf = _num(product.lrf) / 100 * amortization

    doc_stamp_value = _num(product.document_stamp)
    if doc_stamp_value > DOCUMENT_STAMP_FLAT_THRESHOLD:
        document_stamp = doc_stamp_value
    else:
        document_stamp = doc_stamp_value / 100 * amortization

    mort_plus_notarial = _num(product.mort_plus_notarial)

    total_deductions = service_fee + lrf + document_stamp + mort_plus_notarial
    return {
        "service_fee": service_fee,
        "lrf": lrf,
        "document_stamp": document_stamp,
        "mort_plus_notarial": mort_plus_notarial,
        "total_deductions": total_deductions,
        "estimated_net_proceeds": max(0.0, amortization - total_deductions),
    }


def calc_loan_quote(product: LoanProduct, request: LoanRequest) -> LoanQuote:
    """Full quote for a product and the member's entered term and amount.

    The existing balance is carried through for display only; a renewal's
    amortization already has it netted out.
    """
    fees = calc_fee_breakdown(product, request.amortization)
    monthly_payment = calc_monthly_payment(
        request.amortization, request.term_months, product.interest_rate,
    )
    return LoanQuote(
        term_months=request.term_months,
        amortization=request.amortization,
        existing_balance=request.existing_balance,
        monthly_payment=monthly_payment,
        **fees,
    )


def calc_total_interest(
    amortization: float,
    term_months: int,
    interest_rate: Optional[float],
) -> float:
    """Total interest paid over the term"""
    monthly = calc_monthly_payment(amortization, term_months, interest_rate)
    if monthly == 0:
        return 0.0
    return max(0.0, monthly * term_months - amortization)


def calc_effective_rate(quote: LoanQuote) -> float:
    """Annualised IRR of net proceeds against the monthly payments, in %"""
    if quote.term_months <= 0 or quote.monthly_payment <= 0 or quote.estimated_net_proceeds <= 0:
        return 0.0

    periods = np.arange(1, quote.term_months + 1)

    def npv(rate):
        return quote.estimated_net_proceeds - quote.monthly_payment * np.sum((1 + rate) ** -periods)

    try:
        monthly_irr = optimize.brentq(npv, -0.5, 1.0)
    except (ValueError, RuntimeError):
        return 0.0
    annual_irr = (1 + monthly_irr) ** 12 - 1
    return round(annual_irr * 100, RATE_PRECISION)


def generate_schedule(
    amortization: float,
    term_months: int,
    interest_rate: Optional[float],
    start_date: date,
    repayment_day: int = 1,
) -> pd.DataFrame:
    """Amortization schedule, one row per month"""
    if term_months <= 0 or amortization <= 0:
        return pd.DataFrame(columns=AMORTIZATION_SCHEDULE_COLUMNS)

    r = _num(interest_rate) / 12 / 100
    monthly_payment = calc_monthly_payment(amortization, term_months, interest_rate)
    records = []
    remaining = amortization
    cum_principal = 0.0
    cum_interest = 0.0

    for i in range(term_months):
        due = get_due_date(start_date, i + 1, repayment_day)
        interest = remaining * r
        prin = monthly_payment - interest
        payment = monthly_payment

        # last period takes the rounding remainder
        if i == term_months - 1:
            prin = remaining
            payment = prin + interest

        remaining -= prin
        if remaining < 0.005:
            remaining = 0.0

        cum_principal += prin
        cum_interest += interest

        records.append({
            "period": i + 1,
            "due_date": due.strftime("%Y-%m-%d"),
            "monthly_payment": round(payment, 2),
            "principal": round(prin, 2),
            "interest": round(interest, 2),
            "remaining_principal": round(remaining, 2),
            "cumulative_principal": round(cum_principal, 2),
            "cumulative_interest": round(cum_interest, 2),
        })

    return pd.DataFrame(records, columns=AMORTIZATION_SCHEDULE_COLUMNS)


def resolve_loan_defaults(
    product: Optional[LoanProduct],
    defaults: Optional[dict] = None,
) -> Tuple[int, float, float]:
    """Initial (term_months, amortization, existing_balance) for the calculator form.

    Term: caller default, else the product's term cap.
    Amortization: computed max for the member, else the product's fixed max,
    else caller default.
    Existing balance: caller default, else 0.
    """
    defaults = defaults or {}

    term = defaults.get("term_months")
    if _is_finite_number(term):
        term_months = int(term)
    elif product is not None:
        term_months = product.max_term_months
    else:
        term_months = 0

    amortization = 0.0
    computed = product.computed_result if product is not None else None
    max_amortization = product.max_amortization if product is not None else None
    if _is_finite_number(computed) and computed > 0:
        amortization = float(computed)
    elif _is_finite_number(max_amortization) and max_amortization > 0:
        amortization = float(max_amortization)
    elif _is_finite_number(defaults.get("amortization")):
        amortization = float(defaults["amortization"])

    balance = defaults.get("existing_balance")
    existing_balance = float(balance) if _is_finite_number(balance) else 0.0

    return term_months, amortization, existing_balance
