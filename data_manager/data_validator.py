import math
from typing import Optional, Tuple

import numpy as np

from config.constants import AmortizationMode
from core.formula import validate_formula, substitute_basic


def _finite(value) -> bool:
    try:
        return bool(np.isfinite(float(value)))
    except (TypeError, ValueError):
        return False


def validate_loan_request(
    term_months: int,
    amortization: float,
    existing_balance: float = 0.0,
) -> Tuple[bool, str]:
    """Form-level checks before a quote is computed; returns (ok, error)"""
    for name, value in (("Term", term_months), ("Amortization", amortization),
                        ("Existing balance", existing_balance)):
        if not _finite(value):
            return False, f"{name} must be a number"

    if term_months < 1 or float(term_months) != math.floor(term_months):
        return False, "Term must be a whole number of months, at least 1"

    if amortization < 0:
        return False, "Amortization cannot be negative"

    if existing_balance < 0:
        return False, "Existing balance cannot be negative"

    return True, ""


def validate_loan_product(
    product_name: str,
    interest_rate: Optional[float],
    service_fee: Optional[float],
    lrf: Optional[float],
    document_stamp: Optional[float],
    mort_plus_notarial: Optional[float],
    max_term_days: Optional[int],
    max_amortization_mode: str,
    max_amortization_formula: Optional[str] = None,
    max_amortization: Optional[float] = None,
) -> Tuple[bool, str]:
    """Catalog entry checks; returns (ok, error)"""
    if not product_name or not product_name.strip():
        return False, "Product name is required"

    if interest_rate is None:
        return False, "Interest rate is required"

    amounts = (
        ("Interest rate", interest_rate),
        ("Service fee", service_fee),
        ("LRF", lrf),
        ("Document stamp", document_stamp),
        ("Mortgage + notarial fee", mort_plus_notarial),
        ("Max term", max_term_days),
        ("Max amortization", max_amortization),
    )
    for name, value in amounts:
        if value is None:
            continue
        if not _finite(value):
            return False, f"{name} must be a number"
        if value < 0:
            return False, f"{name} cannot be negative"

    if interest_rate > 100:
        return False, "Interest rate must be between 0 and 100%"

    if max_term_days is None or max_term_days < 1 or float(max_term_days) != math.floor(max_term_days):
        return False, "Max term must be a whole number of days, at least 1"

    if max_amortization_mode not in [e.value for e in AmortizationMode]:
        return False, f"Invalid max amortization mode: {max_amortization_mode}"

    if max_amortization_mode == AmortizationMode.FIXED.value and max_amortization is None:
        return False, "Max amortization is required for FIXED mode"

    if max_amortization_mode == AmortizationMode.CUSTOM.value:
        formula = (max_amortization_formula or "").strip()
        if not formula:
            return False, "A formula is required for CUSTOM mode"
        if formula != "basic":
            # any positive stand-in salary exposes syntax errors
            ok, error = validate_formula(substitute_basic(formula, 1))
            if not ok:
                return False, error

    return True, ""
