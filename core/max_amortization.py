"""Maximum amortization a member may borrow under a product, and term/amount checks"""
import logging
import math
import re
from dataclasses import replace
from typing import Optional

from config.constants import AmortizationMode
from core.exceptions import FormulaError
from core.formula import evaluate_formula
from data_manager.schema import LoanProduct

logger = logging.getLogger(__name__)


def _fixed_amortization(product: LoanProduct) -> float:
    value = product.max_amortization
    if value is None or value == "":
        return 0.0
    if isinstance(value, str):
        value = re.sub(r"[,\s]", "", value)
    try:
        value = float(value)
    except ValueError:
        logger.warning("Product %s has unreadable max_amortization %r", product.product_id, product.max_amortization)
        return 0.0
    return value if math.isfinite(value) else 0.0


def _salary_amortization(product: LoanProduct, basic_salary: Optional[float]) -> float:
    formula = (product.max_amortization_formula or "").strip()
    if basic_salary is None or not formula:
        return 0.0

    if formula == "basic":
        return float(basic_salary)

    try:
        return evaluate_formula(formula, basic_salary)
    except FormulaError as e:
        logger.warning("Max amortization formula failed for product %s: %s", product.product_id, e)
        return 0.0


def calc_max_amortization(product: LoanProduct, basic_salary: Optional[float] = None) -> float:
    """Cap on the amortization for this product.

    FIXED uses the configured amount; BASIC and CUSTOM evaluate the product's
    formula over the member's basic salary. Anything unresolvable is 0.
    """
    mode = product.max_amortization_mode
    if mode == AmortizationMode.FIXED.value:
        return _fixed_amortization(product)
    if mode in (AmortizationMode.BASIC.value, AmortizationMode.CUSTOM.value):
        return _salary_amortization(product, basic_salary)
    logger.warning("Product %s has unknown amortization mode %r", product.product_id, mode)
    return 0.0


def validate_amortization(
    product: LoanProduct,
    amortization: float,
    basic_salary: Optional[float] = None,
) -> Optional[str]:
    """Error message when the amount is above the product's cap, else None"""
    computed = calc_max_amortization(product, basic_salary)
    if computed > 0 and amortization > computed:
        return f"Amortization exceeds maximum allowed (₱{computed:,.2f}) for this product"
    return None


def validate_term_months(product: LoanProduct, term_months: int) -> Optional[str]:
    """Error message when the term is longer than the product allows, else None"""
    max_term_months = product.max_term_months
    if term_months > max_term_months:
        return f"Term exceeds maximum allowed ({max_term_months} months) for this product"
    return None


def with_computed_result(product: LoanProduct, basic_salary: Optional[float] = None) -> LoanProduct:
    """Copy of the product carrying the member's computed max amortization, to centavos"""
    return replace(product, computed_result=round(calc_max_amortization(product, basic_salary), 2))
