"""Max amortization and limit checks"""
import pytest

from core.max_amortization import (
    calc_max_amortization,
    validate_amortization,
    validate_term_months,
    with_computed_result,
)
from data_manager.schema import LoanProduct


def _product(**kwargs):
    return LoanProduct(product_id=7, product_name="test", **kwargs)


class TestFixedMode:

    def test_number(self):
        assert calc_max_amortization(_product(max_amortization=200000.0)) == 200000.0

    def test_formatted_string(self):
        assert calc_max_amortization(_product(max_amortization="150, 000")) == 150000.0

    def test_empty(self):
        assert calc_max_amortization(_product()) == 0.0
        assert calc_max_amortization(_product(max_amortization="")) == 0.0

    def test_unreadable(self):
        assert calc_max_amortization(_product(max_amortization="lots")) == 0.0


class TestSalaryModes:

    def test_basic(self):
        product = _product(max_amortization_mode="BASIC", max_amortization_formula="basic")
        assert calc_max_amortization(product, 25000) == 25000.0

    def test_custom_formula(self):
        product = _product(max_amortization_mode="CUSTOM", max_amortization_formula="basic * 3")
        assert calc_max_amortization(product, 20000) == pytest.approx(60000)

    def test_no_salary(self):
        product = _product(max_amortization_mode="CUSTOM", max_amortization_formula="basic * 3")
        assert calc_max_amortization(product, None) == 0.0

    def test_no_formula(self):
        assert calc_max_amortization(_product(max_amortization_mode="BASIC"), 25000) == 0.0

    def test_bad_formula(self):
        product = _product(max_amortization_mode="CUSTOM", max_amortization_formula="basic / 0")
        assert calc_max_amortization(product, 20000) == 0.0

    def test_unknown_mode(self):
        assert calc_max_amortization(_product(max_amortization_mode="OTHER", max_amortization=1000), 1) == 0.0


class TestLimits:

    def test_amortization_over_cap(self):
        message = validate_amortization(_product(max_amortization=100000), 120000)
        assert message == "Amortization exceeds maximum allowed (₱100,000.00) for this product"

    def test_amortization_within_cap(self):
        assert validate_amortization(_product(max_amortization=100000), 100000) is None

    def test_no_cap(self):
        assert validate_amortization(_product(), 10 ** 9) is None

    def test_term_months(self):
        product = _product(max_term_days=365)
        assert product.max_term_months == 12
        assert validate_term_months(product, 12) is None
        assert validate_term_months(product, 13) == "Term exceeds maximum allowed (12 months) for this product"

    def test_max_term_months(self):
        assert _product().max_term_months == 0
        assert _product(max_term_days=359).max_term_months == 11

    def test_with_computed_result(self):
        product = _product(max_amortization_mode="CUSTOM", max_amortization_formula="basic * 2")
        result = with_computed_result(product, 15000)
        assert result.computed_result == pytest.approx(30000)
        assert product.computed_result is None

    def test_computed_result_rounded_to_centavos(self):
        product = _product(max_amortization_mode="CUSTOM", max_amortization_formula="basic / 3")
        assert with_computed_result(product, 10000).computed_result == 3333.33
        assert with_computed_result(product, 20000).computed_result == 6666.67
