"""Excel data layer tests"""
import pandas as pd
import pytest

from core.exceptions import ProductNotFoundError
from data_manager.excel_handler import (
    read_sheet, save_product, get_all_products, get_product_by_id, delete_product,
    get_salary, set_salary, get_config, set_config, get_all_config,
)
from core.calculator import resolve_loan_defaults
from core.max_amortization import with_computed_result
from data_manager.schema import LoanProduct
from config.constants import SHEET_LOAN_PRODUCTS, LOAN_PRODUCTS_COLUMNS


class TestInitExcel:
    def test_creates_file(self, temp_excel):
        assert temp_excel.exists()

    def test_has_all_sheets(self, temp_excel):
        xls = pd.ExcelFile(temp_excel, engine="openpyxl")
        assert "loan_products" in xls.sheet_names
        assert "salary_records" in xls.sheet_names
        assert "config" in xls.sheet_names

    def test_product_headers(self, temp_excel):
        df = read_sheet(SHEET_LOAN_PRODUCTS, temp_excel)
        assert df.empty
        assert list(df.columns) == LOAN_PRODUCTS_COLUMNS

    def test_default_config(self, temp_excel):
        assert get_config("page_size", temp_excel) == "12"
        assert get_config("max_visible_pages", temp_excel) == "5"


class TestProductCRUD:
    def test_save_assigns_ids(self, temp_excel, salary_loan):
        salary_loan.product_id = None
        first = save_product(salary_loan, temp_excel)
        second = save_product(LoanProduct(product_id=None, product_name="Emergency Loan"), temp_excel)
        assert (first, second) == (1, 2)
        assert len(get_all_products(temp_excel)) == 2

    def test_round_trip_fields(self, temp_excel, salary_loan):
        save_product(salary_loan, temp_excel)
        product = get_product_by_id(1, temp_excel)
        assert product.product_name == "Salary Loan"
        assert product.interest_rate == 12.0
        assert product.max_term_months == 24
        assert product.max_amortization_formula is None
        assert product.is_active is True

    def test_update(self, temp_excel, salary_loan):
        save_product(salary_loan, temp_excel)
        salary_loan.interest_rate = 10.5
        save_product(salary_loan, temp_excel)
        products = get_all_products(temp_excel)
        assert len(products) == 1
        assert products[0].interest_rate == 10.5

    def test_active_only(self, temp_excel, salary_loan):
        save_product(salary_loan, temp_excel)
        save_product(LoanProduct(product_id=None, product_name="Old", is_active=False), temp_excel)
        assert [p.product_name for p in get_all_products(temp_excel, active_only=True)] == ["Salary Loan"]

    def test_missing_product(self, temp_excel):
        with pytest.raises(ProductNotFoundError) as exc:
            get_product_by_id(42, temp_excel)
        assert exc.value.details == {"product_id": 42}

    def test_delete(self, temp_excel, salary_loan):
        save_product(salary_loan, temp_excel)
        delete_product(1, temp_excel)
        assert get_all_products(temp_excel) == []
        with pytest.raises(ProductNotFoundError):
            delete_product(1, temp_excel)

    def test_stored_cap_seeds_default_amount(self, temp_excel):
        product = LoanProduct(product_id=None, product_name="Bonus Loan", interest_rate=10,
                              max_term_days=360, max_amortization_mode="BASIC",
                              max_amortization_formula="basic", max_amortization=50000)
        product_id = save_product(product, temp_excel)
        stored = get_product_by_id(product_id, temp_excel)
        assert isinstance(stored.max_amortization, (int, float))
        # no salary record: computed result is 0, the stored cap is used
        stored = with_computed_result(stored, None)
        assert resolve_loan_defaults(stored) == (12, 50000.0, 0.0)


class TestSalary:
    def test_set_and_get(self, temp_excel):
        set_salary("0001-22", 25000, temp_excel)
        assert get_salary("0001-22", temp_excel) == 25000.0

    def test_update_existing(self, temp_excel):
        set_salary("0001-22", 25000, temp_excel)
        set_salary("0001-22", 30000, temp_excel)
        assert get_salary("0001-22", temp_excel) == 30000.0
        assert len(read_sheet("salary_records", temp_excel)) == 1

    def test_unknown_account(self, temp_excel):
        assert get_salary("nobody", temp_excel) is None


class TestConfig:
    def test_set_and_get(self, temp_excel):
        set_config("test_key", "test_value", "test", temp_excel)
        assert get_config("test_key", temp_excel) == "test_value"

    def test_update_existing(self, temp_excel):
        set_config("page_size", "24", "", temp_excel)
        assert int(get_config("page_size", temp_excel)) == 24

    def test_get_all_config(self, temp_excel):
        config_df = get_all_config(temp_excel)
        assert {"key", "value", "description", "updated_at"} <= set(config_df.columns)
        assert "page_size" in config_df["key"].tolist()
