"""Command line tests"""
import pytest
from click.testing import CliRunner

import cli as cli_module
from cli import cli
from data_manager import excel_handler
from data_manager.schema import LoanProduct


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def store(temp_excel, monkeypatch):
    """Point the CLI's store functions at a temp workbook"""
    for name in ("get_all_products", "get_product_by_id", "save_product", "delete_product",
                 "get_salary", "set_salary", "get_config", "set_config", "get_all_config"):
        func = getattr(excel_handler, name)
        monkeypatch.setattr(cli_module, name,
                            lambda *a, _f=func, **kw: _f(*a, filepath=temp_excel, **kw))
    return temp_excel


class TestCalculationCommands:

    def test_monthly_payment(self, runner):
        result = runner.invoke(cli, ["monthly-payment", "--amortization", "100000",
                                     "--interest-rate", "12", "--term-months", "12"])
        assert result.exit_code == 0
        assert "Monthly payment: 8884.88" in result.output

    def test_monthly_payment_rejects_zero_term(self, runner):
        result = runner.invoke(cli, ["monthly-payment", "--amortization", "100000",
                                     "--term-months", "0"])
        assert result.exit_code != 0
        assert "at least 1" in result.output

    def test_ad_hoc_quote(self, runner):
        result = runner.invoke(cli, [
            "quote", "--amortization", "50000", "--term-months", "12",
            "--service-fee", "2", "--lrf", "1", "--document-stamp", "3",
            "--mort-plus-notarial", "500",
        ])
        assert result.exit_code == 0
        assert "Total deductions: ₱3,500.00" in result.output
        assert "Estimated net proceeds: ₱46,500.00" in result.output
        assert "Monthly payment: ₱4,166.67" in result.output

    def test_schedule_csv(self, runner):
        result = runner.invoke(cli, ["schedule", "--amortization", "12000", "--term-months", "12",
                                     "--start-date", "2024-01-01"])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[0].startswith("period,due_date,monthly_payment")
        assert len(lines) == 13

    def test_schedule_bad_date(self, runner):
        result = runner.invoke(cli, ["schedule", "--amortization", "12000", "--term-months", "12",
                                     "--start-date", "01/01/2024"])
        assert result.exit_code != 0

    def test_eval_formula(self, runner):
        result = runner.invoke(cli, ["eval-formula", "--formula", "basic * 3", "--basic-salary", "20000"])
        assert result.exit_code == 0
        assert result.output.strip() == "60000.00"

    def test_eval_formula_error(self, runner):
        result = runner.invoke(cli, ["eval-formula", "--formula", "basic / 0", "--basic-salary", "1"])
        assert result.exit_code == 1
        assert "Division by zero" in result.output

    def test_pages(self, runner):
        result = runner.invoke(cli, ["pages", "--current", "13", "--total", "26"])
        assert result.output.strip() == "11 12 13 14 15"


class TestCatalogCommands:

    def test_add_list_and_quote(self, runner, store):
        result = runner.invoke(cli, [
            "add-product", "--product-name", "Salary Loan", "--interest-rate", "12",
            "--max-term-days", "720", "--max-amortization", "100000",
            "--service-fee", "2", "--lrf", "1", "--document-stamp", "150",
        ])
        assert result.exit_code == 0, result.output
        assert "Product with ID '1' added" in result.output

        listing = runner.invoke(cli, ["list-products"])
        assert "Salary Loan" in listing.output
        assert "24 months" in listing.output

        quote = runner.invoke(cli, ["quote", "--product-id", "1", "--amortization", "10000",
                                    "--term-months", "12"])
        assert quote.exit_code == 0
        assert "Document stamp: ₱150.00" in quote.output

    def test_quote_warns_over_limits(self, runner, store):
        runner.invoke(cli, ["add-product", "--product-name", "Short Loan", "--interest-rate", "10",
                            "--max-term-days", "180", "--max-amortization", "5000"])
        result = runner.invoke(cli, ["quote", "--product-id", "1", "--amortization", "8000",
                                     "--term-months", "12"])
        assert result.exit_code == 0
        assert "Term exceeds maximum allowed (6 months)" in result.output
        assert "Amortization exceeds maximum allowed" in result.output

    def test_add_product_invalid_formula(self, runner, store):
        result = runner.invoke(cli, ["add-product", "--product-name", "Bad", "--interest-rate", "10",
                                     "--max-term-days", "360", "--mode", "CUSTOM", "--formula", "basic ** 2"])
        assert result.exit_code != 0

    def test_max_amortization_unknown_mode(self, runner, store):
        excel_handler.save_product(LoanProduct(product_id=None, product_name="Legacy", interest_rate=8,
                                               max_term_days=360, max_amortization_mode="SALARY"),
                                   filepath=store)
        result = runner.invoke(cli, ["max-amortization", "--product-id", "1", "--basic-salary", "20000"])
        assert result.exit_code == 0, result.output
        assert "Mode: SALARY" in result.output
        assert "Max amortization: ₱0.00" in result.output

    def test_salary_based_cap(self, runner, store):
        runner.invoke(cli, ["add-product", "--product-name", "Multiplier", "--interest-rate", "10",
                            "--max-term-days", "360", "--mode", "CUSTOM", "--formula", "basic * 3"])
        runner.invoke(cli, ["set-salary", "--acctno", "A-1", "--salary", "20000"])
        result = runner.invoke(cli, ["max-amortization", "--product-id", "1", "--acctno", "A-1"])
        assert result.exit_code == 0
        assert "Max amortization: ₱60,000.00" in result.output

    def test_missing_product(self, runner, store):
        result = runner.invoke(cli, ["get-product", "--product-id", "9"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_delete_product(self, runner, store):
        runner.invoke(cli, ["add-product", "--product-name", "Tmp", "--interest-rate", "5",
                            "--max-term-days", "30", "--max-amortization", "1000"])
        result = runner.invoke(cli, ["delete-product", "--product-id", "1"])
        assert result.exit_code == 0
        assert runner.invoke(cli, ["list-products"]).output.strip() == "No products."

    def test_config(self, runner, store):
        runner.invoke(cli, ["set-config", "--key", "page_size", "--value", "24"])
        assert runner.invoke(cli, ["get-config", "--key", "page_size"]).output.strip() == "24"


class TestClassifyCommand:

    def test_classify(self, runner, tmp_path):
        loans_file = tmp_path / "loans.csv"
        loans_file.write_text("loan_status,date_end\nACTIVE,\nMATURED,2025-12-01\n")
        result = runner.invoke(cli, ["classify", "--loans-file", str(loans_file), "--as-of", "2026-01-01"])
        assert result.exit_code == 0
        assert result.output.strip() == "Class B: Past maturity (< 60 days)"

    def test_classify_rejects_bad_date(self, runner, tmp_path):
        loans_file = tmp_path / "loans.csv"
        loans_file.write_text("loan_status,date_end\nMATURED,2025-12-01\n")
        result = runner.invoke(cli, ["classify", "--loans-file", str(loans_file), "--as-of", "01/02/2026"])
        assert result.exit_code == 2
        assert "Invalid date '01/02/2026'" in result.output
