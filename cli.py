import logging
from datetime import datetime

import click
import pandas as pd

from config.constants import AmortizationMode, LoanClass
from config.settings import DEFAULT_MAX_VISIBLE_PAGES
from core.calculator import (
    calc_monthly_payment,
    calc_loan_quote,
    calc_total_interest,
    calc_effective_rate,
    generate_schedule,
)
from core.classification import classify_loans
from core.exceptions import CoopLoanError, FormulaError
from core.formula import evaluate_formula
from core.max_amortization import calc_max_amortization, validate_amortization, validate_term_months
from data_manager.data_validator import validate_loan_request, validate_loan_product
from data_manager.excel_handler import (
    get_all_products,
    get_product_by_id,
    save_product,
    delete_product,
    get_salary,
    set_salary,
    get_all_config,
    get_config,
    set_config,
)
from data_manager.schema import LoanProduct, LoanRequest
from utils.formatters import fmt_amount, fmt_rate, fmt_months
from utils.pagination import build_pagination_window

logger = logging.getLogger(__name__)


def _check_request(term_months, amortization, existing_balance=0.0):
    ok, error = validate_loan_request(term_months, amortization, existing_balance)
    if not ok:
        raise click.BadParameter(error)


def _load_product(product_id):
    try:
        return get_product_by_id(product_id)
    except CoopLoanError as e:
        raise click.ClickException(str(e))


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """A CLI for the cooperative loan calculator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command('monthly-payment')
@click.option('--amortization', type=float, required=True, help='Loan amount')
@click.option('--interest-rate', type=float, default=0.0, help='Annual interest rate (%)')
@click.option('--term-months', type=int, required=True, help='Loan term in months')
def monthly_payment(amortization, interest_rate, term_months):
    """Calculates the fixed monthly payment and total interest."""
    _check_request(term_months, amortization)
    payment = calc_monthly_payment(amortization, term_months, interest_rate)
    click.echo(f"Monthly payment: {payment:.2f}")
    click.echo(f"Total interest: {calc_total_interest(amortization, term_months, interest_rate):.2f}")


@cli.command()
@click.option('--product-id', type=int, help='Catalog product to quote against')
@click.option('--amortization', type=float, required=True, help='Loan amount')
@click.option('--term-months', type=int, required=True, help='Loan term in months')
@click.option('--existing-balance', type=float, default=0.0, help='Balance of the loan being renewed')
@click.option('--interest-rate', type=float, help='Annual interest rate (%)')
@click.option('--service-fee', type=float, help='Service fee (% of amortization)')
@click.option('--lrf', type=float, help='LRF (% of amortization)')
@click.option('--document-stamp', type=float, help='Document stamp (flat if above 100, else %)')
@click.option('--mort-plus-notarial', type=float, help='Mortgage + notarial fee (flat)')
@click.option('--acctno', type=str, help='Member account, used for salary-based caps')
def quote(product_id, amortization, term_months, existing_balance, interest_rate,
          service_fee, lrf, document_stamp, mort_plus_notarial, acctno):
    """Calculates the fee breakdown, net proceeds and monthly payment."""
    _check_request(term_months, amortization, existing_balance)

    if product_id is not None:
        product = _load_product(product_id)
    else:
        product = LoanProduct(product_id=None, product_name="ad hoc")
    overrides = {
        'interest_rate': interest_rate, 'service_fee': service_fee, 'lrf': lrf,
        'document_stamp': document_stamp, 'mort_plus_notarial': mort_plus_notarial,
    }
    for field_name, value in overrides.items():
        if value is not None:
            setattr(product, field_name, value)

    if product_id is not None:
        basic_salary = get_salary(acctno) if acctno else None
        for warning in (validate_term_months(product, term_months),
                        validate_amortization(product, amortization, basic_salary)):
            if warning:
                click.echo(f"Warning: {warning}", err=True)

    q = calc_loan_quote(product, LoanRequest(term_months, amortization, existing_balance))
    click.echo(f"Product: {product.product_name}")
    click.echo(f"Term: {fmt_months(q.term_months)}")
    click.echo(f"Amortization: {fmt_amount(q.amortization)}")
    if q.existing_balance:
        click.echo(f"Existing balance: {fmt_amount(q.existing_balance)}")
    click.echo(f"Service fee: {fmt_amount(q.service_fee)}")
    click.echo(f"LRF: {fmt_amount(q.lrf)}")
    click.echo(f"Document stamp: {fmt_amount(q.document_stamp)}")
    click.echo(f"Mortgage + notarial: {fmt_amount(q.mort_plus_notarial)}")
    click.echo(f"Total deductions: {fmt_amount(q.total_deductions)}")
    click.echo(f"Estimated net proceeds: {fmt_amount(q.estimated_net_proceeds)}")
    click.echo(f"Monthly payment: {fmt_amount(q.monthly_payment)}")
    click.echo(f"Effective rate: {fmt_rate(calc_effective_rate(q))}")


@cli.command()
@click.option('--amortization', type=float, required=True, help='Loan amount')
@click.option('--interest-rate', type=float, default=0.0, help='Annual interest rate (%)')
@click.option('--term-months', type=int, required=True, help='Loan term in months')
@click.option('--start-date', type=str, required=True, help='Release date (YYYY-MM-DD)')
@click.option('--repayment-day', type=click.IntRange(1, 31), default=1, help='Day of month payments fall due')
def schedule(amortization, interest_rate, term_months, start_date, repayment_day):
    """Generates an amortization schedule and outputs it as CSV."""
    _check_request(term_months, amortization)
    try:
        start_date_obj = datetime.strptime(start_date, '%Y-%m-%d').date()
    except ValueError:
        raise click.BadParameter(f"Invalid date '{start_date}', expected YYYY-MM-DD")
    sch = generate_schedule(amortization, term_months, interest_rate, start_date_obj, repayment_day)
    click.echo(sch.to_csv(index=False))


@cli.command('max-amortization')
@click.option('--product-id', type=int, required=True, help='Product ID')
@click.option('--acctno', type=str, help='Member account with a salary record')
@click.option('--basic-salary', type=float, help='Basic salary (overrides the stored record)')
def max_amortization(product_id, acctno, basic_salary):
    """Shows the maximum amortization for a product."""
    product = _load_product(product_id)
    if basic_salary is None and acctno:
        basic_salary = get_salary(acctno)
    result = calc_max_amortization(product, basic_salary)
    mode = product.max_amortization_mode
    if mode in [e.value for e in AmortizationMode]:
        mode = AmortizationMode(mode).label
    click.echo(f"Mode: {mode}")
    click.echo(f"Max term: {product.max_term_months} months")
    click.echo(f"Max amortization: {fmt_amount(result)}")


@cli.command('eval-formula')
@click.option('--formula', type=str, required=True, help='Formula, e.g. "basic * 3"')
@click.option('--basic-salary', type=float, required=True, help='Basic salary')
def eval_formula_command(formula, basic_salary):
    """Evaluates a max amortization formula."""
    try:
        result = evaluate_formula(formula, basic_salary)
    except FormulaError as e:
        raise click.ClickException(e.message)
    click.echo(f"{result:.2f}")


@cli.command('list-products')
@click.option('--active-only', is_flag=True, help='Hide inactive products')
def list_products(active_only):
    """Lists all loan products."""
    products = get_all_products(active_only=active_only)
    if not products:
        click.echo("No products.")
        return
    for p in products:
        status = "" if p.is_active else " (inactive)"
        click.echo(f"{p.product_id}\t{p.product_name}\t{fmt_rate(p.interest_rate or 0)}\t"
                   f"{p.max_term_months} months{status}")


@cli.command('get-product')
@click.option('--product-id', type=int, required=True, help='Product ID')
def get_product(product_id):
    """Gets a loan product by its ID."""
    product = _load_product(product_id)
    for key, value in vars(product).items():
        if key != 'computed_result':
            click.echo(f"{key}: {value}")


@cli.command('add-product')
@click.option('--product-name', type=str, required=True, help='Product name')
@click.option('--interest-rate', type=float, required=True, help='Annual interest rate (%)')
@click.option('--max-term-days', type=int, required=True, help='Maximum term in days')
@click.option('--mode', 'max_amortization_mode', type=click.Choice([e.value for e in AmortizationMode]),
              default=AmortizationMode.FIXED.value, help='Max amortization mode')
@click.option('--formula', 'max_amortization_formula', type=str, help='Formula for BASIC/CUSTOM mode')
@click.option('--max-amortization', type=float, help='Max amortization for FIXED mode')
@click.option('--service-fee', type=float, default=0.0, help='Service fee (%)')
@click.option('--lrf', type=float, default=0.0, help='LRF (%)')
@click.option('--document-stamp', type=float, default=0.0, help='Document stamp (flat if above 100, else %)')
@click.option('--mort-plus-notarial', type=float, default=0.0, help='Mortgage + notarial fee')
@click.option('--inactive', is_flag=True, help='Add as inactive')
@click.option('--terms', type=str, help='Terms and conditions')
def add_product(product_name, interest_rate, max_term_days, max_amortization_mode, max_amortization_formula,
                max_amortization, service_fee, lrf, document_stamp, mort_plus_notarial, inactive, terms):
    """Adds a new loan product."""
    if max_amortization_mode == AmortizationMode.BASIC.value and not max_amortization_formula:
        max_amortization_formula = "basic"
    ok, error = validate_loan_product(
        product_name, interest_rate, service_fee, lrf, document_stamp, mort_plus_notarial,
        max_term_days, max_amortization_mode, max_amortization_formula, max_amortization,
    )
    if not ok:
        raise click.BadParameter(error)

    product = LoanProduct(
        product_id=None,
        product_name=product_name,
        is_active=not inactive,
        interest_rate=interest_rate,
        max_term_days=max_term_days,
        max_amortization_mode=max_amortization_mode,
        max_amortization_formula=max_amortization_formula,
        max_amortization=max_amortization,
        service_fee=service_fee,
        lrf=lrf,
        document_stamp=document_stamp,
        mort_plus_notarial=mort_plus_notarial,
        terms=terms,
    )
    product_id = save_product(product)
    click.echo(f"Product with ID '{product_id}' added successfully.")


@cli.command('delete-product')
@click.option('--product-id', type=int, required=True, help='Product ID')
def delete_product_command(product_id):
    """Deletes a loan product by its ID."""
    try:
        delete_product(product_id)
    except CoopLoanError as e:
        raise click.ClickException(str(e))
    click.echo(f"Product with ID '{product_id}' deleted successfully.")


@cli.command('set-salary')
@click.option('--acctno', type=str, required=True, help='Member account number')
@click.option('--salary', type=click.FloatRange(min=0), required=True, help='Basic salary')
def set_salary_command(acctno, salary):
    """Records a member's basic salary."""
    set_salary(acctno, salary)
    click.echo(f"Salary for '{acctno}' set successfully.")


@cli.command('list-configs')
def list_configs():
    """Lists all system configurations."""
    configs = get_all_config()
    click.echo(configs.to_string())


@cli.command('get-config')
@click.option('--key', type=str, required=True, help='Config key')
def get_config_command(key):
    """Gets a system configuration by its key."""
    value = get_config(key)
    if value is not None:
        click.echo(value)
    else:
        click.echo(f"Config with key '{key}' not found.")


@cli.command('set-config')
@click.option('--key', type=str, required=True, help='Config key')
@click.option('--value', type=str, required=True, help='Config value')
@click.option('--description', type=str, help='Description')
def set_config_command(key, value, description):
    """Sets a system configuration."""
    set_config(key, value, description or "")
    click.echo(f"Config with key '{key}' set successfully.")


@cli.command()
@click.option('--loans-file', type=click.Path(exists=True), required=True,
              help='CSV with loan_status and date_end columns')
@click.option('--as-of', type=str, help='Classification date (YYYY-MM-DD), default today')
def classify(loans_file, as_of):
    """Classifies a member's loans by days past maturity."""
    loans = pd.read_csv(loans_file).to_dict("records")
    today = None
    if as_of:
        try:
            today = datetime.strptime(as_of, '%Y-%m-%d').date()
        except ValueError:
            raise click.BadParameter(f"Invalid date '{as_of}', expected YYYY-MM-DD")
    loan_class = classify_loans(loans, today)
    if loan_class is None:
        click.echo("No loans.")
    else:
        click.echo(f"Class {loan_class}: {LoanClass(loan_class).label}")


@cli.command()
@click.option('--current', type=int, required=True, help='Current page')
@click.option('--total', type=int, required=True, help='Total pages')
@click.option('--max-visible', type=int, default=DEFAULT_MAX_VISIBLE_PAGES, help='Page buttons to show')
def pages(current, total, max_visible):
    """Prints the page numbers shown around the current page."""
    window = build_pagination_window(current, total, max_visible)
    click.echo(" ".join(str(p) for p in window))


if __name__ == "__main__":
    cli()
