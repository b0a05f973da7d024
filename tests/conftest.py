import sys
import pytest
from pathlib import Path

# Make sure the project root is on sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from data_manager.schema import LoanProduct


@pytest.fixture
def temp_excel(tmp_path):
    """Fresh workbook in a temp dir"""
    from data_manager.excel_handler import init_excel
    filepath = tmp_path / "test_data.xlsx"
    init_excel(filepath)
    return filepath


@pytest.fixture
def salary_loan():
    return LoanProduct(
        product_id=1,
        product_name="Salary Loan",
        interest_rate=12.0,
        max_term_days=720,
        max_amortization_mode="FIXED",
        max_amortization=100000.0,
        service_fee=2.0,
        lrf=1.0,
        document_stamp=3.0,
        mort_plus_notarial=500.0,
    )
