from enum import Enum


class AmortizationMode(str, Enum):
    FIXED = "FIXED"  # configured max_amortization
    BASIC = "BASIC"  # member's basic salary
    CUSTOM = "CUSTOM"  # formula over the basic salary

    @property
    def label(self) -> str:
        return {
            "FIXED": "Fixed amount",
            "BASIC": "Basic salary",
            "CUSTOM": "Salary formula",
        }[self.value]


class LoanClass(str, Enum):
    A = "A"  # current
    B = "B"  # matured, under 60 days past
    C = "C"  # matured, under 90 days past
    D = "D"  # matured, 90 days or more past

    @property
    def label(self) -> str:
        return {
            "A": "Current",
            "B": "Past maturity (< 60 days)",
            "C": "Past maturity (< 90 days)",
            "D": "Past maturity (90+ days)",
        }[self.value]


LOAN_STATUS_MATURED = "MATURED"

# Past-maturity thresholds (days)
THRESHOLD_CLASS_B = 60
THRESHOLD_CLASS_C = 90

# Configured document stamp above this is a flat amount, otherwise a percent
DOCUMENT_STAMP_FLAT_THRESHOLD = 100

# max_term_days -> months
DAYS_PER_MONTH = 30

# Formula placeholders for the basic salary
BASIC_PLACEHOLDERS = ("{basic}", "basic")

# Sheet names
SHEET_LOAN_PRODUCTS = "loan_products"
SHEET_SALARY_RECORDS = "salary_records"
SHEET_CONFIG = "config"

# Column definitions
LOAN_PRODUCTS_COLUMNS = [
    "product_id", "product_name", "is_active", "interest_rate",
    "max_term_days", "max_amortization_mode", "max_amortization_formula",
    "max_amortization", "service_fee", "lrf", "document_stamp",
    "mort_plus_notarial", "terms",
]

SALARY_RECORDS_COLUMNS = ["acctno", "salary_amount", "updated_at"]

AMORTIZATION_SCHEDULE_COLUMNS = [
    "period", "due_date", "monthly_payment",
    "principal", "interest", "remaining_principal",
    "cumulative_principal", "cumulative_interest",
]

CONFIG_COLUMNS = ["key", "value", "description", "updated_at"]
