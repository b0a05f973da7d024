import math
from dataclasses import dataclass
from typing import Optional

from config.constants import AmortizationMode, DAYS_PER_MONTH


@dataclass
class LoanProduct:
    product_id: Optional[int]
    product_name: str
    is_active: bool = True
    interest_rate: Optional[float] = None  # annual %
    max_term_days: Optional[int] = None
    max_amortization_mode: str = AmortizationMode.FIXED.value
    max_amortization_formula: Optional[str] = None
    max_amortization: Optional[float] = None
    service_fee: Optional[float] = None  # % of amortization
    lrf: Optional[float] = None  # % of amortization
    document_stamp: Optional[float] = None  # flat if > 100, else %
    mort_plus_notarial: Optional[float] = None  # flat
    terms: Optional[str] = None
    computed_result: Optional[float] = None  # max amortization for the current member

    @property
    def max_term_months(self) -> int:
        if not self.max_term_days:
            return 0
        return int(math.floor(self.max_term_days / DAYS_PER_MONTH))


@dataclass
class LoanRequest:
    term_months: int
    amortization: float
    existing_balance: float = 0.0  # informational, already netted out of amortization


@dataclass
class LoanQuote:
    term_months: int
    amortization: float
    existing_balance: float
    service_fee: float
    lrf: float
    document_stamp: float
    mort_plus_notarial: float
    total_deductions: float
    estimated_net_proceeds: float
    monthly_payment: float
