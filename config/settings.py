import os
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# Data file paths
DATA_DIR = PROJECT_ROOT / "data"
EXCEL_FILE = Path(os.environ.get("COOP_LOAN_DATA_FILE", DATA_DIR / "coop_loans.xlsx"))
BACKUP_KEEP = 5

# Pagination
DEFAULT_PAGE_SIZE = 12
DEFAULT_MAX_VISIBLE_PAGES = 5

# Page config
PAGE_TITLE = "Cooperative Loan Calculator"
PAGE_ICON = "🏦"
LAYOUT = "wide"

# Chart colours
COLORS = {
    "primary": "#1f77b4",
    "secondary": "#ff7f0e",
    "success": "#2ca02c",
    "danger": "#d62728",
    "principal": "#1f77b4",
    "interest": "#ff7f0e",
    "service_fee": "#9467bd",
    "lrf": "#8c564b",
    "document_stamp": "#e377c2",
    "mort_plus_notarial": "#7f7f7f",
    "net_proceeds": "#2ca02c",
}

# Precision
RATE_PRECISION = 4
