import logging
import shutil
from dataclasses import asdict, fields
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd
from openpyxl import load_workbook

from config.constants import (
    SHEET_LOAN_PRODUCTS, SHEET_SALARY_RECORDS, SHEET_CONFIG,
    LOAN_PRODUCTS_COLUMNS, SALARY_RECORDS_COLUMNS, CONFIG_COLUMNS,
)
from config.settings import EXCEL_FILE, BACKUP_KEEP, DEFAULT_PAGE_SIZE, DEFAULT_MAX_VISIBLE_PAGES
from core.exceptions import DataStoreError, ProductNotFoundError
from data_manager.schema import LoanProduct

logger = logging.getLogger(__name__)

_PRODUCT_FIELDS = {f.name for f in fields(LoanProduct)}


def _default_config_rows() -> List[dict]:
    now = datetime.now().isoformat()
    return [
        {"key": "page_size", "value": str(DEFAULT_PAGE_SIZE), "description": "Schedule rows per page", "updated_at": now},
        {"key": "max_visible_pages", "value": str(DEFAULT_MAX_VISIBLE_PAGES), "description": "Page buttons shown", "updated_at": now},
    ]


def init_excel(filepath: Path = EXCEL_FILE):
    """Create the workbook with every sheet and header if it does not exist"""
    if filepath.exists():
        return

    filepath.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Creating workbook %s", filepath)
    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        pd.DataFrame(columns=LOAN_PRODUCTS_COLUMNS).to_excel(
            writer, sheet_name=SHEET_LOAN_PRODUCTS, index=False)
        pd.DataFrame(columns=SALARY_RECORDS_COLUMNS).to_excel(
            writer, sheet_name=SHEET_SALARY_RECORDS, index=False)
        config_df = pd.DataFrame(_default_config_rows(), columns=CONFIG_COLUMNS)
        config_df.to_excel(writer, sheet_name=SHEET_CONFIG, index=False)


def backup_excel(filepath: Path = EXCEL_FILE):
    """Back up the workbook before a write"""
    if filepath.exists():
        ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_path = filepath.with_suffix(f".xlsx.bak_{ts}")
        shutil.copy2(filepath, backup_path)
        backups = sorted(filepath.parent.glob(f"{filepath.stem}.xlsx.bak_*"))
        for old in backups[:-BACKUP_KEEP]:
            old.unlink()


def read_sheet(sheet_name: str, filepath: Path = EXCEL_FILE) -> pd.DataFrame:
    """Read one sheet; an unknown sheet reads as an empty frame"""
    init_excel(filepath)
    try:
        df = pd.read_excel(filepath, sheet_name=sheet_name, engine="openpyxl")
    except ValueError:
        logger.warning("Sheet %s missing from %s", sheet_name, filepath)
        df = pd.DataFrame()
    return df


def write_sheet(df: pd.DataFrame, sheet_name: str, filepath: Path = EXCEL_FILE):
    """Replace one sheet and keep the others"""
    init_excel(filepath)
    backup_excel(filepath)

    try:
        wb = load_workbook(filepath)
        if sheet_name in wb.sheetnames:
            del wb[sheet_name]
        wb.save(filepath)

        with pd.ExcelWriter(filepath, engine="openpyxl", mode="a", if_sheet_exists="replace") as writer:
            df.to_excel(writer, sheet_name=sheet_name, index=False)
    except (OSError, ValueError) as e:
        raise DataStoreError(f"Failed to write sheet '{sheet_name}'", {"file": str(filepath), "error": str(e)}) from e
    logger.debug("Wrote %d rows to %s", len(df), sheet_name)


# ---- Loan products ----

def product_from_row(row) -> LoanProduct:
    """Build a LoanProduct from a sheet row; blank cells become None"""
    data = {}
    for key, value in dict(row).items():
        if key not in _PRODUCT_FIELDS:
            continue
        if pd.isna(value):
            value = None
        elif hasattr(value, "item"):
            # numpy scalar from pandas
            value = value.item()
        data[key] = value

    if data.get("product_id") is not None:
        data["product_id"] = int(data["product_id"])
    if data.get("max_term_days") is not None:
        data["max_term_days"] = int(data["max_term_days"])
    active = data.get("is_active")
    data["is_active"] = True if active is None else bool(active)
    return LoanProduct(**data)


def get_all_products(filepath: Path = EXCEL_FILE, active_only: bool = False) -> List[LoanProduct]:
    df = read_sheet(SHEET_LOAN_PRODUCTS, filepath)
    products = [product_from_row(row) for _, row in df.iterrows()]
    if active_only:
        products = [p for p in products if p.is_active]
    return products


def get_product_by_id(product_id: int, filepath: Path = EXCEL_FILE) -> LoanProduct:
    df = read_sheet(SHEET_LOAN_PRODUCTS, filepath)
    match = df[df["product_id"] == product_id]
    if match.empty:
        raise ProductNotFoundError(product_id)
    return product_from_row(match.iloc[0])


def save_product(product: LoanProduct, filepath: Path = EXCEL_FILE) -> int:
    """Insert (next integer id) or update a product; returns its id"""
    df = read_sheet(SHEET_LOAN_PRODUCTS, filepath)
    record = {k: v for k, v in asdict(product).items() if k in LOAN_PRODUCTS_COLUMNS}

    if product.product_id is not None and not df[df["product_id"] == product.product_id].empty:
        for col, value in record.items():
            df.loc[df["product_id"] == product.product_id, col] = value
        logger.info("Updated product %s", product.product_id)
    else:
        if product.product_id is None:
            record["product_id"] = int(df["product_id"].max()) + 1 if not df.empty else 1
        new_row = pd.DataFrame([record], columns=LOAN_PRODUCTS_COLUMNS)
        df = new_row if df.empty else pd.concat([df, new_row], ignore_index=True)
        logger.info("Added product %s (%s)", record["product_id"], product.product_name)

    write_sheet(df, SHEET_LOAN_PRODUCTS, filepath)
    return int(record["product_id"])


def delete_product(product_id: int, filepath: Path = EXCEL_FILE):
    df = read_sheet(SHEET_LOAN_PRODUCTS, filepath)
    if df[df["product_id"] == product_id].empty:
        raise ProductNotFoundError(product_id)
    df = df[df["product_id"] != product_id]
    write_sheet(df, SHEET_LOAN_PRODUCTS, filepath)
    logger.info("Deleted product %s", product_id)


# ---- Salary records ----

def get_salary(acctno: str, filepath: Path = EXCEL_FILE) -> Optional[float]:
    """Member's basic salary, or None when missing or not numeric"""
    df = read_sheet(SHEET_SALARY_RECORDS, filepath)
    if df.empty:
        return None
    match = df[df["acctno"].astype(str) == str(acctno)]
    if match.empty:
        return None
    value = pd.to_numeric(match.iloc[0]["salary_amount"], errors="coerce")
    return None if pd.isna(value) else float(value)


def set_salary(acctno: str, salary_amount: float, filepath: Path = EXCEL_FILE):
    df = read_sheet(SHEET_SALARY_RECORDS, filepath)
    now = datetime.now().isoformat()
    if not df.empty and str(acctno) in df["acctno"].astype(str).values:
        mask = df["acctno"].astype(str) == str(acctno)
        df.loc[mask, "salary_amount"] = salary_amount
        df.loc[mask, "updated_at"] = now
    else:
        new_row = pd.DataFrame([{
            "acctno": str(acctno), "salary_amount": salary_amount, "updated_at": now,
        }], columns=SALARY_RECORDS_COLUMNS)
        df = new_row if df.empty else pd.concat([df, new_row], ignore_index=True)
    write_sheet(df, SHEET_SALARY_RECORDS, filepath)


# ---- System config ----

def get_config(key: str, filepath: Path = EXCEL_FILE) -> Optional[str]:
    df = read_sheet(SHEET_CONFIG, filepath)
    match = df[df["key"] == key]
    if match.empty:
        return None
    return str(match.iloc[0]["value"])


def get_all_config(filepath: Path = EXCEL_FILE) -> pd.DataFrame:
    """All system config rows"""
    return read_sheet(SHEET_CONFIG, filepath)


def set_config(key: str, value: str, description: str = "", filepath: Path = EXCEL_FILE):
    df = read_sheet(SHEET_CONFIG, filepath)
    now = datetime.now().isoformat()
    if key in df["key"].values:
        df.loc[df["key"] == key, "value"] = value
        df.loc[df["key"] == key, "updated_at"] = now
        if description:
            df.loc[df["key"] == key, "description"] = description
    else:
        new_row = pd.DataFrame([{
            "key": key, "value": value,
            "description": description, "updated_at": now,
        }])
        df = pd.concat([df, new_row], ignore_index=True)
    write_sheet(df, SHEET_CONFIG, filepath)
