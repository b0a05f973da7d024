"""Exceptions raised by the loan calculator toolkit."""


class CoopLoanError(Exception):
    """Base exception for all calculator and store errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class FormulaError(CoopLoanError):
    """Raised when a max-amortization formula cannot be evaluated."""

    def __init__(self, message: str, formula: str = None):
        details = {"formula": formula} if formula is not None else {}
        super().__init__(message, details)


class DataStoreError(CoopLoanError):
    """Raised when the workbook cannot be read or written."""
    pass


class ProductNotFoundError(CoopLoanError):
    """Raised when a loan product cannot be found."""

    def __init__(self, product_id: int):
        super().__init__(f"Product '{product_id}' not found", {"product_id": product_id})
        self.product_id = product_id
