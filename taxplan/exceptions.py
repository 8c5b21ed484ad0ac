"""Custom exceptions for the taxplan engine."""

from decimal import Decimal


class TaxComputationError(Exception):
    """Base exception for tax computation errors."""


class DataValidationError(TaxComputationError):
    """Raised when input data fails validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error on '{field}': {message}")


class LockedFieldError(DataValidationError):
    """Raised when a caller edits a field that a synthetic source locks."""

    def __init__(self, source_id: str, field: str):
        self.source_id = source_id
        super().__init__(field, f"'{field}' is locked on generated source {source_id}")


class BracketTableError(TaxComputationError):
    """Raised when no bracket schedule exists for a year/filing status."""

    def __init__(self, table: str, tax_year: int, filing_status: str):
        self.table = table
        self.tax_year = tax_year
        self.filing_status = filing_status
        super().__init__(f"No {table} brackets for {tax_year}/{filing_status}")


class RMDComputationError(TaxComputationError):
    """Raised when a required distribution cannot be computed."""

    def __init__(self, age: int, factor: Decimal):
        self.age = age
        self.factor = factor
        super().__init__(f"Invalid life expectancy factor {factor} for age {age}")


class MarginalAnalysisError(TaxComputationError):
    """Raised when the rate-change search cannot complete."""

    def __init__(self, message: str):
        super().__init__(f"Marginal analysis failed: {message}")
