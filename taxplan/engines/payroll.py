"""Payroll taxes on earned income: FICA and the Additional Medicare Tax.

Only wages, self-employment and business income count as earned income.
Amounts are annualized before use.
"""

from decimal import ROUND_HALF_UP, Decimal

from taxplan.engines.brackets import (
    ADDITIONAL_MEDICARE_TAX_RATE,
    ADDITIONAL_MEDICARE_TAX_THRESHOLD,
    REGULAR_MEDICARE_TAX_RATE,
    SOCIAL_SECURITY_TAX_RATE,
    SOCIAL_SECURITY_WAGE_BASE,
    resolve_year,
)
from taxplan.models.enums import EARNED_INCOME_TYPES, FilingStatus
from taxplan.models.income import IncomeSource, sum_annual
from taxplan.models.results import AdditionalMedicareResult, FICAResult

ZERO = Decimal("0")
CENT = Decimal("0.01")


def earned_income(income_sources: list[IncomeSource]) -> Decimal:
    return sum_annual(income_sources, EARNED_INCOME_TYPES)


def compute_additional_medicare(
    earned: Decimal, filing_status: FilingStatus
) -> AdditionalMedicareResult:
    """Compute Additional Medicare Tax (0.9%) per Form 8959.

    The threshold is the published value for the filing status; it is never
    scaled for joint or separate filers.
    """
    threshold = ADDITIONAL_MEDICARE_TAX_THRESHOLD[filing_status]
    earned = max(earned, ZERO)
    excess = max(earned - threshold, ZERO)
    tax = (excess * ADDITIONAL_MEDICARE_TAX_RATE).quantize(CENT, rounding=ROUND_HALF_UP)
    return AdditionalMedicareResult(
        threshold=threshold,
        earned_income=earned,
        excess_income=excess,
        tax=tax,
        applies=excess > ZERO,
        rate=ADDITIONAL_MEDICARE_TAX_RATE,
    )


def compute_fica(earned: Decimal, filing_status: FilingStatus, tax_year: int = 2025) -> FICAResult:
    """Employee share of Social Security and Medicare taxes."""
    wage_base = SOCIAL_SECURITY_WAGE_BASE[resolve_year(SOCIAL_SECURITY_WAGE_BASE, tax_year)]
    if earned <= ZERO:
        return FICAResult(wage_base=wage_base)

    ss_wages = min(earned, wage_base)
    social_security = (ss_wages * SOCIAL_SECURITY_TAX_RATE).quantize(CENT, rounding=ROUND_HALF_UP)
    medicare = (earned * REGULAR_MEDICARE_TAX_RATE).quantize(CENT, rounding=ROUND_HALF_UP)
    additional = compute_additional_medicare(earned, filing_status).tax

    return FICAResult(
        earned_income=earned,
        wage_base=wage_base,
        social_security_wages=ss_wages,
        social_security_tax=social_security,
        medicare_tax=medicare,
        additional_medicare_tax=additional,
        total_fica=social_security + medicare + additional,
    )
