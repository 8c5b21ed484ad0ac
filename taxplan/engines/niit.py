"""Net Investment Income Tax (3.8%) per IRC Section 1411."""

from decimal import Decimal

from taxplan.engines.brackets import NIIT_RATE, NIIT_THRESHOLD
from taxplan.models.enums import CAPITAL_GAIN_TYPES, INVESTMENT_INCOME_TYPES, FilingStatus
from taxplan.models.income import IncomeSource, sum_annual
from taxplan.models.results import NIITResult

ZERO = Decimal("0")


def net_investment_income(income_sources: list[IncomeSource]) -> Decimal:
    """Interest, dividends, gains, rents, royalties and passive business income.

    A net capital loss does not offset other investment income.
    """
    other = sum_annual(income_sources, INVESTMENT_INCOME_TYPES - CAPITAL_GAIN_TYPES)
    gains = sum_annual(income_sources, CAPITAL_GAIN_TYPES)
    return other + max(gains, ZERO)


def compute_niit(
    filing_status: FilingStatus, modified_agi: Decimal, investment_income: Decimal
) -> NIITResult:
    """Tax = 3.8% x min(NII, MAGI over threshold)."""
    threshold = NIIT_THRESHOLD[filing_status]
    investment_income = max(investment_income, ZERO)
    excess = max(modified_agi - threshold, ZERO)
    taxable = min(investment_income, excess)
    return NIITResult(
        threshold=threshold,
        modified_agi=modified_agi,
        net_investment_income=investment_income,
        excess_income=excess,
        taxable_amount=taxable,
        tax=taxable * NIIT_RATE,
        applies=investment_income > ZERO and excess > ZERO,
        rate=NIIT_RATE,
        distance_to_threshold=max(threshold - modified_agi, ZERO),
    )
