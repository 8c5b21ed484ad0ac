"""Michigan income tax and homestead property tax credit.

Michigan taxes income at a flat rate starting from federal AGI. Social
Security is fully exempt, retirement income is subtracted by birth year,
and a personal exemption applies per person. The homestead credit refunds
property tax above a share of household income for eligible owners.
"""

import logging
from decimal import Decimal

from taxplan.engines.brackets import (
    MICHIGAN_HOMESTEAD_CREDIT_CAP,
    MICHIGAN_HOMESTEAD_INCOME_CEILING,
    MICHIGAN_HOMESTEAD_INCOME_RATE,
    MICHIGAN_HOMESTEAD_MIN_MONTHS,
    MICHIGAN_HOMESTEAD_TAXABLE_VALUE_RATE,
    MICHIGAN_PERSONAL_EXEMPTION,
    MICHIGAN_RETIREMENT_CAPPED_BIRTH_YEAR,
    MICHIGAN_RETIREMENT_FULL_BIRTH_YEAR,
    MICHIGAN_RETIREMENT_SUBTRACTION_CAP,
    MICHIGAN_STATE_CODE,
    MICHIGAN_TAX_RATE,
)
from taxplan.models.deductions import StateDeductions
from taxplan.models.enums import FilingStatus, HousingStatus
from taxplan.models.household import Housing
from taxplan.models.results import StateTaxResult

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class MichiganTaxCalculator:
    """Computes Michigan tax, the homestead credit and net state liability."""

    def calculate(
        self,
        federal_agi: Decimal,
        taxable_social_security: Decimal,
        retirement_income: Decimal,
        household_income: Decimal,
        filing_status: FilingStatus,
        housing: Housing | None = None,
        birth_years: tuple[int | None, ...] = (),
        exemptions: int = 1,
        state_deductions: StateDeductions | None = None,
    ) -> StateTaxResult:
        state_deductions = state_deductions or StateDeductions()

        retirement = self.retirement_subtraction(retirement_income, filing_status, birth_years)
        exemption_total = MICHIGAN_PERSONAL_EXEMPTION * exemptions
        taxable = max(
            federal_agi
            - taxable_social_security
            - retirement
            - exemption_total
            - state_deductions.other_deductions,
            ZERO,
        )
        tax = taxable * MICHIGAN_TAX_RATE

        eligible = self.homestead_eligible(housing, household_income)
        credit = self.homestead_credit(housing, household_income) if eligible else ZERO
        other_credits = state_deductions.other_credits
        net = max(tax - credit - other_credits, ZERO)

        return StateTaxResult(
            state=MICHIGAN_STATE_CODE,
            rate=MICHIGAN_TAX_RATE,
            taxable_income=taxable,
            retirement_subtraction=retirement,
            personal_exemption=exemption_total,
            tax=tax,
            homestead_eligible=eligible,
            homestead_credit=credit,
            other_credits=other_credits,
            net_tax=net,
        )

    @staticmethod
    def retirement_subtraction(
        retirement_income: Decimal,
        filing_status: FilingStatus,
        birth_years: tuple[int | None, ...],
    ) -> Decimal:
        """Subtraction is set by the older spouse's birth year."""
        known = [year for year in birth_years if year is not None]
        if not known or retirement_income <= ZERO:
            return ZERO
        oldest = min(known)
        if oldest <= MICHIGAN_RETIREMENT_FULL_BIRTH_YEAR:
            return retirement_income
        if oldest <= MICHIGAN_RETIREMENT_CAPPED_BIRTH_YEAR:
            return min(retirement_income, MICHIGAN_RETIREMENT_SUBTRACTION_CAP[filing_status])
        return ZERO

    @staticmethod
    def homestead_eligible(housing: Housing | None, household_income: Decimal) -> bool:
        return (
            housing is not None
            and housing.status == HousingStatus.OWN
            and housing.months_in_michigan >= MICHIGAN_HOMESTEAD_MIN_MONTHS
            and household_income <= MICHIGAN_HOMESTEAD_INCOME_CEILING
        )

    @staticmethod
    def homestead_credit(housing: Housing, household_income: Decimal) -> Decimal:
        """min(cap, creditable property tax - 3.2% of household income), floored at 0."""
        creditable = housing.property_taxes_paid
        if housing.taxable_value > ZERO:
            creditable = min(
                creditable, housing.taxable_value * MICHIGAN_HOMESTEAD_TAXABLE_VALUE_RATE
            )
        excess = creditable - MICHIGAN_HOMESTEAD_INCOME_RATE * max(household_income, ZERO)
        return min(MICHIGAN_HOMESTEAD_CREDIT_CAP, max(excess, ZERO))


def compute_state_tax(state: str, **kwargs) -> StateTaxResult:
    """Dispatch on residence state; only Michigan rules are modeled."""
    if state != MICHIGAN_STATE_CODE:
        logger.info("No state tax rules for %r; state tax set to 0", state)
        return StateTaxResult(state=state)
    return MichiganTaxCalculator().calculate(**kwargs)
