"""Federal deduction engine.

Standard deduction = base + $X per person 65+ (IRC 63(f)).
Itemized = capped SALT + mortgage interest + charitable + medical above
7.5% of AGI + other (Schedule A). The larger of the two is used. The
2025-2028 senior deduction is allowed on top of either.
"""

from decimal import Decimal

from taxplan.engines.brackets import (
    ADDITIONAL_STANDARD_DEDUCTION,
    ADDITIONAL_STANDARD_DEDUCTION_AGE,
    FEDERAL_SALT_CAP,
    MEDICAL_EXPENSE_AGI_FLOOR,
    SENIOR_DEDUCTION_AMOUNT,
    SENIOR_DEDUCTION_PHASEOUT_RATE,
    SENIOR_DEDUCTION_PHASEOUT_START,
    SENIOR_DEDUCTION_YEARS,
    resolve_year,
)
from taxplan.engines.progressive import base_standard_deduction
from taxplan.models.deductions import DeductionResult, Deductions
from taxplan.models.enums import FilingStatus
from taxplan.models.settings import AppSettings

ZERO = Decimal("0")


def seniors_count(
    taxpayer_age: int | None, spouse_age: int | None, filing_status: FilingStatus
) -> int:
    """People on the return aged 65+; the spouse counts only on a joint return."""
    ages = [taxpayer_age]
    if filing_status == FilingStatus.MFJ:
        ages.append(spouse_age)
    return sum(1 for age in ages if age is not None and age >= ADDITIONAL_STANDARD_DEDUCTION_AGE)


def senior_phaseout_start(filing_status: FilingStatus) -> Decimal | None:
    """MAGI where the senior deduction starts shrinking; None when ineligible."""
    return SENIOR_DEDUCTION_PHASEOUT_START.get(filing_status)


class DeductionCalculator:
    def __init__(self) -> None:
        self.warnings: list[str] = []

    def calculate(
        self,
        deductions: Deductions,
        federal_agi: Decimal,
        modified_agi: Decimal,
        filing_status: FilingStatus,
        taxpayer_age: int | None,
        spouse_age: int | None,
        settings: AppSettings,
    ) -> DeductionResult:
        seniors = seniors_count(taxpayer_age, spouse_age, filing_status)

        base = base_standard_deduction(settings.tax_year, filing_status, settings.tcja_sunsetting)
        additional = self.additional_age_deduction(seniors, filing_status, settings.tax_year)
        standard = base + additional

        itemized = deductions.itemized
        salt_cap = FEDERAL_SALT_CAP[filing_status]
        salt = min(itemized.state_and_local_taxes, salt_cap)
        salt_cap_lost = itemized.state_and_local_taxes - salt
        medical = max(itemized.medical_expenses - federal_agi * MEDICAL_EXPENSE_AGI_FLOOR, ZERO)
        total_itemized = (
            salt + itemized.mortgage_interest + itemized.charitable + medical + itemized.other
        )

        used_itemized = total_itemized > standard
        if used_itemized and salt_cap_lost > ZERO:
            self.warnings.append(
                f"SALT cap: ${itemized.state_and_local_taxes:,.2f} in state/local taxes exceeds "
                f"the ${salt_cap:,.2f} federal limit. ${salt_cap_lost:,.2f} is not deductible."
            )

        senior = ZERO
        if settings.senior_deduction_enabled:
            senior = self.senior_deduction(seniors, modified_agi, filing_status, settings.tax_year)

        return DeductionResult(
            base_standard_deduction=base,
            additional_age_deduction=additional,
            standard_deduction=standard,
            salt_uncapped=itemized.state_and_local_taxes,
            salt_deduction=salt,
            salt_cap_lost=salt_cap_lost,
            medical_deduction=medical,
            mortgage_interest=itemized.mortgage_interest,
            charitable=itemized.charitable,
            other=itemized.other,
            total_itemized=total_itemized,
            senior_deduction=senior,
            deduction_used=max(standard, total_itemized) + senior,
            used_itemized=used_itemized,
        )

    @staticmethod
    def additional_age_deduction(seniors: int, filing_status: FilingStatus, tax_year: int) -> Decimal:
        if seniors == 0:
            return ZERO
        year = resolve_year(ADDITIONAL_STANDARD_DEDUCTION, tax_year)
        return ADDITIONAL_STANDARD_DEDUCTION[year][filing_status] * seniors

    @staticmethod
    def senior_deduction(
        seniors: int, modified_agi: Decimal, filing_status: FilingStatus, tax_year: int
    ) -> Decimal:
        """$6,000 per senior, each reduced by 6% of MAGI over the phase-out start."""
        start = senior_phaseout_start(filing_status)
        if seniors == 0 or start is None or tax_year not in SENIOR_DEDUCTION_YEARS:
            return ZERO
        reduction = max(modified_agi - start, ZERO) * SENIOR_DEDUCTION_PHASEOUT_RATE
        return max(SENIOR_DEDUCTION_AMOUNT - reduction, ZERO) * seniors
