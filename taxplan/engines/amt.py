"""Alternative Minimum Tax calculator (Form 6251).

Runs in parallel with the regular computation. The engine never picks the
larger of the two paths; it reports ``additional_tax = max(0, AMT - regular)``
and the orchestrator adds it to regular tax.
"""

import logging
from decimal import Decimal

from taxplan.engines.brackets import (
    AMT_28_PERCENT_THRESHOLD,
    AMT_EXEMPTION,
    AMT_EXEMPTION_PHASEOUT_RATE,
    AMT_HIGH_RATE,
    AMT_LOW_RATE,
    AMT_PHASEOUT_START,
    resolve_year,
)
from taxplan.engines.capital_gains import CapitalGainsCalculator
from taxplan.engines.progressive import ltcg_brackets
from taxplan.models.deductions import DeductionResult
from taxplan.models.enums import FilingStatus, IncomeType
from taxplan.models.income import IncomeSource, sum_annual
from taxplan.models.results import AMTAdjustments, AMTResult

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class AMTCalculator:
    """Computes tentative minimum tax and the AMT owed on top of regular tax."""

    def calculate(
        self,
        income_sources: list[IncomeSource],
        deductions: DeductionResult,
        regular_tax: Decimal,
        filing_status: FilingStatus,
        taxable_income: Decimal,
        preferential_income: Decimal = ZERO,
        tax_year: int = 2025,
    ) -> AMTResult:
        """Compute AMT per Form 6251.

        Args:
            income_sources: Household sources (private activity bond interest
                is an AMT preference item).
            deductions: Deduction breakdown actually used for regular tax.
            regular_tax: Regular federal tax (ordinary + capital gains rates).
            filing_status: Filing status.
            taxable_income: Regular taxable income (Form 1040, Line 15).
            preferential_income: LTCG + qualified dividends inside taxable income.
            tax_year: Tax year.
        """
        adjustments = self.compute_adjustments(income_sources, deductions)
        amti = max(taxable_income + adjustments.total, ZERO)

        exemption = self.compute_exemption(amti, filing_status, tax_year)
        amt_base = max(amti - exemption, ZERO)

        # Preferential income still gets LTCG rates under AMT
        preferential = min(max(preferential_income, ZERO), amt_base)
        amt_ordinary_base = amt_base - preferential
        tentative = self.apply_amt_rates(amt_ordinary_base, filing_status, tax_year)
        tentative += CapitalGainsCalculator.stacked_tax(
            preferential, amt_ordinary_base, ltcg_brackets(tax_year, filing_status)
        )

        additional = max(tentative - regular_tax, ZERO)
        if additional > ZERO:
            logger.info("AMT applies: tentative %s exceeds regular %s", tentative, regular_tax)

        return AMTResult(
            amt_income=amti,
            exemption=exemption,
            amt_taxable_income=amt_base,
            amt_tax=tentative,
            regular_tax=regular_tax,
            additional_tax=additional,
            adjustments=adjustments,
            applies=additional > ZERO,
            effective_amt_rate=tentative / amti if amti > ZERO else ZERO,
        )

    @staticmethod
    def compute_adjustments(
        income_sources: list[IncomeSource], deductions: DeductionResult
    ) -> AMTAdjustments:
        """Items disallowed for AMT (Form 6251 lines 2a-2g).

        The standard deduction when not itemizing; SALT and other itemized
        deductions when itemizing; private activity bond interest always.
        """
        if deductions.used_itemized:
            standard, salt, other = ZERO, deductions.salt_deduction, deductions.other
        else:
            standard, salt, other = deductions.standard_deduction, ZERO, ZERO
        bond_interest = sum_annual(
            income_sources, frozenset({IncomeType.PRIVATE_ACTIVITY_BOND_INTEREST})
        )
        return AMTAdjustments(
            standard_deduction_addback=standard,
            salt_addback=salt,
            other_itemized_addback=other,
            private_activity_bond_interest=bond_interest,
            total=standard + salt + other + bond_interest,
        )

    @staticmethod
    def compute_exemption(amti: Decimal, filing_status: FilingStatus, tax_year: int) -> Decimal:
        """Exemption reduced $0.25 per $1 of AMTI over the phase-out start, floored at 0."""
        year = resolve_year(AMT_EXEMPTION, tax_year)
        exemption_amount = AMT_EXEMPTION[year][filing_status]
        phaseout_start = AMT_PHASEOUT_START[year][filing_status]
        reduction = max(amti - phaseout_start, ZERO) * AMT_EXEMPTION_PHASEOUT_RATE
        return max(exemption_amount - reduction, ZERO)

    @staticmethod
    def apply_amt_rates(base: Decimal, filing_status: FilingStatus, tax_year: int) -> Decimal:
        """26% up to the breakpoint, 28% above (MFS uses half the breakpoint)."""
        breakpoint = AMT_28_PERCENT_THRESHOLD[resolve_year(AMT_28_PERCENT_THRESHOLD, tax_year)]
        if filing_status == FilingStatus.MFS:
            breakpoint = breakpoint / 2
        if base <= breakpoint:
            return base * AMT_LOW_RATE
        return breakpoint * AMT_LOW_RATE + (base - breakpoint) * AMT_HIGH_RATE
