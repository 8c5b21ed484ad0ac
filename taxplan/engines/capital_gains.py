"""Capital gains stacking calculator.

Ordinary income fills the bracket ladder first. Short-term gains are taxed as
ordinary income on top of it. Long-term gains and then qualified dividends
are stacked above that floor on the 0%/15%/20% LTCG schedule (IRS Qualified
Dividends and Capital Gain Tax Worksheet):

    tax = taxAt(floor + gains) - taxAt(floor)    # on the LTCG table
"""

from decimal import Decimal

from taxplan.engines.brackets import NIIT_RATE, NIIT_THRESHOLD, BracketSchedule
from taxplan.engines.progressive import (
    bracket_tax,
    federal_brackets,
    ltcg_brackets,
    marginal_rate,
)
from taxplan.models.enums import FilingStatus
from taxplan.models.results import CapitalGainsResult, GainComponent

ZERO = Decimal("0")


class CapitalGainsCalculator:
    """Computes tax on short-term gains, long-term gains and qualified dividends."""

    def calculate(
        self,
        long_term_gains: Decimal,
        short_term_gains: Decimal,
        qualified_dividends: Decimal,
        ordinary_income: Decimal,
        filing_status: FilingStatus,
        tax_year: int = 2025,
        tcja_sunsetting: bool = False,
    ) -> CapitalGainsResult:
        """Tax gains layered on top of ordinary taxable income.

        Args:
            long_term_gains: Net LTCG subject to preferential rates.
            short_term_gains: Net STCG (ordinary rates).
            qualified_dividends: Qualified dividends (preferential rates).
            ordinary_income: Ordinary taxable income excluding the gains above.
            filing_status: Filing status.
            tax_year: Tax year for the bracket tables.
            tcja_sunsetting: Use the pre-TCJA ordinary schedule for 2026+.

        Returns:
            CapitalGainsResult with per-component tax, blended rates and a
            standalone NIIT estimate on the gains.
        """
        ordinary = max(ordinary_income, ZERO)
        short_term = max(short_term_gains, ZERO)
        long_term = max(long_term_gains, ZERO)
        qualified = max(qualified_dividends, ZERO)

        ordinary_schedule = federal_brackets(tax_year, filing_status, tcja_sunsetting)
        ltcg_schedule = ltcg_brackets(tax_year, filing_status)

        short_term_tax = self.stacked_tax(short_term, ordinary, ordinary_schedule)
        floor = ordinary + short_term
        long_term_tax = self.stacked_tax(long_term, floor, ltcg_schedule)
        qualified_tax = self.stacked_tax(qualified, floor + long_term, ltcg_schedule)

        total_gains = short_term + long_term + qualified
        total_tax = short_term_tax + long_term_tax + qualified_tax

        if long_term + qualified > ZERO:
            top_rate = marginal_rate(floor + long_term + qualified, ltcg_schedule)
        elif short_term > ZERO:
            top_rate = marginal_rate(floor, ordinary_schedule)
        else:
            top_rate = marginal_rate(floor, ltcg_schedule)

        return CapitalGainsResult(
            long_term=self._component(long_term, long_term_tax),
            short_term=self._component(short_term, short_term_tax),
            qualified=self._component(qualified, qualified_tax),
            tax=total_tax,
            effective_rate=total_tax / total_gains if total_gains > ZERO else ZERO,
            marginal_rate=top_rate,
            niit_tax=self.estimate_niit(total_gains, ordinary, filing_status),
        )

    @staticmethod
    def stacked_tax(amount: Decimal, floor: Decimal, brackets: BracketSchedule) -> Decimal:
        """Tax on amount when it sits on top of floor in the given schedule."""
        if amount <= ZERO:
            return ZERO
        return bracket_tax(floor + amount, brackets) - bracket_tax(floor, brackets)

    @staticmethod
    def estimate_niit(gains: Decimal, ordinary_income: Decimal, filing_status: FilingStatus) -> Decimal:
        """NIIT on the gains alone, using ordinary income + gains as a MAGI proxy."""
        excess = max(ordinary_income + gains - NIIT_THRESHOLD[filing_status], ZERO)
        return min(gains, excess) * NIIT_RATE

    @staticmethod
    def _component(amount: Decimal, tax: Decimal) -> GainComponent:
        return GainComponent(
            amount=amount,
            tax=tax,
            effective_rate=tax / amount if amount > ZERO else ZERO,
        )
