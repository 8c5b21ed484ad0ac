"""Comprehensive tax estimation engine.

Composes every calculator into one reconciled result, in dependency order:
  - Taxable portion and early-withdrawal penalties per source
  - Capital loss netting per Schedule D / IRC Section 1211(b)
  - Social Security taxability per IRC Section 86
  - Standard (age 65+, senior) vs. itemized deductions
  - Progressive ordinary tax, then LTCG/qualified dividend stacking
  - Alternative Minimum Tax per Form 6251 (added on top of regular tax)
  - Net Investment Income Tax per IRC Section 1411
  - Additional Medicare Tax per Form 8959 and optional FICA
  - Michigan income tax and homestead credit
  - Medicare IRMAA surcharges
"""

import logging
from collections.abc import Callable
from decimal import Decimal
from typing import TypeVar

from taxplan.engines.amt import AMTCalculator
from taxplan.engines.brackets import (
    CAPITAL_LOSS_LIMIT,
    FICA_MARGINAL_RATE,
    MICHIGAN_STATE_CODE,
    MICHIGAN_TAX_RATE,
)
from taxplan.engines.capital_gains import CapitalGainsCalculator
from taxplan.engines.deductions import DeductionCalculator
from taxplan.engines.distributions import DistributionAdjuster
from taxplan.engines.medicare import compute_irmaa
from taxplan.engines.michigan import compute_state_tax
from taxplan.engines.niit import compute_niit, net_investment_income
from taxplan.engines.payroll import compute_additional_medicare, compute_fica, earned_income
from taxplan.engines.progressive import (
    amount_to_next_bracket,
    bracket_for,
    bracket_tax,
    federal_brackets,
    marginal_rate,
    next_bracket,
    to_tax_brackets,
)
from taxplan.engines.rmd import RMDCalculator
from taxplan.engines.social_security import resolve_social_security
from taxplan.exceptions import TaxComputationError
from taxplan.models.deductions import DeductionResult, Deductions
from taxplan.models.enums import (
    QUALIFIED_ACCOUNT_TYPES,
    TAX_EXEMPT_TYPES,
    FilingStatus,
    IncomeType,
)
from taxplan.models.household import Household, Housing
from taxplan.models.income import IncomeSource
from taxplan.models.results import (
    AdditionalMedicareResult,
    AdjustedSource,
    AMTResult,
    CalculationResult,
    CapitalGainsResult,
    FICAResult,
    IrmaaResult,
    NIITResult,
    SocialSecurityResult,
    StateTaxResult,
)
from taxplan.models.settings import AppSettings

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

T = TypeVar("T")

# Failures a subsystem may raise that degrade the result instead of aborting it
RECOVERABLE_ERRORS = (TaxComputationError, ArithmeticError, ValueError, KeyError, TypeError)

# Taxable distributions that qualify for the Michigan retirement subtraction
RETIREMENT_INCOME_TYPES = QUALIFIED_ACCOUNT_TYPES | {
    IncomeType.PENSION,
    IncomeType.ANNUITY,
    IncomeType.ESTIMATED_RMD,
}

# Handled by dedicated rules rather than summed into ordinary income
SEPARATELY_TAXED_TYPES = TAX_EXEMPT_TYPES | {
    IncomeType.SOCIAL_SECURITY,
    IncomeType.LONG_TERM_CAPITAL_GAINS,
    IncomeType.SHORT_TERM_CAPITAL_GAINS,
    IncomeType.QUALIFIED_DIVIDENDS,
}


def net_capital_gains(
    short_term: Decimal, long_term: Decimal, filing_status: FilingStatus
) -> tuple[Decimal, Decimal, Decimal, Decimal]:
    """Net short- and long-term results per Schedule D.

    Returns (short_term, long_term, loss_deduction, carryover). A net loss is
    deductible against ordinary income up to $3,000 ($1,500 MFS); the rest
    carries over and is not modeled further.
    """
    if short_term >= ZERO and long_term >= ZERO:
        return short_term, long_term, ZERO, ZERO

    net = short_term + long_term
    if net >= ZERO:
        # A loss on one side absorbs gains on the other; the survivor keeps its character
        if short_term < ZERO:
            return ZERO, net, ZERO, ZERO
        return net, ZERO, ZERO, ZERO

    limit = CAPITAL_LOSS_LIMIT[filing_status]
    deduction = min(-net, limit)
    return ZERO, ZERO, deduction, -net - deduction


class TaxEstimator:
    """Estimates federal, payroll and Michigan tax for one household."""

    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.degraded: list[str] = []

    def estimate_household(self, household: Household) -> CalculationResult:
        """Resolve ages at year end, add estimated RMDs, then estimate."""
        self.warnings = []
        self.degraded = []
        as_of = household.as_of
        spouse = household.spouse
        taxpayer_age = household.taxpayer.resolved_age(as_of)
        spouse_age = spouse.resolved_age(as_of) if spouse else None

        rmd = RMDCalculator()
        sources = self._guard(
            "rmd",
            lambda: rmd.synthesize(
                household.income_sources, taxpayer_age, spouse_age, household.settings
            ),
            household.income_sources,
        )
        # estimate() resets diagnostics; keep anything recorded while synthesizing
        carried_degraded = list(self.degraded)
        carried_warnings = rmd.warnings + self.warnings
        result = self.estimate(
            income_sources=sources,
            taxpayer_age=taxpayer_age,
            spouse_age=spouse_age,
            filing_status=household.filing_status,
            deductions=household.deductions,
            settings=household.settings,
            housing=household.housing,
            state=household.taxpayer.state,
            taxpayer_birth_year=household.taxpayer.birth_year(as_of),
            spouse_birth_year=spouse.birth_year(as_of) if spouse else None,
        )
        if carried_degraded or carried_warnings:
            result = result.model_copy(
                update={
                    "degraded": carried_degraded + result.degraded,
                    "warnings": carried_warnings + result.warnings,
                }
            )
        return result

    def estimate(
        self,
        income_sources: list[IncomeSource],
        taxpayer_age: int | None = None,
        spouse_age: int | None = None,
        filing_status: FilingStatus = FilingStatus.SINGLE,
        deductions: Deductions | None = None,
        settings: AppSettings | None = None,
        housing: Housing | None = None,
        state: str = MICHIGAN_STATE_CODE,
        taxpayer_birth_year: int | None = None,
        spouse_birth_year: int | None = None,
    ) -> CalculationResult:
        """Compute the full estimate.

        Pure with respect to its arguments: calling it twice with the same
        input yields an identical result. Subsystem failures are logged,
        recorded in ``degraded`` and replaced by zero-valued records.
        """
        self.warnings = []
        self.degraded = []
        deductions = deductions or Deductions()
        settings = settings or AppSettings()
        income_sources = income_sources or []
        tax_year = settings.tax_year
        is_joint = filing_status == FilingStatus.MFJ

        if taxpayer_birth_year is None and taxpayer_age is not None:
            taxpayer_birth_year = tax_year - taxpayer_age
        if spouse_birth_year is None and spouse_age is not None:
            spouse_birth_year = tax_year - spouse_age

        # --- 1. Taxable portion of each source ---
        adjuster = DistributionAdjuster()
        adjusted = self._guard(
            "distributions",
            lambda: adjuster.adjust(income_sources, taxpayer_age, spouse_age, tax_year),
            self._passthrough(income_sources),
        )
        self.warnings.extend(adjuster.warnings)
        penalties = sum((a.penalty for a in adjusted), ZERO)

        # --- 2. Partition by type ---
        def taxable_of(*types: IncomeType) -> Decimal:
            return sum((a.taxable_amount for a in adjusted if a.type in types), ZERO)

        total_income = max(sum((a.gross_amount for a in adjusted), ZERO), ZERO)
        ss_benefits = taxable_of(IncomeType.SOCIAL_SECURITY)
        tax_exempt_interest = sum(
            (a.gross_amount for a in adjusted if a.type in TAX_EXEMPT_TYPES), ZERO
        )
        qualified_dividends = taxable_of(IncomeType.QUALIFIED_DIVIDENDS)
        ordinary_income = sum(
            (a.taxable_amount for a in adjusted if a.type not in SEPARATELY_TAXED_TYPES), ZERO
        )
        short_term, long_term, capital_loss_deduction, carryover = net_capital_gains(
            taxable_of(IncomeType.SHORT_TERM_CAPITAL_GAINS),
            taxable_of(IncomeType.LONG_TERM_CAPITAL_GAINS),
            filing_status,
        )
        if carryover > ZERO:
            self.warnings.append(
                f"Capital losses exceed the ${CAPITAL_LOSS_LIMIT[filing_status]:,.0f} annual "
                f"limit; ${carryover:,.2f} carries forward to future years."
            )

        # --- 3. Social Security (other income excludes benefits) ---
        non_ss_income = (
            ordinary_income - capital_loss_deduction + short_term + long_term + qualified_dividends
        )
        social_security = self._guard(
            "social_security",
            lambda: resolve_social_security(
                ss_benefits, non_ss_income + tax_exempt_interest, filing_status
            ),
            SocialSecurityResult(benefits=ss_benefits),
        )

        # --- 4. AGI and MAGI ---
        gross_taxable_income = (
            ordinary_income + short_term + long_term + qualified_dividends
            + social_security.taxable_amount
        )
        federal_agi = max(gross_taxable_income - capital_loss_deduction, ZERO)
        magi = federal_agi + tax_exempt_interest

        # --- 5. Deductions ---
        deduction_calculator = DeductionCalculator()
        deduction_result = self._guard(
            "deductions",
            lambda: deduction_calculator.calculate(
                deductions, federal_agi, magi, filing_status, taxpayer_age, spouse_age, settings
            ),
            DeductionResult(),
        )
        self.warnings.extend(deduction_calculator.warnings)

        # --- 6. Taxable income; the deduction absorbs ordinary income first ---
        taxable_income = max(federal_agi - deduction_result.deduction_used, ZERO)
        preferential = long_term + qualified_dividends
        ordinary_taxable = max(taxable_income - preferential, ZERO)
        preferential_taxable = taxable_income - ordinary_taxable
        short_taxable = min(short_term, ordinary_taxable)
        long_taxable = min(long_term, preferential_taxable)
        qualified_taxable = preferential_taxable - long_taxable

        # --- 7. Regular tax ---
        brackets = self._guard(
            "federal_brackets",
            lambda: federal_brackets(tax_year, filing_status, settings.tcja_sunsetting),
            None,
        )
        ordinary_tax = bracket_tax(ordinary_taxable - short_taxable, brackets) if brackets else ZERO
        capital_gains = self._guard(
            "capital_gains",
            lambda: CapitalGainsCalculator().calculate(
                long_term_gains=long_taxable,
                short_term_gains=short_taxable,
                qualified_dividends=qualified_taxable,
                ordinary_income=ordinary_taxable - short_taxable,
                filing_status=filing_status,
                tax_year=tax_year,
                tcja_sunsetting=settings.tcja_sunsetting,
            ),
            CapitalGainsResult(),
        )
        regular_tax = ordinary_tax + capital_gains.tax

        # --- 8. AMT (additive) ---
        amt = self._guard(
            "amt",
            lambda: AMTCalculator().calculate(
                income_sources=income_sources,
                deductions=deduction_result,
                regular_tax=regular_tax,
                filing_status=filing_status,
                taxable_income=taxable_income,
                preferential_income=preferential_taxable,
                tax_year=tax_year,
            ),
            AMTResult(regular_tax=regular_tax),
        )

        # --- 9. Surtaxes ---
        niit = self._guard(
            "niit",
            lambda: compute_niit(filing_status, magi, net_investment_income(income_sources)),
            NIITResult(modified_agi=magi),
        )
        earned = earned_income(income_sources)
        additional_medicare = self._guard(
            "additional_medicare",
            lambda: compute_additional_medicare(earned, filing_status),
            AdditionalMedicareResult(earned_income=earned),
        )

        # --- 10. FICA ---
        fica = FICAResult()
        if settings.fica_enabled:
            fica = self._guard(
                "fica", lambda: compute_fica(earned, filing_status, tax_year), FICAResult()
            )

        # --- 11. State ---
        retirement_income = taxable_of(*RETIREMENT_INCOME_TYPES)
        state_result = self._guard(
            "state",
            lambda: compute_state_tax(
                state,
                federal_agi=federal_agi,
                taxable_social_security=social_security.taxable_amount,
                retirement_income=retirement_income,
                household_income=total_income,
                filing_status=filing_status,
                housing=housing,
                birth_years=(taxpayer_birth_year, spouse_birth_year if is_joint else None),
                exemptions=2 if is_joint else 1,
                state_deductions=deductions.state,
            ),
            StateTaxResult(state=state),
        )

        # --- 12. IRMAA ---
        irmaa = self._guard(
            "irmaa", lambda: compute_irmaa(magi, filing_status, settings), IrmaaResult(magi=magi)
        )

        # --- Totals ---
        federal_total = (
            regular_tax + amt.additional_tax + niit.tax + additional_medicare.tax + penalties
        )
        payroll_tax = fica.social_security_tax + fica.medicare_tax
        total_tax = federal_total + payroll_tax + state_result.net_tax

        # --- 13. Rates and bracket position ---
        if brackets and taxable_income > ZERO:
            federal_marginal = marginal_rate(ordinary_taxable, brackets)
            current_bracket = bracket_for(ordinary_taxable, brackets)
            upcoming_bracket = next_bracket(ordinary_taxable, brackets)
            to_next = amount_to_next_bracket(ordinary_taxable, brackets)
        elif brackets:
            # Inside the deduction: the first bracket starts once it is used up
            federal_marginal = ZERO
            current_bracket = None
            upcoming_bracket = to_tax_brackets(brackets)[0]
            to_next = max(deduction_result.deduction_used - federal_agi, ZERO)
        else:
            federal_marginal, current_bracket, upcoming_bracket, to_next = ZERO, None, None, None

        state_marginal = MICHIGAN_TAX_RATE if state_result.taxable_income > ZERO else ZERO
        total_marginal = federal_marginal + state_marginal
        if settings.fica_enabled and earned > ZERO:
            # Flat 7.65% add-on; ignores the wage base cap
            total_marginal += FICA_MARGINAL_RATE

        return CalculationResult(
            tax_year=tax_year,
            filing_status=filing_status,
            total_income=total_income,
            ordinary_income=ordinary_income,
            gross_taxable_income=gross_taxable_income,
            capital_loss_deduction=capital_loss_deduction,
            federal_agi=federal_agi,
            magi=magi,
            adjusted_sources=adjusted,
            deductions=deduction_result,
            deduction_used=deduction_result.deduction_used,
            used_itemized=deduction_result.used_itemized,
            federal_taxable_income=taxable_income,
            ordinary_taxable_income=ordinary_taxable,
            social_security=social_security,
            capital_gains=capital_gains,
            fica=fica,
            niit=niit,
            additional_medicare=additional_medicare,
            amt=amt,
            state=state_result,
            irmaa=irmaa,
            federal_ordinary_tax=ordinary_tax,
            federal_regular_tax=regular_tax,
            early_withdrawal_penalties=penalties,
            federal_total_tax=federal_total,
            payroll_tax=payroll_tax,
            net_state_tax=state_result.net_tax,
            total_tax=total_tax,
            federal_marginal_rate=federal_marginal,
            state_marginal_rate=state_marginal,
            total_marginal_rate=total_marginal,
            effective_rate_federal=federal_total / total_income if total_income > ZERO else ZERO,
            effective_rate_total=total_tax / total_income if total_income > ZERO else ZERO,
            current_bracket=current_bracket,
            next_bracket=upcoming_bracket,
            amount_to_next_bracket=to_next,
            warnings=list(self.warnings),
            degraded=list(self.degraded),
        )

    def _guard(self, name: str, fn: Callable[[], T], default: T) -> T:
        """Run one subsystem; on failure log it, mark it degraded and use default."""
        try:
            return fn()
        except RECOVERABLE_ERRORS:
            logger.exception("%s calculation failed; using zeroed result", name)
            self.degraded.append(name)
            self.warnings.append(f"The {name.replace('_', ' ')} calculation failed and shows zero.")
            return default

    @staticmethod
    def _passthrough(income_sources: list[IncomeSource]) -> list[AdjustedSource]:
        """Every enabled source fully taxable, for when adjustment fails."""
        return [
            AdjustedSource(
                source_id=s.id,
                type=s.type,
                owner=s.owner,
                gross_amount=s.annual_amount,
                taxable_amount=ZERO if s.type in TAX_EXEMPT_TYPES else s.annual_amount,
            )
            for s in income_sources
            if s.enabled
        ]
