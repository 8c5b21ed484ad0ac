"""Taxable portion and early-withdrawal penalties for distribution sources.

Implements:
  - Qualified plan / IRA distributions: fully taxable, 10% additional tax
    before 59.5 (IRC 72(t)), with the age-55 separation exception for
    employer plans
  - Annuities: qualified contracts fully taxable; non-qualified contracts
    recover basis FIFO if purchased before TEFRA (1982-08-14), otherwise by
    exclusion ratio (IRC 72(b)); 10% additional tax before 59.5 (IRC 72(q))
  - Roth IRA ordering rules: contributions, then conversions, then earnings;
    earnings taxable unless the withdrawal is qualified (age 59.5 + 5 years)
  - Life insurance: MEC gains-first (LIFO) with 10% additional tax before
    59.5 (IRC 72(v)); non-MEC basis-first (FIFO); loans tax-free unless the
    policy lapses
"""

import logging
from decimal import Decimal

from taxplan.engines.brackets import (
    EARLY_WITHDRAWAL_AGE,
    EARLY_WITHDRAWAL_PENALTY_RATE,
    ROTH_HOLDING_PERIOD_YEARS,
    SEPARATION_FROM_SERVICE_AGE,
    TEFRA_EFFECTIVE_DATE,
)
from taxplan.models.enums import (
    QUALIFIED_ACCOUNT_TYPES,
    TAX_EXEMPT_TYPES,
    AccessMethod,
    IncomeType,
    Owner,
    PolicyType,
)
from taxplan.models.income import (
    AnnuityDetails,
    IncomeSource,
    LifeInsuranceDetails,
    QualifiedAccountDetails,
    RothDetails,
)
from taxplan.models.results import AdjustedSource

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Employer plans that honor separation from service at 55
SEPARATION_EXCEPTION_TYPES = frozenset({IncomeType.TRADITIONAL_401K, IncomeType.PLAN_403B})

# First-time homebuyer exception lifetime limit
FIRST_HOME_EXCEPTION_LIMIT = Decimal("10000")


def owner_age(owner: Owner, taxpayer_age: int | None, spouse_age: int | None) -> int | None:
    """Age of whoever owns a source; joint sources use the older person."""
    if owner == Owner.SPOUSE:
        return spouse_age
    if owner == Owner.JOINT:
        known = [age for age in (taxpayer_age, spouse_age) if age is not None]
        return max(known) if known else None
    return taxpayer_age


def is_under_penalty_age(age: int | None) -> bool:
    return age is not None and Decimal(age) < EARLY_WITHDRAWAL_AGE


class DistributionAdjuster:
    """Converts enabled income sources into taxable amounts and penalties."""

    def __init__(self) -> None:
        self.warnings: list[str] = []

    def adjust(
        self,
        income_sources: list[IncomeSource],
        taxpayer_age: int | None,
        spouse_age: int | None,
        tax_year: int,
    ) -> list[AdjustedSource]:
        adjusted = []
        for source in income_sources:
            if not source.enabled:
                continue
            age = owner_age(source.owner, taxpayer_age, spouse_age)
            gross = source.annual_amount
            taxable, penalty, reason = self._adjust_source(source, gross, age, tax_year)
            if penalty > ZERO:
                self.warnings.append(
                    f"Early withdrawal penalty of ${penalty:,.2f} on '{source.name or source.id}' "
                    f"({reason})."
                )
            adjusted.append(
                AdjustedSource(
                    source_id=source.id,
                    type=source.type,
                    owner=source.owner,
                    gross_amount=gross,
                    taxable_amount=taxable,
                    penalty=penalty,
                    penalty_reason=reason,
                )
            )
        return adjusted

    def _adjust_source(
        self, source: IncomeSource, gross: Decimal, age: int | None, tax_year: int
    ) -> tuple[Decimal, Decimal, str]:
        if source.type in QUALIFIED_ACCOUNT_TYPES:
            return self._qualified_account(source, gross, age)
        if source.type == IncomeType.ANNUITY:
            taxable = self.annuity_taxable_amount(source.details, gross)
            return self._penalize(taxable, age, "annuity distribution before age 59.5")
        if source.type == IncomeType.ROTH_IRA:
            return self._roth(source, gross, age, tax_year)
        if source.type == IncomeType.LIFE_INSURANCE:
            return self._life_insurance(source, gross, age)
        if source.type in TAX_EXEMPT_TYPES:
            return ZERO, ZERO, ""
        return gross, ZERO, ""

    # ------------------------------------------------------------------
    # Qualified accounts
    # ------------------------------------------------------------------

    def _qualified_account(
        self, source: IncomeSource, gross: Decimal, age: int | None
    ) -> tuple[Decimal, Decimal, str]:
        details = source.details if isinstance(source.details, QualifiedAccountDetails) else None
        if (
            details is not None
            and details.separated_from_service_at_55
            and source.type in SEPARATION_EXCEPTION_TYPES
            and age is not None
            and age >= SEPARATION_FROM_SERVICE_AGE
        ):
            return gross, ZERO, ""
        return self._penalize(gross, age, f"{source.type.value} distribution before age 59.5")

    @staticmethod
    def _penalize(taxable: Decimal, age: int | None, reason: str) -> tuple[Decimal, Decimal, str]:
        if taxable > ZERO and is_under_penalty_age(age):
            return taxable, taxable * EARLY_WITHDRAWAL_PENALTY_RATE, reason
        return taxable, ZERO, ""

    # ------------------------------------------------------------------
    # Annuities
    # ------------------------------------------------------------------

    @staticmethod
    def annuity_taxable_amount(details: object, gross: Decimal) -> Decimal:
        """Taxable part of an annuity payment.

        Without contract details the payment is treated as fully taxable.
        """
        if not isinstance(details, AnnuityDetails) or details.qualified:
            return gross

        remaining_basis = max(details.cost_basis - details.basis_recovered, ZERO)
        if remaining_basis == ZERO:
            return gross

        if details.purchase_date is not None and details.purchase_date < TEFRA_EFFECTIVE_DATE:
            # Pre-TEFRA: basis comes out first
            return max(gross - remaining_basis, ZERO)

        denominator = details.expected_return or details.current_value
        if denominator <= ZERO:
            return gross
        exclusion_ratio = min(details.cost_basis / denominator, Decimal("1"))
        excluded = min(gross * exclusion_ratio, remaining_basis)
        return gross - excluded

    # ------------------------------------------------------------------
    # Roth IRA
    # ------------------------------------------------------------------

    def _roth(
        self, source: IncomeSource, gross: Decimal, age: int | None, tax_year: int
    ) -> tuple[Decimal, Decimal, str]:
        details = source.details if isinstance(source.details, RothDetails) else None
        if details is None:
            if is_under_penalty_age(age):
                self.warnings.append(
                    f"Roth source '{source.name or source.id}' has no contribution history; "
                    f"treated as a tax-free return of contributions."
                )
            return ZERO, ZERO, ""

        if self.is_qualified_roth_distribution(details, age, tax_year):
            return ZERO, ZERO, ""

        # Ordering rules: contributions, then conversions, then earnings
        earnings = max(gross - details.contributions - details.conversions, ZERO)
        if earnings == ZERO:
            return ZERO, ZERO, ""

        penalized = earnings
        if details.disabled:
            penalized = ZERO
        elif details.first_home:
            penalized = max(earnings - FIRST_HOME_EXCEPTION_LIMIT, ZERO)
        _taxable, penalty, reason = self._penalize(
            penalized, age, "non-qualified Roth earnings before age 59.5"
        )
        return earnings, penalty, reason

    @staticmethod
    def is_qualified_roth_distribution(details: RothDetails, age: int | None, tax_year: int) -> bool:
        """Age 59.5 (or disability) and five tax years since the first contribution."""
        if details.first_contribution_year is None:
            return False
        seasoned = tax_year - details.first_contribution_year >= ROTH_HOLDING_PERIOD_YEARS
        old_enough = age is not None and not is_under_penalty_age(age)
        return seasoned and (old_enough or details.disabled)

    # ------------------------------------------------------------------
    # Life insurance
    # ------------------------------------------------------------------

    def _life_insurance(
        self, source: IncomeSource, gross: Decimal, age: int | None
    ) -> tuple[Decimal, Decimal, str]:
        details = source.details if isinstance(source.details, LifeInsuranceDetails) else None
        if details is None:
            return ZERO, ZERO, ""
        if details.policy_type == PolicyType.TERM:
            self.warnings.append(
                f"'{source.name or source.id}' is a term policy with no cash value to access."
            )
            return ZERO, ZERO, ""

        gain = max(details.cash_value - details.premiums_paid, ZERO)

        if details.is_mec:
            # Loans and withdrawals from a MEC are both distributions, gains first
            taxable = min(gross, gain)
            return self._penalize(taxable, age, "MEC distribution before age 59.5")

        if details.access_method == AccessMethod.LOAN:
            loan, withdrawal = gross, ZERO
        elif details.access_method == AccessMethod.COMBINATION:
            loan = gross * min(max(details.loan_share, ZERO), Decimal("1"))
            withdrawal = gross - loan
        else:
            loan, withdrawal = ZERO, gross

        taxable = max(withdrawal - details.premiums_paid, ZERO)
        if details.policy_lapsed and loan > ZERO:
            taxable += min(loan, max(gain - taxable, ZERO))
        return taxable, ZERO, ""
