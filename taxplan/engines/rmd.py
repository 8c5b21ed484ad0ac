"""Required minimum distributions and estimated-RMD source synthesis.

RMD = prior year-end balance / Uniform Lifetime Table factor, rounded to whole
dollars. When planned withdrawals from an account fall short of the RMD, a
locked ``estimated-rmd`` source named ``rmd-<account id>`` covers the gap.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from taxplan.engines.brackets import (
    UNIFORM_LIFETIME_TABLE,
    UNIFORM_LIFETIME_TABLE_PRE_2022,
    UNIFORM_LIFETIME_TABLE_REVISION_YEAR,
    rmd_start_age,
)
from taxplan.engines.distributions import owner_age
from taxplan.exceptions import RMDComputationError
from taxplan.models.enums import QUALIFIED_ACCOUNT_TYPES, Frequency, IncomeType
from taxplan.models.income import IncomeSource, QualifiedAccountDetails, RMDDetails
from taxplan.models.results import RMDResult
from taxplan.models.settings import AppSettings

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
RMD_ID_PREFIX = "rmd-"


def synthetic_id(account_id: str) -> str:
    return f"{RMD_ID_PREFIX}{account_id}"


def account_balance(source: IncomeSource) -> Decimal | None:
    """Prior year-end balance of an enabled qualified account, if known."""
    if not source.enabled or source.type not in QUALIFIED_ACCOUNT_TYPES:
        return None
    if not isinstance(source.details, QualifiedAccountDetails):
        return None
    return source.details.account_balance


class RMDCalculator:
    """Computes RMDs per account and keeps synthetic RMD sources in sync."""

    def __init__(self) -> None:
        self.warnings: list[str] = []

    def factor_for(self, age: int | None, tax_year: int) -> Decimal | None:
        """Uniform Lifetime Table divisor, or None when no RMD is due."""
        if age is None or age < rmd_start_age(tax_year):
            return None
        if tax_year >= UNIFORM_LIFETIME_TABLE_REVISION_YEAR:
            table = UNIFORM_LIFETIME_TABLE
        else:
            table = UNIFORM_LIFETIME_TABLE_PRE_2022
        oldest = max(table)
        if age > oldest:
            return table[oldest]
        return table.get(age, table[min(table)])

    def required_distribution(self, balance: Decimal, age: int | None, tax_year: int) -> Decimal:
        """round_half_up(balance / factor); 0 below the start age or for unknown age.

        Raises:
            RMDComputationError: The factor for the age is not positive.
        """
        factor = self.factor_for(age, tax_year)
        if factor is None or balance <= ZERO:
            return ZERO
        if factor <= ZERO:
            raise RMDComputationError(age, factor)
        return (balance / factor).quantize(Decimal("1"), rounding=ROUND_HALF_UP)

    def synthesize(
        self,
        income_sources: list[IncomeSource],
        taxpayer_age: int | None,
        spouse_age: int | None,
        settings: AppSettings,
    ) -> list[IncomeSource]:
        """Manual sources followed by one estimated-rmd source per short account.

        Overrides and the enabled flag on a previously generated source carry
        over. Generated sources whose account no longer needs one are dropped.
        Running this on its own output returns the same list.
        """
        self.warnings = []
        manual = [s for s in income_sources if s.type != IncomeType.ESTIMATED_RMD]
        if not settings.rmd_enabled:
            return manual

        previous = {s.id: s for s in income_sources if s.type == IncomeType.ESTIMATED_RMD}
        generated = []
        for account in manual:
            balance = account_balance(account)
            if balance is None:
                continue

            prior = previous.get(synthetic_id(account.id))
            prior_details = prior.details if prior and isinstance(prior.details, RMDDetails) else None
            override_balance = prior_details.override_balance if prior_details else None
            override_amount = prior_details.override_amount if prior_details else None

            age = owner_age(account.owner, taxpayer_age, spouse_age)
            if age is None:
                if balance > ZERO:
                    self.warnings.append(
                        f"Owner age unknown for {account.name or account.id}; no RMD estimated."
                    )
                continue
            used_balance = balance if override_balance is None else override_balance
            required = self.required_distribution(used_balance, age, settings.tax_year)
            existing = account.annual_amount
            if required <= existing:
                continue

            shortfall = required - existing
            logger.debug("RMD shortfall of %s on %s", shortfall, account.id)
            if override_amount is not None and override_amount < shortfall:
                self.warnings.append(
                    f"Estimated RMD for {account.name or account.id} is set to ${override_amount:,.2f}, "
                    f"below the ${shortfall:,.2f} still required."
                )
            generated.append(
                IncomeSource(
                    id=synthetic_id(account.id),
                    name=f"Estimated RMD: {account.name or account.id}",
                    type=IncomeType.ESTIMATED_RMD,
                    amount=shortfall if override_amount is None else override_amount,
                    owner=account.owner,
                    enabled=prior.enabled if prior else True,
                    frequency=Frequency.YEARLY,
                    details=RMDDetails(
                        source_id=account.id,
                        account_balance=used_balance,
                        required_amount=required,
                        existing_amount=existing,
                        shortfall_amount=shortfall,
                        override_amount=override_amount,
                        override_balance=override_balance,
                    ),
                )
            )
        return manual + generated

    def summarize(
        self,
        income_sources: list[IncomeSource],
        taxpayer_age: int | None,
        spouse_age: int | None,
        settings: AppSettings,
    ) -> list[RMDResult]:
        results = []
        for account in income_sources:
            balance = account_balance(account)
            if balance is None:
                continue
            age = owner_age(account.owner, taxpayer_age, spouse_age)
            required = self.required_distribution(balance, age, settings.tax_year)
            existing = account.annual_amount
            results.append(
                RMDResult(
                    source_id=account.id,
                    owner=account.owner,
                    age=age,
                    account_balance=balance,
                    factor=self.factor_for(age, settings.tax_year),
                    required_amount=required,
                    existing_amount=existing,
                    shortfall_amount=max(required - existing, ZERO),
                )
            )
        return results
