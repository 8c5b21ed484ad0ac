"""Shared test fixtures for taxplan."""

from decimal import Decimal

import pytest

from taxplan.models.enums import FilingStatus, IncomeType, Owner
from taxplan.models.household import Household, Person
from taxplan.models.income import IncomeSource, QualifiedAccountDetails
from taxplan.models.settings import AppSettings


def build_source(source_type: IncomeType, amount, source_id: str | None = None, **kwargs) -> IncomeSource:
    """Build an enabled yearly source with a readable default id."""
    return IncomeSource(
        id=source_id or source_type.value,
        name=kwargs.pop("name", source_type.value),
        type=source_type,
        amount=Decimal(str(amount)),
        **kwargs,
    )


@pytest.fixture
def make_source():
    return build_source


@pytest.fixture
def settings_2025() -> AppSettings:
    return AppSettings(tax_year=2025)


@pytest.fixture
def wages_60k() -> list[IncomeSource]:
    return [build_source(IncomeType.WAGES, 60000, "job")]


@pytest.fixture
def retiree_household() -> Household:
    """Single Michigan retiree, 75 at the end of 2025, with an IRA and Social Security."""
    return Household(
        taxpayer=Person(name="Pat", age=75, state="MI"),
        filing_status=FilingStatus.SINGLE,
        income_sources=[
            IncomeSource(
                id="ira",
                name="Traditional IRA",
                type=IncomeType.TRADITIONAL_IRA,
                amount=Decimal("0"),
                owner=Owner.TAXPAYER,
                details=QualifiedAccountDetails(account_balance=Decimal("246000")),
            ),
            build_source(IncomeType.SOCIAL_SECURITY, 30000, "ss"),
        ],
        settings=AppSettings(tax_year=2025),
    )


@pytest.fixture
def married_household() -> Household:
    """Joint filers in their fifties with wages, interest and gains."""
    return Household(
        taxpayer=Person(name="Alex", age=55),
        spouse=Person(name="Sam", age=53),
        filing_status=FilingStatus.MFJ,
        income_sources=[
            build_source(IncomeType.WAGES, 120000, "w2-alex"),
            build_source(IncomeType.WAGES, 80000, "w2-sam", owner=Owner.SPOUSE),
            build_source(IncomeType.INTEREST, 5000, "bank"),
            build_source(IncomeType.LONG_TERM_CAPITAL_GAINS, 20000, "brokerage"),
        ],
        settings=AppSettings(tax_year=2025),
    )
