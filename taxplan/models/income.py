"""Income source models.

Every source shares one envelope (id, name, type, amount, owner, enabled,
frequency). Types that need more context carry a ``details`` payload; the
payload variants form a discriminated union on ``kind``.
"""

import logging
from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from taxplan.exceptions import LockedFieldError
from taxplan.models.coercion import (
    ZERO,
    coerce_amount,
    coerce_choice,
    coerce_date,
    coerce_optional_amount,
    coerce_optional_int,
)
from taxplan.models.enums import (
    CAPITAL_GAIN_TYPES,
    QUALIFIED_ACCOUNT_TYPES,
    AccessMethod,
    Frequency,
    IncomeType,
    Owner,
    PolicyType,
)

logger = logging.getLogger(__name__)


class _Payload(BaseModel):
    """Shared behaviour for details payloads: frozen, lenient numbers and dates."""

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _coerce_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for name, field in cls.model_fields.items():
            # kind is the union discriminator and must reach pydantic untouched
            if name == "kind" or name not in data:
                continue
            data[name] = cls._coerce_value(name, field.annotation, field.default, data[name])
        return data

    @staticmethod
    def _coerce_value(name: str, annotation: Any, default: Any, value: Any) -> Any:
        if annotation is Decimal:
            return coerce_amount(value, name)
        if annotation == (Decimal | None):
            return coerce_optional_amount(value, name)
        if annotation == (date | None):
            return coerce_date(value, name)
        if annotation == (int | None):
            return coerce_optional_int(value, name)
        if isinstance(annotation, type) and issubclass(annotation, StrEnum):
            return coerce_choice(value, annotation, default, name)
        return value


class AnnuityDetails(_Payload):
    """Annuity contract data for TEFRA classification and basis recovery."""

    kind: Literal["annuity"] = "annuity"
    qualified: bool = Field(
        default=False,
        description="Held inside a qualified plan/IRA (fully taxable)",
    )
    purchase_date: date | None = Field(
        default=None,
        description="Contract purchase date; before 1982-08-14 is pre-TEFRA",
    )
    cost_basis: Decimal = Field(default=ZERO, description="After-tax investment in the contract")
    current_value: Decimal = Field(default=ZERO, description="Current contract value")
    expected_return: Decimal = Field(
        default=ZERO,
        description="Total expected payments under the contract (exclusion ratio denominator)",
    )
    basis_recovered: Decimal = Field(
        default=ZERO,
        description="Basis already recovered tax-free in earlier years",
    )


class RothDetails(_Payload):
    """Roth IRA ordering-rule inputs."""

    kind: Literal["roth"] = "roth"
    contributions: Decimal = Field(default=ZERO, description="Total regular contributions")
    conversions: Decimal = Field(default=ZERO, description="Total converted amounts")
    first_contribution_year: int | None = Field(
        default=None,
        description="Tax year of the first Roth contribution (starts the 5-year clock)",
    )
    disabled: bool = False
    first_home: bool = Field(default=False, description="First-time homebuyer exception")


class LifeInsuranceDetails(_Payload):
    """Cash-value life insurance policy data."""

    kind: Literal["life-insurance"] = "life-insurance"
    policy_type: PolicyType = PolicyType.WHOLE
    is_mec: bool = Field(default=False, description="Modified endowment contract (IRC 7702A)")
    cash_value: Decimal = ZERO
    premiums_paid: Decimal = Field(default=ZERO, description="Cost basis in the policy")
    access_method: AccessMethod = AccessMethod.WITHDRAWAL
    loan_share: Decimal = Field(
        default=Decimal("0.5"),
        description="Fraction taken as a loan when access_method is combination",
    )
    policy_lapsed: bool = False


class QualifiedAccountDetails(_Payload):
    """Balance data for an IRA or employer plan distribution source."""

    kind: Literal["qualified-account"] = "qualified-account"
    account_balance: Decimal | None = Field(
        default=None,
        description="Prior year-end balance used for the RMD calculation",
    )
    separated_from_service_at_55: bool = Field(
        default=False,
        description="Left the plan sponsor in or after the year of turning 55",
    )


class RMDDetails(_Payload):
    """Bookkeeping for a generated estimated-rmd source."""

    kind: Literal["estimated-rmd"] = "estimated-rmd"
    source_id: str = ""
    account_balance: Decimal = ZERO
    required_amount: Decimal = ZERO
    existing_amount: Decimal = ZERO
    shortfall_amount: Decimal = ZERO
    override_amount: Decimal | None = None
    override_balance: Decimal | None = None


SourceDetails = Annotated[
    Union[AnnuityDetails, RothDetails, LifeInsuranceDetails, QualifiedAccountDetails, RMDDetails],
    Field(discriminator="kind"),
]


def details_kind_for(income_type: IncomeType) -> str | None:
    """The only details variant a given income type accepts."""
    if income_type == IncomeType.ANNUITY:
        return "annuity"
    if income_type == IncomeType.ROTH_IRA:
        return "roth"
    if income_type == IncomeType.LIFE_INSURANCE:
        return "life-insurance"
    if income_type in QUALIFIED_ACCOUNT_TYPES:
        return "qualified-account"
    if income_type == IncomeType.ESTIMATED_RMD:
        return "estimated-rmd"
    return None


# Fields a generated estimated-rmd source refuses to have edited.
LOCKED_FIELDS = ("name", "type", "owner")


class IncomeSource(BaseModel):
    """One stream of household income."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str = ""
    type: IncomeType = IncomeType.OTHER
    amount: Decimal = Field(
        default=ZERO,
        description="Per-period amount; monthly sources are annualized x12",
    )
    owner: Owner = Owner.TAXPAYER
    enabled: bool = True
    frequency: Frequency = Frequency.YEARLY
    details: SourceDetails | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_envelope(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        source_type = coerce_choice(data.get("type"), IncomeType, IncomeType.OTHER, "income type")
        data["type"] = source_type
        data["owner"] = coerce_choice(data.get("owner"), Owner, Owner.TAXPAYER, "owner")
        data["frequency"] = coerce_choice(
            data.get("frequency"), Frequency, Frequency.YEARLY, "frequency"
        )
        data["amount"] = coerce_amount(
            data.get("amount"),
            f"amount of {data.get('id') or source_type.value}",
            allow_negative=source_type in CAPITAL_GAIN_TYPES,
        )
        if data.get("id") is not None:
            data["id"] = str(data["id"])
        data["details"] = cls._coerce_details(data.get("details"), source_type)
        return data

    @staticmethod
    def _coerce_details(details: Any, source_type: IncomeType) -> Any:
        if details is None:
            return None
        expected = details_kind_for(source_type)
        if isinstance(details, BaseModel):
            kind = getattr(details, "kind", None)
        elif isinstance(details, dict):
            kind = details.get("kind") or expected
            details = {**details, "kind": kind}
        else:
            logger.warning("Ignoring malformed details for %s source", source_type.value)
            return None
        if expected is None or kind != expected:
            logger.warning(
                "Ignoring %s details on %s source", kind, source_type.value
            )
            return None
        return details

    @property
    def annual_amount(self) -> Decimal:
        """Annualized amount; zero when the source is disabled."""
        if not self.enabled:
            return ZERO
        if self.frequency == Frequency.MONTHLY:
            return self.amount * 12
        return self.amount

    @property
    def is_locked(self) -> bool:
        return self.type == IncomeType.ESTIMATED_RMD

    def with_updates(self, **changes: Any) -> "IncomeSource":
        """Return an edited copy, refusing edits to locked fields."""
        if self.is_locked:
            for field in LOCKED_FIELDS:
                if field in changes and changes[field] != getattr(self, field):
                    raise LockedFieldError(self.id, field)
        return IncomeSource.model_validate({**self.model_dump(), **changes})


def sum_annual(sources: list[IncomeSource], types: frozenset[IncomeType]) -> Decimal:
    """Total annualized, enabled amount across sources of the given types."""
    return sum((s.annual_amount for s in sources if s.type in types), ZERO)
