"""Deduction data models.

Federal itemized categories follow Schedule A (Form 1040): SALT per IRC 164,
mortgage interest per IRC 163(h), charitable per IRC 170, medical per IRC 213.
Michigan amounts are entered directly by the household.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from taxplan.models.coercion import coerce_amount


class _Amounts(BaseModel):
    model_config = ConfigDict(frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any, info: ValidationInfo) -> Decimal:
        return coerce_amount(value, info.field_name)


class ItemizedDeductions(_Amounts):
    """Input data for Schedule A itemized deductions.

    All amounts are annual totals. The engine applies the SALT cap and the
    medical AGI floor.
    """

    state_and_local_taxes: Decimal = Field(
        default=Decimal("0"),
        description="State/local income and property taxes paid (capped)",
    )
    mortgage_interest: Decimal = Field(
        default=Decimal("0"),
        description="Home mortgage interest (Form 1098, Box 1)",
    )
    charitable: Decimal = Field(
        default=Decimal("0"),
        description="Charitable contributions to qualifying organizations",
    )
    medical_expenses: Decimal = Field(
        default=Decimal("0"),
        description="Unreimbursed medical/dental expenses before the AGI floor",
    )
    other: Decimal = Field(
        default=Decimal("0"),
        description="Other itemized deductions (not allowed for AMT)",
    )


class StateDeductions(_Amounts):
    """Michigan-specific subtractions and credits entered by the household."""

    other_deductions: Decimal = Field(
        default=Decimal("0"),
        description="Additional Michigan subtractions from income",
    )
    other_credits: Decimal = Field(
        default=Decimal("0"),
        description="Nonrefundable Michigan credits besides homestead",
    )


class Deductions(BaseModel):
    model_config = ConfigDict(frozen=True)

    itemized: ItemizedDeductions = Field(default_factory=ItemizedDeductions)
    state: StateDeductions = Field(default_factory=StateDeductions)


class DeductionResult(BaseModel):
    """Computed deduction breakdown after applying all limits."""

    # Standard deduction
    base_standard_deduction: Decimal = Decimal("0")
    additional_age_deduction: Decimal = Decimal("0")
    standard_deduction: Decimal = Decimal("0")

    # Schedule A
    salt_uncapped: Decimal = Decimal("0")
    salt_deduction: Decimal = Decimal("0")
    salt_cap_lost: Decimal = Decimal("0")
    medical_deduction: Decimal = Decimal("0")
    mortgage_interest: Decimal = Decimal("0")
    charitable: Decimal = Decimal("0")
    other: Decimal = Decimal("0")
    total_itemized: Decimal = Decimal("0")

    # Allowed whether or not the return itemizes
    senior_deduction: Decimal = Decimal("0")

    deduction_used: Decimal = Decimal("0")
    used_itemized: bool = False
