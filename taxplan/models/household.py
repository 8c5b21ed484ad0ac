"""Household snapshot: people, housing, income, deductions and settings."""

import hashlib
import logging
from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from taxplan.models.coercion import ZERO, coerce_age, coerce_amount, coerce_choice, coerce_date
from taxplan.models.deductions import Deductions
from taxplan.models.enums import FilingStatus, HousingStatus
from taxplan.models.income import IncomeSource
from taxplan.models.settings import AppSettings

logger = logging.getLogger(__name__)


def age_from_date_of_birth(date_of_birth: date | None, as_of: date) -> int | None:
    """Whole years between date_of_birth and as_of; None if unknown or in the future."""
    if date_of_birth is None or date_of_birth > as_of:
        return None
    had_birthday = (as_of.month, as_of.day) >= (date_of_birth.month, date_of_birth.day)
    return as_of.year - date_of_birth.year - (0 if had_birthday else 1)


class Person(BaseModel):
    """Taxpayer or spouse."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    date_of_birth: date | None = None
    age: int | None = Field(default=None, description="Explicit age; overrides date_of_birth")
    state: str = "MI"

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _coerce_dob(cls, value: Any) -> date | None:
        return coerce_date(value, "date_of_birth")

    @field_validator("age", mode="before")
    @classmethod
    def _coerce_age(cls, value: Any) -> int | None:
        return coerce_age(value, "age")

    @field_validator("state", mode="before")
    @classmethod
    def _normalize_state(cls, value: Any) -> str:
        return str(value or "").strip().upper()

    def resolved_age(self, as_of: date) -> int | None:
        if self.age is not None:
            return self.age
        return age_from_date_of_birth(self.date_of_birth, as_of)

    def birth_year(self, as_of: date) -> int | None:
        if self.date_of_birth is not None:
            return self.date_of_birth.year
        if self.age is not None:
            return as_of.year - self.age
        return None


class Housing(BaseModel):
    """Homestead data for the Michigan property tax credit."""

    model_config = ConfigDict(frozen=True)

    status: HousingStatus = HousingStatus.RENT
    months_in_michigan: int = 12
    property_taxes_paid: Decimal = ZERO
    taxable_value: Decimal = Field(
        default=ZERO,
        description="Homestead taxable value; zero skips the taxable-value limit",
    )

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> HousingStatus:
        return coerce_choice(value, HousingStatus, HousingStatus.RENT, "housing status")

    @field_validator("months_in_michigan", mode="before")
    @classmethod
    def _coerce_months(cls, value: Any) -> int:
        months = coerce_age(value, "months_in_michigan")
        return 12 if months is None else min(months, 12)

    @field_validator("property_taxes_paid", "taxable_value", mode="before")
    @classmethod
    def _coerce_amounts(cls, value: Any, info: ValidationInfo) -> Decimal:
        return coerce_amount(value, info.field_name)


class Household(BaseModel):
    """Everything one calculation needs, as an immutable value tree."""

    model_config = ConfigDict(frozen=True)

    taxpayer: Person = Field(default_factory=Person)
    spouse: Person | None = None
    filing_status: FilingStatus = FilingStatus.SINGLE
    income_sources: list[IncomeSource] = Field(default_factory=list)
    deductions: Deductions = Field(default_factory=Deductions)
    settings: AppSettings = Field(default_factory=AppSettings)
    housing: Housing | None = None

    @field_validator("filing_status", mode="before")
    @classmethod
    def _parse_filing_status(cls, value: Any) -> FilingStatus:
        return FilingStatus.parse(value)

    @field_validator("income_sources", mode="before")
    @classmethod
    def _assign_ids(cls, value: Any) -> Any:
        """Give every source a unique id; later duplicates get a numeric suffix."""
        if not isinstance(value, list):
            return []
        sources = []
        seen: set[str] = set()
        for index, item in enumerate(value):
            if isinstance(item, IncomeSource):
                source_id = item.id
            elif isinstance(item, dict):
                source_id = str(item.get("id") or "")
            else:
                sources.append(item)
                continue
            source_id = source_id or f"source-{index + 1}"
            if source_id in seen:
                suffix = 2
                while f"{source_id}-{suffix}" in seen:
                    suffix += 1
                logger.warning(
                    "Duplicate income source id %r renamed to %r", source_id, f"{source_id}-{suffix}"
                )
                source_id = f"{source_id}-{suffix}"
            seen.add(source_id)
            if isinstance(item, IncomeSource):
                if item.id != source_id:
                    item = item.model_copy(update={"id": source_id})
            else:
                item = {**item, "id": source_id}
            sources.append(item)
        return sources

    @property
    def as_of(self) -> date:
        """Ages are measured at the end of the tax year."""
        return date(self.settings.tax_year, 12, 31)

    def cache_key(self) -> str:
        """Stable digest of the full input, for caller-side memoization."""
        return hashlib.sha256(self.model_dump_json().encode()).hexdigest()
