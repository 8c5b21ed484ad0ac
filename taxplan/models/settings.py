"""Per-run configuration.

Settings are an explicit immutable value passed to every calculator that
needs them; nothing reads global state.
"""

import logging
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taxplan.models.coercion import coerce_amount

logger = logging.getLogger(__name__)

DEFAULT_TAX_YEAR = 2025


class MedicareCoverage(BaseModel):
    """Medicare enrollment for one person (drives IRMAA surcharges)."""

    model_config = ConfigDict(frozen=True)

    part_b: bool = False
    part_d: bool = False


class AppSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax_year: int = DEFAULT_TAX_YEAR
    tcja_sunsetting: bool = Field(
        default=False,
        description="Use the pre-TCJA rate structure for 2026 and later",
    )
    rmd_enabled: bool = Field(default=True, description="Generate estimated RMD sources")
    fica_enabled: bool = Field(default=False, description="Include employee payroll taxes")
    senior_deduction_enabled: bool = Field(
        default=True,
        description="Apply the 2025-2028 $6,000 senior deduction",
    )
    taxpayer_medicare: MedicareCoverage = Field(default_factory=MedicareCoverage)
    spouse_medicare: MedicareCoverage = Field(default_factory=MedicareCoverage)
    irmaa_threshold_offset: Decimal = Field(
        default=Decimal("0"),
        description="Flat shift applied to every IRMAA MAGI threshold",
    )
    rate_search_horizon: Decimal = Field(
        default=Decimal("500000"),
        description="How much additional income the rate-change search explores",
    )
    rate_search_max_changes: int = 4

    @field_validator("tax_year", mode="before")
    @classmethod
    def _coerce_tax_year(cls, value: Any) -> int:
        try:
            year = int(value)
        except (TypeError, ValueError):
            logger.warning("Invalid tax year %r; using %d", value, DEFAULT_TAX_YEAR)
            return DEFAULT_TAX_YEAR
        return year

    @field_validator("irmaa_threshold_offset", mode="before")
    @classmethod
    def _coerce_offset(cls, value: Any) -> Decimal:
        return coerce_amount(value, "irmaa_threshold_offset", allow_negative=True)

    @field_validator("rate_search_horizon", mode="before")
    @classmethod
    def _coerce_horizon(cls, value: Any) -> Decimal:
        return coerce_amount(value, "rate_search_horizon") or Decimal("500000")
