"""Calculation output models."""

from decimal import Decimal

from pydantic import BaseModel, Field

from taxplan.models.coercion import ZERO
from taxplan.models.deductions import DeductionResult
from taxplan.models.enums import ChangeType, FilingStatus, IncomeType, Owner, SocialSecurityTier


class TaxBracket(BaseModel):
    """One bracket of a progressive schedule; max is None for the top bracket."""

    min: Decimal
    max: Decimal | None
    rate: Decimal


class SocialSecurityResult(BaseModel):
    benefits: Decimal = ZERO
    other_income: Decimal = ZERO
    provisional_income: Decimal = ZERO
    tier1_threshold: Decimal = ZERO
    tier2_threshold: Decimal = ZERO
    tier: SocialSecurityTier = SocialSecurityTier.NONE
    taxable_amount: Decimal = ZERO
    taxable_percentage: Decimal = ZERO


class GainComponent(BaseModel):
    amount: Decimal = ZERO
    tax: Decimal = ZERO
    effective_rate: Decimal = ZERO


class CapitalGainsResult(BaseModel):
    long_term: GainComponent = Field(default_factory=GainComponent)
    short_term: GainComponent = Field(default_factory=GainComponent)
    qualified: GainComponent = Field(default_factory=GainComponent)
    tax: Decimal = ZERO
    effective_rate: Decimal = ZERO
    marginal_rate: Decimal = ZERO
    niit_tax: Decimal = ZERO


class FICAResult(BaseModel):
    earned_income: Decimal = ZERO
    wage_base: Decimal = ZERO
    social_security_wages: Decimal = ZERO
    social_security_tax: Decimal = ZERO
    medicare_tax: Decimal = ZERO
    additional_medicare_tax: Decimal = ZERO
    total_fica: Decimal = ZERO


class AdditionalMedicareResult(BaseModel):
    threshold: Decimal = ZERO
    earned_income: Decimal = ZERO
    excess_income: Decimal = ZERO
    tax: Decimal = ZERO
    applies: bool = False
    rate: Decimal = ZERO


class NIITResult(BaseModel):
    threshold: Decimal = ZERO
    modified_agi: Decimal = ZERO
    net_investment_income: Decimal = ZERO
    excess_income: Decimal = ZERO
    taxable_amount: Decimal = ZERO
    tax: Decimal = ZERO
    applies: bool = False
    rate: Decimal = ZERO
    distance_to_threshold: Decimal = ZERO


class AMTAdjustments(BaseModel):
    standard_deduction_addback: Decimal = ZERO
    salt_addback: Decimal = ZERO
    other_itemized_addback: Decimal = ZERO
    private_activity_bond_interest: Decimal = ZERO
    total: Decimal = ZERO


class AMTResult(BaseModel):
    amt_income: Decimal = ZERO
    exemption: Decimal = ZERO
    amt_taxable_income: Decimal = ZERO
    amt_tax: Decimal = Field(default=ZERO, description="Tentative minimum tax")
    regular_tax: Decimal = ZERO
    additional_tax: Decimal = Field(default=ZERO, description="max(0, tentative AMT - regular tax)")
    adjustments: AMTAdjustments = Field(default_factory=AMTAdjustments)
    applies: bool = False
    effective_amt_rate: Decimal = ZERO


class StateTaxResult(BaseModel):
    state: str = ""
    rate: Decimal = ZERO
    taxable_income: Decimal = ZERO
    retirement_subtraction: Decimal = ZERO
    personal_exemption: Decimal = ZERO
    tax: Decimal = ZERO
    homestead_eligible: bool = False
    homestead_credit: Decimal = ZERO
    other_credits: Decimal = ZERO
    net_tax: Decimal = ZERO


class IrmaaResult(BaseModel):
    magi: Decimal = ZERO
    tier: int = 0
    tier_threshold: Decimal | None = None
    next_threshold: Decimal | None = None
    part_b_surcharge: Decimal = Field(default=ZERO, description="Monthly, per person")
    part_d_surcharge: Decimal = Field(default=ZERO, description="Monthly, per person")
    covered_people: int = 0
    annual_surcharge: Decimal = ZERO


class AdjustedSource(BaseModel):
    """An enabled source after taxable-portion and penalty rules."""

    source_id: str
    type: IncomeType
    owner: Owner
    gross_amount: Decimal
    taxable_amount: Decimal
    penalty: Decimal = ZERO
    penalty_reason: str = ""


class RMDResult(BaseModel):
    source_id: str
    owner: Owner
    age: int | None
    account_balance: Decimal
    factor: Decimal | None
    required_amount: Decimal
    existing_amount: Decimal
    shortfall_amount: Decimal


class RateChange(BaseModel):
    amount_to_change: Decimal
    threshold_income: Decimal
    from_rate: Decimal
    to_rate: Decimal
    change_type: ChangeType
    causes: list[str]
    cause: str


class RateChangeReport(BaseModel):
    current_rate: Decimal
    current_income: Decimal = ZERO
    rate_changes: list[RateChange] = Field(default_factory=list)
    is_fallback: bool = False


class CalculationResult(BaseModel):
    """Complete output of one orchestrator run."""

    tax_year: int
    filing_status: FilingStatus

    # Income
    total_income: Decimal
    ordinary_income: Decimal
    gross_taxable_income: Decimal
    capital_loss_deduction: Decimal
    federal_agi: Decimal
    magi: Decimal
    adjusted_sources: list[AdjustedSource]

    # Deductions
    deductions: DeductionResult
    deduction_used: Decimal
    used_itemized: bool
    federal_taxable_income: Decimal
    ordinary_taxable_income: Decimal

    # Subsystems
    social_security: SocialSecurityResult
    capital_gains: CapitalGainsResult
    fica: FICAResult
    niit: NIITResult
    additional_medicare: AdditionalMedicareResult
    amt: AMTResult
    state: StateTaxResult
    irmaa: IrmaaResult

    # Federal
    federal_ordinary_tax: Decimal
    federal_regular_tax: Decimal
    early_withdrawal_penalties: Decimal
    federal_total_tax: Decimal

    # Totals
    payroll_tax: Decimal
    net_state_tax: Decimal
    total_tax: Decimal

    # Rates
    federal_marginal_rate: Decimal
    state_marginal_rate: Decimal
    total_marginal_rate: Decimal
    effective_rate_federal: Decimal
    effective_rate_total: Decimal
    current_bracket: TaxBracket | None
    next_bracket: TaxBracket | None
    amount_to_next_bracket: Decimal | None

    warnings: list[str] = Field(default_factory=list)
    degraded: list[str] = Field(default_factory=list)
