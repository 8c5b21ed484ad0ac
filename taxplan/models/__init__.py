"""Data models for the taxplan engine."""

from taxplan.models.deductions import (
    DeductionResult,
    Deductions,
    ItemizedDeductions,
    StateDeductions,
)
from taxplan.models.enums import (
    AccessMethod,
    ChangeType,
    FilingStatus,
    Frequency,
    HousingStatus,
    IncomeType,
    Owner,
    PolicyType,
    SocialSecurityTier,
)
from taxplan.models.household import Household, Housing, Person, age_from_date_of_birth
from taxplan.models.income import (
    AnnuityDetails,
    IncomeSource,
    LifeInsuranceDetails,
    QualifiedAccountDetails,
    RMDDetails,
    RothDetails,
)
from taxplan.models.results import (
    AdditionalMedicareResult,
    AdjustedSource,
    AMTAdjustments,
    AMTResult,
    CalculationResult,
    CapitalGainsResult,
    FICAResult,
    GainComponent,
    IrmaaResult,
    NIITResult,
    RateChange,
    RateChangeReport,
    RMDResult,
    SocialSecurityResult,
    StateTaxResult,
    TaxBracket,
)
from taxplan.models.settings import AppSettings, MedicareCoverage

__all__ = [
    "AccessMethod",
    "AdditionalMedicareResult",
    "AdjustedSource",
    "AMTAdjustments",
    "AMTResult",
    "AnnuityDetails",
    "AppSettings",
    "CalculationResult",
    "CapitalGainsResult",
    "ChangeType",
    "DeductionResult",
    "Deductions",
    "FICAResult",
    "FilingStatus",
    "Frequency",
    "GainComponent",
    "Household",
    "Housing",
    "HousingStatus",
    "IncomeSource",
    "IncomeType",
    "IrmaaResult",
    "ItemizedDeductions",
    "LifeInsuranceDetails",
    "MedicareCoverage",
    "NIITResult",
    "Owner",
    "Person",
    "PolicyType",
    "QualifiedAccountDetails",
    "RateChange",
    "RateChangeReport",
    "RMDDetails",
    "RMDResult",
    "RothDetails",
    "SocialSecurityResult",
    "SocialSecurityTier",
    "StateDeductions",
    "StateTaxResult",
    "TaxBracket",
    "age_from_date_of_birth",
]
