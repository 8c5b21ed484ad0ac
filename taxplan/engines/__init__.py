"""Tax computation engines."""

from taxplan.engines.amt import AMTCalculator
from taxplan.engines.capital_gains import CapitalGainsCalculator
from taxplan.engines.deductions import DeductionCalculator
from taxplan.engines.distributions import DistributionAdjuster
from taxplan.engines.estimator import TaxEstimator
from taxplan.engines.marginal import (
    RateChangeAnalyzer,
    analyze_household,
    analyze_rate_changes,
    basic_rate_report,
)
from taxplan.engines.michigan import MichiganTaxCalculator, compute_state_tax
from taxplan.engines.rmd import RMDCalculator

__all__ = [
    "AMTCalculator",
    "CapitalGainsCalculator",
    "DeductionCalculator",
    "DistributionAdjuster",
    "MichiganTaxCalculator",
    "RMDCalculator",
    "RateChangeAnalyzer",
    "TaxEstimator",
    "analyze_household",
    "analyze_rate_changes",
    "basic_rate_report",
    "compute_state_tax",
]
