"""Enumerations for the taxplan engine."""

import logging
from enum import StrEnum

logger = logging.getLogger(__name__)


class FilingStatus(StrEnum):
    SINGLE = "SINGLE"
    MFJ = "MARRIED_FILING_JOINTLY"
    MFS = "MARRIED_FILING_SEPARATELY"
    HOH = "HEAD_OF_HOUSEHOLD"

    @classmethod
    def parse(cls, value: object) -> "FilingStatus":
        """Normalize user-entered filing status strings.

        Accepts enum values, short codes (``MFJ``) and camelCase spellings
        (``marriedFilingJointly``). Anything else falls back to SINGLE.
        """
        if isinstance(value, cls):
            return value
        key = "".join(ch for ch in str(value or "") if ch.isalnum()).upper()
        status = _FILING_STATUS_ALIASES.get(key)
        if status is None:
            logger.warning("Unknown filing status %r; using SINGLE", value)
            return cls.SINGLE
        return status


_FILING_STATUS_ALIASES: dict[str, FilingStatus] = {
    "SINGLE": FilingStatus.SINGLE,
    "S": FilingStatus.SINGLE,
    "MFJ": FilingStatus.MFJ,
    "MARRIEDFILINGJOINTLY": FilingStatus.MFJ,
    "MARRIEDJOINT": FilingStatus.MFJ,
    "JOINT": FilingStatus.MFJ,
    "MFS": FilingStatus.MFS,
    "MARRIEDFILINGSEPARATELY": FilingStatus.MFS,
    "HOH": FilingStatus.HOH,
    "HEADOFHOUSEHOLD": FilingStatus.HOH,
}


class IncomeType(StrEnum):
    WAGES = "wages"
    SELF_EMPLOYMENT = "self-employment"
    BUSINESS = "business"
    TRADITIONAL_IRA = "traditional-ira"
    TRADITIONAL_401K = "401k"
    PLAN_403B = "403b"
    PLAN_457 = "457"
    SEP_IRA = "sep-ira"
    SIMPLE_IRA = "simple-ira"
    ROTH_IRA = "roth-ira"
    SOCIAL_SECURITY = "social-security"
    PENSION = "pension"
    ANNUITY = "annuity"
    LIFE_INSURANCE = "life-insurance"
    LONG_TERM_CAPITAL_GAINS = "long-term-capital-gains"
    SHORT_TERM_CAPITAL_GAINS = "short-term-capital-gains"
    QUALIFIED_DIVIDENDS = "qualified-dividends"
    DIVIDENDS = "dividends"
    INTEREST = "interest"
    TAX_EXEMPT_INTEREST = "tax-exempt-interest"
    RENTAL = "rental"
    ROYALTIES = "royalties"
    PASSIVE_BUSINESS = "passive-business"
    PRIVATE_ACTIVITY_BOND_INTEREST = "private-activity-bond-interest"
    ESTIMATED_RMD = "estimated-rmd"
    OTHER = "other"


# Income type groupings used across calculators.
EARNED_INCOME_TYPES = frozenset({
    IncomeType.WAGES,
    IncomeType.SELF_EMPLOYMENT,
    IncomeType.BUSINESS,
})

QUALIFIED_ACCOUNT_TYPES = frozenset({
    IncomeType.TRADITIONAL_IRA,
    IncomeType.TRADITIONAL_401K,
    IncomeType.PLAN_403B,
    IncomeType.PLAN_457,
    IncomeType.SEP_IRA,
    IncomeType.SIMPLE_IRA,
})

INVESTMENT_INCOME_TYPES = frozenset({
    IncomeType.INTEREST,
    IncomeType.DIVIDENDS,
    IncomeType.QUALIFIED_DIVIDENDS,
    IncomeType.LONG_TERM_CAPITAL_GAINS,
    IncomeType.SHORT_TERM_CAPITAL_GAINS,
    IncomeType.RENTAL,
    IncomeType.ROYALTIES,
    IncomeType.PASSIVE_BUSINESS,
})

CAPITAL_GAIN_TYPES = frozenset({
    IncomeType.LONG_TERM_CAPITAL_GAINS,
    IncomeType.SHORT_TERM_CAPITAL_GAINS,
})

# Never part of AGI.
TAX_EXEMPT_TYPES = frozenset({
    IncomeType.TAX_EXEMPT_INTEREST,
    IncomeType.PRIVATE_ACTIVITY_BOND_INTEREST,
})


class Owner(StrEnum):
    TAXPAYER = "taxpayer"
    SPOUSE = "spouse"
    JOINT = "joint"


class Frequency(StrEnum):
    YEARLY = "yearly"
    MONTHLY = "monthly"


class SocialSecurityTier(StrEnum):
    NONE = "None"
    TIER_I = "I"
    TIER_II = "II"
    TIER_III = "III"


class ChangeType(StrEnum):
    INCREASE = "increase"
    DECREASE = "decrease"


class HousingStatus(StrEnum):
    OWN = "own"
    RENT = "rent"


class PolicyType(StrEnum):
    TERM = "term"
    WHOLE = "whole"
    UNIVERSAL = "universal"
    VARIABLE = "variable"


class AccessMethod(StrEnum):
    WITHDRAWAL = "withdrawal"
    LOAN = "loan"
    COMBINATION = "combination"
