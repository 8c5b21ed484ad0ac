"""Social Security benefit taxability (IRC Section 86).

Provisional income is all other taxable income plus tax-exempt interest plus
half of the benefits. The taxable share is then a closed-form function of
provisional income and the filing-status base amounts:

  Tier I   (PI <= base):          0
  Tier II  (base < PI <= adjusted): min(50% SS, 50% (PI - base))
  Tier III (PI > adjusted):       min(85% SS, 85% (PI - adjusted)
                                      + min(50% SS, 50% (adjusted - base)))

"Other income" is an explicit input. Callers compute it without Social
Security so there is no circular dependency and no iteration.
"""

from decimal import Decimal

from taxplan.engines.brackets import (
    SOCIAL_SECURITY_THRESHOLDS,
    SOCIAL_SECURITY_TIER_II_RATE,
    SOCIAL_SECURITY_TIER_III_RATE,
)
from taxplan.models.enums import FilingStatus, SocialSecurityTier
from taxplan.models.results import SocialSecurityResult

ZERO = Decimal("0")


def resolve_social_security(
    benefits: Decimal, other_income: Decimal, filing_status: FilingStatus
) -> SocialSecurityResult:
    """Compute the taxable portion of Social Security benefits."""
    benefits = max(benefits, ZERO)
    other_income = max(other_income, ZERO)
    tier1, tier2 = SOCIAL_SECURITY_THRESHOLDS[filing_status]

    if benefits == ZERO:
        return SocialSecurityResult(
            other_income=other_income,
            provisional_income=other_income,
            tier1_threshold=tier1,
            tier2_threshold=tier2,
        )

    half_benefits = benefits * SOCIAL_SECURITY_TIER_II_RATE
    provisional = other_income + half_benefits

    if provisional <= tier1:
        tier = SocialSecurityTier.TIER_I
        taxable = ZERO
    elif provisional <= tier2:
        tier = SocialSecurityTier.TIER_II
        taxable = min(half_benefits, (provisional - tier1) * SOCIAL_SECURITY_TIER_II_RATE)
    else:
        tier = SocialSecurityTier.TIER_III
        tier_ii_portion = min(half_benefits, (tier2 - tier1) * SOCIAL_SECURITY_TIER_II_RATE)
        taxable = min(
            benefits * SOCIAL_SECURITY_TIER_III_RATE,
            (provisional - tier2) * SOCIAL_SECURITY_TIER_III_RATE + tier_ii_portion,
        )

    return SocialSecurityResult(
        benefits=benefits,
        other_income=other_income,
        provisional_income=provisional,
        tier1_threshold=tier1,
        tier2_threshold=tier2,
        tier=tier,
        taxable_amount=taxable,
        taxable_percentage=taxable / benefits,
    )


def is_fully_phased_in(result: SocialSecurityResult) -> bool:
    """True once the 85% ceiling binds and more income adds no taxable benefits."""
    return (
        result.benefits > ZERO
        and result.taxable_amount >= result.benefits * SOCIAL_SECURITY_TIER_III_RATE
    )
