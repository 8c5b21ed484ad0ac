"""Medicare IRMAA (income-related monthly adjustment amount) lookup.

Surcharges are set by MAGI tier. CMS uses the MAGI from two years earlier;
a planning estimate applies the current-year MAGI to the tier table.
"""

from decimal import Decimal

from taxplan.engines.brackets import IRMAA_TIERS, resolve_year
from taxplan.models.enums import FilingStatus
from taxplan.models.results import IrmaaResult
from taxplan.models.settings import AppSettings, MedicareCoverage

ZERO = Decimal("0")
MONTHS = 12


def irmaa_tier(
    magi: Decimal, filing_status: FilingStatus, tax_year: int, offset: Decimal = ZERO
) -> tuple[int, Decimal | None, Decimal | None, Decimal, Decimal]:
    """Return (tier, tier threshold, next threshold, Part B, Part D) for MAGI.

    Tier 0 means no surcharge. Every threshold is shifted by ``offset``.
    """
    tiers = IRMAA_TIERS[resolve_year(IRMAA_TIERS, tax_year)][filing_status]
    last = len(tiers) - 1
    tier, current, part_b, part_d = 0, None, ZERO, ZERO
    for index, (threshold, surcharge_b, surcharge_d) in enumerate(tiers):
        threshold += offset
        reached = magi >= threshold if index == last else magi > threshold
        if not reached:
            break
        tier, current, part_b, part_d = index + 1, threshold, surcharge_b, surcharge_d
    upcoming = tiers[tier][0] + offset if tier <= last else None
    return tier, current, upcoming, part_b, part_d


def compute_irmaa(magi: Decimal, filing_status: FilingStatus, settings: AppSettings) -> IrmaaResult:
    coverage: list[MedicareCoverage] = [settings.taxpayer_medicare]
    if filing_status in (FilingStatus.MFJ, FilingStatus.MFS):
        coverage.append(settings.spouse_medicare)
    covered = [c for c in coverage if c.part_b or c.part_d]

    tier, threshold, upcoming, part_b, part_d = irmaa_tier(
        magi, filing_status, settings.tax_year, settings.irmaa_threshold_offset
    )
    monthly = sum(
        ((part_b if c.part_b else ZERO) + (part_d if c.part_d else ZERO) for c in covered),
        ZERO,
    )
    return IrmaaResult(
        magi=magi,
        tier=tier,
        tier_threshold=threshold,
        next_threshold=upcoming,
        part_b_surcharge=part_b,
        part_d_surcharge=part_d,
        covered_people=len(covered),
        annual_surcharge=monthly * MONTHS,
    )
