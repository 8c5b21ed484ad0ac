"""Marginal rate and next-rate-change search.

The marginal rate is measured, not looked up: a synthetic added-income source of
``delta`` dollars is added to the household and the federal total is
re-estimated. The rate at ``delta`` is the extra federal tax per extra
added dollar, so it reflects every interaction at once (Social Security
phase-in, gains pushed into higher LTCG brackets, surtaxes, AMT, the senior
deduction phase-out).

Rate changes happen where one of several threshold indicators flips. Most
indicators are monotone in ``delta``, so their next flip is located with a
doubling search followed by a whole-dollar bisection. AMT can switch on and
then off again as income grows, so its search caps the step at
``SCAN_STEP``.
"""

import logging
from collections.abc import Callable
from decimal import Decimal

from taxplan.engines.brackets import MICHIGAN_STATE_CODE
from taxplan.engines.deductions import senior_phaseout_start
from taxplan.engines.estimator import RECOVERABLE_ERRORS, TaxEstimator
from taxplan.engines.progressive import (
    amount_to_next_bracket,
    bracket_index,
    federal_brackets,
    ltcg_brackets,
    marginal_rate,
)
from taxplan.engines.rmd import RMDCalculator
from taxplan.engines.social_security import is_fully_phased_in
from taxplan.exceptions import MarginalAnalysisError
from taxplan.models.deductions import Deductions
from taxplan.models.enums import ChangeType, FilingStatus, IncomeType, SocialSecurityTier
from taxplan.models.household import Household, Housing
from taxplan.models.income import IncomeSource
from taxplan.models.results import CalculationResult, RateChange, RateChangeReport
from taxplan.models.settings import AppSettings

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")
ADDED_INCOME_ID = "marginal-added-income"

# Largest search step for indicators that can flip back
SCAN_STEP = Decimal("2000")
NON_MONOTONE_INDICATORS = frozenset({"amt"})

# Width of the finite difference used to measure a rate
RATE_STEP = Decimal("10")
RATE_PRECISION = Decimal("0.0001")

CAUSE_LABELS = {
    "deduction_exhausted": "Deductions fully used; income becomes taxable",
    "ordinary_bracket": "Ordinary income reaches the next federal bracket",
    "ltcg_floor_bracket": "Ordinary income pushes capital gains into a higher rate",
    "ltcg_top_bracket": "Capital gains reach a higher rate bracket",
    "ss_tier": "More Social Security benefits become taxable",
    "ss_fully_taxable": "Social Security taxation reaches the 85% ceiling",
    "senior_phaseout": "Senior deduction phase-out",
    "niit": "Net Investment Income Tax begins",
    "additional_medicare": "Additional Medicare Tax begins",
    "amt": "Alternative Minimum Tax applies",
}

SS_TIER_ORDER = {
    SocialSecurityTier.NONE: 0,
    SocialSecurityTier.TIER_I: 1,
    SocialSecurityTier.TIER_II: 2,
    SocialSecurityTier.TIER_III: 3,
}


class RateChangeAnalyzer:
    """Finds where the federal marginal rate changes as income grows."""

    def __init__(self) -> None:
        self._cache: dict[Decimal, CalculationResult] = {}

    def find_next_rate_changes(
        self,
        income_sources: list[IncomeSource],
        taxpayer_age: int | None,
        filing_status: FilingStatus,
        settings: AppSettings | None = None,
        max_changes: int | None = None,
        spouse_age: int | None = None,
        deductions: Deductions | None = None,
        added_type: IncomeType = IncomeType.OTHER,
        housing: Housing | None = None,
        state: str = MICHIGAN_STATE_CODE,
    ) -> RateChangeReport:
        """Search up to ``max_changes`` rate changes within the search horizon.

        Raises:
            MarginalAnalysisError: Any estimate along the way fails or degrades.
        """
        settings = settings or AppSettings()
        if max_changes is None:
            max_changes = settings.rate_search_max_changes
        horizon = settings.rate_search_horizon
        self._cache = {}

        estimator = TaxEstimator()

        def evaluate(delta: Decimal) -> CalculationResult:
            if delta not in self._cache:
                extra = IncomeSource(id=ADDED_INCOME_ID, name="Additional income", type=added_type, amount=delta)
                result = estimator.estimate(
                    income_sources=[*income_sources, extra] if delta > ZERO else income_sources,
                    taxpayer_age=taxpayer_age,
                    spouse_age=spouse_age,
                    filing_status=filing_status,
                    deductions=deductions,
                    settings=settings,
                    housing=housing,
                    state=state,
                )
                if result.degraded:
                    raise MarginalAnalysisError(
                        f"estimate degraded at +${delta:,.0f}: {', '.join(result.degraded)}"
                    )
                self._cache[delta] = result
            return self._cache[delta]

        try:
            indicators = self._indicator_functions(filing_status, settings)
            return self._search(evaluate, indicators, horizon, max_changes)
        except MarginalAnalysisError:
            raise
        except RECOVERABLE_ERRORS as exc:
            raise MarginalAnalysisError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _search(
        self,
        evaluate: Callable[[Decimal], CalculationResult],
        indicators: dict[str, Callable[[CalculationResult], int]],
        horizon: Decimal,
        max_changes: int,
    ) -> RateChangeReport:
        def rate_at(delta: Decimal) -> Decimal:
            before = evaluate(delta).federal_total_tax
            after = evaluate(delta + RATE_STEP).federal_total_tax
            return ((after - before) / RATE_STEP).quantize(RATE_PRECISION)

        baseline = evaluate(ZERO)
        current_rate = rate_at(ZERO)

        position = ZERO
        values = {name: fn(baseline) for name, fn in indicators.items()}
        crossings: dict[str, Decimal | None] = {}
        stale = set(indicators)
        changes: list[RateChange] = []
        from_rate = current_rate

        while len(changes) < max_changes:
            # Only indicators that just flipped need a fresh search
            for name in stale:
                crossings[name] = self._next_crossing(
                    lambda delta, fn=indicators[name]: fn(evaluate(delta)),
                    values[name],
                    position,
                    horizon,
                    max_step=SCAN_STEP if name in NON_MONOTONE_INDICATORS else None,
                )
            pending = {name: at for name, at in crossings.items() if at is not None}
            if not pending:
                break

            at = min(pending.values())
            causes = [name for name in indicators if pending.get(name) == at]
            landed = evaluate(at)
            for name in causes:
                values[name] = indicators[name](landed)
            stale = set(causes)
            position = at

            # The last dollar before the flip is still at the old rate
            amount = at - ONE
            to_rate = rate_at(at)
            if to_rate == from_rate:
                logger.debug("Skipping %s at +%s: rate unchanged", causes, at)
                continue

            changes.append(
                RateChange(
                    amount_to_change=amount,
                    threshold_income=baseline.total_income + amount,
                    from_rate=from_rate,
                    to_rate=to_rate,
                    change_type=ChangeType.INCREASE if to_rate > from_rate else ChangeType.DECREASE,
                    causes=causes,
                    cause="; ".join(CAUSE_LABELS[name] for name in causes),
                )
            )
            from_rate = to_rate

        return RateChangeReport(
            current_rate=current_rate,
            current_income=baseline.total_income,
            rate_changes=changes,
        )

    @staticmethod
    def _next_crossing(
        indicator: Callable[[Decimal], int],
        value: int,
        start: Decimal,
        horizon: Decimal,
        max_step: Decimal | None = None,
    ) -> Decimal | None:
        """Smallest whole-dollar delta in (start, horizon] where indicator != value.

        The search step doubles from one dollar. ``max_step`` caps it so an
        indicator that flips on and back off again cannot hide between two
        steps, as long as its window is at least ``max_step`` wide.
        """
        low = start
        high = None
        step = ONE
        while low < horizon:
            point = min(low + step, horizon)
            if indicator(point) != value:
                high = point
                break
            low = point
            step *= 2
            if max_step is not None:
                step = min(step, max_step)
        if high is None:
            return None

        while high - low > ONE:
            mid = (low + high) // 2
            if indicator(mid) != value:
                high = mid
            else:
                low = mid
        return high

    # ------------------------------------------------------------------
    # Threshold indicators
    # ------------------------------------------------------------------

    @staticmethod
    def _indicator_functions(
        filing_status: FilingStatus, settings: AppSettings
    ) -> dict[str, Callable[[CalculationResult], int]]:
        """Step functions of a result, keyed by cause name; all but amt are monotone."""
        ordinary = federal_brackets(settings.tax_year, filing_status, settings.tcja_sunsetting)
        preferential = ltcg_brackets(settings.tax_year, filing_status)
        senior_start = senior_phaseout_start(filing_status)

        def has_gains(result: CalculationResult) -> bool:
            return result.federal_taxable_income > result.ordinary_taxable_income

        def senior_stage(result: CalculationResult) -> int:
            if senior_start is None or result.magi <= senior_start:
                return 0
            return 1 if result.deductions.senior_deduction > ZERO else 2

        return {
            "deduction_exhausted": lambda r: int(r.federal_taxable_income > ZERO),
            "ordinary_bracket": lambda r: bracket_index(r.ordinary_taxable_income, ordinary),
            "ltcg_floor_bracket": lambda r: (
                bracket_index(r.ordinary_taxable_income, preferential) if has_gains(r) else 0
            ),
            "ltcg_top_bracket": lambda r: (
                bracket_index(r.federal_taxable_income, preferential) if has_gains(r) else 0
            ),
            "ss_tier": lambda r: SS_TIER_ORDER[r.social_security.tier],
            "ss_fully_taxable": lambda r: int(is_fully_phased_in(r.social_security)),
            "senior_phaseout": senior_stage,
            "niit": lambda r: int(r.niit.applies),
            "additional_medicare": lambda r: int(r.additional_medicare.applies),
            "amt": lambda r: int(r.amt.applies),
        }


def basic_rate_report(
    result: CalculationResult, filing_status: FilingStatus, settings: AppSettings
) -> RateChangeReport:
    """Bracket-only fallback: the ordinary rate and one step to the next bracket."""
    brackets = federal_brackets(settings.tax_year, filing_status, settings.tcja_sunsetting)
    income = result.ordinary_taxable_income

    if result.federal_taxable_income <= ZERO:
        current = ZERO
        amount = max(result.deduction_used - result.federal_agi, ZERO)
        to_rate = brackets[0][1]
        cause = "deduction_exhausted"
    else:
        current = marginal_rate(income, brackets)
        amount = amount_to_next_bracket(income, brackets)
        index = bracket_index(income, brackets)
        to_rate = brackets[index + 1][1] if amount is not None else current
        cause = "ordinary_bracket"

    changes = []
    if amount is not None:
        changes.append(
            RateChange(
                amount_to_change=amount,
                threshold_income=result.total_income + amount,
                from_rate=current,
                to_rate=to_rate,
                change_type=ChangeType.INCREASE if to_rate >= current else ChangeType.DECREASE,
                causes=[cause],
                cause=CAUSE_LABELS[cause],
            )
        )
    return RateChangeReport(
        current_rate=current,
        current_income=result.total_income,
        rate_changes=changes,
        is_fallback=True,
    )


def analyze_rate_changes(
    income_sources: list[IncomeSource],
    taxpayer_age: int | None,
    filing_status: FilingStatus,
    settings: AppSettings | None = None,
    max_changes: int | None = None,
    spouse_age: int | None = None,
    deductions: Deductions | None = None,
    added_type: IncomeType = IncomeType.OTHER,
    housing: Housing | None = None,
    state: str = MICHIGAN_STATE_CODE,
) -> RateChangeReport:
    """Run the full search, falling back to the bracket-only report on failure."""
    settings = settings or AppSettings()
    try:
        return RateChangeAnalyzer().find_next_rate_changes(
            income_sources,
            taxpayer_age,
            filing_status,
            settings=settings,
            max_changes=max_changes,
            spouse_age=spouse_age,
            deductions=deductions,
            added_type=added_type,
            housing=housing,
            state=state,
        )
    except MarginalAnalysisError as exc:
        logger.warning("%s; using bracket-only rate estimate", exc)
        result = TaxEstimator().estimate(
            income_sources=income_sources,
            taxpayer_age=taxpayer_age,
            spouse_age=spouse_age,
            filing_status=filing_status,
            deductions=deductions,
            settings=settings,
            housing=housing,
            state=state,
        )
        return basic_rate_report(result, filing_status, settings)


def analyze_household(
    household: Household,
    max_changes: int | None = None,
    added_type: IncomeType = IncomeType.OTHER,
) -> RateChangeReport:
    """Rate changes for a household snapshot, estimated RMDs included."""
    as_of = household.as_of
    taxpayer_age = household.taxpayer.resolved_age(as_of)
    spouse_age = household.spouse.resolved_age(as_of) if household.spouse else None
    sources = RMDCalculator().synthesize(
        household.income_sources, taxpayer_age, spouse_age, household.settings
    )
    return analyze_rate_changes(
        sources,
        taxpayer_age,
        household.filing_status,
        settings=household.settings,
        max_changes=max_changes,
        spouse_age=spouse_age,
        deductions=household.deductions,
        added_type=added_type,
        housing=household.housing,
        state=household.taxpayer.state,
    )
