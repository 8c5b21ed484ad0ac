"""Tests for tax table completeness and year resolution."""

from decimal import Decimal

from taxplan.engines.brackets import (
    AMT_EXEMPTION,
    FEDERAL_BRACKETS,
    FEDERAL_LTCG_BRACKETS,
    FEDERAL_STANDARD_DEDUCTION,
    IRMAA_TIERS,
    TCJA_SUNSET_BRACKETS,
    UNIFORM_LIFETIME_TABLE,
    UNIFORM_LIFETIME_TABLE_PRE_2022,
    resolve_year,
    rmd_start_age,
)
from taxplan.models.enums import FilingStatus

ALL_STATUSES = [FilingStatus.SINGLE, FilingStatus.MFJ, FilingStatus.MFS, FilingStatus.HOH]


class TestFederalBrackets:
    def test_all_statuses_present(self):
        for year in (2024, 2025):
            for status in ALL_STATUSES:
                assert status in FEDERAL_BRACKETS[year], f"Missing {year}/{status}"
                assert status in FEDERAL_LTCG_BRACKETS[year], f"Missing LTCG {year}/{status}"
                assert status in FEDERAL_STANDARD_DEDUCTION[year]
                assert status in AMT_EXEMPTION[year]

    def test_bracket_monotonicity(self):
        schedules = [FEDERAL_BRACKETS[y][s] for y in (2024, 2025) for s in ALL_STATUSES]
        schedules += list(TCJA_SUNSET_BRACKETS.values())
        for brackets in schedules:
            prev_bound = Decimal("0")
            prev_rate = Decimal("0")
            for upper, rate in brackets:
                assert rate > prev_rate
                prev_rate = rate
                if upper is not None:
                    assert upper > prev_bound
                    prev_bound = upper

    def test_top_bracket_is_unbounded(self):
        for status in ALL_STATUSES:
            assert FEDERAL_BRACKETS[2025][status][-1][0] is None
            assert FEDERAL_LTCG_BRACKETS[2025][status][-1][0] is None

    def test_2025_single_first_bracket(self):
        assert FEDERAL_BRACKETS[2025][FilingStatus.SINGLE][0] == (Decimal("11925"), Decimal("0.10"))


class TestResolveYear:
    def test_exact_year(self):
        assert resolve_year(FEDERAL_BRACKETS, 2024) == 2024

    def test_later_year_uses_latest_earlier(self):
        assert resolve_year(FEDERAL_BRACKETS, 2031) == 2025

    def test_earlier_year_uses_earliest(self):
        assert resolve_year(FEDERAL_BRACKETS, 2019) == 2024

    def test_irmaa_single_year_table(self):
        assert resolve_year(IRMAA_TIERS, 2024) == 2025


class TestRMDTables:
    def test_start_age_by_year(self):
        assert rmd_start_age(2019) == 70
        assert rmd_start_age(2021) == 72
        assert rmd_start_age(2023) == 73
        assert rmd_start_age(2030) == 73

    def test_pre_2022_factor_at_72(self):
        assert UNIFORM_LIFETIME_TABLE_PRE_2022[72] == Decimal("25.6")

    def test_current_factor_at_73(self):
        assert UNIFORM_LIFETIME_TABLE[73] == Decimal("26.5")

    def test_factors_decrease_with_age(self):
        for table in (UNIFORM_LIFETIME_TABLE, UNIFORM_LIFETIME_TABLE_PRE_2022):
            ages = sorted(table)
            for younger, older in zip(ages, ages[1:]):
                assert table[older] < table[younger]


class TestIrmaaTiers:
    def test_thresholds_ascending(self):
        for status in ALL_STATUSES:
            thresholds = [t[0] for t in IRMAA_TIERS[2025][status]]
            assert thresholds == sorted(thresholds)

    def test_surcharges_ascending(self):
        tiers = IRMAA_TIERS[2025][FilingStatus.SINGLE]
        assert [t[1] for t in tiers] == sorted(t[1] for t in tiers)
        assert [t[2] for t in tiers] == sorted(t[2] for t in tiers)
