"""Tests for the progressive bracket engine.

Expected values use the 2025 single schedule (Rev. Proc. 2024-40):
10% to $11,925, 12% to $48,475, 22% to $103,350, 24% to $197,300.
"""

from decimal import Decimal

import pytest

from taxplan.engines.brackets import FEDERAL_BRACKETS, TCJA_SUNSET_BRACKETS
from taxplan.engines.progressive import (
    amount_to_next_bracket,
    base_standard_deduction,
    bracket_for,
    bracket_index,
    bracket_tax,
    federal_brackets,
    marginal_rate,
    next_bracket,
    to_tax_brackets,
)
from taxplan.models.enums import FilingStatus


@pytest.fixture
def single_2025():
    return FEDERAL_BRACKETS[2025][FilingStatus.SINGLE]


class TestBracketTax:
    def test_ladder_sum(self, single_2025):
        """$45,000 -> 10% x 11,925 + 12% x 33,075 = 1,192.50 + 3,969.00 = 5,161.50."""
        assert bracket_tax(Decimal("45000"), single_2025) == Decimal("5161.50")

    def test_first_bracket_exactly(self, single_2025):
        assert bracket_tax(Decimal("11925"), single_2025) == Decimal("1192.50")

    def test_zero_and_negative(self, single_2025):
        assert bracket_tax(Decimal("0"), single_2025) == Decimal("0")
        assert bracket_tax(Decimal("-5000"), single_2025) == Decimal("0")

    def test_top_bracket(self, single_2025):
        """$700,000: 188,769.75 through $626,350, then 37% x 73,650 = 27,250.50."""
        expected = (
            Decimal("1192.50")
            + Decimal("4386.00")
            + Decimal("12072.50")
            + Decimal("22548.00")
            + Decimal("17032.00")
            + Decimal("131538.75")
            + Decimal("27250.50")
        )
        assert bracket_tax(Decimal("700000"), single_2025) == expected

    def test_continuous_across_boundary(self, single_2025):
        below = bracket_tax(Decimal("48475"), single_2025)
        above = bracket_tax(Decimal("48476"), single_2025)
        assert below == Decimal("5578.50")
        assert above - below == Decimal("0.22")

    def test_non_decreasing(self, single_2025):
        previous = Decimal("0")
        for income in range(0, 800001, 25000):
            tax = bracket_tax(Decimal(income), single_2025)
            assert tax >= previous
            previous = tax


class TestBracketPosition:
    def test_boundary_belongs_to_lower_bracket(self, single_2025):
        assert bracket_index(Decimal("11925"), single_2025) == 0
        assert bracket_index(Decimal("11926"), single_2025) == 1
        assert marginal_rate(Decimal("11925"), single_2025) == Decimal("0.10")

    def test_amount_to_next_bracket(self, single_2025):
        assert amount_to_next_bracket(Decimal("45000"), single_2025) == Decimal("3475")

    def test_amount_to_next_in_top_bracket(self, single_2025):
        assert amount_to_next_bracket(Decimal("1000000"), single_2025) is None

    def test_bracket_for(self, single_2025):
        bracket = bracket_for(Decimal("45000"), single_2025)
        assert bracket.min == Decimal("11925")
        assert bracket.max == Decimal("48475")
        assert bracket.rate == Decimal("0.12")

    def test_next_bracket(self, single_2025):
        upcoming = next_bracket(Decimal("45000"), single_2025)
        assert upcoming.min == Decimal("48475")
        assert upcoming.rate == Decimal("0.22")
        assert next_bracket(Decimal("1000000"), single_2025) is None

    def test_to_tax_brackets(self, single_2025):
        expanded = to_tax_brackets(single_2025)
        assert len(expanded) == 7
        assert expanded[0].min == Decimal("0")
        assert expanded[-1].max is None
        assert expanded[-1].min == Decimal("626350")


class TestScheduleSelection:
    def test_tcja_sunset_flag(self):
        assert federal_brackets(2026, FilingStatus.SINGLE, True) is TCJA_SUNSET_BRACKETS[FilingStatus.SINGLE]

    def test_sunset_flag_ignored_before_2026(self):
        assert federal_brackets(2025, FilingStatus.SINGLE, True) is FEDERAL_BRACKETS[2025][FilingStatus.SINGLE]

    def test_future_year_without_sunset(self):
        assert federal_brackets(2027, FilingStatus.MFJ) is FEDERAL_BRACKETS[2025][FilingStatus.MFJ]

    def test_standard_deduction(self):
        assert base_standard_deduction(2025, FilingStatus.MFJ) == Decimal("30000")
        assert base_standard_deduction(2024, FilingStatus.HOH) == Decimal("21900")
        assert base_standard_deduction(2026, FilingStatus.SINGLE, True) == Decimal("8000")
        assert base_standard_deduction(2026, FilingStatus.SINGLE) == Decimal("15000")
