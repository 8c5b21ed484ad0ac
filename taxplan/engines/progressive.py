"""Progressive bracket engine.

Applies any ordered ``(upper_bound, rate)`` schedule from ``brackets.py``.
Each dollar is taxed only at the rate of the bracket it falls in, so tax is
non-decreasing and continuous across bracket boundaries.

Boundary convention: income exactly equal to an upper bound belongs to the
lower bracket; the next dollar is taxed at the higher rate.
"""

from decimal import Decimal

from taxplan.engines.brackets import (
    FEDERAL_BRACKETS,
    FEDERAL_LTCG_BRACKETS,
    FEDERAL_STANDARD_DEDUCTION,
    TCJA_SUNSET_BRACKETS,
    TCJA_SUNSET_STANDARD_DEDUCTION,
    TCJA_SUNSET_YEAR,
    BracketSchedule,
    resolve_year,
)
from taxplan.exceptions import BracketTableError
from taxplan.models.enums import FilingStatus
from taxplan.models.results import TaxBracket

ZERO = Decimal("0")


def bracket_tax(taxable_income: Decimal, brackets: BracketSchedule) -> Decimal:
    """Apply progressive tax brackets to income."""
    if taxable_income <= ZERO:
        return ZERO

    tax = ZERO
    prev_bound = ZERO
    for upper_bound, rate in brackets:
        if upper_bound is None:
            tax += (taxable_income - prev_bound) * rate
            break
        tax += (min(taxable_income, upper_bound) - prev_bound) * rate
        if taxable_income <= upper_bound:
            break
        prev_bound = upper_bound
    return tax


def bracket_index(income: Decimal, brackets: BracketSchedule) -> int:
    """Position of the bracket containing income."""
    for index, (upper_bound, _rate) in enumerate(brackets):
        if upper_bound is None or income <= upper_bound:
            return index
    return len(brackets) - 1


def marginal_rate(income: Decimal, brackets: BracketSchedule) -> Decimal:
    return brackets[bracket_index(income, brackets)][1]


def to_tax_brackets(brackets: BracketSchedule) -> list[TaxBracket]:
    """Expand a schedule into explicit {min, max, rate} triples."""
    result = []
    lower = ZERO
    for upper_bound, rate in brackets:
        result.append(TaxBracket(min=lower, max=upper_bound, rate=rate))
        if upper_bound is not None:
            lower = upper_bound
    return result


def bracket_for(income: Decimal, brackets: BracketSchedule) -> TaxBracket:
    return to_tax_brackets(brackets)[bracket_index(income, brackets)]


def next_bracket(income: Decimal, brackets: BracketSchedule) -> TaxBracket | None:
    index = bracket_index(income, brackets) + 1
    if index >= len(brackets):
        return None
    return to_tax_brackets(brackets)[index]


def amount_to_next_bracket(income: Decimal, brackets: BracketSchedule) -> Decimal | None:
    """Additional income until the next bracket starts; None in the top bracket."""
    upper_bound = brackets[bracket_index(income, brackets)][0]
    if upper_bound is None:
        return None
    return upper_bound - max(income, ZERO)


# ----------------------------------------------------------------------
# Schedule selection
# ----------------------------------------------------------------------


def federal_brackets(
    tax_year: int, filing_status: FilingStatus, tcja_sunsetting: bool = False
) -> BracketSchedule:
    """Ordinary income schedule for the year, honoring the TCJA sunset flag."""
    if tax_year >= TCJA_SUNSET_YEAR and tcja_sunsetting:
        return TCJA_SUNSET_BRACKETS[filing_status]
    year = resolve_year(FEDERAL_BRACKETS, tax_year)
    brackets = FEDERAL_BRACKETS[year].get(filing_status)
    if not brackets:
        raise BracketTableError("federal", tax_year, filing_status)
    return brackets


def ltcg_brackets(tax_year: int, filing_status: FilingStatus) -> BracketSchedule:
    year = resolve_year(FEDERAL_LTCG_BRACKETS, tax_year)
    brackets = FEDERAL_LTCG_BRACKETS[year].get(filing_status)
    if not brackets:
        raise BracketTableError("LTCG", tax_year, filing_status)
    return brackets


def base_standard_deduction(
    tax_year: int, filing_status: FilingStatus, tcja_sunsetting: bool = False
) -> Decimal:
    if tax_year >= TCJA_SUNSET_YEAR and tcja_sunsetting:
        return TCJA_SUNSET_STANDARD_DEDUCTION[filing_status]
    year = resolve_year(FEDERAL_STANDARD_DEDUCTION, tax_year)
    return FEDERAL_STANDARD_DEDUCTION[year][filing_status]
