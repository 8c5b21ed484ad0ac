"""Tests for standard, itemized and senior deductions (2025 tables)."""

from decimal import Decimal

import pytest

from taxplan.engines.deductions import DeductionCalculator, seniors_count
from taxplan.models.deductions import Deductions, ItemizedDeductions
from taxplan.models.enums import FilingStatus
from taxplan.models.settings import AppSettings


@pytest.fixture
def engine():
    return DeductionCalculator()


def run(engine, status=FilingStatus.SINGLE, agi="60000", tp_age=40, sp_age=None,
        itemized=None, settings=None):
    deductions = Deductions(itemized=itemized or ItemizedDeductions())
    return engine.calculate(
        deductions,
        Decimal(agi),
        Decimal(agi),
        status,
        tp_age,
        sp_age,
        settings or AppSettings(tax_year=2025),
    )


class TestStandardDeduction:
    def test_single_under_65(self, engine):
        r = run(engine)
        assert r.standard_deduction == Decimal("15000")
        assert r.senior_deduction == Decimal("0")
        assert r.deduction_used == Decimal("15000")
        assert not r.used_itemized

    def test_single_senior(self, engine):
        """15,000 + 2,000 age 65+ + 6,000 senior deduction = 23,000."""
        r = run(engine, agi="50000", tp_age=70)
        assert r.additional_age_deduction == Decimal("2000")
        assert r.standard_deduction == Decimal("17000")
        assert r.senior_deduction == Decimal("6000")
        assert r.deduction_used == Decimal("23000")

    def test_joint_both_seniors(self, engine):
        """30,000 + 2 x 1,600 + 2 x 6,000 = 45,200."""
        r = run(engine, FilingStatus.MFJ, agi="100000", tp_age=66, sp_age=67)
        assert r.standard_deduction == Decimal("33200")
        assert r.senior_deduction == Decimal("12000")
        assert r.deduction_used == Decimal("45200")

    def test_2024_age_amount(self, engine):
        r = run(engine, tp_age=70, settings=AppSettings(tax_year=2024))
        assert r.standard_deduction == Decimal("16550")
        assert r.senior_deduction == Decimal("0")

    def test_tcja_sunset(self, engine):
        r = run(engine, settings=AppSettings(tax_year=2026, tcja_sunsetting=True))
        assert r.standard_deduction == Decimal("8000")


class TestSeniorDeduction:
    def test_count_spouse_only_when_joint(self):
        assert seniors_count(70, 70, FilingStatus.MFJ) == 2
        assert seniors_count(70, 60, FilingStatus.MFJ) == 1
        assert seniors_count(70, 70, FilingStatus.MFS) == 1
        assert seniors_count(None, None, FilingStatus.SINGLE) == 0

    def test_phaseout(self):
        """MAGI $100,000: 6% x 25,000 = 1,500 -> 4,500."""
        amount = DeductionCalculator.senior_deduction(1, Decimal("100000"), FilingStatus.SINGLE, 2025)
        assert amount == Decimal("4500")

    def test_fully_phased_out(self):
        amount = DeductionCalculator.senior_deduction(1, Decimal("175000"), FilingStatus.SINGLE, 2025)
        assert amount == Decimal("0")

    def test_mfs_ineligible(self):
        amount = DeductionCalculator.senior_deduction(1, Decimal("50000"), FilingStatus.MFS, 2025)
        assert amount == Decimal("0")

    def test_only_2025_through_2028(self):
        for year, expected in ((2024, "0"), (2025, "6000"), (2028, "6000"), (2029, "0")):
            amount = DeductionCalculator.senior_deduction(1, Decimal("50000"), FilingStatus.SINGLE, year)
            assert amount == Decimal(expected), year

    def test_setting_disables(self, engine):
        r = run(engine, tp_age=70, settings=AppSettings(senior_deduction_enabled=False))
        assert r.senior_deduction == Decimal("0")

    def test_added_on_top_of_itemized(self, engine):
        itemized = ItemizedDeductions(mortgage_interest=Decimal("20000"))
        r = run(engine, agi="50000", tp_age=70, itemized=itemized)
        assert r.used_itemized
        assert r.deduction_used == Decimal("26000")


class TestItemized:
    def test_salt_cap_and_warning(self, engine):
        itemized = ItemizedDeductions(
            state_and_local_taxes=Decimal("15000"),
            mortgage_interest=Decimal("12000"),
            charitable=Decimal("3000"),
        )
        r = run(engine, agi="150000", itemized=itemized)
        assert r.salt_deduction == Decimal("10000")
        assert r.salt_cap_lost == Decimal("5000")
        assert r.total_itemized == Decimal("25000")
        assert r.used_itemized
        assert r.deduction_used == Decimal("25000")
        assert any("SALT cap" in w for w in engine.warnings)

    def test_no_warning_when_not_itemizing(self, engine):
        itemized = ItemizedDeductions(state_and_local_taxes=Decimal("12000"))
        r = run(engine, itemized=itemized)
        assert not r.used_itemized
        assert engine.warnings == []

    def test_medical_floor(self, engine):
        """$10,000 medical - 7.5% x $80,000 = 4,000."""
        itemized = ItemizedDeductions(medical_expenses=Decimal("10000"))
        r = run(engine, agi="80000", itemized=itemized)
        assert r.medical_deduction == Decimal("4000")

    def test_mfs_salt_cap(self, engine):
        itemized = ItemizedDeductions(state_and_local_taxes=Decimal("9000"))
        r = run(engine, FilingStatus.MFS, itemized=itemized)
        assert r.salt_deduction == Decimal("5000")

    def test_standard_wins_tie(self, engine):
        itemized = ItemizedDeductions(mortgage_interest=Decimal("15000"))
        r = run(engine, itemized=itemized)
        assert not r.used_itemized
        assert r.deduction_used == Decimal("15000")
