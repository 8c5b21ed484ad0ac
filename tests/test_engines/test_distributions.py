"""Tests for taxable-portion rules and early withdrawal penalties."""

from datetime import date
from decimal import Decimal

import pytest

from taxplan.engines.distributions import DistributionAdjuster, owner_age
from taxplan.models.enums import AccessMethod, IncomeType, Owner, PolicyType
from taxplan.models.income import (
    AnnuityDetails,
    IncomeSource,
    LifeInsuranceDetails,
    QualifiedAccountDetails,
    RothDetails,
)


@pytest.fixture
def engine():
    return DistributionAdjuster()


def adjust_one(engine, source, age, tax_year=2025):
    adjusted = engine.adjust([source], age, None, tax_year)
    assert len(adjusted) == 1
    return adjusted[0]


class TestOwnerAge:
    def test_owner_lookup(self):
        assert owner_age(Owner.TAXPAYER, 60, 55) == 60
        assert owner_age(Owner.SPOUSE, 60, 55) == 55

    def test_joint_uses_older(self):
        assert owner_age(Owner.JOINT, 60, 66) == 66
        assert owner_age(Owner.JOINT, None, 66) == 66
        assert owner_age(Owner.JOINT, None, None) is None


class TestQualifiedAccounts:
    def test_fully_taxable_with_penalty_before_59_half(self, engine):
        source = IncomeSource(id="ira", type=IncomeType.TRADITIONAL_IRA, amount=Decimal("20000"))
        a = adjust_one(engine, source, 50)
        assert a.taxable_amount == Decimal("20000")
        assert a.penalty == Decimal("2000.0")
        assert len(engine.warnings) == 1

    def test_no_penalty_at_60(self, engine):
        source = IncomeSource(id="ira", type=IncomeType.TRADITIONAL_IRA, amount=Decimal("20000"))
        assert adjust_one(engine, source, 60).penalty == Decimal("0")
        assert engine.warnings == []

    def test_unknown_age_not_penalized(self, engine):
        source = IncomeSource(id="ira", type=IncomeType.TRADITIONAL_IRA, amount=Decimal("20000"))
        assert adjust_one(engine, source, None).penalty == Decimal("0")

    def test_separation_from_service_at_55(self, engine):
        source = IncomeSource(
            id="401k",
            type=IncomeType.TRADITIONAL_401K,
            amount=Decimal("30000"),
            details=QualifiedAccountDetails(separated_from_service_at_55=True),
        )
        assert adjust_one(engine, source, 56).penalty == Decimal("0")

    def test_separation_exception_not_for_iras(self, engine):
        source = IncomeSource(
            id="ira",
            type=IncomeType.TRADITIONAL_IRA,
            amount=Decimal("30000"),
            details=QualifiedAccountDetails(separated_from_service_at_55=True),
        )
        assert adjust_one(engine, source, 56).penalty == Decimal("3000.0")


class TestAnnuities:
    def test_pre_tefra_basis_first(self, engine):
        """Remaining basis 30,000 - 25,000 = 5,000 comes out first: 12,000 - 5,000 taxable."""
        source = IncomeSource(
            id="ann",
            type=IncomeType.ANNUITY,
            amount=Decimal("12000"),
            details=AnnuityDetails(
                purchase_date=date(1980, 1, 1),
                cost_basis=Decimal("30000"),
                basis_recovered=Decimal("25000"),
            ),
        )
        a = adjust_one(engine, source, 70)
        assert a.taxable_amount == Decimal("7000")
        assert a.penalty == Decimal("0")

    def test_exclusion_ratio(self, engine):
        """50,000 / 200,000 = 25% excluded: 10,000 payment -> 7,500 taxable."""
        source = IncomeSource(
            id="ann",
            type=IncomeType.ANNUITY,
            amount=Decimal("10000"),
            details=AnnuityDetails(
                purchase_date="2005-03-01",
                cost_basis=Decimal("50000"),
                expected_return=Decimal("200000"),
            ),
        )
        assert adjust_one(engine, source, 70).taxable_amount == Decimal("7500")

    def test_exclusion_capped_by_remaining_basis(self):
        details = AnnuityDetails(
            cost_basis=Decimal("50000"),
            expected_return=Decimal("200000"),
            basis_recovered=Decimal("49000"),
        )
        taxable = DistributionAdjuster.annuity_taxable_amount(details, Decimal("10000"))
        assert taxable == Decimal("9000")

    def test_qualified_annuity_fully_taxable(self):
        details = AnnuityDetails(qualified=True, cost_basis=Decimal("50000"))
        assert DistributionAdjuster.annuity_taxable_amount(details, Decimal("10000")) == Decimal("10000")

    def test_no_details_fully_taxable_and_penalized_early(self, engine):
        source = IncomeSource(id="ann", type=IncomeType.ANNUITY, amount=Decimal("10000"))
        a = adjust_one(engine, source, 50)
        assert a.taxable_amount == Decimal("10000")
        assert a.penalty == Decimal("1000.0")


class TestRoth:
    def test_qualified_distribution_tax_free(self, engine):
        source = IncomeSource(
            id="roth",
            type=IncomeType.ROTH_IRA,
            amount=Decimal("40000"),
            details=RothDetails(first_contribution_year=2010),
        )
        a = adjust_one(engine, source, 65)
        assert a.taxable_amount == Decimal("0")
        assert a.penalty == Decimal("0")

    def test_ordering_rules_before_59_half(self, engine):
        """20,000 - 10,000 contributions - 5,000 conversions = 5,000 earnings, 10% penalty."""
        source = IncomeSource(
            id="roth",
            type=IncomeType.ROTH_IRA,
            amount=Decimal("20000"),
            details=RothDetails(
                contributions=Decimal("10000"),
                conversions=Decimal("5000"),
                first_contribution_year=2015,
            ),
        )
        a = adjust_one(engine, source, 50)
        assert a.taxable_amount == Decimal("5000")
        assert a.penalty == Decimal("500.0")

    def test_unseasoned_account_after_59_half(self, engine):
        source = IncomeSource(
            id="roth",
            type=IncomeType.ROTH_IRA,
            amount=Decimal("20000"),
            details=RothDetails(contributions=Decimal("15000"), first_contribution_year=2023),
        )
        a = adjust_one(engine, source, 62)
        assert a.taxable_amount == Decimal("5000")
        assert a.penalty == Decimal("0")

    def test_contributions_come_out_tax_free(self, engine):
        source = IncomeSource(
            id="roth",
            type=IncomeType.ROTH_IRA,
            amount=Decimal("8000"),
            details=RothDetails(contributions=Decimal("10000")),
        )
        assert adjust_one(engine, source, 40).taxable_amount == Decimal("0")

    def test_disability_waives_penalty(self, engine):
        source = IncomeSource(
            id="roth",
            type=IncomeType.ROTH_IRA,
            amount=Decimal("20000"),
            details=RothDetails(
                contributions=Decimal("15000"), first_contribution_year=2023, disabled=True
            ),
        )
        a = adjust_one(engine, source, 45)
        assert a.taxable_amount == Decimal("5000")
        assert a.penalty == Decimal("0")

    def test_first_home_exception(self, engine):
        """Earnings 15,000; first $10,000 exempt from the penalty -> 10% x 5,000."""
        source = IncomeSource(
            id="roth",
            type=IncomeType.ROTH_IRA,
            amount=Decimal("20000"),
            details=RothDetails(contributions=Decimal("5000"), first_home=True),
        )
        a = adjust_one(engine, source, 35)
        assert a.taxable_amount == Decimal("15000")
        assert a.penalty == Decimal("500.0")

    def test_missing_history_warns(self, engine):
        source = IncomeSource(id="roth", name="Roth", type=IncomeType.ROTH_IRA, amount=Decimal("5000"))
        a = adjust_one(engine, source, 45)
        assert a.taxable_amount == Decimal("0")
        assert "no contribution history" in engine.warnings[0]


class TestLifeInsurance:
    def policy(self, amount, **details):
        return IncomeSource(
            id="wl",
            name="Whole life",
            type=IncomeType.LIFE_INSURANCE,
            amount=Decimal(amount),
            details=LifeInsuranceDetails(
                cash_value=Decimal("100000"), premiums_paid=Decimal("60000"), **details
            ),
        )

    def test_mec_gains_first_with_penalty(self, engine):
        """Gain 40,000 comes out first; 10% penalty before 59.5."""
        a = adjust_one(engine, self.policy("50000", is_mec=True), 50)
        assert a.taxable_amount == Decimal("40000")
        assert a.penalty == Decimal("4000.0")

    def test_withdrawal_basis_first(self, engine):
        a = adjust_one(engine, self.policy("70000"), 50)
        assert a.taxable_amount == Decimal("10000")
        assert a.penalty == Decimal("0")

    def test_loan_tax_free(self, engine):
        a = adjust_one(engine, self.policy("50000", access_method=AccessMethod.LOAN), 50)
        assert a.taxable_amount == Decimal("0")

    def test_lapsed_loan_taxes_gain(self, engine):
        policy = self.policy("50000", access_method=AccessMethod.LOAN, policy_lapsed=True)
        assert adjust_one(engine, policy, 70).taxable_amount == Decimal("40000")

    def test_combination_split(self, engine):
        """Half loan, half withdrawal: 40,000 withdrawn is within 60,000 basis."""
        policy = self.policy("80000", access_method="combination")
        assert adjust_one(engine, policy, 70).taxable_amount == Decimal("0")

    def test_term_policy_warns(self, engine):
        policy = self.policy("10000", policy_type=PolicyType.TERM)
        assert adjust_one(engine, policy, 70).taxable_amount == Decimal("0")
        assert "term policy" in engine.warnings[0]

    def test_no_details(self, engine):
        source = IncomeSource(id="li", type=IncomeType.LIFE_INSURANCE, amount=Decimal("10000"))
        assert adjust_one(engine, source, 70).taxable_amount == Decimal("0")


class TestOtherTypes:
    def test_tax_exempt_interest(self, engine):
        source = IncomeSource(id="muni", type=IncomeType.TAX_EXEMPT_INTEREST, amount=Decimal("4000"))
        a = adjust_one(engine, source, 50)
        assert a.gross_amount == Decimal("4000")
        assert a.taxable_amount == Decimal("0")

    def test_wages_pass_through(self, engine):
        source = IncomeSource(id="w2", type=IncomeType.WAGES, amount=Decimal("4000"), frequency="monthly")
        assert adjust_one(engine, source, 50).taxable_amount == Decimal("48000")

    def test_disabled_sources_skipped(self, engine):
        sources = [
            IncomeSource(id="a", type=IncomeType.WAGES, amount=Decimal("1000")),
            IncomeSource(id="b", type=IncomeType.WAGES, amount=Decimal("1000"), enabled=False),
        ]
        assert [a.source_id for a in engine.adjust(sources, 40, None, 2025)] == ["a"]
