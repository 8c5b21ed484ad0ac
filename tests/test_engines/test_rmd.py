"""Tests for required minimum distributions and estimated-RMD sources."""

from decimal import Decimal

import pytest

from taxplan.engines.rmd import RMDCalculator, synthetic_id
from taxplan.exceptions import LockedFieldError, RMDComputationError
from taxplan.models.enums import IncomeType, Owner
from taxplan.models.income import IncomeSource, QualifiedAccountDetails, RMDDetails
from taxplan.models.settings import AppSettings


@pytest.fixture
def engine():
    return RMDCalculator()


@pytest.fixture
def settings_2021():
    return AppSettings(tax_year=2021)


def ira(amount="0", balance="100000", owner=Owner.TAXPAYER, enabled=True, source_id="ira"):
    return IncomeSource(
        id=source_id,
        name="Rollover IRA",
        type=IncomeType.TRADITIONAL_IRA,
        amount=Decimal(amount),
        owner=owner,
        enabled=enabled,
        details=QualifiedAccountDetails(account_balance=Decimal(balance)),
    )


def generated(sources):
    return [s for s in sources if s.type == IncomeType.ESTIMATED_RMD]


class TestFactor:
    def test_pre_2022_table(self, engine):
        assert engine.factor_for(72, 2021) == Decimal("25.6")

    def test_current_table(self, engine):
        assert engine.factor_for(73, 2025) == Decimal("26.5")

    def test_below_start_age(self, engine):
        assert engine.factor_for(72, 2025) is None
        assert engine.factor_for(None, 2025) is None

    def test_beyond_table_uses_last_factor(self, engine):
        assert engine.factor_for(125, 2025) == Decimal("2.0")


class TestRequiredDistribution:
    def test_rounds_to_whole_dollars(self, engine):
        """100,000 / 25.6 = 3,906.25 -> 3,906."""
        assert engine.required_distribution(Decimal("100000"), 72, 2021) == Decimal("3906")

    def test_half_rounds_up(self, engine):
        """200,000 / 25.6 = 7,812.5 -> 7,813."""
        assert engine.required_distribution(Decimal("200000"), 72, 2021) == Decimal("7813")

    def test_no_rmd_before_start_age(self, engine):
        assert engine.required_distribution(Decimal("500000"), 70, 2025) == Decimal("0")

    def test_invalid_factor_raises(self, engine, monkeypatch):
        monkeypatch.setattr(engine, "factor_for", lambda age, year: Decimal("0"))
        with pytest.raises(RMDComputationError):
            engine.required_distribution(Decimal("100000"), 80, 2025)


class TestSynthesize:
    def test_creates_shortfall_source(self, engine, settings_2021):
        sources = engine.synthesize([ira()], 72, None, settings_2021)
        rmds = generated(sources)
        assert len(rmds) == 1
        rmd = rmds[0]
        assert rmd.id == synthetic_id("ira") == "rmd-ira"
        assert rmd.amount == Decimal("3906")
        assert rmd.name == "Estimated RMD: Rollover IRA"
        assert rmd.details.required_amount == Decimal("3906")
        assert rmd.details.shortfall_amount == Decimal("3906")
        assert rmd.details.source_id == "ira"

    def test_no_source_when_withdrawals_cover_rmd(self, engine, settings_2021):
        sources = engine.synthesize([ira(amount="3906")], 72, None, settings_2021)
        assert generated(sources) == []

    def test_partial_shortfall(self, engine, settings_2021):
        sources = engine.synthesize([ira(amount="1000")], 72, None, settings_2021)
        assert generated(sources)[0].amount == Decimal("2906")

    def test_idempotent(self, engine, settings_2021):
        once = engine.synthesize([ira()], 72, None, settings_2021)
        twice = engine.synthesize(once, 72, None, settings_2021)
        assert twice == once

    def test_spouse_account_uses_spouse_age(self, engine, settings_2021):
        account = ira(owner=Owner.SPOUSE)
        assert generated(engine.synthesize([account], 60, 72, settings_2021))[0].owner == Owner.SPOUSE
        assert generated(engine.synthesize([account], 72, 60, settings_2021)) == []

    def test_disabled_account_ignored(self, engine, settings_2021):
        assert generated(engine.synthesize([ira(enabled=False)], 72, None, settings_2021)) == []

    def test_rmd_disabled_removes_generated_sources(self, engine, settings_2021):
        sources = engine.synthesize([ira()], 72, None, settings_2021)
        off = AppSettings(tax_year=2021, rmd_enabled=False)
        assert generated(engine.synthesize(sources, 72, None, off)) == []

    def test_stale_source_dropped(self, engine, settings_2021):
        sources = engine.synthesize([ira()], 72, None, settings_2021)
        covered = [ira(amount="5000"), *generated(sources)]
        assert generated(engine.synthesize(covered, 72, None, settings_2021)) == []

    def test_overrides_and_enabled_flag_preserved(self, engine, settings_2021):
        prior = IncomeSource(
            id="rmd-ira",
            name="Estimated RMD: Rollover IRA",
            type=IncomeType.ESTIMATED_RMD,
            amount=Decimal("3906"),
            enabled=False,
            details=RMDDetails(source_id="ira", override_amount=Decimal("5000")),
        )
        rmd = generated(engine.synthesize([ira(), prior], 72, None, settings_2021))[0]
        assert rmd.amount == Decimal("5000")
        assert rmd.enabled is False
        assert rmd.details.override_amount == Decimal("5000")

    def test_override_balance(self, engine, settings_2021):
        prior = IncomeSource(
            id="rmd-ira",
            type=IncomeType.ESTIMATED_RMD,
            details=RMDDetails(source_id="ira", override_balance=Decimal("200000")),
        )
        rmd = generated(engine.synthesize([ira(), prior], 72, None, settings_2021))[0]
        assert rmd.amount == Decimal("7813")
        assert rmd.details.account_balance == Decimal("200000")

    def test_generated_source_is_locked(self, engine, settings_2021):
        rmd = generated(engine.synthesize([ira()], 72, None, settings_2021))[0]
        with pytest.raises(LockedFieldError):
            rmd.with_updates(name="My RMD")
        assert rmd.with_updates(amount=Decimal("4500")).amount == Decimal("4500")


class TestSynthesizeWarnings:
    def test_no_warnings_for_plain_shortfall(self, engine, settings_2021):
        engine.synthesize([ira()], 72, None, settings_2021)
        assert engine.warnings == []

    def test_unknown_owner_age(self, engine, settings_2021):
        assert generated(engine.synthesize([ira()], None, None, settings_2021)) == []
        assert engine.warnings == ["Owner age unknown for Rollover IRA; no RMD estimated."]

    def test_override_below_requirement(self, engine, settings_2021):
        """Required 3,906 but the user pinned the estimate at 2,000."""
        prior = IncomeSource(
            id="rmd-ira",
            type=IncomeType.ESTIMATED_RMD,
            details=RMDDetails(source_id="ira", override_amount=Decimal("2000")),
        )
        engine.synthesize([ira(), prior], 72, None, settings_2021)
        assert engine.warnings == [
            "Estimated RMD for Rollover IRA is set to $2,000.00, below the $3,906.00 still required."
        ]

    def test_warnings_reset_per_call(self, engine, settings_2021):
        engine.synthesize([ira()], None, None, settings_2021)
        engine.synthesize([ira()], 72, None, settings_2021)
        assert engine.warnings == []


class TestSummarize:
    def test_per_account_rows(self, engine):
        settings = AppSettings(tax_year=2025)
        rows = engine.summarize([ira(amount="4000", balance="246000")], 75, None, settings)
        assert len(rows) == 1
        row = rows[0]
        assert row.factor == Decimal("24.6")
        assert row.required_amount == Decimal("10000")
        assert row.existing_amount == Decimal("4000")
        assert row.shortfall_amount == Decimal("6000")

    def test_accounts_without_balance_skipped(self, engine):
        plain = IncomeSource(id="ira", type=IncomeType.TRADITIONAL_IRA, amount=Decimal("1000"))
        assert engine.summarize([plain], 80, None, AppSettings()) == []
