"""Typer CLI interface for taxplan."""

import logging
from pathlib import Path

import typer
from pydantic import ValidationError

from taxplan.models.household import Household

app = typer.Typer(
    name="taxplan",
    help="taxplan: retirement tax planning estimates for a household.",
)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """taxplan: retirement tax planning estimates for a household."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_household(path: Path) -> Household:
    """Read a household snapshot, exiting with status 1 on unusable input."""
    if not path.exists():
        typer.echo(f"Error: File not found: {path}", err=True)
        raise typer.Exit(1)
    try:
        return Household.model_validate_json(path.read_text())
    except ValidationError as exc:
        typer.echo(f"Error: Invalid household file {path.name}:\n{exc}", err=True)
        raise typer.Exit(1)


FILE_ARGUMENT = typer.Argument(..., help="Household JSON file")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Show debug logging")


@app.command()
def estimate(
    file: Path = FILE_ARGUMENT,
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Compute the federal, payroll and state tax estimate for a household."""
    from taxplan.engines.estimator import TaxEstimator

    _configure_logging(verbose)
    household = _load_household(file)
    result = TaxEstimator().estimate_household(household)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return

    fs_key = result.filing_status.value
    typer.echo(f"=== Tax Estimate: {result.tax_year} ({fs_key}) ===")
    typer.echo("")
    typer.echo("INCOME")
    typer.echo(f"  Total Income:          ${result.total_income:>12,.2f}")
    if result.social_security.benefits > 0:
        typer.echo(f"  Social Security:       ${result.social_security.benefits:>12,.2f}")
        typer.echo(f"    (Taxable:            ${result.social_security.taxable_amount:>12,.2f})")
    typer.echo(f"  AGI:                   ${result.federal_agi:>12,.2f}")
    typer.echo(f"  MAGI:                  ${result.magi:>12,.2f}")
    typer.echo("")
    typer.echo("DEDUCTIONS")
    label = "ITEMIZED" if result.used_itemized else "STANDARD"
    typer.echo(f"  Standard Deduction:    ${result.deductions.standard_deduction:>12,.2f}")
    typer.echo(f"  Itemized Deductions:   ${result.deductions.total_itemized:>12,.2f}")
    if result.deductions.senior_deduction > 0:
        typer.echo(f"  Senior Deduction:      ${result.deductions.senior_deduction:>12,.2f}")
    typer.echo(f"  >>> Using {label}:      ${result.deduction_used:>12,.2f}")
    typer.echo(f"  Taxable Income:        ${result.federal_taxable_income:>12,.2f}")
    typer.echo("")
    typer.echo("FEDERAL TAX")
    typer.echo(f"  Ordinary Income Tax:   ${result.federal_ordinary_tax:>12,.2f}")
    typer.echo(f"  Capital Gains Tax:     ${result.capital_gains.tax:>12,.2f}")
    typer.echo(f"  AMT:                   ${result.amt.additional_tax:>12,.2f}")
    typer.echo(f"  NIIT (3.8%):           ${result.niit.tax:>12,.2f}")
    if result.additional_medicare.tax > 0:
        typer.echo(f"  Addl Medicare Tax:     ${result.additional_medicare.tax:>12,.2f}")
    if result.early_withdrawal_penalties > 0:
        typer.echo(f"  Early Withdrawal:      ${result.early_withdrawal_penalties:>12,.2f}")
    typer.echo("  ──────────────────────────────────────")
    typer.echo(f"  Total Federal Tax:     ${result.federal_total_tax:>12,.2f}")
    typer.echo("")
    typer.echo(f"STATE TAX ({result.state.state or 'N/A'})")
    typer.echo(f"  Taxable Income:        ${result.state.taxable_income:>12,.2f}")
    typer.echo(f"  Income Tax:            ${result.state.tax:>12,.2f}")
    if result.state.homestead_credit > 0:
        typer.echo(f"  Homestead Credit:     -${result.state.homestead_credit:>12,.2f}")
    typer.echo(f"  Net State Tax:         ${result.net_state_tax:>12,.2f}")
    if result.payroll_tax > 0:
        typer.echo("")
        typer.echo("PAYROLL TAX")
        typer.echo(f"  Social Security:       ${result.fica.social_security_tax:>12,.2f}")
        typer.echo(f"  Medicare:              ${result.fica.medicare_tax:>12,.2f}")
    typer.echo("")
    typer.echo("TOTAL")
    typer.echo("  ══════════════════════════════════════")
    typer.echo(f"  Total Tax:             ${result.total_tax:>12,.2f}")
    typer.echo(f"  Marginal Rate:         {result.total_marginal_rate * 100:>12.2f}%")
    typer.echo(f"  Effective Rate:        {result.effective_rate_total * 100:>12.2f}%")
    if result.irmaa.tier > 0:
        typer.echo(f"  IRMAA Surcharge:       ${result.irmaa.annual_surcharge:>12,.2f}")

    if result.warnings:
        typer.echo("")
        typer.echo("WARNINGS:")
        for w in result.warnings:
            typer.echo(f"  - {w}")


@app.command(name="rate-changes")
def rate_changes(
    file: Path = FILE_ARGUMENT,
    max_changes: int | None = typer.Option(
        None, "--max-changes", "-n", help="Stop after this many rate changes"
    ),
    added: str = typer.Option(
        "other", "--added-type", help="Type of the added income: other or wages"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Show where the marginal rate changes as income grows."""
    from taxplan.engines.marginal import analyze_household
    from taxplan.models.enums import IncomeType

    _configure_logging(verbose)
    added_types = {"other": IncomeType.OTHER, "wages": IncomeType.WAGES}
    if added.lower() not in added_types:
        typer.echo(f"Error: Invalid added type '{added}'. Valid: other, wages", err=True)
        raise typer.Exit(1)

    household = _load_household(file)
    report = analyze_household(household, max_changes=max_changes, added_type=added_types[added.lower()])

    if as_json:
        typer.echo(report.model_dump_json(indent=2))
        return

    suffix = " (bracket-only estimate)" if report.is_fallback else ""
    typer.echo(f"Current marginal rate: {report.current_rate * 100:.2f}%{suffix}")
    if not report.rate_changes:
        typer.echo("No rate changes within the search range.")
        return
    for change in report.rate_changes:
        typer.echo(
            f"  +${change.amount_to_change:>12,.0f}: "
            f"{change.from_rate * 100:6.2f}% -> {change.to_rate * 100:6.2f}%  {change.cause}"
        )


@app.command()
def rmd(
    file: Path = FILE_ARGUMENT,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Show required minimum distributions per account."""
    from taxplan.engines.rmd import RMDCalculator
    from taxplan.exceptions import RMDComputationError
    from taxplan.models.enums import IncomeType

    _configure_logging(verbose)
    household = _load_household(file)
    as_of = household.as_of
    taxpayer_age = household.taxpayer.resolved_age(as_of)
    spouse_age = household.spouse.resolved_age(as_of) if household.spouse else None

    calculator = RMDCalculator()
    try:
        results = calculator.summarize(
            household.income_sources, taxpayer_age, spouse_age, household.settings
        )
        sources = calculator.synthesize(
            household.income_sources, taxpayer_age, spouse_age, household.settings
        )
    except RMDComputationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    if not results:
        typer.echo("No qualified accounts with a balance.")
        return

    typer.echo(f"=== Required Minimum Distributions: {household.settings.tax_year} ===")
    for r in results:
        factor = f"{r.factor}" if r.factor is not None else "n/a"
        typer.echo(f"  {r.source_id} (age {r.age if r.age is not None else '?'}, factor {factor})")
        typer.echo(f"    Balance:             ${r.account_balance:>12,.2f}")
        typer.echo(f"    Required:            ${r.required_amount:>12,.2f}")
        typer.echo(f"    Planned:             ${r.existing_amount:>12,.2f}")
        typer.echo(f"    Shortfall:           ${r.shortfall_amount:>12,.2f}")

    generated = [s for s in sources if s.type == IncomeType.ESTIMATED_RMD]
    if generated:
        typer.echo("")
        typer.echo("Estimated RMD sources:")
        for s in generated:
            state = "" if s.enabled else " (disabled)"
            typer.echo(f"  {s.id}: ${s.amount:,.2f}{state}")

    if calculator.warnings:
        typer.echo("")
        typer.echo("WARNINGS:")
        for w in calculator.warnings:
            typer.echo(f"  - {w}")


@app.command()
def report(
    file: Path = FILE_ARGUMENT,
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the report to this file"),
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Render the plain-text tax summary report."""
    from taxplan.engines.estimator import TaxEstimator
    from taxplan.engines.marginal import analyze_household
    from taxplan.reports import TaxSummaryGenerator

    _configure_logging(verbose)
    household = _load_household(file)
    result = TaxEstimator().estimate_household(household)
    rate_report = analyze_household(household)
    content = TaxSummaryGenerator().render(result, rate_report)

    if output is None:
        typer.echo(content)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content)
    typer.echo(f"Report written to {output}")
