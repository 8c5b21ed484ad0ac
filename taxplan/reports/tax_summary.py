"""Household tax summary report generator."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from taxplan.models.results import CalculationResult, RateChangeReport

TEMPLATE_DIR = Path(__file__).parent / "templates"


def money(value) -> str:
    return f"${value:,.2f}"


def percent(value) -> str:
    return f"{value * 100:.2f}%"


class TaxSummaryGenerator:
    """Generates a human-readable summary of one calculation."""

    def __init__(self) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["money"] = money
        self.env.filters["percent"] = percent

    def render(self, result: CalculationResult, rate_report: RateChangeReport | None = None) -> str:
        """Render the tax summary, optionally with upcoming rate changes."""
        template = self.env.get_template("tax_summary.txt")
        return template.render(res=result, rates=rate_report)
