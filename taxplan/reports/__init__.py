"""Report generation for taxplan."""

from taxplan.reports.tax_summary import TaxSummaryGenerator

__all__ = ["TaxSummaryGenerator"]
