"""Evaluation of selected SNP sets."""

from .evaluation import (
    ChromosomeCoverage,
    ChromosomeRetention,
    EvaluationReport,
    LDCoverage,
    MAFBin,
    compute_chromosome_retention,
    compute_genome_coverage,
    compute_ld_coverage,
    compute_maf_distribution,
    evaluate_selection,
)
from .reports import ReportExporter, ReportFormat, default_report_path

__all__ = [
    "ChromosomeCoverage",
    "ChromosomeRetention",
    "EvaluationReport",
    "LDCoverage",
    "MAFBin",
    "ReportExporter",
    "ReportFormat",
    "compute_chromosome_retention",
    "compute_genome_coverage",
    "compute_ld_coverage",
    "compute_maf_distribution",
    "default_report_path",
    "evaluate_selection",
]
