"""Evaluation report rendering."""

import json
from enum import Enum
from pathlib import Path

from .evaluation import TARGET_LD_COVERAGE, TARGET_WINDOW_COVERAGE, EvaluationReport

RULE = "=" * 50


class ReportFormat(Enum):
    JSON = "json"
    TEXT = "text"


REPORT_SUFFIXES = {
    ReportFormat.JSON: ".json",
    ReportFormat.TEXT: ".txt",
}


def default_report_path(output_path: Path | str, format: ReportFormat = ReportFormat.TEXT) -> Path:
    """``sample.vcf`` -> ``sample_evaluation_report.txt`` next to the output."""
    output_path = Path(output_path)
    stem = output_path.name
    for suffix in (".gz", ".vcf"):
        if stem.endswith(suffix):
            stem = stem[: -len(suffix)]
    return output_path.with_name(f"{stem}_evaluation_report{REPORT_SUFFIXES[format]}")


class ReportExporter:
    def export(self, report: EvaluationReport, format: ReportFormat) -> str:
        if format == ReportFormat.JSON:
            return self._export_json(report)
        elif format == ReportFormat.TEXT:
            return self._export_text(report)
        else:
            raise ValueError(f"Unsupported format: {format}")

    def _export_json(self, report: EvaluationReport) -> str:
        return json.dumps(report.to_dict(), indent=2)

    def _export_text(self, report: EvaluationReport) -> str:
        lines = [
            "Reduced-representation SNP evaluation report",
            f"Generated: {report.generated_at}",
            f"Input file: {report.input_path}",
            f"Output file: {report.output_path}",
            f"Window size: {report.window_size} bp",
            f"QUAL threshold: {report.qual_threshold:g}",
            f"AF threshold: {report.af_threshold:g}",
        ]
        if report.ld_block_path is not None:
            lines.append(f"LD block file: {report.ld_block_path}")
            lines.append(f"LD sub-window: {report.ld_window_size} bp")
        lines += [RULE, ""]

        lines += [
            "Summary:",
            "--------",
            f"Input SNPs: {report.input_snps}",
            f"Selected SNPs: {report.selected_snps}",
            f"Reduction rate: {report.reduction_rate:.2f}%",
            "",
        ]

        lines += self._coverage_table(report)
        lines += self._maf_table(report)
        lines += self._retention_table(report)
        if report.ld_coverage is not None:
            lines += self._ld_section(report)
        lines += self._conclusions(report)

        return "\n".join(lines) + "\n"

    def _coverage_table(self, report: EvaluationReport) -> list[str]:
        lines = [
            "1. Genome coverage",
            "Chromosome\tLength(bp)\tWindows\tCovered\tCoverage",
            "----------\t----------\t-------\t-------\t--------",
        ]
        for row in report.coverage:
            lines.append(
                f"{row.chrom}\t{row.length}\t{row.total_windows}\t"
                f"{row.covered_windows}\t{row.coverage:.2f}%"
            )
        lines.append("----------\t----------\t-------\t-------\t--------")
        lines.append(
            f"Total\t-\t{report.total_windows}\t{report.covered_windows}\t"
            f"{report.window_coverage:.2f}%"
        )
        lines.append("")
        return lines

    def _maf_table(self, report: EvaluationReport) -> list[str]:
        lines = [
            "2. MAF distribution",
            "MAF bin\tInput SNPs\tInput %\tSelected SNPs\tSelected %",
            "-------\t----------\t-------\t-------------\t----------",
        ]
        for b in report.maf_bins:
            lines.append(
                f"{b.lower}-{b.upper}%\t{b.input_count}\t{b.input_percent:.2f}%\t"
                f"{b.output_count}\t{b.output_percent:.2f}%"
            )
        lines.append("-------\t----------\t-------\t-------------\t----------")
        lines.append(f"Total\t{report.input_snps}\t100.00%\t{report.selected_snps}\t100.00%")
        lines.append("")
        return lines

    def _retention_table(self, report: EvaluationReport) -> list[str]:
        lines = [
            "3. Chromosome distribution",
            "Chromosome\tInput SNPs\tSelected SNPs\tRetention",
            "----------\t----------\t-------------\t---------",
        ]
        for row in report.retention:
            lines.append(
                f"{row.chrom}\t{row.input_count}\t{row.output_count}\t{row.retention:.2f}%"
            )
        lines.append("----------\t----------\t-------------\t---------")
        lines.append(
            f"Total\t{report.input_snps}\t{report.selected_snps}\t{report.overall_retention:.2f}%"
        )
        lines.append("")
        return lines

    def _ld_section(self, report: EvaluationReport) -> list[str]:
        ld = report.ld_coverage
        return [
            "4. LD block coverage",
            f"Total LD blocks: {ld.total_blocks}",
            f"Covered LD blocks: {ld.covered_blocks}",
            f"LD block coverage: {ld.coverage:.2f}%",
            f"Mean SNPs per covered block: {ld.mean_snps_per_block:.3f}",
            "",
        ]

    def _conclusions(self, report: EvaluationReport) -> list[str]:
        lines = [
            "Conclusions:",
            "============",
            "A representative reduced SNP set should keep:",
            f"  - genome window coverage > {TARGET_WINDOW_COVERAGE:.0f}%",
            "  - a MAF distribution similar to the input",
            "  - balanced retention across chromosomes",
            f"  - LD block coverage > {TARGET_LD_COVERAGE:.0f}% (when LD blocks are used)",
            "",
            "Observed:",
        ]
        window_ok = report.window_coverage > TARGET_WINDOW_COVERAGE
        lines.append(
            f"  - window coverage {report.window_coverage:.2f}% "
            f"({'ok' if window_ok else 'below target, consider a smaller window size'})"
        )
        if report.ld_coverage is not None:
            ld_ok = report.ld_coverage.coverage > TARGET_LD_COVERAGE
            lines.append(
                f"  - LD block coverage {report.ld_coverage.coverage:.2f}% "
                f"({'ok' if ld_ok else 'below target, consider a smaller LD sub-window'})"
            )
        lines += [
            "",
            "If the MAF distribution shifts noticeably, adjust the QUAL/AF thresholds;",
            "if a chromosome's retention is out of line, check that chromosome's data quality.",
            RULE,
        ]
        return lines
