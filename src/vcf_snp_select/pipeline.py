"""Window filter -> LD block filter -> sort pipeline."""

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import SelectConfig
from .models import VariantRecord
from .qc.evaluation import evaluate_selection
from .qc.reports import ReportExporter, ReportFormat, default_report_path
from .references.ld_blocks import LDBlockIndex, LDBlockLoader
from .selection.ld_block import filter_ld_blocks
from .selection.window import select_by_window
from .vcf_parser import VCFReader, write_vcf

logger = logging.getLogger(__name__)


def sort_records(records: list[VariantRecord]) -> list[VariantRecord]:
    """Sort by chromosome (lexicographic) then numeric position.

    The raw line breaks remaining ties so the order never depends on the
    order records arrived in.
    """
    return sorted(records, key=lambda r: (r.chrom, r.pos, r.line))


@dataclass
class SelectionResult:
    """Counts and paths from a pipeline run."""

    input_path: str
    output_path: str
    input_records: int
    malformed_records: int
    window_selected: int
    final_records: int
    ld_block_path: str | None = None
    ld_passthrough: int | None = None
    ld_selected: int | None = None
    report_path: str | None = None

    def to_dict(self) -> dict:
        result = {
            "input_path": self.input_path,
            "output_path": self.output_path,
            "input_records": self.input_records,
            "malformed_records": self.malformed_records,
            "window_selected": self.window_selected,
            "final_records": self.final_records,
        }
        if self.ld_block_path is not None:
            result["ld_filter"] = {
                "ld_block_path": self.ld_block_path,
                "passthrough": self.ld_passthrough,
                "selected_in_blocks": self.ld_selected,
            }
        if self.report_path is not None:
            result["report_path"] = self.report_path
        return result


class SNPSelectPipeline:
    """Run the SNP selection stages over a VCF file.

    Each stage consumes the complete output of the previous one. Any failure
    aborts the run before the output file is written.
    """

    def __init__(self, config: SelectConfig | None = None):
        self.config = config or SelectConfig()

    def check_inputs(self, input_path: Path, ld_block_path: Path | None = None) -> None:
        """Fail early on missing inputs.

        Raises:
            FileNotFoundError: If the VCF or the LD block file does not exist
        """
        if not input_path.is_file():
            raise FileNotFoundError(f"Input VCF file not found: {input_path}")
        if ld_block_path is not None and not ld_block_path.is_file():
            raise FileNotFoundError(f"LD block file not found: {ld_block_path}")

    def run(
        self,
        input_path: Path | str,
        output_path: Path | str,
        ld_block_path: Path | str | None = None,
        evaluate: bool = False,
        report_format: ReportFormat = ReportFormat.TEXT,
        report_path: Path | str | None = None,
    ) -> SelectionResult:
        input_path = Path(input_path)
        output_path = Path(output_path)
        ld_block_path = Path(ld_block_path) if ld_block_path is not None else None

        self.check_inputs(input_path, ld_block_path)

        # Parse the block file before touching the VCF so a bad file fails fast
        index = None
        if ld_block_path is not None:
            index = LDBlockIndex(LDBlockLoader().load(ld_block_path), presorted=True)

        logger.info("Step 1: window filter on %s", input_path.name)
        reader = VCFReader(input_path)
        window_selected = select_by_window(reader.records(), self.config)
        logger.info(
            "Read %d variant(s); window filter kept %d",
            reader.records_read,
            len(window_selected),
        )

        result = SelectionResult(
            input_path=str(input_path),
            output_path=str(output_path),
            input_records=reader.records_read,
            malformed_records=reader.malformed_count,
            window_selected=len(window_selected),
            final_records=0,
        )

        if index is not None:
            logger.info("Step 2: LD block filter with %s", ld_block_path.name)
            ld_selection = filter_ld_blocks(window_selected, index, self.config)
            selected = ld_selection.records

            result.ld_block_path = str(ld_block_path)
            result.ld_passthrough = len(ld_selection.passthrough)
            result.ld_selected = len(ld_selection.selected)
        else:
            logger.info("No LD block file given, skipping LD block filter")
            selected = window_selected

        final = sort_records(selected)
        result.final_records = write_vcf(
            output_path, reader.header_lines, final, newline=reader.newline
        )
        logger.info("Wrote %d variant(s) to %s", result.final_records, output_path)

        if evaluate:
            report = evaluate_selection(
                input_path,
                output_path,
                config=self.config,
                ld_block_path=ld_block_path,
            )
            destination = (
                Path(report_path)
                if report_path is not None
                else default_report_path(output_path, report_format)
            )
            destination.write_text(ReportExporter().export(report, report_format), encoding="utf-8")
            result.report_path = str(destination)
            logger.info("Evaluation report written to %s", destination)

        return result
