"""vcf-snp-select: window and LD block based SNP selection CLI."""

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console

from . import __version__
from .config import ConfigValidationError, SelectConfig, build_config, load_config
from .pipeline import SNPSelectPipeline
from .qc.evaluation import evaluate_selection
from .qc.reports import ReportExporter, ReportFormat


def version_callback(value: bool) -> None:
    if value:
        print(__version__)
        raise typer.Exit()


app = typer.Typer(
    name="vcf-snp-select",
    help="Select representative SNPs from a VCF by genomic window and LD block",
)
console = Console()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version", callback=version_callback, is_eager=True, help="Show version and exit"
        ),
    ] = None,
) -> None:
    pass


def setup_logging(verbose: bool, quiet: bool) -> None:
    """Configure logging based on verbosity flags."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("vcf_snp_select").setLevel(level)


def _resolve_config(config_path: Path | None, overrides: dict[str, Any]) -> SelectConfig:
    """Merge the optional TOML config with options given on the command line."""
    overrides = {k: v for k, v in overrides.items() if v is not None}
    try:
        if config_path is not None:
            return load_config(config_path, overrides)
        return build_config(overrides)
    except (FileNotFoundError, ConfigValidationError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None


def _require_file(path: Path | None, label: str) -> None:
    if path is not None and not path.is_file():
        console.print(f"[red]Error: {label} not found: {path}[/red]")
        raise typer.Exit(1)


@app.command()
def select(
    input_vcf: Path = typer.Argument(..., help="Input VCF file (.vcf, .vcf.gz)"),
    output: Path = typer.Option(..., "--output", "-o", help="Output VCF file (.vcf, .vcf.gz)"),
    window_size: Annotated[
        int | None, typer.Option("--window", "-w", help="Window size in bp [default: 10000]")
    ] = None,
    qual_threshold: Annotated[
        float | None, typer.Option("--qual", "-q", help="Keep QUAL above this [default: 30]")
    ] = None,
    af_threshold: Annotated[
        float | None, typer.Option("--af", "-a", help="Keep AF above this [default: 0.05]")
    ] = None,
    ld_block_file: Annotated[
        Path | None,
        typer.Option("--ldblock", "-l", help="LD block file (chrom start end); enables LD filter"),
    ] = None,
    ld_window_size: Annotated[
        int | None,
        typer.Option("--ldwindow", "-s", help="Sub-window size inside LD blocks [default: 20000]"),
    ] = None,
    evaluate: bool = typer.Option(False, "--evaluate", "-e", help="Write an evaluation report"),
    report_format: ReportFormat = typer.Option(
        ReportFormat.TEXT, "--report-format", help="Evaluation report format"
    ),
    config_path: Annotated[
        Path | None, typer.Option("--config", "-c", help="TOML configuration file")
    ] = None,
    unsorted: bool = typer.Option(
        False, "--unsorted", help="Input is not sorted by chromosome and position"
    ),
    keep_singleton_blocks: bool = typer.Option(
        False,
        "--keep-singleton-blocks",
        help="Keep the variant of LD blocks that contain a single variant",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", help="Minimal output"),
) -> None:
    """Filter a VCF to one SNP per window, then thin SNPs inside LD blocks.

    Examples:

        # Window filter only
        vcf-snp-select select input.vcf -o output.vcf -w 10000 -q 30 -a 0.05

        # Window filter, LD block filter and evaluation report
        vcf-snp-select select input.vcf -o output.vcf -l ld_blocks.txt -s 20000 -e
    """
    setup_logging(verbose, quiet)

    _require_file(input_vcf, "Input VCF file")
    _require_file(ld_block_file, "LD block file")

    config = _resolve_config(
        config_path,
        {
            "window_size": window_size,
            "qual_threshold": qual_threshold,
            "af_threshold": af_threshold,
            "ld_window_size": ld_window_size,
            "presorted": False if unsorted else None,
            "keep_singleton_blocks": True if keep_singleton_blocks else None,
        },
    )
    if not verbose and not quiet:
        logging.getLogger("vcf_snp_select").setLevel(config.log_level)

    if not quiet and not json_output:
        console.print(f"Input: {input_vcf}")
        console.print(f"Output: {output}")
        console.print(
            f"Window: {config.window_size:,} bp  QUAL > {config.qual_threshold:g}  "
            f"AF > {config.af_threshold:g}"
        )
        if ld_block_file is not None:
            console.print(f"LD blocks: {ld_block_file} (sub-window {config.ld_window_size:,} bp)")

    try:
        result = SNPSelectPipeline(config).run(
            input_vcf,
            output,
            ld_block_path=ld_block_file,
            evaluate=evaluate,
            report_format=report_format,
        )
    except (ValueError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    if not quiet:
        console.print(f"[cyan]Window filter:[/cyan] {result.window_selected:,} SNPs")
        if result.ld_block_path is not None:
            console.print(
                f"[cyan]LD block filter:[/cyan] {result.ld_passthrough:,} outside blocks, "
                f"{result.ld_selected:,} selected inside blocks"
            )
        else:
            console.print("[dim]LD block filter skipped[/dim]")
    console.print(f"[green]✓[/green] Wrote {result.final_records:,} SNPs to {result.output_path}")
    if result.report_path is not None:
        console.print(f"  Report: {result.report_path}")


@app.command()
def evaluate(
    input_vcf: Path = typer.Argument(..., help="Original VCF file"),
    output_vcf: Path = typer.Argument(..., help="Selected VCF file"),
    window_size: Annotated[
        int | None, typer.Option("--window", "-w", help="Window size in bp [default: 10000]")
    ] = None,
    ld_block_file: Annotated[
        Path | None, typer.Option("--ldblock", "-l", help="LD block file used for selection")
    ] = None,
    ld_window_size: Annotated[
        int | None, typer.Option("--ldwindow", "-s", help="LD sub-window size [default: 20000]")
    ] = None,
    format: ReportFormat = typer.Option(ReportFormat.TEXT, "--format", "-f", help="Report format"),
    report_path: Annotated[
        Path | None, typer.Option("--report", "-r", help="Write the report here instead of stdout")
    ] = None,
    config_path: Annotated[
        Path | None, typer.Option("--config", "-c", help="TOML configuration file")
    ] = None,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Report how representative a selected SNP set is of its input."""
    setup_logging(verbose, quiet=not verbose)

    _require_file(input_vcf, "Input VCF file")
    _require_file(output_vcf, "Selected VCF file")
    _require_file(ld_block_file, "LD block file")

    config = _resolve_config(
        config_path, {"window_size": window_size, "ld_window_size": ld_window_size}
    )

    try:
        report = evaluate_selection(
            input_vcf, output_vcf, config=config, ld_block_path=ld_block_file
        )
    except (ValueError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    rendered = ReportExporter().export(report, format)
    if report_path is not None:
        report_path.write_text(rendered, encoding="utf-8")
        console.print(f"[green]✓[/green] Report written to {report_path}")
    else:
        typer.echo(rendered, nl=False)


if __name__ == "__main__":  # pragma: no cover
    app()
