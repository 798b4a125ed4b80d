"""Representativeness evaluation of a reduced SNP set.

Compares the selected VCF against its input:
- Genome coverage: fraction of fixed windows per chromosome that keep a SNP
- MAF distribution in 10% bins, before and after selection
- Per-chromosome retention
- LD block coverage, when an LD block file was used
"""

import logging
from collections import Counter, defaultdict
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path

from ..config import SelectConfig
from ..models import VariantRecord, WindowKey, safe_float
from ..references.ld_blocks import LDBlockIndex, LDBlockLoader
from ..vcf_parser import VCFReader

logger = logging.getLogger(__name__)

MAF_BIN_STARTS = (0, 10, 20, 30, 40, 50)

TARGET_WINDOW_COVERAGE = 90.0
TARGET_LD_COVERAGE = 85.0


def percent(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def order_chromosomes(chroms: Iterable[str], preferred: Iterable[str]) -> list[str]:
    """Preferred chromosomes first in their given order, the rest sorted."""
    present = set(chroms)
    ordered = [c for c in preferred if c in present]
    ordered += sorted(present - set(ordered))
    return ordered


def minor_allele_frequency(record: VariantRecord) -> float:
    """MAF from INFO/AF, assuming 0.5 when AF is missing or unparsable."""
    af = safe_float(record.info.get("AF"))
    if af is None:
        af = 0.5
    return 1 - af if af > 0.5 else af


def maf_bin(maf: float) -> int:
    return int(maf * 10) * 10


@dataclass
class ChromosomeCoverage:
    chrom: str
    length: int
    total_windows: int
    covered_windows: int

    @property
    def coverage(self) -> float:
        return percent(self.covered_windows, self.total_windows)


@dataclass
class MAFBin:
    lower: int
    input_count: int
    input_percent: float
    output_count: int
    output_percent: float

    @property
    def upper(self) -> int:
        return self.lower + 10


@dataclass
class ChromosomeRetention:
    chrom: str
    input_count: int
    output_count: int

    @property
    def retention(self) -> float:
        return percent(self.output_count, self.input_count)


@dataclass
class LDCoverage:
    total_blocks: int
    covered_blocks: int
    snps_in_blocks: int

    @property
    def coverage(self) -> float:
        return percent(self.covered_blocks, self.total_blocks)

    @property
    def mean_snps_per_block(self) -> float:
        return self.snps_in_blocks / self.covered_blocks if self.covered_blocks else 0.0


@dataclass
class EvaluationReport:
    """All tables of an evaluation report."""

    input_path: str
    output_path: str
    window_size: int
    qual_threshold: float
    af_threshold: float
    input_snps: int
    selected_snps: int
    coverage: list[ChromosomeCoverage] = field(default_factory=list)
    maf_bins: list[MAFBin] = field(default_factory=list)
    retention: list[ChromosomeRetention] = field(default_factory=list)
    ld_block_path: str | None = None
    ld_window_size: int | None = None
    ld_coverage: LDCoverage | None = None
    generated_at: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))

    @property
    def reduction_rate(self) -> float:
        if self.input_snps == 0:
            return 0.0
        return (1 - self.selected_snps / self.input_snps) * 100

    @property
    def total_windows(self) -> int:
        return sum(c.total_windows for c in self.coverage)

    @property
    def covered_windows(self) -> int:
        return sum(c.covered_windows for c in self.coverage)

    @property
    def window_coverage(self) -> float:
        return percent(self.covered_windows, self.total_windows)

    @property
    def overall_retention(self) -> float:
        return percent(self.selected_snps, self.input_snps)

    def to_dict(self) -> dict:
        result = {
            "generated_at": self.generated_at,
            "parameters": {
                "input_path": self.input_path,
                "output_path": self.output_path,
                "window_size": self.window_size,
                "qual_threshold": self.qual_threshold,
                "af_threshold": self.af_threshold,
            },
            "summary": {
                "input_snps": self.input_snps,
                "selected_snps": self.selected_snps,
                "reduction_rate": round(self.reduction_rate, 2),
            },
            "genome_coverage": {
                "chromosomes": [
                    {**asdict(c), "coverage": round(c.coverage, 2)} for c in self.coverage
                ],
                "total_windows": self.total_windows,
                "covered_windows": self.covered_windows,
                "coverage": round(self.window_coverage, 2),
            },
            "maf_distribution": [
                {
                    "bin": f"{b.lower}-{b.upper}%",
                    "input_count": b.input_count,
                    "input_percent": round(b.input_percent, 2),
                    "output_count": b.output_count,
                    "output_percent": round(b.output_percent, 2),
                }
                for b in self.maf_bins
            ],
            "chromosome_distribution": [
                {**asdict(r), "retention": round(r.retention, 2)} for r in self.retention
            ],
        }
        if self.ld_block_path is not None:
            result["parameters"]["ld_block_path"] = self.ld_block_path
            result["parameters"]["ld_window_size"] = self.ld_window_size
        if self.ld_coverage is not None:
            result["ld_block_coverage"] = {
                "total_blocks": self.ld_coverage.total_blocks,
                "covered_blocks": self.ld_coverage.covered_blocks,
                "coverage": round(self.ld_coverage.coverage, 2),
                "mean_snps_per_block": round(self.ld_coverage.mean_snps_per_block, 3),
            }
        return result


def compute_genome_coverage(
    input_records: list[VariantRecord],
    output_records: list[VariantRecord],
    window_size: int,
    chromosome_order: Iterable[str] = (),
) -> list[ChromosomeCoverage]:
    """Window coverage per chromosome.

    Chromosome length is taken as the largest position seen in either file.
    """
    lengths: dict[str, int] = {}
    for record in (*input_records, *output_records):
        if record.pos > lengths.get(record.chrom, 0):
            lengths[record.chrom] = record.pos

    covered: dict[str, set[int]] = defaultdict(set)
    for record in output_records:
        covered[record.chrom].add(WindowKey.for_position(record.chrom, record.pos, window_size).start)

    rows = []
    for chrom in order_chromosomes(lengths, chromosome_order):
        length = lengths[chrom]
        rows.append(
            ChromosomeCoverage(
                chrom=chrom,
                length=length,
                total_windows=(length - 1) // window_size + 1,
                covered_windows=len(covered.get(chrom, ())),
            )
        )
    return rows


def compute_maf_distribution(
    input_records: list[VariantRecord], output_records: list[VariantRecord]
) -> list[MAFBin]:
    input_bins = Counter(maf_bin(minor_allele_frequency(r)) for r in input_records)
    output_bins = Counter(maf_bin(minor_allele_frequency(r)) for r in output_records)

    return [
        MAFBin(
            lower=lower,
            input_count=input_bins[lower],
            input_percent=percent(input_bins[lower], len(input_records)),
            output_count=output_bins[lower],
            output_percent=percent(output_bins[lower], len(output_records)),
        )
        for lower in MAF_BIN_STARTS
    ]


def compute_chromosome_retention(
    input_records: list[VariantRecord],
    output_records: list[VariantRecord],
    chromosome_order: Iterable[str] = (),
) -> list[ChromosomeRetention]:
    input_counts = Counter(r.chrom for r in input_records)
    output_counts = Counter(r.chrom for r in output_records)

    return [
        ChromosomeRetention(
            chrom=chrom,
            input_count=input_counts[chrom],
            output_count=output_counts[chrom],
        )
        for chrom in order_chromosomes(input_counts, chromosome_order)
    ]


def compute_ld_coverage(output_records: list[VariantRecord], index: LDBlockIndex) -> LDCoverage:
    per_block: Counter = Counter()
    for record in output_records:
        match = index.find(record.chrom, record.pos)
        if match is not None:
            per_block[match.key] += 1

    return LDCoverage(
        total_blocks=len(index),
        covered_blocks=len(per_block),
        snps_in_blocks=sum(per_block.values()),
    )


def evaluate_selection(
    input_path: Path | str,
    output_path: Path | str,
    config: SelectConfig | None = None,
    ld_block_path: Path | str | None = None,
) -> EvaluationReport:
    """Build an evaluation report comparing output_path against input_path."""
    config = config or SelectConfig()
    input_records = VCFReader(input_path).read_all()
    output_records = VCFReader(output_path).read_all()

    report = EvaluationReport(
        input_path=str(input_path),
        output_path=str(output_path),
        window_size=config.window_size,
        qual_threshold=config.qual_threshold,
        af_threshold=config.af_threshold,
        input_snps=len(input_records),
        selected_snps=len(output_records),
        coverage=compute_genome_coverage(
            input_records, output_records, config.window_size, config.chromosome_order
        ),
        maf_bins=compute_maf_distribution(input_records, output_records),
        retention=compute_chromosome_retention(
            input_records, output_records, config.chromosome_order
        ),
    )

    if ld_block_path is not None:
        index = LDBlockIndex(LDBlockLoader().load(ld_block_path), presorted=True)
        report.ld_block_path = str(ld_block_path)
        report.ld_window_size = config.ld_window_size
        report.ld_coverage = compute_ld_coverage(output_records, index)

    logger.info(
        "Evaluated %d of %d SNPs: window coverage %.2f%%",
        report.selected_snps,
        report.input_snps,
        report.window_coverage,
    )
    return report
