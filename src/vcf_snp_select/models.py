"""Data models for VCF variants and LD intervals."""

import math
import re
from dataclasses import dataclass, field
from typing import NamedTuple

ACCEPTED_FILTERS = ("PASS", ".")

# Plain decimal or scientific notation; rejects '4_0', 'inf', 'nan' and friends
NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def safe_float(value) -> float | None:
    """Convert a VCF numeric field to float.

    Returns None unless value is a finite number written in plain decimal or
    scientific notation.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    if not NUMBER_PATTERN.fullmatch(value):
        return None
    result = float(value)
    return result if math.isfinite(result) else None


def parse_info(info_column: str) -> dict[str, str]:
    """Split an INFO column on ';' then on the first '='.

    Flags without a value map to an empty string. The first occurrence of a
    repeated key wins.
    """
    info: dict[str, str] = {}
    if info_column in ("", "."):
        return info

    for entry in info_column.split(";"):
        if not entry:
            continue
        key, _, value = entry.partition("=")
        info.setdefault(key, value)
    return info


@dataclass(frozen=True)
class VariantRecord:
    """Represents a single VCF body line."""

    chrom: str
    pos: int
    rs_id: str
    ref: str
    alt: str
    qual: float | None
    filter: str
    info: dict[str, str] = field(compare=False)

    # Raw line without terminator, written back verbatim
    line: str = field(default="", repr=False)

    @property
    def allele_frequency(self) -> float | None:
        """AF from INFO, or None when missing or not a single number."""
        return safe_float(self.info.get("AF"))

    @property
    def passes_filter(self) -> bool:
        return self.filter in ACCEPTED_FILTERS


class WindowKey(NamedTuple):
    """Fixed-size genomic window a position falls into."""

    chrom: str
    start: int

    @classmethod
    def for_position(cls, chrom: str, pos: int, window_size: int) -> "WindowKey":
        return cls(chrom, (pos - 1) // window_size * window_size + 1)


@dataclass(frozen=True, order=True)
class LDBlock:
    """A linkage-disequilibrium interval, inclusive on both ends."""

    chrom: str
    start: int
    end: int

    @property
    def length(self) -> int:
        # end - start, not end - start + 1
        return self.end - self.start

    def contains(self, chrom: str, pos: int) -> bool:
        return chrom == self.chrom and self.start <= pos <= self.end

    def subwindows(self, subwindow_size: int) -> list[tuple[int, int]]:
        """Partition the block into sub-windows of subwindow_size.

        The last sub-window is clamped to the block end, so it may be
        shorter or longer than the others.
        """
        count = (self.length - 1) // subwindow_size + 1
        bounds = []
        for i in range(count):
            bin_start = self.start + i * subwindow_size
            bin_end = self.end if i == count - 1 else bin_start + subwindow_size - 1
            bounds.append((bin_start, bin_end))
        return bounds
