"""LD block interval loading and lookup.

Block files are whitespace-delimited ``chrom start end`` rows without a
header, e.g. the output of PLINK ``--blocks`` or LDBlockShow converted to
three columns. Extra columns are ignored.

Blocks are sorted by (chrom, start) and a variant belongs to the first block
in that order whose inclusive [start, end] range contains it. Blocks may
overlap; the sort order then decides.
"""

import bisect
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ..models import LDBlock
from ..vcf_parser import open_text

logger = logging.getLogger(__name__)


class LDBlockFormatError(ValueError):
    """Raised when an LD block file contains an invalid row."""

    pass


@dataclass(frozen=True)
class BlockMatch:
    """A block and its position in the chromosome's sorted block list."""

    block: LDBlock
    index: int

    @property
    def key(self) -> tuple[str, int]:
        return (self.block.chrom, self.index)


def sort_blocks(blocks: Iterable[LDBlock]) -> list[LDBlock]:
    """Sort blocks by chromosome, then numeric start (then end)."""
    return sorted(blocks, key=lambda b: (b.chrom, b.start, b.end))


class LDBlockLoader:
    """Read LD block definitions from a text file."""

    def load(self, path: Path | str, sort: bool = True) -> list[LDBlock]:
        """Load blocks from a whitespace-delimited file (can be gzipped).

        Args:
            path: Path to the block file
            sort: Sort by (chrom, start); pass False to keep file order

        Returns:
            List of LDBlock

        Raises:
            FileNotFoundError: If the file does not exist
            LDBlockFormatError: If a row is not ``chrom start end`` with end > start
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"LD block file not found: {path}")

        blocks = []
        with open_text(path) as f:
            for line_number, line in enumerate(f, start=1):
                stripped = line.strip()
                if not stripped or stripped.startswith("#"):
                    continue
                blocks.append(self._parse_row(stripped, path, line_number))

        logger.info("Loaded %d LD blocks from %s", len(blocks), path.name)
        return sort_blocks(blocks) if sort else blocks

    def _parse_row(self, row: str, path: Path, line_number: int) -> LDBlock:
        parts = row.split()
        if len(parts) < 3:
            raise LDBlockFormatError(
                f"{path.name}:{line_number}: expected 'chrom start end', got '{row}'"
            )

        chrom = parts[0]
        try:
            start = int(parts[1])
            end = int(parts[2])
        except ValueError:
            raise LDBlockFormatError(
                f"{path.name}:{line_number}: start and end must be integers, got '{row}'"
            ) from None

        if end <= start:
            raise LDBlockFormatError(
                f"{path.name}:{line_number}: block end ({end}) must be greater than start ({start})"
            )

        return LDBlock(chrom=chrom, start=start, end=end)


class LDBlockIndex:
    """Find the first block containing a position.

    Per chromosome, blocks are kept in sorted order alongside a running
    maximum of their end coordinates. The first block whose running maximum
    reaches the position is the first block, in list order, that ends at or
    after it; since starts are ascending, if that block starts after the
    position no later block can contain it either.
    """

    def __init__(self, blocks: Iterable[LDBlock], presorted: bool = False):
        ordered = list(blocks) if presorted else sort_blocks(blocks)
        self._blocks: dict[str, list[LDBlock]] = {}
        for block in ordered:
            self._blocks.setdefault(block.chrom, []).append(block)

        self._max_ends: dict[str, list[int]] = {}
        for chrom, chrom_blocks in self._blocks.items():
            running = []
            current = None
            for block in chrom_blocks:
                current = block.end if current is None else max(current, block.end)
                running.append(current)
            self._max_ends[chrom] = running

    def __len__(self) -> int:
        return sum(len(b) for b in self._blocks.values())

    def find(self, chrom: str, pos: int) -> BlockMatch | None:
        """Return the first block on chrom with start <= pos <= end, or None."""
        max_ends = self._max_ends.get(chrom)
        if not max_ends:
            return None

        i = bisect.bisect_left(max_ends, pos)
        if i == len(max_ends):
            return None

        block = self._blocks[chrom][i]
        if block.start > pos:
            return None
        return BlockMatch(block=block, index=i)


def load_ld_blocks(path: Path | str) -> list[LDBlock]:
    """Load and sort LD blocks from path."""
    return LDBlockLoader().load(path)
