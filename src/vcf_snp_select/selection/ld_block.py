"""LD block thinning of window-selected variants.

Variants outside every LD block pass through unchanged. Variants inside a
block are buffered until the input is exhausted, then reduced to the best
variant per block, or per sub-window for blocks longer than the sub-window
size.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..config import SelectConfig
from ..models import LDBlock, VariantRecord
from ..references.ld_blocks import LDBlockIndex

logger = logging.getLogger(__name__)

# Starting value for block maxima; any parsed QUAL of a window-selected
# record is above it.
NO_QUAL = -1.0


@dataclass
class BlockMembers:
    """Records assigned to one LD block, in arrival order."""

    block: LDBlock
    members: list[tuple[float | None, VariantRecord]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.members)

    def add(self, record: VariantRecord) -> None:
        self.members.append((record.qual, record))

    def best(self, start: int | None = None, end: int | None = None) -> VariantRecord | None:
        """Highest-QUAL member, optionally limited to positions in [start, end].

        The first member wins ties. Members without QUAL are never chosen.
        """
        best_qual = NO_QUAL
        best_record = None
        for qual, record in self.members:
            if qual is None:
                continue
            if start is not None and record.pos < start:
                continue
            if end is not None and record.pos > end:
                continue
            if qual > best_qual:
                best_qual = qual
                best_record = record
        return best_record


@dataclass
class AssignmentResult:
    """Output of LDBlockAssigner.assign."""

    passthrough: list[VariantRecord]
    blocks: dict[tuple[str, int], BlockMembers]

    @property
    def assigned_count(self) -> int:
        return sum(b.count for b in self.blocks.values())


class LDBlockAssigner:
    """Split records into block members and pass-through records."""

    def __init__(self, index: LDBlockIndex):
        self.index = index

    def assign(self, records: Iterable[VariantRecord]) -> AssignmentResult:
        passthrough: list[VariantRecord] = []
        blocks: dict[tuple[str, int], BlockMembers] = {}

        for record in records:
            match = self.index.find(record.chrom, record.pos)
            if match is None:
                passthrough.append(record)
                continue

            if match.key not in blocks:
                blocks[match.key] = BlockMembers(block=match.block)
            blocks[match.key].add(record)

        result = AssignmentResult(passthrough=passthrough, blocks=blocks)
        logger.debug(
            "Assigned %d variant(s) to %d LD block(s); %d outside blocks",
            result.assigned_count,
            len(blocks),
            len(passthrough),
        )
        return result


class BlockSubSelector:
    """Pick representative records from buffered LD block members."""

    def __init__(self, subwindow_size: int, keep_singleton_blocks: bool = False):
        self.subwindow_size = subwindow_size
        self.keep_singleton_blocks = keep_singleton_blocks

    def select_block(self, members: BlockMembers) -> list[VariantRecord]:
        block = members.block

        if block.length <= self.subwindow_size:
            # A block holding a single variant yields nothing by default
            if members.count == 1 and not self.keep_singleton_blocks:
                return []
            best = members.best()
            return [best] if best is not None else []

        selected = []
        for bin_start, bin_end in block.subwindows(self.subwindow_size):
            best = members.best(bin_start, bin_end)
            if best is not None:
                selected.append(best)
        return selected

    def select(self, blocks: Iterable[BlockMembers]) -> list[VariantRecord]:
        selected = []
        for members in blocks:
            selected.extend(self.select_block(members))
        return selected


@dataclass
class LDBlockSelection:
    """Pass-through records and block representatives of one LD block run."""

    passthrough: list[VariantRecord]
    selected: list[VariantRecord]
    block_count: int

    @property
    def records(self) -> list[VariantRecord]:
        return self.passthrough + self.selected


def filter_ld_blocks(
    records: Iterable[VariantRecord],
    blocks: Iterable[LDBlock] | LDBlockIndex,
    config: SelectConfig | None = None,
) -> LDBlockSelection:
    """Assign records to LD blocks and pick each block's representatives."""
    config = config or SelectConfig()
    index = blocks if isinstance(blocks, LDBlockIndex) else LDBlockIndex(blocks)

    assignment = LDBlockAssigner(index).assign(records)
    sub_selector = BlockSubSelector(
        subwindow_size=config.ld_window_size,
        keep_singleton_blocks=config.keep_singleton_blocks,
    )
    selection = LDBlockSelection(
        passthrough=assignment.passthrough,
        selected=sub_selector.select(assignment.blocks.values()),
        block_count=len(assignment.blocks),
    )

    logger.info(
        "LD block filter kept %d variant(s) outside blocks and %d from %d block(s)",
        len(selection.passthrough),
        len(selection.selected),
        selection.block_count,
    )
    return selection


def select_by_ld_block(
    records: Iterable[VariantRecord],
    blocks: Iterable[LDBlock] | LDBlockIndex,
    config: SelectConfig | None = None,
) -> list[VariantRecord]:
    """Thin records inside LD blocks.

    Returns pass-through records in input order followed by the records
    selected from each block, block by block. The result is not sorted by
    position.
    """
    return filter_ld_blocks(records, blocks, config).records
