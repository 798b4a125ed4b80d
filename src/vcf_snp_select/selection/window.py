"""Fixed-size window selection.

Keeps the highest-QUAL variant per genomic window after QUAL, FILTER and AF
filtering. Input is expected to be grouped by chromosome and ascending by
position; a window is closed as soon as a record from a different window
arrives. Pass ``presorted=False`` for input that is not sorted, at the cost of
holding one accumulator per window until the end of input.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from ..config import SelectConfig
from ..models import VariantRecord, WindowKey

logger = logging.getLogger(__name__)


@dataclass
class WindowBest:
    """Running best record of one window."""

    best_qual: float = 0.0
    best: VariantRecord | None = None

    def offer(self, record: VariantRecord) -> None:
        # Strict '>' keeps the first record on ties
        if record.qual > self.best_qual:
            self.best_qual = record.qual
            self.best = record


class WindowSelector:
    """Select at most one record per fixed-size window."""

    def __init__(
        self,
        window_size: int,
        qual_threshold: float,
        af_threshold: float,
        presorted: bool = True,
    ):
        self.window_size = window_size
        self.qual_threshold = qual_threshold
        self.af_threshold = af_threshold
        self.presorted = presorted
        self.rejected = 0
        self.selected = 0

    @classmethod
    def from_config(cls, config: SelectConfig) -> "WindowSelector":
        return cls(
            window_size=config.window_size,
            qual_threshold=config.qual_threshold,
            af_threshold=config.af_threshold,
            presorted=config.presorted,
        )

    def passes(self, record: VariantRecord) -> bool:
        """Apply the QUAL, FILTER and AF checks in that order.

        A missing or unparsable QUAL or AF always fails.
        """
        if record.qual is None or not record.qual > self.qual_threshold:
            return False
        if not record.passes_filter:
            return False
        if "AF" not in record.info:
            return False
        af = record.allele_frequency
        if af is None or not af > self.af_threshold:
            return False
        return True

    def window_key(self, record: VariantRecord) -> WindowKey:
        return WindowKey.for_position(record.chrom, record.pos, self.window_size)

    def select(self, records: Iterable[VariantRecord]) -> Iterator[VariantRecord]:
        """Yield the best record of each window that has a qualifying record."""
        self.rejected = 0
        self.selected = 0

        selected = self._select_streaming(records) if self.presorted else self._select_keyed(records)
        for record in selected:
            self.selected += 1
            yield record

        logger.info(
            "Window filter selected %d variant(s) (window=%d bp, QUAL>%s, AF>%s); %d rejected",
            self.selected,
            self.window_size,
            self.qual_threshold,
            self.af_threshold,
            self.rejected,
        )

    def _select_streaming(self, records: Iterable[VariantRecord]) -> Iterator[VariantRecord]:
        current_key: WindowKey | None = None
        current = WindowBest()
        # Only chromosome names are remembered; windows behind the current
        # one on the same chromosome are detected by their start
        finished_chroms: set[str] = set()
        warned_unsorted = False

        for record in records:
            if not self.passes(record):
                self.rejected += 1
                continue

            key = self.window_key(record)
            if key != current_key:
                backwards = False
                if current_key is not None:
                    if current.best is not None:
                        yield current.best
                    if key.chrom == current_key.chrom:
                        backwards = key.start < current_key.start
                    else:
                        finished_chroms.add(current_key.chrom)
                        backwards = key.chrom in finished_chroms
                if backwards and not warned_unsorted:
                    logger.warning(
                        "Input is not coordinate-sorted (%s:%d is behind an already closed "
                        "window); run with presorted=False to select one variant per window",
                        record.chrom,
                        record.pos,
                    )
                    warned_unsorted = True
                current_key = key
                current = WindowBest()

            current.offer(record)

        if current.best is not None:
            yield current.best

    def _select_keyed(self, records: Iterable[VariantRecord]) -> Iterator[VariantRecord]:
        windows: dict[WindowKey, WindowBest] = {}

        for record in records:
            if not self.passes(record):
                self.rejected += 1
                continue
            key = self.window_key(record)
            if key not in windows:
                windows[key] = WindowBest()
            windows[key].offer(record)

        for window in windows.values():
            if window.best is not None:
                yield window.best


def select_by_window(
    records: Iterable[VariantRecord], config: SelectConfig | None = None
) -> list[VariantRecord]:
    """Run the window selector over records and return the selected ones."""
    config = config or SelectConfig()
    selector = WindowSelector.from_config(config)
    return list(selector.select(records))
