"""VCF reading and writing.

Only the eight fixed columns are interpreted. Header lines, FORMAT and sample
columns are carried through untouched.
"""

import gzip
import logging
import os
import tempfile
from collections.abc import Iterable, Iterator
from pathlib import Path

from .models import VariantRecord, parse_info, safe_float

logger = logging.getLogger(__name__)

MIN_COLUMNS = 8


class VCFParseError(ValueError):
    """Raised when a body line cannot be turned into a VariantRecord."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


def open_text(path: Path | str, mode: str = "r"):
    """Open a plain or gzip-compressed text file.

    Bytes that are not valid UTF-8 are carried as surrogates and written back
    unchanged, and line terminators are not translated.
    """
    options = {"encoding": "utf-8", "errors": "surrogateescape", "newline": ""}
    if str(path).endswith(".gz"):
        return gzip.open(path, mode + "t", **options)
    return open(path, mode, **options)


def line_terminator(line: str) -> str:
    return "\r\n" if line.endswith("\r\n") else "\n"


def parse_variant_line(line: str, line_number: int | None = None) -> VariantRecord:
    """Parse a tab-delimited VCF body line.

    A missing or non-numeric QUAL becomes None rather than an error; only a
    truncated line or a non-integer POS is rejected.
    """
    line = line.rstrip("\r\n")
    fields = line.split("\t")
    if len(fields) < MIN_COLUMNS:
        raise VCFParseError(
            f"expected at least {MIN_COLUMNS} tab-separated columns, got {len(fields)}",
            line_number,
        )

    try:
        pos = int(fields[1])
    except ValueError:
        raise VCFParseError(f"invalid POS '{fields[1]}'", line_number) from None

    return VariantRecord(
        chrom=fields[0],
        pos=pos,
        rs_id=fields[2],
        ref=fields[3],
        alt=fields[4],
        qual=safe_float(fields[5]),
        filter=fields[6],
        info=parse_info(fields[7]),
        line=line,
    )


class VCFReader:
    """Stream a VCF file, splitting header lines from parsed records."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self.header_lines: list[str] = []
        self.records_read = 0
        self.malformed_count = 0
        # Terminator of the first line, reused when writing output
        self.newline = "\n"

    def records(self) -> Iterator[VariantRecord]:
        """Yield records in file order; header lines are collected as a side effect."""
        self.header_lines = []
        self.records_read = 0
        self.malformed_count = 0
        self.newline = "\n"

        with open_text(self.path) as f:
            for line_number, line in enumerate(f, start=1):
                if line_number == 1:
                    self.newline = line_terminator(line)
                if line.startswith("#"):
                    self.header_lines.append(line.rstrip("\r\n"))
                    continue
                if not line.strip():
                    continue

                try:
                    record = parse_variant_line(line, line_number)
                except VCFParseError as e:
                    self.malformed_count += 1
                    logger.debug("Skipping malformed record in %s: %s", self.path.name, e)
                    continue

                self.records_read += 1
                yield record

        if self.malformed_count:
            logger.warning(
                "Skipped %d malformed record(s) in %s", self.malformed_count, self.path.name
            )

    def read_all(self) -> list[VariantRecord]:
        return list(self.records())


def write_vcf(
    path: Path | str,
    header_lines: Iterable[str],
    records: Iterable[VariantRecord],
    newline: str = "\n",
) -> int:
    """Write header lines then record lines; returns the number of records written.

    Every line is ended with newline; pass ``VCFReader.newline`` to keep the
    input's terminators. The file is written to a temporary sibling and
    renamed into place, so a failed run never leaves a partial output behind.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    suffix = ".gz" if path.name.endswith(".gz") else ""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=suffix, dir=path.parent)
    os.close(fd)
    tmp_path = Path(tmp_name)

    count = 0
    try:
        with open_text(tmp_path, "w") as f:
            for header in header_lines:
                f.write(header + newline)
            for record in records:
                f.write(record.line + newline)
                count += 1
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    return count
