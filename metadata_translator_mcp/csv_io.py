"""CSV export/import of one culture's translations."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable, Iterator

from .logging_config import get_logger
from .rows import CsvRow, TranslationRow

logger = get_logger(__name__)

HEADER = ["Type", "Original", "Translation"]


def write_csv(path: str | Path, rows: Iterable[TranslationRow], default_culture: str, culture: str) -> int:
    """Write ``Type,Original,Translation`` lines, UTF-8 with BOM. Returns the row count."""
    count = 0
    with open(path, "w", encoding="utf-8-sig", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow(HEADER)
        for row in rows:
            writer.writerow([row.property.value, row.get(default_culture), row.get(culture)])
            count += 1
    return count


class _LineSource:
    """Feeds csv.reader line by line, dropping '#' lines between records.

    Lines inside a quoted multi-line field are never treated as comments.
    """

    def __init__(self, text: str):
        self._lines = io.StringIO(text, newline="")
        self.in_record = False

    def __iter__(self):
        return self

    def __next__(self) -> str:
        line = next(self._lines)
        while not self.in_record and line.startswith("#"):
            line = next(self._lines)
        self.in_record = True
        return line


def _records(text: str) -> Iterator[list[str]]:
    source = _LineSource(text)
    for fields in csv.reader(source):
        source.in_record = False
        yield fields


def read_csv(path: str | Path, fallback_to_default: bool = False) -> list[CsvRow]:
    """Parse a translation CSV.

    Empty or unreadable files give an empty list. The first record is the
    header; records without exactly three fields are skipped.
    """
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read '%s': %s", path, exc)
        return []

    if not text.strip():
        logger.info("'%s' is empty, nothing to import.", path)
        return []

    records = _records(text)
    next(records, None)

    parsed: list[CsvRow] = []
    skipped = 0
    for fields in records:
        if len(fields) != 3:
            skipped += 1
            continue
        type_, original, translation = fields
        if fallback_to_default and not translation:
            translation = original
        parsed.append(CsvRow(type_, original, translation))

    if skipped:
        logger.debug("Skipped %d malformed record(s) in '%s'", skipped, path)
    return parsed
