"""Merging externally supplied translations into the flattened rows."""

from __future__ import annotations

from typing import Sequence

from .logging_config import get_logger
from .rows import CsvRow, TranslationRow

logger = get_logger(__name__)


def _rows_align(rows: Sequence[TranslationRow], default_culture: str, csv_rows: Sequence[CsvRow]) -> bool:
    if len(rows) != len(csv_rows):
        return False
    return all(
        row.get(default_culture) == ext.original and (not ext.type or ext.type == row.property.value)
        for row, ext in zip(rows, csv_rows)
    )


def _find_match(csv_rows: Sequence[CsvRow], row: TranslationRow, original: str, typed: bool) -> CsvRow | None:
    kind = row.property.value
    for ext in csv_rows:
        if ext.original == original and (not typed or ext.type == kind):
            return ext
    return None


def apply_translations(
    rows: Sequence[TranslationRow],
    culture: str,
    default_culture: str,
    csv_rows: Sequence[CsvRow],
    overwrite: bool = False,
) -> int:
    """Apply ``csv_rows`` to ``rows`` for ``culture``; returns rows written.

    A file exported by ``write_csv`` and left in order lines up with the
    rows one to one and is applied by position. Anything else is matched by
    the default-culture string (and by Type when the first external row
    has one), first match wins.
    """
    if not csv_rows:
        return 0

    if _rows_align(rows, default_culture, csv_rows):
        logger.debug("Applying %d translation(s) for %s by position", len(csv_rows), culture)
        return sum(row.set(culture, ext.translation, overwrite) for row, ext in zip(rows, csv_rows))

    typed = bool(csv_rows[0].type)
    logger.debug(
        "Row layout differs (%d rows, %d external); matching %s by content%s",
        len(rows), len(csv_rows), culture, " and type" if typed else "",
    )

    written = 0
    for row in rows:
        match = _find_match(csv_rows, row, row.get(default_culture), typed)
        if match is not None and row.set(culture, match.translation, overwrite):
            written += 1
    return written
