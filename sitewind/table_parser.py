"""Delimited-text parsing for the reference datasets.

The datasets arrive as loosely formatted exports: comma, semicolon,
tab or pipe separated, sometimes with a byte-order mark, sometimes with
quoted fields. Only the header line is used to sniff the delimiter;
every data line is then split with the same delimiter. Rows are kept as
they are even when their width differs from the header.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# Candidate delimiters in tie-break priority order
DELIMITERS: tuple[str, ...] = (",", ";", "\t", "|")

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_BOM = "\ufeff"


@dataclass(frozen=True)
class RawTable:
    """Header row plus data rows, all cells as trimmed strings."""

    headers: tuple[str, ...] = field(default_factory=tuple)
    rows: tuple[tuple[str, ...], ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.headers


def cell(row: tuple[str, ...], index: int | None) -> str:
    """Return the cell at *index*, or ``""`` when the row is too short."""
    if index is None or index < 0 or index >= len(row):
        return ""
    return row[index]


def split_line(line: str, delimiter: str = ",") -> list[str]:
    """Split one line, honouring double quotes and ``""`` escapes."""
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current).strip())
    return fields


def _parse_row(line: str, delimiter: str) -> tuple[str, ...]:
    values = []
    for value in split_line(line, delimiter):
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        values.append(value.strip())
    return tuple(values)


def detect_delimiter(line: str) -> str:
    """Pick the delimiter producing the most fields on *line*.

    Ties go to the earlier entry in :data:`DELIMITERS`. When no
    candidate yields more than one field the comma is assumed.
    """
    best, best_count = ",", 0
    for delimiter in DELIMITERS:
        count = len(split_line(line, delimiter))
        if count > best_count:
            best, best_count = delimiter, count
    return best if best_count > 1 else ","


def parse_table(text: str | None) -> RawTable:
    """Parse raw delimited text into a :class:`RawTable`.

    Never raises; empty or blank input gives an empty table.
    """
    if not text:
        return RawTable()
    if text.startswith(_BOM):
        text = text[len(_BOM):]

    lines = [line.strip() for line in _LINE_BREAK.split(text)]
    lines = [line for line in lines if line]
    if not lines:
        return RawTable()

    header_line, data_lines = lines[0], lines[1:]
    delimiter = detect_delimiter(header_line)
    headers = _parse_row(header_line, delimiter)
    rows = tuple(_parse_row(line, delimiter) for line in data_lines)
    return RawTable(headers=headers, rows=rows)


__all__ = ["DELIMITERS", "RawTable", "cell", "detect_delimiter", "parse_table", "split_line"]
