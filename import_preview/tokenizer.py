"""
Quote-aware line tokenizer.

One physical line is one row: the text is split into lines before any quote
handling, so quoted fields cannot contain newlines. Every field is trimmed,
including quoted ones.
"""

from __future__ import annotations

import re
from typing import List, Optional

from .errors import EmptyFileError
from .models import Table

_LINE_BREAK_RE = re.compile(r"\r?\n")

QUOTE = '"'
DELIMITER = ","


def split_lines(text: str) -> List[str]:
    """Split on line breaks and drop lines that are blank after trimming."""
    return [line for line in _LINE_BREAK_RE.split(text) if line.strip()]


def parse_line(line: str) -> List[str]:
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    i = 0
    while i < len(line):
        char = line[i]
        if in_quotes:
            if char == QUOTE:
                if i + 1 < len(line) and line[i + 1] == QUOTE:
                    # escaped quote
                    current.append(QUOTE)
                    i += 1
                else:
                    in_quotes = False
            else:
                current.append(char)
        elif char == QUOTE:
            in_quotes = True
        elif char == DELIMITER:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current).strip())
    return fields


def normalize_row(row: List[str], width: int) -> List[str]:
    """Right-pad with empty strings or truncate so the row is ``width`` long."""
    if len(row) < width:
        return row + [""] * (width - len(row))
    return row[:width]


def tokenize(text: str, max_rows: Optional[int] = None) -> Table:
    """
    Tokenize decoded text into a header row and data rows.

    At most ``max_rows`` data lines are tokenized when a limit is given;
    ``Table.total_rows`` always reflects every data line in the text.
    Raises ``EmptyFileError`` when the text has no non-blank line.
    """
    lines = split_lines(text)
    if not lines:
        raise EmptyFileError()

    headers = parse_line(lines[0])
    data_lines = lines[1:]
    if max_rows is not None:
        data_lines = data_lines[: max(max_rows, 0)]

    rows = [normalize_row(parse_line(line), len(headers)) for line in data_lines]
    return Table(headers=headers, rows=rows, total_rows=len(lines) - 1)
