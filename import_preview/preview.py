"""
Preview assembly: bytes -> decoded text -> table -> validation report.

Responsibilities:
- encoding detection
- tokenizing at most one page of data rows
- counting every data row so callers know whether more exist
- validating the returned page when rules are supplied

Only the returned page is validated; rows past ``max_rows`` are counted but
never checked.
"""

from __future__ import annotations

from typing import Optional, Sequence

import httpx

from .config import get_settings
from .encoding import detect_encoding
from .errors import ImportPreviewError
from .fetch import fetch_bytes
from .models import FieldRule, FileCheckResult, PreviewResult
from .tokenizer import tokenize
from .validation import validate_table


def parse_for_preview(
    raw: bytes,
    max_rows: Optional[int] = None,
    rules: Optional[Sequence[FieldRule]] = None,
) -> PreviewResult:
    """
    Decode, tokenize and optionally validate an uploaded file.

    ``max_rows`` defaults to the configured page size. Raises
    ``EmptyFileError`` when the file has no non-blank line.
    """
    if max_rows is None:
        max_rows = get_settings().default_max_rows

    detected = detect_encoding(raw)
    table = tokenize(detected.text, max_rows=max_rows)

    validation = None
    if rules is not None:
        validation = validate_table(table.headers, table.rows, rules)

    return PreviewResult(
        headers=table.headers,
        rows=table.rows,
        total_rows=table.total_rows,
        total_columns=len(table.headers),
        has_more=table.total_rows > max_rows,
        encoding=detected.encoding,
        encoding_confidence=detected.confidence,
        validation=validation,
    )


def parse_preview_from_url(
    url: str,
    max_rows: Optional[int] = None,
    rules: Optional[Sequence[FieldRule]] = None,
    client: Optional[httpx.Client] = None,
) -> PreviewResult:
    return parse_for_preview(fetch_bytes(url, client=client), max_rows=max_rows, rules=rules)


def check_file(raw: bytes, required_headers: Optional[Sequence[str]] = None) -> FileCheckResult:
    """
    Quick structural check: header row present, required headers present,
    at least one data row. Problems are reported as messages, never raised.
    """
    errors: list[str] = []

    try:
        preview = parse_for_preview(raw, max_rows=1)
    except ImportPreviewError as exc:
        return FileCheckResult(valid=False, errors=[str(exc)])

    if not any(preview.headers):
        errors.append("missing header row")

    if required_headers:
        missing = [header for header in required_headers if header not in preview.headers]
        if missing:
            errors.append(f"missing required columns: {', '.join(missing)}")

    if preview.total_rows == 0:
        errors.append("no data rows")

    return FileCheckResult(valid=not errors, errors=errors)
