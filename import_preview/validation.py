"""
Rule-driven validation of a tokenized table.

Checks per field run in a fixed order (presence, type, pattern, range, enum)
and stop at the first failure, so a field yields at most one error per row.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .models import (
    ErrorKind,
    FieldRule,
    FieldType,
    ValidationError,
    ValidationResult,
    ValidationSummary,
)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)

DATE_FORMATS: Tuple[Tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII), "%Y-%m-%d"),
    (re.compile(r"^\d{4}/\d{2}/\d{2}$", re.ASCII), "%Y/%m/%d"),
    (re.compile(r"^\d{2}-\d{2}-\d{4}$", re.ASCII), "%d-%m-%Y"),
    (re.compile(r"^\d{2}/\d{2}/\d{4}$", re.ASCII), "%d/%m/%Y"),
)

BOOLEAN_VALUES = frozenset({"true", "false", "是", "否", "1", "0", "yes", "no"})

# (kind, message) for a failed check
Failure = Tuple[ErrorKind, str]


def parse_number(value: str) -> Optional[float]:
    """Parse a plain ASCII decimal or exponent literal; anything else is None."""
    if not NUMBER_RE.match(value):
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def is_valid_email(value: str) -> bool:
    return EMAIL_RE.match(value) is not None


def is_valid_date(value: str) -> bool:
    for pattern, fmt in DATE_FORMATS:
        if pattern.match(value):
            try:
                datetime.strptime(value, fmt)
            except ValueError:
                return False
            return True
    return False


def _check_string(value: str, rule: FieldRule) -> Optional[Failure]:
    return None


def _check_number(value: str, rule: FieldRule) -> Optional[Failure]:
    if parse_number(value) is None:
        return ErrorKind.TYPE, f"Column '{rule.name}' must be a number, got '{value}'"
    return None


def _check_email(value: str, rule: FieldRule) -> Optional[Failure]:
    if not is_valid_email(value):
        return ErrorKind.FORMAT, f"Column '{rule.name}' must be a valid email address"
    return None


def _check_date(value: str, rule: FieldRule) -> Optional[Failure]:
    if not is_valid_date(value):
        return ErrorKind.FORMAT, f"Column '{rule.name}' must be a valid date (e.g. YYYY-MM-DD)"
    return None


def _check_boolean(value: str, rule: FieldRule) -> Optional[Failure]:
    if value.lower() not in BOOLEAN_VALUES:
        return ErrorKind.TYPE, f"Column '{rule.name}' must be a boolean (true/false, yes/no, 1/0)"
    return None


TYPE_CHECKS: Dict[FieldType, Callable[[str, FieldRule], Optional[Failure]]] = {
    FieldType.STRING: _check_string,
    FieldType.NUMBER: _check_number,
    FieldType.EMAIL: _check_email,
    FieldType.DATE: _check_date,
    FieldType.BOOLEAN: _check_boolean,
}


def _format_bound(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def _check_range(value: str, rule: FieldRule) -> Optional[Failure]:
    if rule.min is None and rule.max is None:
        return None

    if rule.type == FieldType.NUMBER:
        number = parse_number(value)
        if rule.min is not None and number < rule.min:
            return ErrorKind.RANGE, f"Column '{rule.name}' must be at least {_format_bound(rule.min)}"
        if rule.max is not None and number > rule.max:
            return ErrorKind.RANGE, f"Column '{rule.name}' must be at most {_format_bound(rule.max)}"
    elif rule.type == FieldType.STRING:
        length = len(value)
        if rule.min is not None and length < rule.min:
            return (
                ErrorKind.RANGE,
                f"Column '{rule.name}' must be at least {_format_bound(rule.min)} characters long",
            )
        if rule.max is not None and length > rule.max:
            return (
                ErrorKind.RANGE,
                f"Column '{rule.name}' must be at most {_format_bound(rule.max)} characters long",
            )
    return None


def check_value(value: str, rule: FieldRule) -> Optional[Failure]:
    """Run every check for one cell and return the first failure, if any."""
    trimmed = value.strip()

    if not trimmed:
        if rule.required:
            return ErrorKind.MISSING, f"Column '{rule.name}' is required and cannot be empty"
        return None

    if rule.type is not None:
        failure = TYPE_CHECKS[rule.type](trimmed, rule)
        if failure:
            return failure

    if rule.pattern is not None and not rule.pattern.search(trimmed):
        return ErrorKind.FORMAT, f"Column '{rule.name}' does not match the required format"

    failure = _check_range(trimmed, rule)
    if failure:
        return failure

    if rule.enum is not None and trimmed not in rule.enum:
        return ErrorKind.ENUM, f"Column '{rule.name}' must be one of: {', '.join(rule.enum)}"

    return None


def validate_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    rules: Sequence[FieldRule],
) -> ValidationResult:
    missing_columns = [rule.name for rule in rules if rule.required and rule.name not in headers]
    if missing_columns:
        return ValidationResult(
            valid=False,
            errors=[
                ValidationError(
                    row=0,
                    column=name,
                    value="",
                    message=f"Missing required column '{name}'",
                    kind=ErrorKind.MISSING,
                )
                for name in missing_columns
            ],
            summary=ValidationSummary(
                total_rows=len(rows),
                valid_rows=0,
                error_rows=len(rows),
            ),
        )

    # duplicate headers resolve to the last occurrence
    column_index = {header: index for index, header in enumerate(headers)}

    errors: List[ValidationError] = []
    error_rows = set()
    for row_index, row in enumerate(rows):
        for rule in rules:
            index = column_index.get(rule.name)
            if index is None:
                continue
            value = row[index] if index < len(row) else ""
            failure = check_value(value, rule)
            if failure:
                kind, message = failure
                errors.append(
                    ValidationError(
                        row=row_index + 1,
                        column=rule.name,
                        value=value,
                        message=message,
                        kind=kind,
                    )
                )
                error_rows.add(row_index)

    return ValidationResult(
        valid=not errors,
        errors=errors,
        summary=ValidationSummary(
            total_rows=len(rows),
            valid_rows=len(rows) - len(error_rows),
            error_rows=len(error_rows),
        ),
    )
