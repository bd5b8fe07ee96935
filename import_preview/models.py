from __future__ import annotations

import re
from enum import StrEnum
from typing import List, Optional

from pydantic import BaseModel, Field


class SupportedEncoding(StrEnum):
    UTF_8 = "utf-8"
    BIG5 = "big5"
    GBK = "gbk"
    GB2312 = "gb2312"
    SHIFT_JIS = "shift_jis"


class FieldType(StrEnum):
    STRING = "string"
    NUMBER = "number"
    EMAIL = "email"
    DATE = "date"
    BOOLEAN = "boolean"


class ErrorKind(StrEnum):
    MISSING = "missing"
    TYPE = "type"
    FORMAT = "format"
    RANGE = "range"
    ENUM = "enum"


class DetectionResult(BaseModel):
    model_config = {"frozen": True}

    encoding: SupportedEncoding
    confidence: int = Field(ge=0, le=100)
    text: str


class Table(BaseModel):
    """Header row plus data rows, each row exactly ``len(headers)`` wide.

    ``total_rows`` counts every data line in the document, including lines
    that were not tokenized into ``rows`` because of a row limit.
    """

    model_config = {"frozen": True}

    headers: List[str]
    rows: List[List[str]] = Field(default_factory=list)
    total_rows: int = 0


class FieldRule(BaseModel):
    """Declarative constraint for one named column."""

    model_config = {"frozen": True}

    name: str
    required: bool = False
    type: Optional[FieldType] = None
    pattern: Optional[re.Pattern[str]] = None
    # numeric bounds for numbers, length bounds for strings
    min: Optional[float] = None
    max: Optional[float] = None
    enum: Optional[List[str]] = None


class ValidationError(BaseModel):
    model_config = {"frozen": True}

    row: int = Field(ge=0, description="1-based data row; 0 for file-level errors")
    column: str
    value: str = ""
    message: str
    kind: ErrorKind


class ValidationSummary(BaseModel):
    model_config = {"frozen": True}

    total_rows: int = 0
    valid_rows: int = 0
    error_rows: int = 0
    warning_rows: int = 0


class ValidationResult(BaseModel):
    model_config = {"frozen": True}

    valid: bool
    errors: List[ValidationError] = Field(default_factory=list)
    warnings: List[ValidationError] = Field(default_factory=list)
    summary: ValidationSummary


class PreviewResult(BaseModel):
    model_config = {"frozen": True}

    headers: List[str]
    rows: List[List[str]]
    total_rows: int
    total_columns: int
    has_more: bool
    encoding: SupportedEncoding
    encoding_confidence: int = Field(ge=0, le=100)
    validation: Optional[ValidationResult] = None


class FileCheckResult(BaseModel):
    model_config = {"frozen": True}

    valid: bool
    errors: List[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    ok: bool = True
