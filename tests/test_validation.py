import pytest

from import_preview.models import ErrorKind, FieldRule, FieldType
from import_preview.rules import EXAM_TEMPLATE_RULES, ROSTER_RULES
from import_preview.validation import check_value, is_valid_date, parse_number, validate_table

EXAM_HEADERS = ["question", "type", "difficulty", "correct answer", "score"]


def exam_row(**overrides):
    row = {
        "question": "What is interior design?",
        "type": "short answer",
        "difficulty": "easy",
        "correct answer": "Planning interior spaces",
        "score": "10",
    }
    row.update(overrides)
    return [row[h] for h in EXAM_HEADERS]


def test_valid_roster():
    headers = ["name", "department name", "email"]
    rows = [
        ["Alice", "Design", "alice@example.com"],
        ["Bob", "Engineering", ""],
    ]
    result = validate_table(headers, rows, ROSTER_RULES)
    assert result.valid
    assert result.errors == []
    assert result.warnings == []
    assert result.summary.total_rows == 2
    assert result.summary.valid_rows == 2
    assert result.summary.error_rows == 0


def test_missing_required_column_short_circuits():
    result = validate_table(["name"], [["A"], ["Alice"]], ROSTER_RULES)
    assert not result.valid
    assert len(result.errors) == 1
    error = result.errors[0]
    assert error.row == 0
    assert error.column == "department name"
    assert error.kind == ErrorKind.MISSING
    # the too-short "A" is never checked
    assert all(e.row == 0 for e in result.errors)
    assert result.summary.error_rows == 2
    assert result.summary.valid_rows == 0


def test_one_error_per_missing_required_column():
    result = validate_table(["email"], [["a@b.co"]], ROSTER_RULES)
    assert [e.column for e in result.errors] == ["name", "department name"]
    assert {e.kind for e in result.errors} == {ErrorKind.MISSING}


def test_optional_column_may_be_absent():
    result = validate_table(["name", "department name"], [["Alice", "Design"]], ROSTER_RULES)
    assert result.valid


def test_empty_required_value():
    result = validate_table(["name", "department name"], [["", "Design"]], ROSTER_RULES)
    assert not result.valid
    assert len(result.errors) == 1
    assert result.errors[0].kind == ErrorKind.MISSING
    assert result.errors[0].column == "name"
    assert result.errors[0].row == 1


def test_invalid_email_is_format_error():
    headers = ["name", "department name", "email"]
    result = validate_table(headers, [["Alice", "Design", "not-an-email"]], ROSTER_RULES)
    assert [(e.column, e.kind) for e in result.errors] == [("email", ErrorKind.FORMAT)]
    assert result.errors[0].value == "not-an-email"


def test_string_length_range():
    headers = ["name", "department name"]
    result = validate_table(headers, [["A", "Design"], ["Bob", "D" * 51]], ROSTER_RULES)
    assert [(e.row, e.column, e.kind) for e in result.errors] == [
        (1, "name", ErrorKind.RANGE),
        (2, "department name", ErrorKind.RANGE),
    ]


def test_valid_exam_template():
    rows = [exam_row(), exam_row(type="multiple choice", difficulty="medium", score="5")]
    result = validate_table(EXAM_HEADERS, rows, EXAM_TEMPLATE_RULES)
    assert result.valid
    assert result.summary.valid_rows == 2


def test_exam_score_out_of_range():
    result = validate_table(EXAM_HEADERS, [exam_row(score="150")], EXAM_TEMPLATE_RULES)
    assert not result.valid
    assert result.errors[0].kind == ErrorKind.RANGE
    assert result.errors[0].column == "score"


def test_exam_type_not_in_enum():
    result = validate_table(EXAM_HEADERS, [exam_row(type="essay")], EXAM_TEMPLATE_RULES)
    assert [e.kind for e in result.errors] == [ErrorKind.ENUM]


def test_exam_score_not_a_number():
    result = validate_table(EXAM_HEADERS, [exam_row(score="ten")], EXAM_TEMPLATE_RULES)
    assert [e.kind for e in result.errors] == [ErrorKind.TYPE]


def test_error_rows_counts_distinct_rows():
    rows = [
        exam_row(type="essay", difficulty="impossible", score="0"),
        exam_row(),
        exam_row(question="Hi"),
    ]
    result = validate_table(EXAM_HEADERS, rows, EXAM_TEMPLATE_RULES)
    assert len(result.errors) == 4
    assert result.summary.error_rows == 2
    assert result.summary.valid_rows == 1


def test_short_row_reads_missing_cells_as_empty():
    result = validate_table(["name", "department name"], [["Alice"]], ROSTER_RULES)
    assert [(e.column, e.kind) for e in result.errors] == [("department name", ErrorKind.MISSING)]


def test_first_failing_check_wins():
    rule = FieldRule(name="code", required=True, type=FieldType.NUMBER, pattern=r"^\d+$", min=10, enum=["5"])
    assert check_value("x", rule)[0] == ErrorKind.TYPE
    assert check_value("5.0", rule)[0] == ErrorKind.FORMAT
    assert check_value("5", rule)[0] == ErrorKind.RANGE
    assert check_value("50", rule)[0] == ErrorKind.ENUM


def test_pattern_is_compiled_from_string():
    rule = FieldRule(name="code", pattern="^[A-Z]{3}$")
    assert check_value("ABC", rule) is None
    assert check_value(" ABC ", rule) is None
    assert check_value("abc", rule)[0] == ErrorKind.FORMAT


def test_optional_empty_value_skips_checks():
    rule = FieldRule(name="score", type=FieldType.NUMBER, min=1)
    assert check_value("   ", rule) is None


@pytest.mark.parametrize("value", ["true", "FALSE", "是", "否", "1", "0", "Yes", "no"])
def test_boolean_accepts(value):
    assert check_value(value, FieldRule(name="flag", type=FieldType.BOOLEAN)) is None


def test_boolean_rejects():
    failure = check_value("maybe", FieldRule(name="flag", type=FieldType.BOOLEAN))
    assert failure[0] == ErrorKind.TYPE


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2024-02-29", True),
        ("2024/12/31", True),
        ("31-12-2024", True),
        ("31/12/2024", True),
        ("2023-02-29", False),
        ("12/31/2024", False),
        ("2024.01.01", False),
        ("2024-1-1", False),
    ],
)
def test_dates(value, expected):
    assert is_valid_date(value) is expected


def test_date_failure_is_format_error():
    failure = check_value("yesterday", FieldRule(name="born", type=FieldType.DATE))
    assert failure[0] == ErrorKind.FORMAT


@pytest.mark.parametrize(
    "value,expected",
    [
        ("42", 42.0),
        ("-1.5", -1.5),
        ("+.5", 0.5),
        ("1e2", 100.0),
        ("inf", None),
        ("nan", None),
        ("abc", None),
        ("１５０", None),
        ("1_0", None),
        ("1e999", None),
    ],
)
def test_parse_number(value, expected):
    assert parse_number(value) == expected


def test_full_width_digits_are_a_type_error():
    rule = FieldRule(name="score", type=FieldType.NUMBER, min=1, max=100)
    assert check_value("１５０", rule)[0] == ErrorKind.TYPE
    assert check_value("1_0", rule)[0] == ErrorKind.TYPE


def test_full_width_dates_rejected():
    assert is_valid_date("２０２４-０１-０１") is False


def test_validation_is_deterministic():
    rows = [exam_row(type="essay"), exam_row(score="150")]
    assert validate_table(EXAM_HEADERS, rows, EXAM_TEMPLATE_RULES) == validate_table(
        EXAM_HEADERS, rows, EXAM_TEMPLATE_RULES
    )
