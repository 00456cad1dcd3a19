from __future__ import annotations

from datetime import date

import pytest

from src.roster_tracker.roster_tracker.attendees.model import Attendee
from src.roster_tracker.roster_tracker.core.enums import ColumnRole
from src.roster_tracker.roster_tracker.core.exceptions import CsvParseError, MissingColumnsError, ValidationError
from src.roster_tracker.roster_tracker.csv_io.codec import (
    export_attendee_csv,
    export_filename,
    parse_attendee_csv,
    parse_presence,
    resolve_columns,
)


def test_blank_name_rows_are_skipped():
    candidates = parse_attendee_csv("name,course,batch\nJohn Doe,CS,2024\n,EC,2025")

    assert len(candidates) == 1
    assert candidates[0].full_name == "John Doe"
    assert candidates[0].course == "CS"
    assert candidates[0].batch == "2024"
    assert candidates[0].is_present is None


def test_headers_are_matched_by_keyword():
    text = "Student Name,Program,Batch Year,Shift,Mobile,Status\nAli Raza,BBA,2019,Evening,0300-1111111,Present\n"

    (c,) = parse_attendee_csv(text)

    assert c.to_dict() == {
        "full_name": "Ali Raza",
        "course": "BBA",
        "batch": "2019",
        "shift": "Evening",
        "contact_no": "0300-1111111",
        "is_present": True,
    }


def test_first_matching_header_wins():
    columns = resolve_columns(["Name", "Father Name", "Course", "Batch", "Phone", "Contact"])

    assert columns[ColumnRole.NAME] == 0
    assert columns[ColumnRole.CONTACT] == 4
    assert ColumnRole.SHIFT not in columns


def test_missing_required_columns_are_reported():
    with pytest.raises(MissingColumnsError) as exc:
        parse_attendee_csv("name,shift\nJohn,Morning\n")

    assert exc.value.missing == ["course", "batch"]
    assert isinstance(exc.value, ValidationError)


def test_missing_columns_checked_even_without_data_rows():
    with pytest.raises(MissingColumnsError):
        parse_attendee_csv("full name,contact\n")


def test_empty_text_gives_no_candidates():
    assert parse_attendee_csv("") == []
    assert parse_attendee_csv("name,course,batch\n") == []


def test_cells_are_trimmed_and_optional_blanks_become_none():
    (c,) = parse_attendee_csv("name,course,batch,shift,contact\n  Hina Shah , MBA ,  ,  ,\n")

    assert c.full_name == "Hina Shah"
    assert c.course == "MBA"
    assert c.batch == ""
    assert c.shift is None
    assert c.contact_no is None


def test_blank_and_whitespace_only_rows_are_ignored():
    text = "name,course,batch\n\nJohn,CS,2024\n  ,  , \n"
    assert [c.full_name for c in parse_attendee_csv(text)] == ["John"]


def test_byte_order_mark_is_stripped():
    (c,) = parse_attendee_csv("\ufeffname,course,batch\nJohn,CS,2024\n")
    assert c.full_name == "John"


def test_quoted_fields_may_hold_commas_and_newlines():
    (c,) = parse_attendee_csv('name,course,batch\n"Doe, John","BS\nCS",2024\n')

    assert c.full_name == "Doe, John"
    assert c.course == "BS\nCS"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("true", True),
        ("YES", True),
        ("1", True),
        (" Present ", True),
        ("false", False),
        ("no", False),
        ("0", False),
        ("Absent", False),
        ("", None),
        ("maybe", None),
        (None, None),
    ],
)
def test_parse_presence(value, expected):
    assert parse_presence(value) is expected


def test_unterminated_quote_fails_the_whole_import():
    with pytest.raises(CsvParseError):
        parse_attendee_csv('name,course,batch\nJohn,CS,2024\n"Jane,EC,2025\n')


def test_field_count_mismatch_reports_line():
    with pytest.raises(CsvParseError) as exc:
        parse_attendee_csv("name,course,batch\nJohn,CS,2024\nJane,EC\n")

    assert exc.value.line == 3
    assert "line 3" in str(exc.value)


def test_export_writes_fixed_header_and_rows(roster):
    lines = export_attendee_csv(roster).splitlines()

    assert lines[0] == "Full Name,Course,Shift,Batch,Contact No.,Present,Checked In At"
    assert lines[1] == "Aisha Khan,BCA,Morning,2016,0300-1234567,No,"
    assert lines[3] == "Sara Malik,MBA,,Batch 1999,0321-7654321,Yes,2026-03-02 09:15:00"
    assert len(lines) == 1 + len(roster)


def test_export_quotes_fields_with_commas():
    text = export_attendee_csv([Attendee(attendee_id=1, full_name="Doe, John", course="CS", batch="2024")])

    assert text.splitlines()[1] == '"Doe, John",CS,,2024,,No,'


def test_exported_csv_imports_back(roster):
    candidates = parse_attendee_csv(export_attendee_csv(roster))

    # Import trims cells, so the padded "bca " comes back as "bca".
    assert [(c.full_name, c.course, c.batch, c.shift, c.contact_no, c.is_present) for c in candidates] == [
        (a.full_name, a.course.strip(), a.batch, a.shift, a.contact_no, a.is_present) for a in roster
    ]


def test_export_keeps_case_variants_apart():
    rows = [
        Attendee(attendee_id=1, full_name="A", course="BCA", batch="2016", shift="Morning"),
        Attendee(attendee_id=2, full_name="B", course="bca", batch="16", shift="morning"),
    ]

    candidates = parse_attendee_csv(export_attendee_csv(rows))

    assert [(c.course, c.batch, c.shift) for c in candidates] == [("BCA", "2016", "Morning"), ("bca", "16", "morning")]


def test_export_filename():
    assert export_filename(date(2026, 3, 2)) == "attendance-export-2026-03-02.csv"
