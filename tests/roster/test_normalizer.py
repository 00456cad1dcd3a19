import pytest

from src.roster_tracker.roster_tracker.roster.normalizer import (
    canonical_course,
    format_batch_year,
    normalize_batch_year,
)


@pytest.mark.parametrize(
    "batch, expected",
    [
        ("2016", 2016),
        ("16", 2016),
        ("Batch 2016", 2016),
        ("2016-2020", 2016),
        ("85", 1985),
        ("99", 1999),
        ("0", 2000),
        ("30", 2030),
        ("31", None),  # 1931 is before the accepted window
        ("45", None),
        ("1979", None),
        ("2031", None),
        ("199", None),
    ],
)
def test_normalize_batch_year(batch, expected):
    assert normalize_batch_year(batch) == expected


@pytest.mark.parametrize("batch", ["", None, "Batch A", "evening group", "---"])
def test_normalize_batch_year_without_digits_is_no_year(batch):
    assert normalize_batch_year(batch) is None


def test_first_digit_run_wins_even_when_later_one_is_valid():
    assert normalize_batch_year("Section 7 / 2019") == 2007
    assert normalize_batch_year("Group 500 of 2019") is None


def test_format_batch_year_falls_back_to_raw_value():
    assert format_batch_year("Batch 99") == "1999"
    assert format_batch_year("Evening") == "Evening"
    assert format_batch_year(None) == ""


@pytest.mark.parametrize(
    "course, expected",
    [
        ("bca", "BCA"),
        (" BCA ", "BCA"),
        ("BS   computer\tscience", "BS COMPUTER SCIENCE"),
        ("B C A", "B C A"),
        ("", "UNKNOWN"),
        (None, "UNKNOWN"),
        ("   ", "UNKNOWN"),
    ],
)
def test_canonical_course(course, expected):
    assert canonical_course(course) == expected


@pytest.mark.parametrize("course", ["bca", "  Bs  CS ", "UNKNOWN", "", "m.b.a\n(evening)"])
def test_canonical_course_is_idempotent(course):
    assert canonical_course(canonical_course(course)) == canonical_course(course)


def test_case_and_spacing_variants_share_a_key():
    assert canonical_course("bs computer science") == canonical_course("  BS  Computer   Science ")
    assert canonical_course("BCA") != canonical_course("B C A")
