"""Canonical keys for free-text roster fields.

Course and batch values are typed by hand in many formats ("bca", " BCA ",
"Batch 2016", "16", "2016-2020"). Grouping and sorting work on the keys
produced here, never on the raw display values. None of these functions
raise: a value that cannot be derived is returned as None.
"""

from __future__ import annotations

import re
from typing import Optional

from ..core.constants import MAX_BATCH_YEAR, MIN_BATCH_YEAR, TWO_DIGIT_YEAR_PIVOT, UNKNOWN_COURSE

_WHITESPACE_RE = re.compile(r"\s+")
_DIGITS_RE = re.compile(r"[0-9]+")


def canonical_course(course: Optional[str]) -> str:
    """Trim, upper-case and collapse whitespace; blank input -> UNKNOWN."""
    if not course:
        return UNKNOWN_COURSE
    key = _WHITESPACE_RE.sub(" ", course.strip().upper())
    return key or UNKNOWN_COURSE


def normalize_batch_year(batch: Optional[str]) -> Optional[int]:
    """Extract a four-digit batch year, or None when there is no plausible one.

    The first run of digits is used ("2016-2020" -> 2016). One or two digit
    values are expanded around a fixed pivot: 0-30 -> 2000s, 31-99 -> 1900s.
    Years outside [1980, 2030] are rejected rather than clamped.
    """
    if not batch:
        return None

    match = _DIGITS_RE.search(batch)
    if not match:
        return None

    year = int(match.group())
    if year <= 99:
        year += 2000 if year <= TWO_DIGIT_YEAR_PIVOT else 1900

    if year < MIN_BATCH_YEAR or year > MAX_BATCH_YEAR:
        return None
    return year


def format_batch_year(batch: Optional[str]) -> str:
    """Display form: the normalized year, or the raw value when there is none."""
    year = normalize_batch_year(batch)
    return str(year) if year is not None else (batch or "")
