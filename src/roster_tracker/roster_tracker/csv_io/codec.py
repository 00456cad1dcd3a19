"""CSV import/export for the attendee roster.

Import resolves column roles by substring match on the header names, so
spreadsheets exported from different tools ("Student Name", "Program",
"Batch Year", "Mobile") load without remapping. Export always writes the
complete collection with a fixed header.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable, Optional, Sequence

from ..attendees.model import Attendee
from ..common.datetime_utils import format_date, format_timestamp
from ..core.constants import EXPORT_HEADERS
from ..core.enums import ColumnRole
from ..core.exceptions import CsvParseError, MissingColumnsError
from .model import AttendeeCandidate

# Checked in order; the first header containing any keyword gets the role.
COLUMN_KEYWORDS: dict[ColumnRole, tuple[str, ...]] = {
    ColumnRole.NAME: ("name",),
    ColumnRole.COURSE: ("course", "program"),
    ColumnRole.BATCH: ("batch", "year"),
    ColumnRole.SHIFT: ("shift",),
    ColumnRole.CONTACT: ("contact", "phone", "mobile"),
    ColumnRole.PRESENCE: ("present", "attendance", "status"),
}

REQUIRED_ROLES = (ColumnRole.NAME, ColumnRole.COURSE, ColumnRole.BATCH)

_TRUE_VALUES = {"true", "yes", "1", "present"}
_FALSE_VALUES = {"false", "no", "0", "absent"}


def resolve_columns(headers: Sequence[str]) -> dict[ColumnRole, int]:
    """Map each column role to a header index.

    Raises MissingColumnsError when name, course or batch cannot be found.
    """
    normalized = [h.strip().lower() for h in headers]
    resolved: dict[ColumnRole, int] = {}
    for role, keywords in COLUMN_KEYWORDS.items():
        for index, header in enumerate(normalized):
            if any(k in header for k in keywords):
                resolved[role] = index
                break

    missing = [role.value for role in REQUIRED_ROLES if role not in resolved]
    if missing:
        raise MissingColumnsError(missing, normalized)
    return resolved


def parse_presence(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    lower = value.strip().lower()
    if lower in _TRUE_VALUES:
        return True
    if lower in _FALSE_VALUES:
        return False
    return None


def _read_rows(text: str) -> list[tuple[int, list[str]]]:
    reader = csv.reader(io.StringIO(text), strict=True)
    rows: list[tuple[int, list[str]]] = []
    try:
        for row in reader:
            if not any(field.strip() for field in row):
                continue
            rows.append((reader.line_num, row))
    except csv.Error as e:
        raise CsvParseError(str(e), line=reader.line_num) from e
    return rows


def _cell(row: Sequence[str], columns: dict[ColumnRole, int], role: ColumnRole) -> Optional[str]:
    index = columns.get(role)
    if index is None:
        return None
    return row[index].strip()


def parse_attendee_csv(text: str) -> list[AttendeeCandidate]:
    """Parse CSV text into candidates; all-or-nothing.

    Rows without a name are skipped. Empty course/batch values are kept as
    empty strings so they show up in review instead of vanishing.
    """
    rows = _read_rows(text.lstrip("\ufeff"))
    if not rows:
        return []

    _, headers = rows[0]
    columns = resolve_columns(headers)

    candidates: list[AttendeeCandidate] = []
    for line, row in rows[1:]:
        if len(row) != len(headers):
            raise CsvParseError(f"expected {len(headers)} fields but found {len(row)}", line=line)

        full_name = _cell(row, columns, ColumnRole.NAME)
        if not full_name:
            continue

        candidates.append(
            AttendeeCandidate(
                full_name=full_name,
                course=_cell(row, columns, ColumnRole.COURSE) or "",
                batch=_cell(row, columns, ColumnRole.BATCH) or "",
                shift=_cell(row, columns, ColumnRole.SHIFT) or None,
                contact_no=_cell(row, columns, ColumnRole.CONTACT) or None,
                is_present=parse_presence(_cell(row, columns, ColumnRole.PRESENCE)),
            )
        )
    return candidates


def export_attendee_csv(attendees: Iterable[Attendee]) -> str:
    """Serialize the full collection, in the given order, as CSV text."""
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for a in attendees:
        writer.writerow(
            [
                a.full_name,
                a.course,
                a.shift or "",
                a.batch,
                a.contact_no or "",
                "Yes" if a.is_present else "No",
                format_timestamp(a.checked_in_at),
            ]
        )
    return out.getvalue()


def export_filename(today: date) -> str:
    return f"attendance-export-{format_date(today)}.csv"
