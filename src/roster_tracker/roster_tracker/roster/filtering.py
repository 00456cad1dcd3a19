"""Filter/sort engine shared by the roster, admin console and print view.

Everything here is a pure function of its inputs: the collection passed in
is never mutated and the same inputs always give the same output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Collection, Iterable, Optional, Sequence

from ..attendees.model import Attendee
from ..core.constants import ALL
from ..core.enums import PresenceFilter, SortColumn, SortDirection
from .normalizer import canonical_course, normalize_batch_year

DEFAULT_SEARCH_FIELDS = ("full_name", "contact_no")
ADMIN_SEARCH_FIELDS = ("full_name", "course", "shift", "batch", "contact_no")


@dataclass(frozen=True)
class FilterSpec:
    course: str = ALL
    batch: str = ALL
    shift: str = ALL
    presence: PresenceFilter = PresenceFilter.ALL
    search: str = ""
    search_fields: tuple[str, ...] = DEFAULT_SEARCH_FIELDS

    @property
    def is_unconstrained(self) -> bool:
        return (
            is_all(self.course)
            and is_all(self.batch)
            and is_all(self.shift)
            and self.presence == PresenceFilter.ALL
            and not self.search.strip()
        )


@dataclass(frozen=True)
class SortSpec:
    column: SortColumn = SortColumn.NAME
    direction: SortDirection = SortDirection.ASC

    def describe(self) -> str:
        """One-line description used as the print subtitle."""
        order = "A-Z" if self.direction == SortDirection.ASC else "Z-A"
        return f"Sorted by {_SORT_LABELS[self.column]} ({order})"


_SORT_LABELS = {
    SortColumn.NAME: "Name",
    SortColumn.COURSE: "Course",
    SortColumn.BATCH: "Batch",
    SortColumn.SHIFT: "Shift",
    SortColumn.CONTACT: "Contact",
    SortColumn.PRESENCE: "Status",
}


def is_all(value: Optional[str]) -> bool:
    return not value or value == ALL


def _matches_exact(wanted: Optional[str], actual: Optional[str]) -> bool:
    return is_all(wanted) or actual == wanted


def _matches_presence(presence: PresenceFilter, attendee: Attendee) -> bool:
    if presence == PresenceFilter.PRESENT:
        return attendee.is_present
    if presence == PresenceFilter.ABSENT:
        return not attendee.is_present
    return True


def _matches_search(search: str, fields: Sequence[str], attendee: Attendee) -> bool:
    needle = search.strip().lower()
    if not needle:
        return True
    for field in fields:
        value = getattr(attendee, field, None)
        if value and needle in str(value).lower():
            return True
    return False


def matches(spec: FilterSpec, attendee: Attendee) -> bool:
    return (
        _matches_exact(spec.course, attendee.course)
        and _matches_exact(spec.batch, attendee.batch)
        and _matches_exact(spec.shift, attendee.shift)
        and _matches_presence(spec.presence, attendee)
        and _matches_search(spec.search, spec.search_fields, attendee)
    )


def filter_attendees(attendees: Iterable[Attendee], spec: FilterSpec) -> list[Attendee]:
    return [a for a in attendees if matches(spec, a)]


def _batch_key(attendee: Attendee) -> tuple[bool, int]:
    # Unparseable batches compare greater than every real year.
    year = normalize_batch_year(attendee.batch)
    return (year is None, year or 0)


_SORT_KEYS: dict[SortColumn, Callable[[Attendee], Any]] = {
    SortColumn.NAME: lambda a: a.full_name.lower(),
    SortColumn.COURSE: lambda a: canonical_course(a.course),
    SortColumn.BATCH: _batch_key,
    SortColumn.SHIFT: lambda a: (a.shift or "").lower(),
    SortColumn.CONTACT: lambda a: (a.contact_no or "").lower(),
    SortColumn.PRESENCE: lambda a: a.is_present,
}


def sort_attendees(attendees: Iterable[Attendee], spec: SortSpec) -> list[Attendee]:
    """Stable sort; ties keep their input order in both directions."""
    return sorted(attendees, key=_SORT_KEYS[spec.column], reverse=spec.direction == SortDirection.DESC)


def visible_attendees(
    attendees: Iterable[Attendee],
    spec: FilterSpec,
    sort: Optional[SortSpec] = None,
) -> list[Attendee]:
    rows = filter_attendees(attendees, spec)
    if sort is not None:
        rows = sort_attendees(rows, sort)
    return rows


def narrow_to_selection(attendees: Iterable[Attendee], selected_ids: Collection[int]) -> list[Attendee]:
    """Keep selected attendees in their current order; empty selection keeps all."""
    rows = list(attendees)
    if not selected_ids:
        return rows
    wanted = set(selected_ids)
    return [a for a in rows if a.attendee_id in wanted]
