from __future__ import annotations

from typing import Iterable, Optional

from ..attendees.model import Attendee
from .normalizer import canonical_course, normalize_batch_year


def present_by_course(attendees: Iterable[Attendee]) -> dict[str, int]:
    """Count present attendees per canonical course key."""
    counts: dict[str, int] = {}
    for a in attendees:
        if not a.is_present:
            continue
        key = canonical_course(a.course)
        counts[key] = counts.get(key, 0) + 1
    return counts


def oldest_batch_year(attendees: Iterable[Attendee]) -> Optional[int]:
    years = [y for y in (normalize_batch_year(a.batch) for a in attendees) if y is not None]
    return min(years) if years else None
