from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from src.roster_tracker.roster_tracker.attendees.model import Attendee
from src.roster_tracker.roster_tracker.core.exceptions import StoreError


class InMemoryAttendees:
    """AttendeeRepository fake; `fail_after_writes` simulates a backend outage."""

    def __init__(self, attendees: tuple[Attendee, ...] = (), *, fail_after_writes: Optional[int] = None):
        self._rows: dict[int, Attendee] = {a.attendee_id: a for a in attendees}
        self._next_id = max(self._rows, default=0) + 1
        self._writes = 0
        self.fail_after_writes = fail_after_writes

    def _write(self) -> None:
        if self.fail_after_writes is not None and self._writes >= self.fail_after_writes:
            raise StoreError("backend unavailable")
        self._writes += 1

    def list_all(self):
        return list(self._rows.values())

    def list_filtered(self, *, course=None, batch=None, shift=None, present_only=False):
        return [
            a
            for a in self._rows.values()
            if (course is None or a.course == course)
            and (batch is None or a.batch == batch)
            and (shift is None or a.shift == shift)
            and (not present_only or a.is_present)
        ]

    def get_by_id(self, attendee_id: int) -> Optional[Attendee]:
        return self._rows.get(attendee_id)

    def count_presence(self) -> tuple[int, int]:
        return len(self._rows), sum(1 for a in self._rows.values() if a.is_present)

    def create(self, *, full_name, course, batch, shift, contact_no, is_present, checked_in_at) -> int:
        self._write()
        attendee_id = self._next_id
        self._next_id += 1
        self._rows[attendee_id] = Attendee(
            attendee_id=attendee_id,
            full_name=full_name,
            course=course,
            batch=batch,
            shift=shift,
            contact_no=contact_no,
            is_present=is_present,
            checked_in_at=checked_in_at,
        )
        return attendee_id

    def update_presence(self, *, attendee_id: int, is_present: bool, checked_in_at: Optional[datetime]) -> bool:
        self._write()
        current = self._rows.get(attendee_id)
        if not current:
            return False
        self._rows[attendee_id] = replace(current, is_present=is_present, checked_in_at=checked_in_at)
        return True

    def delete(self, attendee_id: int) -> bool:
        self._write()
        return self._rows.pop(attendee_id, None) is not None

    def distinct_values(self, column: str):
        return sorted({getattr(a, column) for a in self._rows.values() if getattr(a, column) is not None})


def make_attendee(attendee_id: int, full_name: str, **kwargs) -> Attendee:
    kwargs.setdefault("course", "BCA")
    kwargs.setdefault("batch", "2016")
    return Attendee(attendee_id=attendee_id, full_name=full_name, **kwargs)
