from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Attendee


class AttendeeRepository(Protocol):
    """Repository interface for attendees.

    The service depends on this interface, not on a concrete database.
    Every method is a single atomic store operation.
    """

    def list_all(self) -> Sequence[Attendee]:
        raise NotImplementedError

    def list_filtered(
        self,
        *,
        course: Optional[str] = None,
        batch: Optional[str] = None,
        shift: Optional[str] = None,
        present_only: bool = False,
    ) -> Sequence[Attendee]:
        raise NotImplementedError

    def get_by_id(self, attendee_id: int) -> Optional[Attendee]:
        raise NotImplementedError

    def count_presence(self) -> tuple[int, int]:
        """Return (total, present)."""

        raise NotImplementedError

    def create(
        self,
        *,
        full_name: str,
        course: str,
        batch: str,
        shift: Optional[str],
        contact_no: Optional[str],
        is_present: bool,
        checked_in_at: Optional[datetime],
    ) -> int:
        raise NotImplementedError

    def update_presence(self, *, attendee_id: int, is_present: bool, checked_in_at: Optional[datetime]) -> bool:
        """Return False when the attendee no longer exists."""

        raise NotImplementedError

    def delete(self, attendee_id: int) -> bool:
        raise NotImplementedError

    def distinct_values(self, column: str) -> Sequence[str]:
        """Sorted distinct non-null values of course, batch or shift."""

        raise NotImplementedError
