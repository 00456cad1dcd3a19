from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence, TypeVar

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.exceptions import BulkOperationError, StoreError
from ..csv_io.model import AttendeeCandidate
from .live import LiveQueryHub, PendingMutations, Subscription
from .model import AttendanceStats, Attendee, BulkResult
from .repository import AttendeeRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _percentage(present: int, total: int) -> int:
    # Round half up, 0 for an empty roster.
    if total <= 0:
        return 0
    return (present * 200 + total) // (2 * total)


class AttendeeService:
    """Use cases over the attendee store.

    Every mutation keeps is_present and checked_in_at paired, then publishes
    to the live query hub so subscribers see the new state.
    """

    def __init__(
        self,
        attendees: AttendeeRepository,
        *,
        hub: Optional[LiveQueryHub] = None,
        pending: Optional[PendingMutations] = None,
    ):
        self._attendees = attendees
        self._hub = hub or LiveQueryHub()
        self._pending = pending or PendingMutations()

    @property
    def pending(self) -> PendingMutations:
        return self._pending

    # ----- queries -----

    def list_all(self) -> list[Attendee]:
        return list(self._attendees.list_all())

    def list_filtered(
        self,
        *,
        course: Optional[str] = None,
        batch: Optional[str] = None,
        shift: Optional[str] = None,
        present_only: bool = False,
    ) -> list[Attendee]:
        return list(
            self._attendees.list_filtered(course=course, batch=batch, shift=shift, present_only=present_only)
        )

    def get(self, attendee_id: int) -> Optional[Attendee]:
        return self._attendees.get_by_id(int(attendee_id))

    def stats(self) -> AttendanceStats:
        total, present = self._attendees.count_presence()
        return AttendanceStats(
            total=total,
            present=present,
            absent=total - present,
            percentage=_percentage(present, total),
        )

    def distinct_courses(self) -> list[str]:
        return list(self._attendees.distinct_values("course"))

    def distinct_batches(self) -> list[str]:
        return list(self._attendees.distinct_values("batch"))

    def distinct_shifts(self) -> list[str]:
        return [s for s in self._attendees.distinct_values("shift") if s and s.strip()]

    # ----- live queries -----

    def subscribe(self, query: Callable[[], T], listener: Callable[[T], None]) -> Subscription[T]:
        return self._hub.subscribe(query, listener)

    def subscribe_roster(self, listener: Callable[[list[Attendee]], None]) -> Subscription[list[Attendee]]:
        return self._hub.subscribe(self.list_all, listener)

    def subscribe_stats(self, listener: Callable[[AttendanceStats], None]) -> Subscription[AttendanceStats]:
        return self._hub.subscribe(self.stats, listener)

    # ----- mutations -----

    def set_presence(self, attendee_id: int, is_present: bool, *, now: Optional[datetime] = None) -> bool:
        """Mark one attendee; returns False when the record no longer exists."""
        attendee_id = int(attendee_id)
        with self._pending.track([attendee_id]):
            found = self._attendees.update_presence(
                attendee_id=attendee_id,
                is_present=bool(is_present),
                checked_in_at=(now or now_local()) if is_present else None,
            )

        if not found:
            logger.warning("Presence update for missing attendee %s ignored", attendee_id)
            return False

        self._hub.publish()
        return True

    def set_presence_bulk(
        self,
        attendee_ids: Iterable[int],
        is_present: bool,
        *,
        now: Optional[datetime] = None,
    ) -> BulkResult:
        ids = [int(i) for i in attendee_ids]
        checked_in_at = (now or now_local()) if is_present else None

        with self._pending.track(ids):
            result = self._run_bulk(
                "Bulk presence update",
                ids,
                lambda i: self._attendees.update_presence(
                    attendee_id=i, is_present=bool(is_present), checked_in_at=checked_in_at
                ),
            )

        logger.info("Marked %d of %d attendees %s", result.affected, len(ids), "present" if is_present else "absent")
        return result

    def add_attendee(
        self,
        *,
        full_name: Optional[str],
        course: Optional[str],
        batch: Optional[str],
        shift: Optional[str] = None,
        contact_no: Optional[str] = None,
    ) -> int:
        full_name = require_non_empty(full_name, "Full name")
        course = require_non_empty(course, "Course")
        batch = require_non_empty(batch, "Batch")

        attendee_id = self._attendees.create(
            full_name=full_name,
            course=course,
            batch=batch,
            shift=optional_text(shift),
            contact_no=optional_text(contact_no),
            is_present=False,
            checked_in_at=None,
        )
        logger.info("Added attendee %s (%s)", attendee_id, full_name)
        self._hub.publish()
        return attendee_id

    def import_candidates(
        self,
        candidates: Sequence[AttendeeCandidate],
        *,
        now: Optional[datetime] = None,
    ) -> BulkResult:
        """Insert parsed CSV rows; unspecified presence defaults to absent."""
        for c in candidates:
            require_non_empty(c.full_name, "Full name")

        stamp = now or now_local()

        def _insert(c: AttendeeCandidate) -> bool:
            is_present = bool(c.is_present)
            self._attendees.create(
                full_name=c.full_name.strip(),
                course=c.course,
                batch=c.batch,
                shift=optional_text(c.shift),
                contact_no=optional_text(c.contact_no),
                is_present=is_present,
                checked_in_at=stamp if is_present else None,
            )
            return True

        result = self._run_bulk("Import", list(candidates), _insert)
        logger.info("Imported %d attendees", result.affected)
        return result

    def delete(self, attendee_id: int) -> bool:
        """Delete one attendee; a missing record is a no-op returning False."""
        attendee_id = int(attendee_id)
        with self._pending.track([attendee_id]):
            deleted = self._attendees.delete(attendee_id)

        if not deleted:
            logger.warning("Delete of missing attendee %s ignored", attendee_id)
            return False

        logger.info("Deleted attendee %s", attendee_id)
        self._hub.publish()
        return True

    def delete_all(self) -> BulkResult:
        ids = [a.attendee_id for a in self._attendees.list_all()]
        result = self._run_bulk("Delete all", ids, self._attendees.delete)
        logger.info("Deleted %d attendees", result.affected)
        return result

    def reset_all_presence(self) -> BulkResult:
        ids = [a.attendee_id for a in self._attendees.list_all()]
        result = self._run_bulk(
            "Reset attendance",
            ids,
            lambda i: self._attendees.update_presence(attendee_id=i, is_present=False, checked_in_at=None),
        )
        logger.info("Reset attendance for %d attendees", result.affected)
        return result

    def _run_bulk(self, operation: str, items: Sequence[T], apply: Callable[[T], bool]) -> BulkResult:
        """Apply per-record operations in order, counting the ones that took effect.

        There is no cross-record atomicity: on failure the records already
        applied stay applied and BulkOperationError reports how many.
        """
        affected = 0
        try:
            for item in items:
                if apply(item):
                    affected += 1
        except StoreError as e:
            logger.error("%s stopped after %d of %d records: %s", operation, affected, len(items), e)
            raise BulkOperationError(operation, affected=affected, total=len(items)) from e
        finally:
            if affected:
                self._hub.publish()
        return BulkResult(affected=affected)
