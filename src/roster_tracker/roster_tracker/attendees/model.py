from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Attendee:
    """Domain entity: one person tracked on the roster."""

    attendee_id: int
    full_name: str
    course: str
    batch: str
    shift: Optional[str] = None
    contact_no: Optional[str] = None
    is_present: bool = False
    checked_in_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendee_id,
            "full_name": self.full_name,
            "course": self.course,
            "batch": self.batch,
            "shift": self.shift,
            "contact_no": self.contact_no,
            "is_present": self.is_present,
            "checked_in_at": self.checked_in_at.isoformat() if self.checked_in_at else None,
        }


@dataclass(frozen=True)
class AttendanceStats:
    total: int
    present: int
    absent: int
    percentage: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "absent": self.absent,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class BulkResult:
    """Outcome of a bulk operation: how many records it touched."""

    affected: int
