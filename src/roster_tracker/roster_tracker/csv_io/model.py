from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AttendeeCandidate:
    """A record ready for insertion (CSV row or manual add).

    is_present=None means the source did not say; the store then
    defaults to absent.
    """

    full_name: str
    course: str
    batch: str
    shift: Optional[str] = None
    contact_no: Optional[str] = None
    is_present: Optional[bool] = None

    def to_dict(self) -> dict:
        return {
            "full_name": self.full_name,
            "course": self.course,
            "batch": self.batch,
            "shift": self.shift,
            "contact_no": self.contact_no,
            "is_present": self.is_present,
        }
