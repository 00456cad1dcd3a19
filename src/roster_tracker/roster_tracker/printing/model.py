from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PrintRow:
    index: int
    full_name: str
    course: str
    shift: str
    batch: str
    contact_no: str
    is_present: bool

    @property
    def status(self) -> str:
        return "Present" if self.is_present else "Absent"


@dataclass(frozen=True)
class PrintDocument:
    """Read-model for the printable attendance list."""

    title: str
    generated_at: datetime
    sort_description: str
    total: int
    present: int
    absent: int
    rows: list[PrintRow]
