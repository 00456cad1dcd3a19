from __future__ import annotations

from datetime import datetime
from typing import Collection, Optional

from ..attendees.service import AttendeeService
from ..common.datetime_utils import now_local
from ..core.exceptions import ValidationError
from ..roster.filtering import FilterSpec, SortSpec, is_all, narrow_to_selection, visible_attendees
from ..roster.normalizer import canonical_course, format_batch_year
from .model import PrintDocument, PrintRow

PRINT_TITLE = "Attendance List"


class PrintListService:
    """Builds the printable list from the current filtered and sorted view.

    Unlike the CSV export, the print view honours filters, sort order and an
    optional row selection.
    """

    def __init__(self, attendees: AttendeeService):
        self._attendees = attendees

    def build(
        self,
        *,
        spec: FilterSpec,
        sort: SortSpec,
        selected_ids: Collection[int] = (),
        now: Optional[datetime] = None,
    ) -> PrintDocument:
        # Exact-match predicates go to the store; the engine re-applies them with the rest.
        source = self._attendees.list_filtered(
            course=None if is_all(spec.course) else spec.course,
            batch=None if is_all(spec.batch) else spec.batch,
            shift=None if is_all(spec.shift) else spec.shift,
        )
        rows = narrow_to_selection(visible_attendees(source, spec, sort), selected_ids)
        if not rows:
            raise ValidationError("No data to export")

        present = sum(1 for a in rows if a.is_present)
        return PrintDocument(
            title=PRINT_TITLE,
            generated_at=now or now_local(),
            sort_description=sort.describe(),
            total=len(rows),
            present=present,
            absent=len(rows) - present,
            rows=[
                PrintRow(
                    index=i,
                    full_name=a.full_name,
                    course=canonical_course(a.course),
                    shift=a.shift or "-",
                    batch=format_batch_year(a.batch),
                    contact_no=a.contact_no or "-",
                    is_present=a.is_present,
                )
                for i, a in enumerate(rows, start=1)
            ],
        )
