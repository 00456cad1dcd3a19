from __future__ import annotations

from datetime import datetime

import pytest

from src.roster_tracker.roster_tracker.attendees.model import Attendee

from tests.fakes import InMemoryAttendees, make_attendee


@pytest.fixture
def roster() -> tuple[Attendee, ...]:
    return (
        make_attendee(1, "Aisha Khan", course="BCA", batch="2016", shift="Morning", contact_no="0300-1234567"),
        make_attendee(2, "bilal Ahmed", course="bca ", batch="16", shift="Evening"),
        make_attendee(
            3,
            "Sara Malik",
            course="MBA",
            batch="Batch 1999",
            contact_no="0321-7654321",
            is_present=True,
            checked_in_at=datetime(2026, 3, 2, 9, 15),
        ),
        make_attendee(4, "Usman Tariq", course="BS  Computer Science", batch="unknown", shift="Morning"),
    )


@pytest.fixture
def repo(roster) -> InMemoryAttendees:
    return InMemoryAttendees(roster)
