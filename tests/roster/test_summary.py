from src.roster_tracker.roster_tracker.roster.summary import oldest_batch_year, present_by_course

from tests.fakes import make_attendee


def test_present_by_course_groups_on_canonical_key():
    rows = [
        make_attendee(1, "A", course="BCA", is_present=True),
        make_attendee(2, "B", course=" bca", is_present=True),
        make_attendee(3, "C", course="MBA", is_present=True),
        make_attendee(4, "D", course="MBA"),
        make_attendee(5, "E", course="", is_present=True),
    ]

    assert present_by_course(rows) == {"BCA": 2, "MBA": 1, "UNKNOWN": 1}


def test_present_by_course_is_empty_when_nobody_is_present(roster):
    absent = [a for a in roster if not a.is_present]
    assert present_by_course(absent) == {}


def test_oldest_batch_year_ignores_unparseable_batches(roster):
    assert oldest_batch_year(roster) == 1999


def test_oldest_batch_year_none_without_any_year():
    rows = [make_attendee(1, "A", batch="unknown"), make_attendee(2, "B", batch="")]
    assert oldest_batch_year(rows) is None
