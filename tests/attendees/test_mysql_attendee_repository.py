from __future__ import annotations

from src.roster_tracker.roster_tracker.attendees.mysql_attendee_repository import MySQLAttendeeRepository


class FakeCursor:
    def __init__(self, rows):
        self._rows = rows
        self.executed: list[tuple[str, tuple]] = []

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), tuple(params)))

    def fetchall(self):
        return list(self._rows)

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.committed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        pass

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, rows=()):
        self.cursor = FakeCursor(list(rows))

    def connect(self):
        return FakeConnection(self.cursor)


def test_distinct_courses_keep_case_and_padding_variants():
    factory = FakeConnectionFactory([{"value": "bca "}, {"value": "MBA"}, {"value": "BCA"}])

    values = MySQLAttendeeRepository(factory).distinct_values("course")

    assert values == ["BCA", "MBA", "bca "]
    (sql, _), = factory.cursor.executed
    assert "DISTINCT course COLLATE utf8mb4_0900_bin" in sql


def test_filtered_list_compares_values_byte_for_byte():
    factory = FakeConnectionFactory()

    MySQLAttendeeRepository(factory).list_filtered(course="bca ", batch="16", shift="Evening", present_only=True)

    (sql, params), = factory.cursor.executed
    assert "course COLLATE utf8mb4_0900_bin = %s" in sql
    assert "batch COLLATE utf8mb4_0900_bin = %s" in sql
    assert "shift COLLATE utf8mb4_0900_bin = %s" in sql
    assert "is_present=1" in sql
    assert params == ("bca ", "16", "Evening")


def test_unfiltered_list_has_no_where_clause():
    factory = FakeConnectionFactory()

    MySQLAttendeeRepository(factory).list_filtered()

    (sql, params), = factory.cursor.executed
    assert "WHERE" not in sql
    assert params == ()
