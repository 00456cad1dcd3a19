from __future__ import annotations

from enum import Enum


class PresenceFilter(str, Enum):
    """Tri-state presence filter used by every roster view."""

    ALL = "all"
    PRESENT = "present"
    ABSENT = "absent"


class SortColumn(str, Enum):
    NAME = "name"
    COURSE = "course"
    BATCH = "batch"
    SHIFT = "shift"
    CONTACT = "contact"
    PRESENCE = "presence"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ColumnRole(str, Enum):
    """Semantic role of a CSV column, resolved from its header."""

    NAME = "name"
    COURSE = "course"
    BATCH = "batch"
    SHIFT = "shift"
    CONTACT = "contact"
    PRESENCE = "presence"
