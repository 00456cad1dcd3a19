"""Example: use the service layer directly (no Flask).

Imports a CSV file, then prints the batch-sorted roster of one course.
Usage: python examples/example_usage.py path/to/roster.csv "BCA"
"""

import importlib
import sys
from pathlib import Path

from config import get_settings_module

from src.roster_tracker.roster_tracker.container import build_container
from src.roster_tracker.roster_tracker.core.enums import SortColumn
from src.roster_tracker.roster_tracker.csv_io.codec import parse_attendee_csv
from src.roster_tracker.roster_tracker.roster.filtering import FilterSpec, SortSpec, visible_attendees
from src.roster_tracker.roster_tracker.roster.normalizer import format_batch_year


def main():
    csv_path, course = sys.argv[1], sys.argv[2]

    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    service = container.attendee_service

    candidates = parse_attendee_csv(Path(csv_path).read_text(encoding="utf-8-sig"))
    print(f"Imported {service.import_candidates(candidates).affected} attendees")

    rows = visible_attendees(service.list_all(), FilterSpec(course=course), SortSpec(column=SortColumn.BATCH))
    for a in rows:
        print(f"{a.full_name:<30} {format_batch_year(a.batch):<10} {'Present' if a.is_present else 'Absent'}")
    print(service.stats())


if __name__ == "__main__":
    main()
