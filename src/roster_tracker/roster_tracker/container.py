from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendees.live import LiveQueryHub, PendingMutations
from .attendees.mysql_attendee_repository import MySQLAttendeeRepository
from .attendees.repository import AttendeeRepository
from .attendees.service import AttendeeService
from .database.connection import DBConfig, DatabaseConnection
from .printing.service import PrintListService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendees_repo: AttendeeRepository
    live_hub: LiveQueryHub

    attendee_service: AttendeeService
    print_service: PrintListService


def build_container_for(attendees_repo: AttendeeRepository, *, conn: Optional[DatabaseConnection] = None) -> Container:
    live_hub = LiveQueryHub()
    attendee_service = AttendeeService(attendees_repo, hub=live_hub, pending=PendingMutations())
    print_service = PrintListService(attendee_service)

    return Container(
        conn=conn,
        attendees_repo=attendees_repo,
        live_hub=live_hub,
        attendee_service=attendee_service,
        print_service=print_service,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_container_for(MySQLAttendeeRepository(conn), conn=conn)
