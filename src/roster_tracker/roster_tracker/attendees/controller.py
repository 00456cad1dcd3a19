from __future__ import annotations

import json
import logging
import queue
from datetime import date
from functools import wraps
from typing import Mapping

from flask import Flask, jsonify, render_template, request, stream_with_context

from ..container import Container
from ..core.constants import ALL
from ..core.enums import PresenceFilter, SortColumn, SortDirection
from ..core.exceptions import BulkOperationError, CsvParseError, StoreError, ValidationError
from ..csv_io.codec import export_attendee_csv, export_filename, parse_attendee_csv
from ..roster.filtering import ADMIN_SEARCH_FIELDS, DEFAULT_SEARCH_FIELDS, FilterSpec, SortSpec, visible_attendees
from ..roster.summary import oldest_batch_year, present_by_course
from .model import Attendee

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def filter_spec_from_args(args: Mapping[str, str]) -> FilterSpec:
    """Build a FilterSpec from query args (course, batch, shift, show, q, scope)."""
    show = (args.get("show") or PresenceFilter.ALL.value).lower()
    try:
        presence = PresenceFilter(show)
    except ValueError:
        raise ValidationError(f"Unknown presence filter: {show}")

    scope = (args.get("scope") or "").lower()
    return FilterSpec(
        course=args.get("course") or ALL,
        batch=args.get("batch") or ALL,
        shift=args.get("shift") or ALL,
        presence=presence,
        search=args.get("q") or "",
        search_fields=ADMIN_SEARCH_FIELDS if scope == "admin" else DEFAULT_SEARCH_FIELDS,
    )


def sort_spec_from_args(args: Mapping[str, str], *, default: SortSpec | None = None) -> SortSpec | None:
    column = args.get("sort")
    if not column:
        return default

    try:
        return SortSpec(
            column=SortColumn(column.lower()),
            direction=SortDirection((args.get("order") or SortDirection.ASC.value).lower()),
        )
    except ValueError:
        raise ValidationError(f"Unknown sort: {column} {args.get('order') or ''}".strip())


def _parse_ids(values) -> list[int]:
    try:
        return [int(v) for v in values or []]
    except (TypeError, ValueError):
        raise ValidationError("Attendee ids must be integers")


def register(app: Flask, container: Container) -> None:
    service = container.attendee_service

    def json_errors(view):
        """Map domain errors onto the JSON error shape used by every API route."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except (ValidationError, CsvParseError) as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except BulkOperationError as e:
                return jsonify({"success": False, "message": str(e), "affected": e.affected, "total": e.total}), 500
            except StoreError as e:
                logger.error("Store error in %s: %s", request.path, e)
                return jsonify({"success": False, "message": "Attendee store error, please retry"}), 500

        return wrapper

    def _roster_payload(attendees: list[Attendee], spec: FilterSpec, sort: SortSpec | None) -> dict:
        rows = visible_attendees(attendees, spec, sort)
        pending = service.pending.snapshot()
        return {
            "attendees": [dict(a.to_dict(), pending=a.attendee_id in pending) for a in rows],
            "count": len(rows),
            "stats": service.stats().to_dict(),
        }

    def _body() -> dict:
        return request.get_json(silent=True) or {}

    def _confirmed() -> bool:
        value = _body().get("confirm", request.values.get("confirm", ""))
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUTHY

    def _csv_text() -> str:
        upload = request.files.get("file")
        if upload is not None:
            if not (upload.filename or "").lower().endswith(".csv"):
                raise ValidationError("Invalid file type, expected a .csv file")
            raw = upload.read()
        elif request.form.get("csv"):
            return request.form["csv"]
        else:
            raw = request.get_data()

        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise CsvParseError("file is not valid UTF-8 text")

    # ----- queries -----

    @app.route("/api/attendees", methods=["GET"], endpoint="api_attendees")
    @json_errors
    def api_attendees():
        spec = filter_spec_from_args(request.args)
        sort = sort_spec_from_args(request.args)
        return jsonify(_roster_payload(service.list_all(), spec, sort))

    @app.route("/api/attendees/stats", methods=["GET"], endpoint="api_attendees_stats")
    @json_errors
    def api_attendees_stats():
        return jsonify(service.stats().to_dict())

    @app.route("/api/attendees/options", methods=["GET"], endpoint="api_attendees_options")
    @json_errors
    def api_attendees_options():
        return jsonify(
            {
                "courses": service.distinct_courses(),
                "batches": service.distinct_batches(),
                "shifts": service.distinct_shifts(),
            }
        )

    @app.route("/api/attendees/summary", methods=["GET"], endpoint="api_attendees_summary")
    @json_errors
    def api_attendees_summary():
        attendees = service.list_all()
        by_course = present_by_course(attendees)
        return jsonify(
            {
                "present_by_course": by_course,
                "present_total": sum(by_course.values()),
                "oldest_batch_year": oldest_batch_year(attendees),
            }
        )

    @app.route("/api/attendees/stream", methods=["GET"], endpoint="api_attendees_stream")
    @json_errors
    def api_attendees_stream():
        """Server-sent events: the filtered roster is pushed after every change."""

        spec = filter_spec_from_args(request.args)
        sort = sort_spec_from_args(request.args)
        keepalive = float(app.config.get("STREAM_KEEPALIVE_SECONDS", 15))

        updates: queue.Queue = queue.Queue()

        # Runs on whichever thread publishes, so it must not touch the request context.
        def query() -> dict:
            return _roster_payload(service.list_all(), spec, sort)

        def generate():
            # A body that is never iterated (HEAD, early disconnect) must not hold a subscription.
            sub = service.subscribe(query, updates.put)
            try:
                while True:
                    try:
                        payload = updates.get(timeout=keepalive)
                    except queue.Empty:
                        yield ": keepalive\n\n"
                        continue
                    yield f"data: {json.dumps(payload)}\n\n"
            finally:
                sub.cancel()

        return app.response_class(
            stream_with_context(generate()),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache"},
        )

    # ----- mutations -----

    @app.route("/api/attendees", methods=["POST"], endpoint="api_attendees_add")
    @json_errors
    def api_attendees_add():
        data = _body() or request.form
        attendee_id = service.add_attendee(
            full_name=data.get("full_name"),
            course=data.get("course"),
            batch=data.get("batch"),
            shift=data.get("shift"),
            contact_no=data.get("contact_no"),
        )
        return jsonify({"success": True, "id": attendee_id}), 201

    @app.route("/api/attendees/<int:attendee_id>/presence", methods=["POST"], endpoint="api_attendee_presence")
    @json_errors
    def api_attendee_presence(attendee_id: int):
        data = _body()
        if not isinstance(data.get("is_present"), bool):
            raise ValidationError("is_present must be true or false")

        if not service.set_presence(attendee_id, data["is_present"]):
            return jsonify({"success": False, "message": "Attendee not found"}), 404
        return jsonify({"success": True})

    @app.route("/api/attendees/presence", methods=["POST"], endpoint="api_attendees_presence_bulk")
    @json_errors
    def api_attendees_presence_bulk():
        data = _body()
        if not isinstance(data.get("is_present"), bool):
            raise ValidationError("is_present must be true or false")

        result = service.set_presence_bulk(_parse_ids(data.get("ids")), data["is_present"])
        return jsonify({"success": True, "updated": result.affected})

    @app.route("/api/attendees/<int:attendee_id>", methods=["DELETE"], endpoint="api_attendee_delete")
    @json_errors
    def api_attendee_delete(attendee_id: int):
        if not service.delete(attendee_id):
            return jsonify({"success": False, "message": "Attendee not found"}), 404
        return jsonify({"success": True})

    @app.route("/api/attendees/import/preview", methods=["POST"], endpoint="api_attendees_import_preview")
    @json_errors
    def api_attendees_import_preview():
        candidates = parse_attendee_csv(_csv_text())
        return jsonify({"count": len(candidates), "attendees": [c.to_dict() for c in candidates]})

    @app.route("/api/attendees/import", methods=["POST"], endpoint="api_attendees_import")
    @json_errors
    def api_attendees_import():
        candidates = parse_attendee_csv(_csv_text())
        if not candidates:
            raise ValidationError("No attendees found in the CSV")

        result = service.import_candidates(candidates)
        return jsonify({"success": True, "imported": result.affected})

    @app.route("/api/attendees/clear", methods=["POST"], endpoint="api_attendees_clear")
    @json_errors
    def api_attendees_clear():
        if not _confirmed():
            raise ValidationError("Deleting ALL attendees cannot be undone; resend with confirm=true")

        result = service.delete_all()
        return jsonify({"success": True, "deleted": result.affected})

    @app.route("/api/attendees/reset", methods=["POST"], endpoint="api_attendees_reset")
    @json_errors
    def api_attendees_reset():
        if not _confirmed():
            raise ValidationError("Everyone will be marked absent; resend with confirm=true")

        result = service.reset_all_presence()
        return jsonify({"success": True, "reset": result.affected})

    # ----- exports -----

    @app.route("/attendees/export.csv", methods=["GET"], endpoint="attendees_export_csv")
    @json_errors
    def attendees_export_csv():
        # Always the full collection, whatever filters the caller has on screen.
        attendees = service.list_all()
        if not attendees:
            raise ValidationError("No data to export")

        csv_bytes = export_attendee_csv(attendees).encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={export_filename(date.today())}"},
        )

    @app.route("/attendees/print", methods=["GET"], endpoint="attendees_print")
    @json_errors
    def attendees_print():
        spec = filter_spec_from_args(request.args)
        sort = sort_spec_from_args(request.args, default=SortSpec())
        selected = _parse_ids(request.args.getlist("selected"))

        doc = container.print_service.build(spec=spec, sort=sort, selected_ids=selected)
        autoprint = request.args.get("autoprint", "").lower() in _TRUTHY
        return render_template("print_list.html", doc=doc, autoprint=autoprint)
