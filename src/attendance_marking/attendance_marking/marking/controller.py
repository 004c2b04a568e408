from __future__ import annotations

import logging
import uuid
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.validators import parse_iso_date, parse_period, parse_status, require_non_empty
from ..container import Container
from ..core.exceptions import CommitError, CommitInProgressError, RosterFetchError, ServiceError, ValidationError
from ..roster.model import SelectionKey
from .aggregator import attendance_band, average_percentage

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def operator_session():
        if "operator_id" not in session:
            session["operator_id"] = uuid.uuid4().hex
        return container.sessions.get(session["operator_id"])

    def json_errors(view):
        """Map engine errors to JSON responses; the session state is left as the engine set it."""

        @wraps(view)
        async def wrapper(*args, **kwargs):
            try:
                return await view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except CommitInProgressError as e:
                return jsonify({"success": False, "message": str(e)}), 409
            except (RosterFetchError, CommitError, ServiceError) as e:
                return jsonify({"success": False, "message": str(e), "retryable": True}), 502
            except Exception:
                logger.exception("Unhandled error in %s", view.__name__)
                return jsonify({"success": False, "message": "Internal error"}), 500

        return wrapper

    def band(pct):
        b = attendance_band(pct, good=container.good_percentage, minimum=container.minimum_percentage)
        return b.value if b else None

    def selection_result(marking, applied: bool):
        if applied:
            return jsonify(marking.snapshot())
        body = {"success": False, "message": "Selection was superseded by a newer request", "session": marking.snapshot()}
        return jsonify(body), 409

    @app.route("/api/marking", methods=["GET"], endpoint="marking_snapshot")
    @json_errors
    async def marking_snapshot():
        return jsonify(operator_session().snapshot())

    @app.route("/api/marking/selection", methods=["PUT"], endpoint="marking_select")
    @json_errors
    async def marking_select():
        data = request.get_json(silent=True) or {}
        key = SelectionKey(
            date=parse_iso_date(data.get("date")),
            class_name=require_non_empty(data.get("className"), "className"),
            section=require_non_empty(data.get("section"), "section"),
            period=parse_period(data.get("period")),
        )
        marking = operator_session()
        applied = await marking.select(key)
        return selection_result(marking, applied)

    @app.route("/api/marking/reload", methods=["POST"], endpoint="marking_reload")
    @json_errors
    async def marking_reload():
        marking = operator_session()
        applied = await marking.reload()
        return selection_result(marking, applied)

    @app.route("/api/marking/cycle/<subject_id>", methods=["POST"], endpoint="marking_cycle")
    @json_errors
    async def marking_cycle(subject_id: str):
        marking = operator_session()
        marking.cycle(subject_id)
        return jsonify(marking.snapshot())

    @app.route("/api/marking/set-all", methods=["POST"], endpoint="marking_set_all")
    @json_errors
    async def marking_set_all():
        data = request.get_json(silent=True) or {}
        marking = operator_session()
        marking.set_all(parse_status(data.get("status")))
        return jsonify(marking.snapshot())

    @app.route("/api/marking/reset", methods=["POST"], endpoint="marking_reset")
    @json_errors
    async def marking_reset():
        marking = operator_session()
        marking.reset()
        return jsonify(marking.snapshot())

    @app.route("/api/marking/commit", methods=["POST"], endpoint="marking_commit")
    @json_errors
    async def marking_commit():
        marking = operator_session()
        receipt = await marking.commit()
        return jsonify(
            {
                "success": receipt.success,
                "savedCount": receipt.saved_count,
                "message": f"Attendance saved for {receipt.saved_count} students.",
                "session": marking.snapshot(),
            }
        )

    @app.route("/api/marking/periods/summary", methods=["GET"], endpoint="marking_period_summary")
    @json_errors
    async def marking_period_summary():
        marking = operator_session()
        students = await marking.load_subject_summary()
        breakdown = await marking.subject_breakdown()
        return jsonify(
            {
                "students": [
                    {
                        "subjectId": s.subject_id,
                        "name": s.name,
                        "totalPeriods": s.total_periods,
                        "attendedPeriods": s.attended_periods,
                        "periodPercentage": s.period_percentage,
                        "band": band(s.period_percentage),
                        "subjectWise": [
                            {
                                "subject": sw.subject,
                                "attended": sw.attended,
                                "total": sw.total,
                                "percentage": sw.percentage,
                                "band": band(sw.percentage),
                            }
                            for sw in s.subject_wise
                        ],
                    }
                    for s in students
                ],
                "subjects": [
                    {
                        "subject": b.subject,
                        "attended": b.attended,
                        "total": b.total,
                        "percentage": b.percentage,
                        "band": band(b.percentage),
                    }
                    for b in breakdown
                ],
                "averagePercentage": average_percentage(breakdown),
            }
        )
