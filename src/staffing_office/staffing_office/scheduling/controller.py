from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.responses import http_status
from ..container import Container
from .model import ProposedAssignment
from .service import OperationResult, ScheduleResult

_PROPOSED_FIELDS = ("worker_id", "start_date", "end_date", "shift_start", "shift_end", "pay_rate_per_day")


def _warnings(result) -> list[dict]:
    return [{"message": w.message, "worker_ids": list(w.worker_ids)} for w in result.warnings]


def _schedule_payload(result: ScheduleResult) -> dict:
    return {
        "success": result.success,
        "message": result.message,
        "error_type": result.error_type,
        "conflicts": list(result.conflicts),
        "missing_ids": list(result.missing_ids),
        "assignment_ids": list(result.assignment_ids),
        "warnings": _warnings(result),
    }


def _operation_payload(result: OperationResult) -> dict:
    return {
        "success": result.success,
        "message": result.message,
        "error_type": result.error_type,
        "assignment_id": result.assignment_id,
        "conflicts": list(result.conflicts),
        "warnings": _warnings(result),
    }


def _bad_request(message: str):
    return jsonify({"success": False, "message": message, "error_type": "ValidationError"}), 400


def register(app: Flask, container: Container) -> None:
    service = container.scheduling_service

    @app.route("/api/clients/<client_id>/shifts", methods=["POST"], endpoint="api_schedule_shifts")
    def api_schedule_shifts(client_id: str):
        data = request.get_json(silent=True) or {}
        shifts = data.get("shifts")
        if not isinstance(shifts, list) or not all(isinstance(s, dict) for s in shifts):
            return _bad_request("Request body must contain a 'shifts' list")

        proposed = [ProposedAssignment(**{f: s.get(f) for f in _PROPOSED_FIELDS}) for s in shifts]
        result = service.schedule_shifts(proposed, client_id)
        return jsonify(_schedule_payload(result)), http_status(result.success, result.error_type)

    @app.route("/api/assignments/<int:assignment_id>", methods=["PATCH"], endpoint="api_update_assignment")
    def api_update_assignment(assignment_id: int):
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _bad_request("Request body must be a JSON object")

        result = service.update_assignment(assignment_id, data)
        return jsonify(_operation_payload(result)), http_status(result.success, result.error_type)

    @app.route("/api/assignments/<int:assignment_id>/end", methods=["POST"], endpoint="api_end_assignment")
    def api_end_assignment(assignment_id: int):
        data = request.get_json(silent=True) or {}
        end_date = None
        if data.get("end_date"):
            try:
                end_date = parse_iso_date(data["end_date"])
            except (AttributeError, TypeError, ValueError):
                return _bad_request("Invalid date format, expected YYYY-MM-DD")

        result = service.end_assignment(assignment_id, end_date)
        return jsonify(_operation_payload(result)), http_status(result.success, result.error_type)

    @app.route("/api/assignments/<int:assignment_id>", methods=["DELETE"], endpoint="api_delete_assignment")
    def api_delete_assignment(assignment_id: int):
        result = service.delete_assignment(assignment_id)
        return jsonify(_operation_payload(result)), http_status(result.success, result.error_type)
