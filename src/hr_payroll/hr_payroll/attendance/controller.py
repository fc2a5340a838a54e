from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request

from ..common.http import current_identity, json_api, require_self_or_admin, to_json
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ValidationError
from ..container import Container
from .model import AttendanceRecord


def record_json(r: Optional[AttendanceRecord]) -> Optional[dict]:
    if r is None:
        return None
    return {
        "id": r.attendance_id,
        "employeeId": r.employee_id,
        "date": to_json(r.work_date),
        "clockInTime": to_json(r.clock_in_time),
        "breakStartTime": to_json(r.break_start_time),
        "breakEndTime": to_json(r.break_end_time),
        "clockOutTime": to_json(r.clock_out_time),
        "status": r.status.value,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/<int:employee_id>/today", methods=["GET"], endpoint="attendance_today")
    @json_api
    def attendance_today(employee_id: int):
        require_self_or_admin(current_identity(), employee_id)
        record = container.attendance_service.get_today(employee_id)
        return jsonify(record_json(record))

    @app.route("/api/attendance/<int:employee_id>/history", methods=["GET"], endpoint="attendance_history")
    @json_api
    def attendance_history(employee_id: int):
        require_self_or_admin(current_identity(), employee_id)
        try:
            limit = int(request.args.get("limit", DEFAULT_HISTORY_LIMIT))
        except ValueError:
            raise ValidationError("limit must be an integer")
        rows = container.attendance_service.get_history(employee_id, limit=limit)
        return jsonify([record_json(r) for r in rows])

    @app.route("/api/attendance/<int:employee_id>/clockin", methods=["POST"], endpoint="attendance_clock_in")
    @json_api
    def attendance_clock_in(employee_id: int):
        require_self_or_admin(current_identity(), employee_id)
        record = container.attendance_service.clock_in(employee_id)
        return jsonify(record_json(record))

    @app.route("/api/attendance/<int:employee_id>/clockout", methods=["POST"], endpoint="attendance_clock_out")
    @json_api
    def attendance_clock_out(employee_id: int):
        require_self_or_admin(current_identity(), employee_id)
        record = container.attendance_service.clock_out(employee_id)
        return jsonify(record_json(record))
