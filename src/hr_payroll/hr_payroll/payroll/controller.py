from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_identity, json_api, require_admin, to_json
from ..core.exceptions import ValidationError
from ..container import Container
from .model import PayrollRecord, RunResult


def payroll_json(p: PayrollRecord) -> dict:
    return {
        "id": p.payroll_id,
        "employeeId": p.employee_id,
        "name": p.employee_name,
        "department": p.department,
        "month": p.month,
        "year": p.year,
        "baseSalary": to_json(p.base_salary),
        "totalHours": to_json(p.total_hours),
        "bonuses": to_json(p.bonuses),
        "deductions": to_json(p.deductions),
        "netSalary": to_json(p.net_salary),
        "status": p.status.value,
        "paymentDate": to_json(p.payment_date),
    }


def run_result_json(r: RunResult) -> dict:
    return {
        "success": True,
        "month": r.month,
        "year": r.year,
        "processed": r.processed,
        "failed": r.failed,
        "errors": {str(k): v for k, v in r.errors.items()},
        "skipped": r.skipped,
        "cancelled": r.cancelled,
    }


def _period_from_body() -> tuple[str, object]:
    body = request.get_json(silent=True) or {}
    month = body.get("month")
    year = body.get("year")
    if not month or year is None:
        raise ValidationError("month and year are required")
    return str(month), year


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    @json_api
    def payroll_generate():
        require_admin(current_identity())
        month, year = _period_from_body()
        result = container.payroll_service.run_payroll(month, year)
        return jsonify(run_result_json(result))

    @app.route("/api/payroll/cancel", methods=["POST"], endpoint="payroll_cancel")
    @json_api
    def payroll_cancel():
        require_admin(current_identity())
        month, year = _period_from_body()
        cancelled = container.payroll_service.cancel_run(month, year)
        return jsonify({"success": True, "cancelled": cancelled})

    @app.route("/api/payroll/history", methods=["GET"], endpoint="payroll_history")
    @json_api
    def payroll_history():
        identity = current_identity()
        raw = request.args.get("employeeId")
        try:
            employee_id = int(raw) if raw else None
        except ValueError:
            raise ValidationError("employeeId must be an integer")

        rows = container.payroll_service.get_payroll_history(
            current_employee_id=identity.employee_id,
            current_role=identity.role,
            employee_id=employee_id,
        )
        return jsonify([payroll_json(p) for p in rows])

    @app.route("/api/payroll/<int:payroll_id>", methods=["PUT"], endpoint="payroll_update")
    @json_api
    def payroll_update(payroll_id: int):
        identity = current_identity()
        body = request.get_json(silent=True) or {}
        record = container.payroll_service.update_payroll_record(
            payroll_id,
            current_role=identity.role,
            bonuses=body.get("bonuses"),
            deductions=body.get("deductions"),
            net_salary=body.get("netSalary"),
            status=body.get("status"),
        )
        return jsonify({"success": True, "record": payroll_json(record)})
