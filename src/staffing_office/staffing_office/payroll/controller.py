from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.responses import http_status, plain
from ..container import Container
from .model import AdvanceResult, PayCycleReport, PayrollResult


def _payroll_payload(result: PayrollResult) -> dict:
    return plain(
        {
            "success": result.success,
            "worker_id": result.worker_id,
            "start_date": result.start_date,
            "end_date": result.end_date,
            "error": result.error,
            "error_type": result.error_type,
            "payment_id": result.payment_id,
            "salary": result.salary,
            "net_salary": result.net_salary,
            "days_worked": result.days_worked,
            "hours_worked": result.hours_worked,
            "actual_hours": result.actual_hours,
            "average_hourly_rate": result.average_hourly_rate,
            "skipped_records": result.skipped_records,
            "info": result.info,
            "overlapping_payments": result.overlapping_payments,
        }
    )


def _advance_payload(result: AdvanceResult) -> dict:
    return plain(
        {
            "success": result.success,
            "worker_id": result.worker_id,
            "start_date": result.start_date,
            "end_date": result.end_date,
            "error": result.error,
            "error_type": result.error_type,
            "payment_id": result.payment_id,
            "advance_amount": result.advance_amount,
            "assigned_days": result.assigned_days,
            "info": result.info,
            "overlapping_payments": result.overlapping_payments,
        }
    )


def _cycle_payload(report: PayCycleReport) -> dict:
    return plain(
        {
            "success": report.success,
            "start_date": report.start_date,
            "end_date": report.end_date,
            "error": report.error,
            "error_type": report.error_type,
            "created": [_payroll_payload(r) for r in report.created],
            "skipped": [_payroll_payload(r) for r in report.skipped],
            "failed": [_payroll_payload(r) for r in report.failed],
        }
    )


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/workers/<int:worker_id>/salary", methods=["POST"], endpoint="api_calculate_salary")
    def api_calculate_salary(worker_id: int):
        data = request.get_json(silent=True) or {}
        result = service.calculate_salary(
            worker_id,
            data.get("start_date"),
            data.get("end_date"),
            existing_payment_id=data.get("existing_payment_id"),
        )
        return jsonify(_payroll_payload(result)), http_status(result.success, result.error_type)

    @app.route("/api/workers/<int:worker_id>/salary/advance", methods=["POST"], endpoint="api_advance_salary")
    def api_advance_salary(worker_id: int):
        data = request.get_json(silent=True) or {}
        result = service.create_advance_salary(worker_id, data.get("start_date"), data.get("end_date"))
        return jsonify(_advance_payload(result)), http_status(result.success, result.error_type)

    @app.route("/api/payroll/cycles", methods=["POST"], endpoint="api_run_pay_cycle")
    def api_run_pay_cycle():
        data = request.get_json(silent=True) or {}
        worker_ids = data.get("worker_ids")
        if worker_ids is not None and not isinstance(worker_ids, list):
            return jsonify({"success": False, "error": "worker_ids must be a list", "error_type": "ValidationError"}), 400
        report = service.run_pay_cycle(data.get("start_date"), data.get("end_date"), worker_ids=worker_ids)
        return jsonify(_cycle_payload(report)), http_status(report.success, report.error_type)

    @app.route("/api/payments/<int:payment_id>/status", methods=["PATCH"], endpoint="api_payment_status")
    def api_payment_status(payment_id: int):
        data = request.get_json(silent=True) or {}
        result = service.update_payment_status(payment_id, data.get("status"))
        return (
            jsonify({"success": result.success, "message": result.message, "error_type": result.error_type}),
            http_status(result.success, result.error_type),
        )
