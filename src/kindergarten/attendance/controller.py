from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user_id, error_response, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance/scan", methods=["POST"], endpoint="attendance_scan")
    @login_required
    def attendance_scan():
        """QR scan: check the child in or out depending on its current status."""
        try:
            data = json_body()
            result = container.attendance_service.process_scan(data.get("token", ""), current_user_id())
            return ok(result.to_dict())
        except Exception as e:
            return error_response(e)

    @app.route("/children/<int:child_id>/attendance", methods=["PUT"], endpoint="attendance_override")
    @login_required
    def attendance_override(child_id: int):
        try:
            data = json_body()
            result = container.attendance_service.override_status(child_id, data.get("status", ""), current_user_id())
            return ok(result.to_dict())
        except Exception as e:
            return error_response(e)

    @app.route("/children/<int:child_id>/attendance", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history(child_id: int):
        try:
            limit = request.args.get("limit", default=30, type=int)
            rows = container.attendance_service.history(child_id, limit=limit)
            return ok({"records": [r.to_dict() for r in rows]})
        except Exception as e:
            return error_response(e)

    @app.route("/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @login_required
    def attendance_summary():
        try:
            summary = container.report_service.summary(request.args.get("range", "week"))
            return ok(summary.to_dict())
        except Exception as e:
            return error_response(e)
