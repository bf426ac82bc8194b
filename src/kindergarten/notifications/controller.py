from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user_id, error_response, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/notifications", methods=["GET"], endpoint="notifications_list")
    @login_required
    def notifications_list():
        try:
            limit = request.args.get("limit", default=100, type=int)
            items = container.notification_service.list_for_user(current_user_id(), limit=limit)
            return ok({"notifications": [n.to_dict() for n in items]})
        except Exception as e:
            return error_response(e)

    @app.route("/notifications", methods=["PUT"], endpoint="notifications_mark_read")
    @login_required
    def notifications_mark_read():
        """Body: {"id": <notification id>} or {"mark_all": true}."""
        try:
            data = json_body()
            if data.get("mark_all"):
                updated = container.notification_service.mark_all_read(current_user_id())
                return ok({"updated": updated})
            if data.get("id") is not None:
                container.notification_service.mark_read(current_user_id(), data["id"])
                return ok({"updated": 1})
            return ok({"updated": 0})
        except Exception as e:
            return error_response(e)

    @app.route("/notifications", methods=["DELETE"], endpoint="notifications_clear")
    @login_required
    def notifications_clear():
        try:
            deleted = container.notification_service.clear(current_user_id())
            return ok({"deleted": deleted})
        except Exception as e:
            return error_response(e)
