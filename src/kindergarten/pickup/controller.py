from __future__ import annotations

from flask import Flask

from ..common.web import error_response, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/pickup", methods=["POST"], endpoint="pickup_register")
    @login_required
    def pickup_register():
        """Manual pickup: {child_id, actor: "parent"|"other", actor_name?}."""
        try:
            data = json_body()
            result = container.pickup_service.register_pickup(
                data.get("child_id"),
                data.get("actor", ""),
                data.get("actor_name"),
            )
            return ok(result.to_dict())
        except Exception as e:
            return error_response(e)
