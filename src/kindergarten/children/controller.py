from __future__ import annotations

import io

from flask import Flask, send_file

from ..common.web import current_user_id, error_response, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/children", methods=["POST"], endpoint="children_register")
    @login_required
    def children_register():
        try:
            data = json_body()
            child = container.child_service.register_child(
                name=data.get("name", ""),
                parent_id=data.get("parent_id"),
                actor_user_id=current_user_id(),
            )
            return ok(
                {
                    "child_id": child.child_id,
                    "name": child.name,
                    "status": child.status.value,
                    "qr_code": child.qr_code,
                },
                201,
            )
        except Exception as e:
            return error_response(e)

    @app.route("/children/<int:child_id>/qr.png", methods=["GET"], endpoint="children_qr_image")
    @login_required
    def children_qr_image(child_id: int):
        """Printable badge for the child."""
        try:
            png = container.child_service.qr_png(child_id)
            return send_file(io.BytesIO(png), mimetype="image/png", download_name=f"child-{child_id}.png")
        except Exception as e:
            return error_response(e)
