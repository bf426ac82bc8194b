from __future__ import annotations

import io
import logging
import secrets

import qrcode

from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import QR_TOKEN_BYTES, QR_TOKEN_PREFIX
from ..core.enums import ChildStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..database.unit_of_work import Repositories, UnitOfWork
from .model import Child

logger = logging.getLogger(__name__)

_MAX_TOKEN_ATTEMPTS = 5


def new_qr_token() -> str:
    return QR_TOKEN_PREFIX + secrets.token_urlsafe(QR_TOKEN_BYTES)


class ChildService:
    """Use case: register children and print their badges."""

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    def register_child(self, *, name: str, parent_id: int, actor_user_id: int) -> Child:
        name = require_non_empty(name, "Child name")
        parent_id = require_positive_int(parent_id, "parent_id")
        return self._uow.with_transaction(lambda tx: self._register(tx, name, parent_id, actor_user_id))

    def _register(self, tx: Repositories, name: str, parent_id: int, actor_user_id: int) -> Child:
        actor = tx.users.get_by_id(int(actor_user_id))
        if not actor or actor.role != Role.ADMIN:
            raise AuthorizationError("Only admins can register children")

        parent = tx.users.get_by_id(parent_id)
        if not parent or parent.role != Role.PARENT:
            raise ValidationError("parent_id does not refer to a parent account")

        for _ in range(_MAX_TOKEN_ATTEMPTS):
            token = new_qr_token()
            if not tx.children.qr_code_exists(token):
                break
        else:
            raise RuntimeError("Could not generate a unique QR token")

        child_id = tx.children.create_child(name=name, parent_id=parent_id, qr_code=token, status=ChildStatus.ABSENT)
        logger.info("Registered child %s for parent %s", child_id, parent_id)
        return Child(child_id=child_id, name=name, parent_id=parent_id, status=ChildStatus.ABSENT, qr_code=token)

    def get_child(self, child_id: int) -> Child:
        child = self._uow.with_transaction(lambda tx: tx.children.get_by_id(int(child_id)))
        if not child:
            raise NotFoundError("Child not found")
        return child

    def qr_png(self, child_id: int) -> bytes:
        """Badge image: the child's token as a PNG QR code."""

        child = self.get_child(child_id)
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=2,
        )
        qr.add_data(child.qr_code)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()
