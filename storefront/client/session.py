"""
Who is using the storefront, and what they may do.

The current user (guest or signed in) lives under a single key of a small
JSON file, the client's only persisted state. `authorize` is the one place
role rules are written down; every privileged client action asks it first.

These checks are pre-flight only. The API does not authenticate writes, so
they keep honest users on the happy path and are not a security boundary.
"""
from __future__ import annotations

import json
import logging
import os
import secrets
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError

from storefront.core.config import get_settings
from storefront.domain.models.user import User

logger = logging.getLogger(__name__)

USER_KEY = "sonko_user"


class LocalStore:
    """Tiny persistent key-value store backed by one JSON file."""

    def __init__(self, path: Optional[str] = None):
        self.path = path or get_settings().CLIENT_STATE_PATH

    def _load(self) -> dict:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("local store unreadable path=%s err=%s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict) -> None:
        folder = os.path.dirname(os.path.abspath(self.path))
        fd, tmp = tempfile.mkstemp(dir=folder, prefix=".sonko-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise

    def get(self, key: str) -> Any:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


def new_guest() -> User:
    return User(
        id=f"guest_{secrets.token_hex(8)}",
        name="Guest",
        email="",
        role="guest",
        created_at=datetime.now(timezone.utc),
    )


class Session:
    """Current user, restored from the local store or synthesized as a guest."""

    def __init__(self, store: Optional[LocalStore] = None):
        self.store = store or LocalStore()
        self.user = self._restore()

    def _restore(self) -> User:
        raw = self.store.get(USER_KEY)
        if raw:
            try:
                return User.model_validate(raw)
            except ValidationError as e:
                logger.warning("stored user discarded err=%s", e)
        guest = new_guest()
        self._persist(guest)
        return guest

    def _persist(self, user: User) -> None:
        self.store.set(USER_KEY, user.model_dump(mode="json"))

    def sign_in(self, user: User) -> None:
        self.user = user
        self._persist(user)
        logger.info("signed in id=%s role=%s", user.id, user.role)

    def sign_out(self) -> User:
        """Replace the user with a fresh guest identity."""
        self.user = new_guest()
        self._persist(self.user)
        logger.info("signed out, new guest id=%s", self.user.id)
        return self.user


# ----- role gating ----------------------------------------------------------------

class Action(str, Enum):
    OPEN_ADMIN = "open_admin"
    CREATE_PRODUCT = "create_product"
    UPDATE_PRODUCT = "update_product"
    DELETE_PRODUCT = "delete_product"
    UPLOAD_MEDIA = "upload_media"
    CREATE_CATEGORY = "create_category"
    DELETE_CATEGORY = "delete_category"
    VIEW_STATS = "view_stats"


# Anything signed in may open the dashboard; catalog writes need an admin.
_ADMIN_ONLY = {
    Action.CREATE_PRODUCT,
    Action.UPDATE_PRODUCT,
    Action.DELETE_PRODUCT,
    Action.UPLOAD_MEDIA,
    Action.CREATE_CATEGORY,
    Action.DELETE_CATEGORY,
}


@dataclass(frozen=True)
class AuthDecision:
    allowed: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.allowed


def authorize(user: Optional[User], action: Action) -> AuthDecision:
    if user is None or user.is_guest:
        return AuthDecision(False, "Sign in to continue")
    if action in _ADMIN_ONLY and not user.is_admin:
        return AuthDecision(False, "Admin role required")
    return AuthDecision(True)
