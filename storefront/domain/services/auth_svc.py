# storefront/domain/services/auth_svc.py
"""
Credential checks for the admin login.

Stored secrets come in two formats:
  - 64 hex chars: SHA-256 digest of the password (current format)
  - anything else: legacy plaintext
Every failure is reported as the same InvalidCredentials so callers cannot
tell "no such user" from "wrong password" from "store down".
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Optional

from storefront.domain.models.user import PublicUser

logger = logging.getLogger(__name__)

_SHA256_HEX = re.compile(r"[0-9a-fA-F]{64}")


class InvalidCredentials(Exception):
    """Opaque login failure."""


def sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def is_sha256_digest(stored: str) -> bool:
    return bool(_SHA256_HEX.fullmatch(stored or ""))


def verify_password(supplied: str, stored: Optional[str]) -> bool:
    if not stored:
        return False
    if is_sha256_digest(stored):
        return hmac.compare_digest(sha256_hex(supplied), stored.lower())
    return hmac.compare_digest(supplied.encode("utf-8"), stored.encode("utf-8"))


async def authenticate(user_repo, email: str, password: str) -> PublicUser:
    """
    Return the minimal user record or raise InvalidCredentials.
    `user_repo` may be None when the store is not configured.
    """
    email = email.strip().lower()
    if user_repo is None:
        logger.error("login failed email=%s reason=store_unavailable", email)
        raise InvalidCredentials()
    try:
        row = await user_repo.find_by_email(email)
    except Exception as e:
        logger.error("login failed email=%s reason=store_error err=%s", email, e)
        raise InvalidCredentials() from e

    if not row:
        logger.info("login failed email=%s reason=unknown_user", email)
        raise InvalidCredentials()
    # legacy rows used `password_hash`
    stored = row.get("password") or row.get("password_hash")
    if not verify_password(password, stored):
        logger.info("login failed email=%s reason=bad_password", email)
        raise InvalidCredentials()

    logger.info("login ok email=%s role=%s", email, row.get("role"))
    return PublicUser(
        id=str(row.get("id")),
        name=row.get("name") or email.split("@")[0],
        email=row.get("email") or email,
        role=row.get("role") or "user",
    )


async def register(user_repo, name: str, email: str, password: str, role: str = "user") -> PublicUser:
    """Create a user with a SHA-256 stored secret. Raises UserExists on duplicate email."""
    doc = {
        "id": uuid.uuid4().hex,
        "name": name.strip(),
        "email": email.strip().lower(),
        "role": role,
        "password": sha256_hex(password),
        "created_at": datetime.now(timezone.utc),
    }
    saved = await user_repo.insert(doc)
    logger.info("user created email=%s role=%s", saved["email"], role)
    return PublicUser(id=saved["id"], name=saved["name"], email=saved["email"], role=role)
