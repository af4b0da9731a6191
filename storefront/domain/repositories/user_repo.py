# storefront/domain/repositories/user_repo.py

from __future__ import annotations
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError


class UserExists(Exception):
    """Email already registered."""


class UserRepo:
    """
    Users collection. Documents: {id, name, email (lowercased), role, password, created_at}.
    `password` is either a 64-hex SHA-256 digest or a legacy plaintext value.
    Raw documents are returned on purpose: only the auth service reads the secret.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "users"):
        self.col = db[collection_name]

    async def find_by_email(self, email: str) -> Optional[dict]:
        return await self.col.find_one({"email": email.strip().lower()}, {"_id": 0})

    async def insert(self, doc: dict) -> dict:
        doc = {**doc, "email": doc["email"].strip().lower()}
        if await self.find_by_email(doc["email"]):
            raise UserExists(doc["email"])
        try:
            await self.col.insert_one(dict(doc))
        except DuplicateKeyError as e:
            raise UserExists(doc["email"]) from e
        return doc
