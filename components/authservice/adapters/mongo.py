from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..contracts import CredentialStorePort, User
from ..errors import DuplicateEmail

logger = logging.getLogger("authservice.mongo")

_DUPLICATE_KEY = 11000


def _is_duplicate_key(ex: PyMongoError) -> bool:
    return getattr(ex, "code", None) == _DUPLICATE_KEY


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # The driver hands back naive datetimes that are already UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class MongoCredentialStore(CredentialStorePort):
    """
    Credential store over a MongoDB `users` collection.

    Document fields keep the names used by the existing collection:
      email, password, fullName, authCode, authCodeExpiry, emailVerified
    Uniqueness of `email` is enforced by a unique index, so every write
    primitive here is a single atomic document operation.
    """

    def __init__(self, collection: Collection):
        self._users = collection
        self._users.create_index([("email", ASCENDING)], unique=True)

    @classmethod
    def from_uri(cls, uri: str, db_name: str, *, collection: str = "users", timeout_ms: int = 10_000) -> "MongoCredentialStore":
        client = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
        return cls(client[db_name][collection])

    # --------- Mapping ----------
    @staticmethod
    def _to_doc(user: User) -> Dict[str, Any]:
        return {
            "email": user.email,
            "password": user.password_hash,
            "fullName": user.full_name,
            "authCode": user.pending_code,
            "authCodeExpiry": user.pending_code_expiry,
            "emailVerified": user.email_verified,
        }

    @staticmethod
    def _from_doc(doc: Dict[str, Any]) -> User:
        return User(
            email=doc["email"],
            password_hash=doc.get("password"),
            full_name=doc.get("fullName"),
            pending_code=doc.get("authCode"),
            pending_code_expiry=_as_utc(doc.get("authCodeExpiry")),
            email_verified=bool(doc.get("emailVerified", False)),
        )

    # --------- CredentialStorePort ----------
    def find_by_email(self, email: str) -> Optional[User]:
        doc = self._users.find_one({"email": email})
        return self._from_doc(doc) if doc else None

    def create(self, user: User) -> User:
        try:
            self._users.insert_one(self._to_doc(user))
            return user
        except PyMongoError as ex:
            if not _is_duplicate_key(ex):
                raise

        # The email exists; only a record without a password may be claimed.
        doc = self._users.find_one_and_update(
            {"email": user.email, "password": None},
            {
                "$set": {
                    "password": user.password_hash,
                    "fullName": user.full_name,
                    "authCode": None,
                    "authCodeExpiry": None,
                    "emailVerified": False,
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise DuplicateEmail()
        logger.info("store.claimed_pending_record")
        return self._from_doc(doc)

    def upsert_code(self, email: str, code: str, expiry: datetime) -> User:
        update = {
            "$set": {"authCode": code, "authCodeExpiry": expiry},
            "$setOnInsert": {"emailVerified": False},
        }
        try:
            doc = self._users.find_one_and_update(
                {"email": email}, update, upsert=True, return_document=ReturnDocument.AFTER
            )
        except PyMongoError as ex:
            # Two concurrent upserts can race on the insert; the loser updates.
            if not _is_duplicate_key(ex):
                raise
            doc = self._users.find_one_and_update(
                {"email": email}, update, return_document=ReturnDocument.AFTER
            )
        return self._from_doc(doc)

    def save(self, user: User) -> None:
        doc = self._to_doc(user)
        self._users.update_one({"email": user.email}, {"$set": doc}, upsert=True)

    def consume_code(self, email: str, code: str) -> bool:
        # No-op once a newer code or a signup claim has replaced `code`.
        doc = self._users.find_one_and_update(
            {"email": email, "authCode": code},
            {"$set": {"authCode": None, "authCodeExpiry": None, "emailVerified": True}},
        )
        return doc is not None
