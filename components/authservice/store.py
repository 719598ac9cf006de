from __future__ import annotations

import threading
from datetime import datetime
from typing import Dict, Optional

from .contracts import CredentialStorePort, User
from .errors import DuplicateEmail


class InMemoryCredentialStore(CredentialStorePort):
    """
    Thread-safe in-memory user store keyed by email.

    For single-process dev/testing; records are copied in and out so callers
    never share a mutable instance with the store.
    """

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}
        self._lock = threading.RLock()

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user = self._users.get(email)
            return user.model_copy() if user else None

    def create(self, user: User) -> User:
        with self._lock:
            existing = self._users.get(user.email)
            if existing is not None and existing.has_password():
                raise DuplicateEmail()
            if existing is not None:
                # Claim a record left behind by a pre-signup code request.
                # Verification done before the claim does not carry over.
                user = existing.model_copy(
                    update={
                        "password_hash": user.password_hash,
                        "full_name": user.full_name,
                        "pending_code": None,
                        "pending_code_expiry": None,
                        "email_verified": False,
                    }
                )
            self._users[user.email] = user.model_copy()
            return user.model_copy()

    def upsert_code(self, email: str, code: str, expiry: datetime) -> User:
        with self._lock:
            current = self._users.get(email) or User(email=email)
            updated = current.model_copy(update={"pending_code": code, "pending_code_expiry": expiry})
            self._users[email] = updated
            return updated.model_copy()

    def save(self, user: User) -> None:
        with self._lock:
            self._users[user.email] = user.model_copy()

    def consume_code(self, email: str, code: str) -> bool:
        """Clear the pending code and mark the email verified, only if `code` is still the pending one."""
        with self._lock:
            current = self._users.get(email)
            if current is None or current.pending_code != code:
                return False
            self._users[email] = current.model_copy(
                update={"pending_code": None, "pending_code_expiry": None, "email_verified": True}
            )
            return True

    def count(self) -> int:
        with self._lock:
            return len(self._users)
