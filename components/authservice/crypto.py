from __future__ import annotations
from typing import Any, Dict, Optional

import bcrypt
import jwt

from .contracts import TokenSignerPort

# bcrypt only looks at the first 72 bytes; newer releases refuse longer input.
_BCRYPT_MAX_BYTES = 72


def _pw_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    """
    bcrypt hasher with a tunable cost factor (10 rounds by default).
    """
    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._dummy_hash = self.hash("not-a-real-password")

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(_pw_bytes(password), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, encoded: str) -> bool:
        # checkpw compares in constant time; a malformed hash raises ValueError.
        return bcrypt.checkpw(_pw_bytes(password), encoded.encode("utf-8"))

    def burn(self, password: str) -> None:
        """Run a throwaway verification so unknown users cost as much as known ones."""
        self.verify(password, self._dummy_hash)


class HS256TokenSigner(TokenSignerPort):
    """
    HS256 JWT signer backed by PyJWT. Expiry is checked against the caller's
    clock rather than the wall clock so tests can move time.
    Supports kid in header for future key rotation.
    """
    def __init__(self, secret: str, kid: Optional[str] = "primary"):
        if not secret:
            raise ValueError("HS256TokenSigner requires non-empty secret")
        self._secret = secret
        self._kid = kid

    def sign(self, claims: Dict[str, Any]) -> str:
        headers = {"kid": self._kid} if self._kid else None
        return jwt.encode(claims, self._secret, algorithm="HS256", headers=headers)

    def verify(self, token: str, *, now: int) -> Dict[str, Any]:
        payload = jwt.decode(
            token,
            self._secret,
            algorithms=["HS256"],
            options={"verify_exp": False, "verify_iat": False, "verify_nbf": False, "require": ["exp"]},
        )
        if now >= int(payload["exp"]):
            raise jwt.ExpiredSignatureError("Token expired")
        return payload

    def active_kid(self) -> Optional[str]:
        return self._kid
