from __future__ import annotations

import hmac
import logging
import secrets
from datetime import datetime, timezone

from .contracts import ClockPort, CredentialStorePort, MailerPort, VerifyOutcome
from .errors import DeliveryFailed

logger = logging.getLogger("authservice.codes")

CODE_MIN = 100_000
CODE_MAX = 999_999

SUBJECT = "Your Verification Code"


def generate_code() -> str:
    """Uniform 6-digit code in [100000, 999999]; never has a leading zero."""
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


class VerificationCodeIssuer:
    """
    Issues and checks emailed one-time codes.

    Per email: NONE -> ISSUED -> (VERIFIED | EXPIRED). Only the most recently
    issued code is stored, so a new issue invalidates any earlier code.
    """

    def __init__(
        self,
        *,
        store: CredentialStorePort,
        mailer: MailerPort,
        clock: ClockPort,
        ttl_seconds: int = 900,
    ):
        self.store = store
        self.mailer = mailer
        self.clock = clock
        self.ttl_seconds = ttl_seconds

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self.clock.now_utc_ts(), tz=timezone.utc)

    def issue(self, email: str) -> str:
        code = generate_code()
        expiry = datetime.fromtimestamp(self.clock.now_utc_ts() + self.ttl_seconds, tz=timezone.utc)
        self.store.upsert_code(email, code, expiry)

        minutes = self.ttl_seconds // 60
        body = f"Your verification code is: {code}. It expires in {minutes} minutes."
        try:
            self.mailer.send(to=email, subject=SUBJECT, body=body)
        except Exception as ex:
            # The stored code stays valid; only delivery failed.
            logger.warning("code.delivery_failed", extra={"error": type(ex).__name__})
            raise DeliveryFailed() from ex
        logger.info("code.issued", extra={"expires_at": expiry.isoformat()})
        return code

    def verify(self, email: str, submitted: str) -> VerifyOutcome:
        user = self.store.find_by_email(email)
        if user is None or not user.pending_code or user.pending_code_expiry is None:
            return VerifyOutcome.INVALID
        if not hmac.compare_digest(user.pending_code.encode("utf-8"), submitted.encode("utf-8")):
            return VerifyOutcome.INVALID
        if self._now() > user.pending_code_expiry:
            return VerifyOutcome.EXPIRED

        # The code may have been replaced or cleared since the read.
        if not self.store.consume_code(email, user.pending_code):
            return VerifyOutcome.INVALID
        return VerifyOutcome.VERIFIED
