from __future__ import annotations
import logging
import time
from typing import Optional

import jwt

from .codes import VerificationCodeIssuer
from .config import AuthSettings
from .contracts import (
    ClockPort, CredentialStorePort, MailerPort, TokenSignerPort,
    SignupRequest, SendCodeRequest, VerifyCodeRequest, LoginRequest,
    MessageResponse, LoginResponse, ProtectedResponse,
    TokenClaims, User, VerifyOutcome,
)
from .crypto import PasswordHasher
from .errors import (
    InvalidCredentials, InvalidOrExpired, InvalidOrExpiredToken,
    Unauthorized, ValidationError,
)

logger = logging.getLogger("authservice")

SIGNUP_OK = "Account created successfully!"
SIGNUP_OK_CHECK_EMAIL = "Account created successfully! Check your email for the verification code."


class SystemClock(ClockPort):
    def now_utc_ts(self) -> int:
        return int(time.time())


def _present(*values: Optional[str]) -> bool:
    return all(v is not None and v.strip() for v in values)


class AuthService:
    def __init__(
        self,
        *,
        store: CredentialStorePort,
        hasher: PasswordHasher,
        signer: TokenSignerPort,
        mailer: MailerPort,
        cfg: AuthSettings,
        clock: Optional[ClockPort] = None,
    ):
        self.store = store
        self.hasher = hasher
        self.signer = signer
        self.cfg = cfg
        self.clock = clock or SystemClock()
        self.codes = VerificationCodeIssuer(
            store=store, mailer=mailer, clock=self.clock, ttl_seconds=cfg.CODE_TTL_SECONDS
        )

    # --------- Core operations ----------
    def signup(self, req: SignupRequest) -> MessageResponse:
        if not _present(req.email, req.password, req.full_name):
            raise ValidationError("All fields are required")

        user = User(email=req.email, password_hash=self.hasher.hash(req.password), full_name=req.full_name)
        self.store.create(user)
        logger.info("signup.created")

        if not self.cfg.SIGNUP_SENDS_CODE:
            return MessageResponse(message=SIGNUP_OK)
        # The account stays created if delivery fails; the user can ask for a new code.
        self.codes.issue(req.email)
        return MessageResponse(message=SIGNUP_OK_CHECK_EMAIL)

    def send_auth_code(self, req: SendCodeRequest) -> MessageResponse:
        if not _present(req.email):
            raise ValidationError("Email is required")
        self.codes.issue(req.email)
        return MessageResponse(message="Verification code sent")

    def verify_auth_code(self, req: VerifyCodeRequest) -> MessageResponse:
        if not _present(req.email, req.auth_code):
            raise ValidationError("Email and verification code are required")

        outcome = self.codes.verify(req.email, req.auth_code.strip())
        if outcome is not VerifyOutcome.VERIFIED:
            logger.info("code.rejected", extra={"outcome": outcome.value})
            raise InvalidOrExpired()
        return MessageResponse(message="Email verified successfully")

    def login(self, req: LoginRequest) -> LoginResponse:
        if not _present(req.email, req.password):
            raise ValidationError("Email and Password are required")

        user = self.store.find_by_email(req.email)
        if user is None or not user.has_password():
            self.hasher.burn(req.password)
            raise InvalidCredentials()
        if not self.hasher.verify(req.password, user.password_hash):
            raise InvalidCredentials()

        token = self.issue_token(user.email)
        logger.info("login.succeeded")
        return LoginResponse(message="Login successful", token=token, redirect_url=self.cfg.redirect_hint())

    def access_protected(self, authorization: Optional[str]) -> ProtectedResponse:
        token = self.bearer_token(authorization)
        claims = self.verify_token(token)
        return ProtectedResponse(message=f"Welcome {claims.email}! This is protected data.", email=claims.email)

    # --------- Tokens ----------
    def issue_token(self, email: str) -> str:
        now = self.clock.now_utc_ts()
        claims = TokenClaims(email=email, iat=now, exp=now + self.cfg.TOKEN_TTL_SECONDS)
        return self.signer.sign(claims.model_dump())

    def verify_token(self, token: str) -> TokenClaims:
        # Malformed, forged and expired tokens are indistinguishable to callers.
        try:
            payload = self.signer.verify(token, now=self.clock.now_utc_ts())
            return TokenClaims(email=payload["email"], iat=payload.get("iat", 0), exp=payload["exp"])
        except (jwt.PyJWTError, KeyError, TypeError, ValueError) as ex:
            logger.info("token.rejected", extra={"reason": type(ex).__name__})
            raise InvalidOrExpiredToken()

    @staticmethod
    def bearer_token(authorization: Optional[str]) -> str:
        if not authorization:
            raise Unauthorized()
        scheme, _, token = authorization.strip().partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise Unauthorized()
        return token.strip()
