from __future__ import annotations
import enum
from datetime import datetime
from typing import Any, Dict, Literal, Optional, Protocol
from pydantic import BaseModel, ConfigDict, Field, constr, field_validator

# ---------- Wire format ----------
class ErrorPayload(BaseModel):
    type: Literal["AUTH_ERROR","VALIDATION","NOT_FOUND","CONFLICT","UPSTREAM","INTERNAL"]
    code: constr(strip_whitespace=True, min_length=1)
    message: constr(strip_whitespace=True, min_length=1)
    details: Optional[Dict[str, Any]] = None

class MessageResponse(BaseModel):
    message: str

class LoginResponse(BaseModel):
    message: str
    token: str
    redirect_url: Optional[str] = None

class ProtectedResponse(BaseModel):
    message: str
    email: str

# ---------- Domain Models ----------
class User(BaseModel):
    email: str
    password_hash: Optional[str] = None
    full_name: Optional[str] = None
    pending_code: Optional[str] = None
    pending_code_expiry: Optional[datetime] = None
    email_verified: bool = False

    def has_password(self) -> bool:
        return bool(self.password_hash)

class TokenClaims(BaseModel):
    email: str
    iat: int
    exp: int

class VerifyOutcome(str, enum.Enum):
    VERIFIED = "verified"
    INVALID = "invalid"
    EXPIRED = "expired"

# ---------- Ports (Contracts) ----------
class CredentialStorePort(Protocol):
    """
    Persistence for user records. Implementations make `create`,
    `upsert_code` and `consume_code` atomic; email is an opaque, case-sensitive key.
    """
    def find_by_email(self, email: str) -> Optional[User]: ...
    def create(self, user: User) -> User: ...
    def upsert_code(self, email: str, code: str, expiry: datetime) -> User: ...
    def save(self, user: User) -> None: ...
    def consume_code(self, email: str, code: str) -> bool: ...

class TokenSignerPort(Protocol):
    """
    Contract for compact token signing/verification.
    `verify` raises on malformed input, bad signature or expiry at `now`.
    """
    def sign(self, claims: Dict[str, Any]) -> str: ...
    def verify(self, token: str, *, now: int) -> Dict[str, Any]: ...

class MailerPort(Protocol):
    """Blocking mail delivery; raises on any delivery failure."""
    def send(self, *, to: str, subject: str, body: str) -> None: ...

class ClockPort(Protocol):
    def now_utc_ts(self) -> int: ...

# ---------- Service I/O ----------
# Fields are optional so that missing values surface as service-level
# validation errors (400) rather than framework 422s.
class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

class SignupRequest(_Request):
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = Field(default=None, alias="fullName")

class SendCodeRequest(_Request):
    email: Optional[str] = None

class VerifyCodeRequest(_Request):
    email: Optional[str] = None
    auth_code: Optional[str] = Field(default=None, alias="authCode")

    @field_validator("auth_code", mode="before")
    @classmethod
    def _numeric_code(cls, v: Any) -> Any:
        # Clients may send the code as a JSON number.
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

class LoginRequest(_Request):
    email: Optional[str] = None
    password: Optional[str] = None

# ---------- Errors ----------
class AuthErrorCodes:
    MISSING_FIELDS = "MISSING_FIELDS"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    BAD_CREDENTIALS = "BAD_CREDENTIALS"
    INVALID_CODE = "INVALID_CODE"
    INVALID_TOKEN = "INVALID_TOKEN"
    MISSING_TOKEN = "MISSING_TOKEN"
    DELIVERY_FAILED = "DELIVERY_FAILED"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"
