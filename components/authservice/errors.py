from __future__ import annotations
from typing import Any, Dict, Optional
from .contracts import AuthErrorCodes, ErrorPayload


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing or invalid."""


class AuthServiceException(Exception):
    type: str = "INTERNAL"
    code: str = AuthErrorCodes.INTERNAL
    message: str = "Internal server error"
    status_code: int = 500

    def __init__(self, message: Optional[str] = None, *, details: Optional[Dict[str, Any]] = None):
        if message:
            self.message = message
        self.details = details
        super().__init__(self.message)

    @property
    def payload(self) -> ErrorPayload:
        return ErrorPayload(type=self.type, code=self.code, message=self.message, details=self.details)


class ValidationError(AuthServiceException):
    type = "VALIDATION"
    code = AuthErrorCodes.MISSING_FIELDS
    message = "All fields are required"
    status_code = 400


class DuplicateEmail(AuthServiceException):
    type = "CONFLICT"
    code = AuthErrorCodes.DUPLICATE_EMAIL
    message = "Email already registered"
    status_code = 400


class InvalidCredentials(AuthServiceException):
    type = "AUTH_ERROR"
    code = AuthErrorCodes.BAD_CREDENTIALS
    message = "Invalid email or password"
    status_code = 400


class InvalidOrExpired(AuthServiceException):
    type = "AUTH_ERROR"
    code = AuthErrorCodes.INVALID_CODE
    message = "Invalid or expired verification code"
    status_code = 400


class InvalidOrExpiredToken(InvalidOrExpired):
    code = AuthErrorCodes.INVALID_TOKEN
    message = "Invalid or expired token"
    status_code = 403


class Unauthorized(AuthServiceException):
    type = "AUTH_ERROR"
    code = AuthErrorCodes.MISSING_TOKEN
    message = "Access denied. No token provided."
    status_code = 401


class DeliveryFailed(AuthServiceException):
    type = "UPSTREAM"
    code = AuthErrorCodes.DELIVERY_FAILED
    message = "Error sending verification code"
    status_code = 500


class InternalError(AuthServiceException):
    pass
