from __future__ import annotations
from typing import List, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

DEFAULT_CORS_ORIGINS = (
    "https://vigor-data-hub.vercel.app,"
    "https://vigor-data-hub-bay.vercel.app,"
    "https://vigordatahub.onrender.com,"
    "http://localhost:5000"
)


class AuthSettings(BaseSettings):
    # Required at startup
    MONGO_URI: str = Field(min_length=1)
    EMAIL_USER: str = Field(min_length=1)
    EMAIL_PASS: str = Field(min_length=1)
    JWT_SECRET: str = Field(min_length=1)

    MONGO_DB: str = "vigordatahub"
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_TIMEOUT_SECONDS: float = 10.0

    BCRYPT_ROUNDS: int = Field(default=10, ge=4, le=31)
    CODE_TTL_SECONDS: int = Field(default=900, gt=0)      # 15 minutes
    TOKEN_TTL_SECONDS: int = Field(default=3600, gt=0)    # 1 hour
    SIGNUP_SENDS_CODE: bool = True
    LOGIN_REDIRECT_URL: Optional[str] = "dashboard.html"

    CORS_ALLOW_ORIGINS: str = DEFAULT_CORS_ORIGINS
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]

    def redirect_hint(self) -> Optional[str]:
        return self.LOGIN_REDIRECT_URL or None


def load_settings(**overrides) -> AuthSettings:
    """
    Build settings from the environment (plus optional overrides).
    Missing or invalid required values raise ConfigError; callers treat it as fatal.
    """
    try:
        return AuthSettings(**overrides)
    except ValidationError as ex:
        missing = sorted({str(err["loc"][0]) for err in ex.errors() if err.get("loc")})
        raise ConfigError(f"Invalid or missing configuration: {', '.join(missing) or 'unknown'}") from ex
