from .service import AuthService, SystemClock
from .codes import VerificationCodeIssuer, generate_code
from .crypto import HS256TokenSigner, PasswordHasher
from .store import InMemoryCredentialStore
from .config import AuthSettings, load_settings
from .deps import set_auth_service, get_auth_service
from .errors import AuthServiceException, ConfigError
from .routes import router as auth_router

__all__ = [
    "AuthService",
    "SystemClock",
    "VerificationCodeIssuer",
    "generate_code",
    "HS256TokenSigner",
    "PasswordHasher",
    "InMemoryCredentialStore",
    "AuthSettings",
    "load_settings",
    "set_auth_service",
    "get_auth_service",
    "AuthServiceException",
    "ConfigError",
    "auth_router",
]
