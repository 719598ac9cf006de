from __future__ import annotations
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from components.authservice import (
    AuthService, AuthSettings, HS256TokenSigner, PasswordHasher,
    auth_router, set_auth_service,
)
from components.authservice.adapters.mongo import MongoCredentialStore
from components.authservice.contracts import ClockPort, CredentialStorePort, MailerPort
from components.mailer import SmtpMailer

from .errors import install_error_handlers
from .observability import RequestContextMiddleware
from .settings import APP_NAME, APP_VERSION, CORS_HEADERS, CORS_METHODS


def build_auth_service(
    settings: AuthSettings,
    *,
    store: Optional[CredentialStorePort] = None,
    mailer: Optional[MailerPort] = None,
    clock: Optional[ClockPort] = None,
) -> AuthService:
    """Wire the auth service from settings; any collaborator may be supplied instead."""
    if store is None:
        store = MongoCredentialStore.from_uri(settings.MONGO_URI, settings.MONGO_DB)
    if mailer is None:
        mailer = SmtpMailer(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.EMAIL_USER,
            password=settings.EMAIL_PASS,
            timeout=settings.SMTP_TIMEOUT_SECONDS,
        )
    return AuthService(
        store=store,
        hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        signer=HS256TokenSigner(settings.JWT_SECRET),
        mailer=mailer,
        cfg=settings,
        clock=clock,
    )


def create_app(
    settings: AuthSettings,
    *,
    store: Optional[CredentialStorePort] = None,
    mailer: Optional[MailerPort] = None,
    clock: Optional[ClockPort] = None,
) -> FastAPI:
    app = FastAPI(title=APP_NAME, version=APP_VERSION)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    install_error_handlers(app)

    set_auth_service(app, build_auth_service(settings, store=store, mailer=mailer, clock=clock))
    app.include_router(auth_router)

    @app.get("/healthz", include_in_schema=False)
    def healthz():
        return {"status": "ok"}

    return app
