from typing import Optional

from fastapi import FastAPI, Header, Request

from .service import AuthService


def set_auth_service(app: FastAPI, svc: AuthService) -> None:
    """Attach the wired service to the application; one instance per app."""
    app.state.auth_service = svc


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_authorization_header(authorization: Optional[str] = Header(default=None, alias="Authorization")) -> Optional[str]:
    """
    Extract the Authorization header value (e.g., 'Bearer <token>').
    Parsing and rejection happen in the service so all callers share one rule.
    """
    return authorization
