from __future__ import annotations
from typing import Optional
from fastapi import APIRouter, Depends, status
from .contracts import (
    SignupRequest, SendCodeRequest, VerifyCodeRequest, LoginRequest,
    MessageResponse, LoginResponse, ProtectedResponse,
)
from .deps import get_auth_service, get_authorization_header
from .service import AuthService

# Service errors propagate to the application's exception handlers.
router = APIRouter(tags=["auth"])

@router.post("/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def signup(req: SignupRequest, svc: AuthService = Depends(get_auth_service)):
    return svc.signup(req)

@router.post("/send-auth-code", response_model=MessageResponse)
def send_auth_code(req: SendCodeRequest, svc: AuthService = Depends(get_auth_service)):
    return svc.send_auth_code(req)

@router.post("/verify-auth-code", response_model=MessageResponse)
def verify_auth_code(req: VerifyCodeRequest, svc: AuthService = Depends(get_auth_service)):
    return svc.verify_auth_code(req)

@router.post("/login", response_model=LoginResponse, response_model_exclude_none=True)
def login(req: LoginRequest, svc: AuthService = Depends(get_auth_service)):
    return svc.login(req)

@router.get("/protected", response_model=ProtectedResponse)
def protected(
    authorization: Optional[str] = Depends(get_authorization_header),
    svc: AuthService = Depends(get_auth_service),
):
    return svc.access_protected(authorization)
