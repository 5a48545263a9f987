"""
Auth API routes: signup, signin.

Mounted under both ``/auth`` and ``/api/auth``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from auth.dependencies import get_auth_service, get_settings
from auth.outcome import Outcome, run_handler
from auth.service import AuthService, AuthSession
from config.settings import Settings

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────
# Fields are optional here so that missing values reach the service and
# are reported in the same {"error": ...} shape as every other failure.


class SignupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    password: Optional[str] = None
    wallet_address: Optional[str] = Field(default=None, alias="walletAddress")


class SigninRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    token: str
    wallet_address: str = Field(alias="walletAddress")


class ErrorResponse(BaseModel):
    error: str


def _session_outcome(status_code: int, message: str):
    def build(session: AuthSession) -> Outcome:
        body = AuthResponse(
            message=message,
            token=session.token,
            wallet_address=session.wallet_address,
        )
        return Outcome(status_code=status_code, body=body.model_dump(by_alias=True))

    return build


def _respond(outcome: Outcome) -> JSONResponse:
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def signup(
    req: SignupRequest,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Register a new account and return its token."""
    outcome = await run_handler(
        service.register(req.email, req.password, req.wallet_address),
        on_success=_session_outcome(status.HTTP_201_CREATED, "User created successfully"),
        server_error_message="Error creating user",
        deadline=settings.request_deadline_seconds,
    )
    return _respond(outcome)


@router.post(
    "/signin",
    response_model=AuthResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def signin(
    req: SigninRequest,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Sign in with email + password."""
    outcome = await run_handler(
        service.authenticate(req.email, req.password),
        on_success=_session_outcome(status.HTTP_200_OK, "Login successful"),
        server_error_message="Error signing in",
        deadline=settings.request_deadline_seconds,
    )
    return _respond(outcome)
