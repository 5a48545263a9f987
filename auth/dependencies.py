"""
FastAPI dependencies for authentication.

The store, token issuer and ``AuthService`` live on ``app.state`` (built
by ``main.create_app``); these dependencies hand them to route handlers.
``get_current_claims`` is the bearer-token check for protected routes.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.jwt import InvalidTokenError, TokenIssuer
from auth.service import AuthService
from config.settings import Settings
from database.store import AccountStore

_bearer_scheme = HTTPBearer()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> AccountStore:
    return request.app.state.store


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.tokens


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


async def get_current_claims(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    """
    Verify the Bearer token and return its claims
    (``accountId``, ``walletAddress``, ``iat``, ``exp``).
    """
    try:
        return tokens.verify_token(credentials.credentials)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
