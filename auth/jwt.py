"""
JWT creation and verification.

Tokens carry the claim set ``{accountId, walletAddress}`` plus ``iat`` and
``exp``, and are signed with the process-wide secret (env var:
``JWT_SECRET``).  Verification always checks signature, expiry and the
presence of both account claims.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt

ACCOUNT_ID_CLAIM = "accountId"
WALLET_ADDRESS_CLAIM = "walletAddress"
_REQUIRED_CLAIMS = (ACCOUNT_ID_CLAIM, WALLET_ADDRESS_CLAIM)


class InvalidTokenError(ValueError):
    """Raised when a token is malformed, tampered with or expired."""


class TokenIssuer:
    """Signs and verifies account tokens with a fixed lifetime."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expiry_seconds: int = 86400,
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self.expiry = timedelta(seconds=expiry_seconds)

    def create_token(self, account_id: str, wallet_address: str) -> str:
        """Create a signed token for ``account_id``."""
        issued_at = datetime.now(timezone.utc)
        claims = {
            ACCOUNT_ID_CLAIM: account_id,
            WALLET_ADDRESS_CLAIM: wallet_address,
            "iat": issued_at,
            "exp": issued_at + self.expiry,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify ``token`` and return its claims.

        Raises ``InvalidTokenError`` on a bad signature, an expired token or
        missing account claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require_exp": True},
            )
        except JWTError as exc:
            raise InvalidTokenError(f"Invalid token: {exc}") from exc

        missing = [c for c in _REQUIRED_CLAIMS if not payload.get(c)]
        if missing:
            raise InvalidTokenError(f"Token missing required claim: {missing[0]}")
        return payload
