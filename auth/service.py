"""
Registration and sign-in handlers.

``AuthService`` owns the credential-verification and token-issuance
sequence.  It is transport-agnostic: it takes plain values, raises errors
from ``auth.errors`` and returns an ``AuthSession``.  Every store call is
bounded by ``store_timeout`` seconds; bcrypt runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Optional, TypeVar

from auth.errors import AuthError, ConflictError, ServiceUnavailable, ValidationError
from auth.jwt import TokenIssuer
from auth.password import DEFAULT_ROUNDS, hash_password_async, verify_password_async
from auth.wallet import is_valid_wallet_address, normalize_wallet_address
from database.models import Account
from database.store import AccountStore, DuplicateAccountError, StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AuthSession:
    """What a successful signup/signin hands back to the caller."""

    account_id: str
    wallet_address: str
    token: str


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _require_text(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    return value


class AuthService:
    def __init__(
        self,
        store: AccountStore,
        tokens: TokenIssuer,
        store_timeout: float = 5.0,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ) -> None:
        self.store = store
        self.tokens = tokens
        self.store_timeout = store_timeout
        self.bcrypt_rounds = bcrypt_rounds

    async def _bounded(self, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.store_timeout)
        except asyncio.TimeoutError:
            logger.warning("Credential store did not answer within %.1fs", self.store_timeout)
            raise ServiceUnavailable()
        except StoreUnavailableError as exc:
            logger.warning("Credential store unreachable: %s", exc)
            raise ServiceUnavailable()

    def _issue(self, account: Account) -> AuthSession:
        token = self.tokens.create_token(account.id, account.wallet_address)
        return AuthSession(
            account_id=account.id,
            wallet_address=account.wallet_address,
            token=token,
        )

    # ── Registration ────────────────────────────────────────────────────

    async def register(self, email: Any, password: Any, wallet_address: Any) -> AuthSession:
        """
        Create an account and issue its first token.

        Raises ``ValidationError`` for a malformed wallet address or a
        missing email/password, and ``ConflictError`` if either the email or
        the wallet address is already taken (without saying which).
        """
        if not is_valid_wallet_address(wallet_address):
            raise ValidationError("Invalid wallet address")

        email = _require_text(email)
        password = _require_text(password)
        if email is None or password is None:
            raise ValidationError("Email and password are required")

        email = normalize_email(email)
        wallet_address = normalize_wallet_address(wallet_address)

        existing = await self._bounded(
            self.store.find_by_email_or_wallet(email, wallet_address)
        )
        if existing is not None:
            raise ConflictError()

        password_hash = await hash_password_async(password, self.bcrypt_rounds)
        account = Account(
            email=email,
            wallet_address=wallet_address,
            password_hash=password_hash,
        )
        try:
            account = await self._bounded(self.store.create(account))
        except DuplicateAccountError:
            # Lost a race with a concurrent signup; the index has the final word.
            raise ConflictError()

        logger.info("Registered account %s", account.id)
        return self._issue(account)

    # ── Sign-in ─────────────────────────────────────────────────────────

    async def authenticate(self, email: Any, password: Any) -> AuthSession:
        """
        Verify credentials and issue a token.

        An unknown email and a wrong password both raise the same
        ``AuthError``.
        """
        email = _require_text(email)
        password = _require_text(password)
        if email is None or password is None:
            raise ValidationError("Email and password are required")

        account = await self._bounded(self.store.find_by_email(normalize_email(email)))
        if account is None:
            raise AuthError()

        matches = await verify_password_async(password, account.password_hash)
        if not matches:
            raise AuthError()

        logger.info("Sign-in for account %s", account.id)
        return self._issue(account)
