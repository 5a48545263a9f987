"""
Shared fixtures: an in-memory credential store and a test application.
"""

from __future__ import annotations

import asyncio
import itertools
from typing import Dict, Optional

import httpx
import pytest

from auth.jwt import TokenIssuer
from auth.service import AuthService
from config.settings import Settings
from database.models import Account
from database.store import AccountStore, DuplicateAccountError

WALLET_A = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
WALLET_B = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
WALLET_C = "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB"
BAD_CHECKSUM_WALLET = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAeD"


class InMemoryAccountStore(AccountStore):
    """Dict-backed store enforcing the same uniqueness as the Mongo indexes."""

    def __init__(self, delay: float = 0.0) -> None:
        self.accounts: Dict[str, Account] = {}
        self.delay = delay
        self.calls = 0
        self.connected = False
        self._ids = itertools.count(1)

    async def _touch(self) -> None:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)

    async def connect(self) -> None:
        self.connected = True

    async def is_healthy(self) -> bool:
        return self.connected

    async def close(self) -> None:
        self.connected = False

    async def create(self, account: Account) -> Account:
        await self._touch()
        for existing in self.accounts.values():
            if (
                existing.email == account.email
                or existing.wallet_address == account.wallet_address
            ):
                raise DuplicateAccountError("duplicate")
        account.id = f"{next(self._ids):024x}"
        self.accounts[account.id] = account
        return account

    async def find_by_email(self, email: str) -> Optional[Account]:
        await self._touch()
        for account in self.accounts.values():
            if account.email == email:
                return account
        return None

    async def find_by_email_or_wallet(
        self, email: str, wallet_address: str
    ) -> Optional[Account]:
        await self._touch()
        for account in self.accounts.values():
            if account.email == email or account.wallet_address == wallet_address:
                return account
        return None

    async def update_password_hash(self, account_id: str, password_hash: str) -> bool:
        await self._touch()
        account = self.accounts.get(account_id)
        if account is None:
            return False
        account.password_hash = password_hash
        return True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        request_timeout_ms=200,
        request_deadline_ms=2000,
        allowed_origins=["http://localhost:3000"],
    )


@pytest.fixture
def store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture
def tokens(settings) -> TokenIssuer:
    return TokenIssuer(secret=settings.jwt_secret, expiry_seconds=settings.jwt_expiry_seconds)


@pytest.fixture
def service(store, tokens, settings) -> AuthService:
    return AuthService(
        store=store,
        tokens=tokens,
        store_timeout=settings.request_timeout_seconds,
        bcrypt_rounds=settings.bcrypt_rounds,
    )


@pytest.fixture
def app(settings, store):
    from main import create_app

    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    )
