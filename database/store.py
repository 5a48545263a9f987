"""
Credential store: account persistence behind a small async interface.

``AccountStore`` is what the auth handlers depend on.  ``MongoAccountStore``
is the production implementation on PyMongo's asyncio client; the unique
indexes it creates on ``connect()`` are the final authority on email and
wallet-address uniqueness.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional

from pymongo import ASCENDING, AsyncMongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError, ServerSelectionTimeoutError

from database.models import Account, object_id

logger = logging.getLogger(__name__)


class DuplicateAccountError(Exception):
    """An insert violated the email or wallet-address unique index."""


class StoreUnavailableError(Exception):
    """No server could be selected for the operation."""


@contextmanager
def _server_selection_guard():
    try:
        yield
    except ServerSelectionTimeoutError as exc:
        raise StoreUnavailableError(str(exc)) from exc


class AccountStore(ABC):
    """Abstract credential store."""

    # ── Lifecycle ───────────────────────────────────────────────────────

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection and ensure unique indexes exist."""
        ...

    @abstractmethod
    async def is_healthy(self) -> bool:
        """Cheap round-trip check; never raises."""
        ...

    @abstractmethod
    async def close(self) -> None:
        ...

    # ── Accounts ────────────────────────────────────────────────────────

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """
        Persist a new account and return it with ``id`` assigned.

        Raises ``DuplicateAccountError`` if the email or wallet address is
        already taken.
        """
        ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Account]:
        ...

    @abstractmethod
    async def find_by_email_or_wallet(
        self, email: str, wallet_address: str
    ) -> Optional[Account]:
        ...

    @abstractmethod
    async def update_password_hash(self, account_id: str, password_hash: str) -> bool:
        """Replace the stored hash.  Returns False if no such account."""
        ...


class MongoAccountStore(AccountStore):
    """MongoDB-backed store for ``Account`` documents."""

    def __init__(
        self,
        uri: str,
        database: str,
        collection: str = "users",
        server_selection_timeout_ms: int = 5000,
    ) -> None:
        self._uri = uri
        self._database_name = database
        self._collection_name = collection
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._client: Optional[AsyncMongoClient] = None
        self._indexes_ready = False

    @property
    def _collection(self):
        if self._client is None:
            raise RuntimeError("MongoAccountStore used before connect()")
        return self._client[self._database_name][self._collection_name]

    async def connect(self) -> None:
        if self._client is not None:
            return
        self._client = AsyncMongoClient(
            self._uri,
            serverSelectionTimeoutMS=self._server_selection_timeout_ms,
            tz_aware=True,
        )
        await self._ensure_indexes()
        logger.info(
            "Connected to MongoDB (db=%s, collection=%s)",
            self._database_name,
            self._collection_name,
        )

    async def _ensure_indexes(self) -> None:
        if self._indexes_ready:
            return
        await self._collection.create_index([("email", ASCENDING)], unique=True)
        await self._collection.create_index([("walletAddress", ASCENDING)], unique=True)
        self._indexes_ready = True

    async def is_healthy(self) -> bool:
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as exc:
            logger.warning("MongoDB health check failed: %s", exc)
            return False

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._indexes_ready = False
            logger.info("MongoDB connection closed")

    async def create(self, account: Account) -> Account:
        with _server_selection_guard():
            # connect() may have run while the server was down.
            await self._ensure_indexes()
            try:
                result = await self._collection.insert_one(account.to_document())
            except DuplicateKeyError as exc:
                raise DuplicateAccountError("email or wallet address already in use") from exc
        account.id = str(result.inserted_id)
        return account

    async def find_by_email(self, email: str) -> Optional[Account]:
        with _server_selection_guard():
            doc = await self._collection.find_one({"email": email})
        return Account.from_document(doc) if doc else None

    async def find_by_email_or_wallet(
        self, email: str, wallet_address: str
    ) -> Optional[Account]:
        with _server_selection_guard():
            doc = await self._collection.find_one(
                {"$or": [{"email": email}, {"walletAddress": wallet_address}]}
            )
        return Account.from_document(doc) if doc else None

    async def update_password_hash(self, account_id: str, password_hash: str) -> bool:
        with _server_selection_guard():
            result = await self._collection.update_one(
                {"_id": object_id(account_id)},
                {
                    "$set": {
                        "password": password_hash,
                        "updatedAt": datetime.now(timezone.utc),
                    }
                },
            )
        return result.matched_count == 1
