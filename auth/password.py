"""
Password hashing and verification.

bcrypt with a per-hash salt and configurable work factor.  The async
variants run the hashing in a worker thread so a signup or signin never
stalls the event loop for the ~0.25s a round-12 hash takes.
"""

from __future__ import annotations

import asyncio

import bcrypt

DEFAULT_ROUNDS = 12

# bcrypt only reads the first 72 bytes; newer releases raise on longer input.
BCRYPT_MAX_BYTES = 72


def _secret(password: str) -> bytes:
    return password.encode()[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    return bcrypt.hashpw(_secret(password), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash; False on a corrupt hash."""
    try:
        return bcrypt.checkpw(_secret(password), password_hash.encode())
    except (ValueError, TypeError):
        return False


async def hash_password_async(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    return await asyncio.to_thread(hash_password, password, rounds)


async def verify_password_async(password: str, password_hash: str) -> bool:
    return await asyncio.to_thread(verify_password, password, password_hash)
