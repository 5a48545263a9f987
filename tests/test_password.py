"""
Tests for bcrypt password hashing.
"""

import pytest

from auth.password import (
    hash_password,
    hash_password_async,
    verify_password,
    verify_password_async,
)


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("hunter22", rounds=4)
        assert hashed != "hunter22"
        assert hashed.startswith("$2")

    def test_same_password_gets_distinct_salts(self):
        assert hash_password("hunter22", rounds=4) != hash_password("hunter22", rounds=4)

    def test_verify_roundtrip(self):
        hashed = hash_password("hunter22", rounds=4)
        assert verify_password("hunter22", hashed) is True
        assert verify_password("hunter23", hashed) is False

    def test_verify_against_garbage_hash_is_false(self):
        assert verify_password("hunter22", "not-a-bcrypt-hash") is False

    def test_passwords_past_72_bytes_hash_and_verify(self):
        long_password = "p" * 80
        hashed = hash_password(long_password, rounds=4)
        assert verify_password(long_password, hashed) is True
        assert verify_password("q" * 80, hashed) is False

    def test_multibyte_password_past_72_bytes(self):
        long_password = "\u00e9" * 50  # 100 bytes in UTF-8
        hashed = hash_password(long_password, rounds=4)
        assert verify_password(long_password, hashed) is True


class TestAsyncVariants:
    @pytest.mark.asyncio
    async def test_async_roundtrip(self):
        hashed = await hash_password_async("hunter22", rounds=4)
        assert await verify_password_async("hunter22", hashed) is True
        assert await verify_password_async("wrong", hashed) is False
