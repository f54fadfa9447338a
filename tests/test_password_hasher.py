"""Unit tests for PasswordHasher (bcrypt with SHA-256 pre-hash)."""

import bcrypt
import pytest

from common.auth import PasswordHasher, VerifyResult


class TestHash:
    @pytest.mark.asyncio
    async def test_hash_is_salted_per_call(self, password_hasher):
        first = await password_hasher.hash("secret1")
        second = await password_hasher.hash("secret1")

        assert first != second
        assert first != "secret1"
        assert password_hasher.is_hash(first)

    def test_default_cost_is_twelve_rounds(self):
        hasher = PasswordHasher()

        assert hasher.rounds == 12
        assert hasher.hash_sync("secret1").startswith("$2b$12$")

    @pytest.mark.asyncio
    async def test_long_passwords_are_not_truncated(self, password_hasher):
        base = "x" * 80
        hashed = await password_hasher.hash(base + "a")

        assert await password_hasher.verify(base + "a", hashed) is VerifyResult.MATCH
        assert await password_hasher.verify(base + "b", hashed) is VerifyResult.MISMATCH


class TestVerify:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("password", ["secret1", "pässwörd", " spaced out ", "a" * 6])
    async def test_verify_matches_own_hash(self, password_hasher, password):
        hashed = await password_hasher.hash(password)

        assert await password_hasher.verify(password, hashed) is VerifyResult.MATCH

    @pytest.mark.asyncio
    async def test_verify_rejects_other_password(self, password_hasher):
        hashed = await password_hasher.hash("secret1")

        assert await password_hasher.verify("secret2", hashed) is VerifyResult.MISMATCH
        assert await password_hasher.verify("", hashed) is VerifyResult.MISMATCH

    @pytest.mark.asyncio
    async def test_legacy_direct_bcrypt_hash_still_verifies(self, password_hasher):
        legacy = bcrypt.hashpw(b"secret1", bcrypt.gensalt(rounds=4)).decode("utf-8")

        assert await password_hasher.verify("secret1", legacy) is VerifyResult.MATCH
        assert await password_hasher.verify("wrong", legacy) is VerifyResult.MISMATCH

    @pytest.mark.asyncio
    async def test_express_era_2a_hash_verifies(self, password_hasher):
        legacy = bcrypt.hashpw(b"secret1", bcrypt.gensalt(rounds=4, prefix=b"2a")).decode("utf-8")

        assert legacy.startswith("$2a$")
        assert await password_hasher.verify("secret1", legacy) is VerifyResult.MATCH

    @pytest.mark.asyncio
    @pytest.mark.parametrize("stored", ["secret1", "", "$2b$04$short", None])
    async def test_malformed_hash_does_not_raise(self, password_hasher, stored):
        assert await password_hasher.verify("secret1", stored) is VerifyResult.MALFORMED


class TestIsHash:
    def test_recognizes_bcrypt_hashes(self, password_hasher):
        assert password_hasher.is_hash(password_hasher.hash_sync("secret1"))

    @pytest.mark.parametrize("value", ["", "secret1", "$2b$12$", "$1$abc$def"])
    def test_rejects_other_values(self, password_hasher, value):
        assert not password_hasher.is_hash(value)
