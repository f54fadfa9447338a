"""
bcrypt password hashing.

Hashing and verification run in a worker thread so the event loop keeps
serving other requests while bcrypt burns CPU.

Example:
    hasher = PasswordHasher(rounds=12)

    hashed = await hasher.hash("secret1")
    result = await hasher.verify("secret1", hashed)
    assert result is VerifyResult.MATCH
"""

import asyncio
import base64
import hashlib
import re
from enum import Enum

import bcrypt as bcrypt_lib

# Modular crypt format: $2a$/$2b$/$2x$/$2y$, two-digit cost, 53 chars of salt+digest
BCRYPT_HASH_PATTERN = re.compile(r"^\$2[abxy]?\$\d{2}\$[./A-Za-z0-9]{53}$")


class VerifyResult(Enum):
    """Outcome of checking a password against a stored hash."""

    MATCH = "match"
    MISMATCH = "mismatch"
    # Stored value is not a bcrypt hash at all
    MALFORMED = "malformed"


class PasswordHasher:
    """
    bcrypt hasher with SHA-256 pre-hashing.

    Pre-hashing handles bcrypt's 72-byte limit and ensures consistent
    behavior across all password lengths. Direct bcrypt hashes written by
    older deployments still verify.
    """

    def __init__(self, rounds: int = 12):
        """
        Initialize the hasher.

        Args:
            rounds: bcrypt cost factor (log2 of the iteration count)
        """
        self.rounds = rounds

    @staticmethod
    def _prehash_password(password: str) -> bytes:
        sha256_hash = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash)

    @staticmethod
    def is_hash(value: str) -> bool:
        """Check whether a stored value is a well-formed bcrypt hash."""
        return bool(value) and BCRYPT_HASH_PATTERN.match(value) is not None

    def hash_sync(self, password: str) -> str:
        """Hash a password using bcrypt with SHA-256 pre-hashing."""
        salt = bcrypt_lib.gensalt(rounds=self.rounds)
        return bcrypt_lib.hashpw(self._prehash_password(password), salt).decode("utf-8")

    def verify_sync(self, password: str, hashed: str) -> VerifyResult:
        """
        Verify a password against its hash.

        Never raises on bad input: a value that is not a bcrypt hash yields
        VerifyResult.MALFORMED so callers can apply their own policy.
        """
        if not isinstance(hashed, str) or not self.is_hash(hashed):
            return VerifyResult.MALFORMED

        hashed_bytes = hashed.encode("utf-8")

        # Try new method first (SHA-256 pre-hash)
        try:
            if bcrypt_lib.checkpw(self._prehash_password(password), hashed_bytes):
                return VerifyResult.MATCH
        except ValueError:
            return VerifyResult.MALFORMED

        # Fallback to legacy method (direct bcrypt) for old hashes
        try:
            if bcrypt_lib.checkpw(password.encode("utf-8"), hashed_bytes):
                return VerifyResult.MATCH
        except ValueError:
            # Password too long for direct bcrypt - definitely not a match
            pass

        return VerifyResult.MISMATCH

    async def hash(self, password: str) -> str:
        """Hash a password without blocking the event loop."""
        return await asyncio.to_thread(self.hash_sync, password)

    async def verify(self, password: str, hashed: str) -> VerifyResult:
        """Verify a password without blocking the event loop."""
        return await asyncio.to_thread(self.verify_sync, password, hashed)
