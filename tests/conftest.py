"""Shared test fixtures for user auth tests."""

import copy
import pytest
from datetime import datetime, timezone
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from common.auth import JWTAuth, PasswordHasher
from userauth.auth.errors import StoreUnavailableError
from userauth.user.services.user_store import (
    CREDENTIAL_FIELD,
    Conflict,
    Created,
    StoreResult,
    Unavailable,
    ValidationFailed,
)

TEST_SECRET = "test-secret"


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine),
    # so use MagicMock for it. Async methods like find_one, insert_one
    # etc. stay as AsyncMock.
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def make_cursor():
    def _make(docs):
        cursor = MagicMock()
        cursor.to_list = AsyncMock(return_value=docs)
        return cursor
    return _make


@pytest.fixture
def password_hasher():
    # Minimum cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_auth():
    return JWTAuth(secret=TEST_SECRET, access_token_expire_minutes=60)


@pytest.fixture
def sample_user_doc(sample_user_id):
    return {
        "_id": ObjectId(sample_user_id),
        "username": "alice1",
        "email": "alice@x.com",
        "createdAt": datetime(2026, 1, 2, 3, 4, 5),
    }


class FakeUserStore:
    """In-memory stand-in with the UserStore interface and unique constraints."""

    def __init__(self):
        self.users: List[dict] = []
        self.available = True

    def _check(self):
        if not self.available:
            raise StoreUnavailableError()

    @staticmethod
    def _public(user: dict, *excluded: str) -> dict:
        return {k: copy.deepcopy(v) for k, v in user.items() if k not in excluded}

    async def find_by_username_or_email(self, username: str, email: str) -> Optional[dict]:
        self._check()
        for user in self.users:
            if user["username"] == username:
                return self._public(user, CREDENTIAL_FIELD)
        for user in self.users:
            if user["email"] == email:
                return self._public(user, CREDENTIAL_FIELD)
        return None

    async def find_by_email(self, email: str, include_credential: bool = False) -> Optional[dict]:
        self._check()
        for user in self.users:
            if user["email"] == email:
                if include_credential:
                    return self._public(user)
                return self._public(user, CREDENTIAL_FIELD)
        return None

    async def find_by_id(self, user_id: str) -> Optional[dict]:
        self._check()
        for user in self.users:
            if str(user["_id"]) == user_id:
                return self._public(user, CREDENTIAL_FIELD)
        return None

    async def list_all(self) -> List[dict]:
        self._check()
        return [self._public(user, CREDENTIAL_FIELD, "email") for user in self.users]

    async def create(self, username: str, email: str, credential_hash: str) -> StoreResult:
        if not self.available:
            return Unavailable("down")
        if not username or not email:
            return ValidationFailed(["missing"])
        for name, value in (("username", username), ("email", email)):
            if any(user[name] == value for user in self.users):
                return Conflict(name)
        user = {
            "_id": ObjectId(),
            "username": username,
            "email": email,
            CREDENTIAL_FIELD: credential_hash,
            "createdAt": datetime.now(timezone.utc),
        }
        self.users.append(user)
        return Created(self._public(user, CREDENTIAL_FIELD))

    async def delete_by_email(self, email: str) -> Optional[dict]:
        self._check()
        for user in self.users:
            if user["email"] == email:
                self.users.remove(user)
                return self._public(user, CREDENTIAL_FIELD)
        return None


@pytest.fixture
def fake_store():
    return FakeUserStore()
