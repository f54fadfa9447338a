"""Unit tests for the registration, login and profile pipelines."""

import logging
import pytest
from unittest.mock import AsyncMock
from bson import ObjectId

from common.auth import VerifyResult
from common.utils import NotFoundException
from userauth.auth import pipelines
from userauth.auth.errors import (
    ConflictError,
    CredentialVerificationError,
    InvalidCredentialsError,
    StoreUnavailableError,
    ValidationError,
)
from userauth.user.services.user_store import (
    Conflict,
    Created,
    Unavailable,
    UserStore,
    ValidationFailed,
)


@pytest.fixture
def user_store():
    store = AsyncMock(spec=UserStore)
    store.find_by_username_or_email.return_value = None
    return store


def created(username="alice1", email="alice@x.com"):
    return Created({"_id": ObjectId(), "username": username, "email": email, "createdAt": None})


# ─────────────────────────────────────────────────────────────────
# registration_pipeline
# ─────────────────────────────────────────────────────────────────


class TestRegistration:
    @pytest.mark.asyncio
    async def test_normalizes_and_hashes_before_persisting(self, user_store, password_hasher):
        user_store.create.return_value = created()

        user = await pipelines.registration_pipeline(
            user_store, password_hasher, "  alice1 ", " ALICE@X.com ", "secret1"
        )

        username, email, credential = user_store.create.call_args[0]
        assert (username, email) == ("alice1", "alice@x.com")
        assert credential != "secret1"
        assert password_hasher.verify_sync("secret1", credential) is VerifyResult.MATCH
        assert set(user) == {"id", "username", "email", "createdAt"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username, email, password", [
        (None, "a@x.com", "secret1"),
        ("alice1", None, "secret1"),
        ("alice1", "a@x.com", None),
        ("   ", "a@x.com", "secret1"),
        ("alice1", "a@x.com", ""),
    ])
    async def test_missing_fields(self, user_store, password_hasher, username, email, password):
        with pytest.raises(ValidationError, match="Username, email and password are required"):
            await pipelines.registration_pipeline(user_store, password_hasher, username, email, password)

        user_store.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_short_password(self, user_store, password_hasher):
        with pytest.raises(ValidationError, match="at least 6 characters"):
            await pipelines.registration_pipeline(user_store, password_hasher, "alice1", "a@x.com", "12345")

    @pytest.mark.asyncio
    async def test_no_upper_bound_on_password_length(self, user_store, password_hasher):
        user_store.create.return_value = created()
        password = "x" * 300

        await pipelines.registration_pipeline(user_store, password_hasher, "alice1", "a@x.com", password)

        credential = user_store.create.call_args[0][2]
        assert password_hasher.verify_sync(password, credential) is VerifyResult.MATCH

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username", ["ab", "x" * 51])
    async def test_username_length(self, user_store, password_hasher, username):
        with pytest.raises(ValidationError, match="between 3 and 50"):
            await pipelines.registration_pipeline(user_store, password_hasher, username, "a@x.com", "secret1")

    @pytest.mark.asyncio
    async def test_username_charset(self, user_store, password_hasher):
        with pytest.raises(ValidationError, match="letters, numbers"):
            await pipelines.registration_pipeline(user_store, password_hasher, "bob!", "a@x.com", "secret1")

    @pytest.mark.asyncio
    async def test_allowed_username_characters(self, user_store, password_hasher):
        user_store.create.return_value = created("Bob Smith-Jr_2")

        await pipelines.registration_pipeline(
            user_store, password_hasher, "Bob Smith-Jr_2", "a@x.com", "secret1"
        )

        user_store.create.assert_called_once()

    @pytest.mark.asyncio
    async def test_existing_username_conflicts_first(self, user_store, password_hasher):
        user_store.find_by_username_or_email.return_value = {
            "_id": ObjectId(), "username": "alice1", "email": "alice@x.com",
        }

        with pytest.raises(ConflictError) as exc_info:
            await pipelines.registration_pipeline(user_store, password_hasher, "alice1", "alice@x.com", "secret1")

        assert exc_info.value.field == "username"
        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "Username already exists"

    @pytest.mark.asyncio
    async def test_existing_email_conflicts(self, user_store, password_hasher):
        user_store.find_by_username_or_email.return_value = {
            "_id": ObjectId(), "username": "someone", "email": "alice@x.com",
        }

        with pytest.raises(ConflictError) as exc_info:
            await pipelines.registration_pipeline(user_store, password_hasher, "alice1", "ALICE@x.com", "secret1")

        assert exc_info.value.message == "Email already exists"
        user_store.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_insert_race_surfaces_as_conflict(self, user_store, password_hasher):
        user_store.create.return_value = Conflict("email")

        with pytest.raises(ConflictError) as exc_info:
            await pipelines.registration_pipeline(user_store, password_hasher, "alice1", "alice@x.com", "secret1")

        assert exc_info.value.field == "email"

    @pytest.mark.asyncio
    async def test_store_validation_failure(self, user_store, password_hasher):
        user_store.create.return_value = ValidationFailed(["Path `email` is required."])

        with pytest.raises(ValidationError) as exc_info:
            await pipelines.registration_pipeline(user_store, password_hasher, "alice1", "alice@x.com", "secret1")

        assert exc_info.value.message == "Validation failed"
        assert exc_info.value.errors == ["Path `email` is required."]

    @pytest.mark.asyncio
    async def test_store_unavailable(self, user_store, password_hasher):
        user_store.create.return_value = Unavailable("down")

        with pytest.raises(StoreUnavailableError):
            await pipelines.registration_pipeline(user_store, password_hasher, "alice1", "alice@x.com", "secret1")


# ─────────────────────────────────────────────────────────────────
# login_pipeline
# ─────────────────────────────────────────────────────────────────


class TestLogin:
    @pytest.fixture
    def stored_user(self, password_hasher):
        return {
            "_id": ObjectId(),
            "username": "alice1",
            "email": "alice@x.com",
            "password": password_hasher.hash_sync("secret1"),
        }

    @pytest.mark.asyncio
    async def test_issues_token_for_user(self, user_store, password_hasher, token_auth, stored_user):
        user_store.find_by_email.return_value = stored_user

        token = await pipelines.login_pipeline(
            user_store, password_hasher, token_auth, " Alice@X.com", "secret1"
        )

        assert await token_auth.verify_token(token) == str(stored_user["_id"])
        user_store.find_by_email.assert_called_once_with("alice@x.com", include_credential=True)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email, password", [(None, "secret1"), ("a@x.com", None), ("", "")])
    async def test_missing_fields(self, user_store, password_hasher, token_auth, email, password):
        with pytest.raises(ValidationError, match="Email and password are required"):
            await pipelines.login_pipeline(user_store, password_hasher, token_auth, email, password)

    @pytest.mark.asyncio
    async def test_unknown_email(self, user_store, password_hasher, token_auth):
        user_store.find_by_email.return_value = None

        with pytest.raises(InvalidCredentialsError):
            await pipelines.login_pipeline(user_store, password_hasher, token_auth, "a@x.com", "secret1")

    @pytest.mark.asyncio
    async def test_user_without_stored_credential(self, user_store, password_hasher, token_auth, stored_user):
        stored_user.pop("password")
        user_store.find_by_email.return_value = stored_user

        with pytest.raises(InvalidCredentialsError):
            await pipelines.login_pipeline(user_store, password_hasher, token_auth, "alice@x.com", "secret1")

    @pytest.mark.asyncio
    async def test_wrong_password(self, user_store, password_hasher, token_auth, stored_user):
        user_store.find_by_email.return_value = stored_user

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await pipelines.login_pipeline(user_store, password_hasher, token_auth, "alice@x.com", "wrong")

        assert exc_info.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_plaintext_legacy_credential_accepted_with_warning(
        self, user_store, password_hasher, token_auth, stored_user, caplog,
    ):
        stored_user["password"] = "secret1"
        user_store.find_by_email.return_value = stored_user

        with caplog.at_level(logging.WARNING, logger="userauth.auth.pipelines"):
            token = await pipelines.login_pipeline(
                user_store, password_hasher, token_auth, "alice@x.com", "secret1"
            )

        assert await token_auth.verify_token(token) == str(stored_user["_id"])
        assert "requires one-time rehash" in caplog.text
        assert "secret1" not in caplog.text

    @pytest.mark.asyncio
    async def test_plaintext_legacy_mismatch_is_verification_failure(
        self, user_store, password_hasher, token_auth, stored_user,
    ):
        stored_user["password"] = "not-a-hash"
        user_store.find_by_email.return_value = stored_user

        with pytest.raises(CredentialVerificationError) as exc_info:
            await pipelines.login_pipeline(user_store, password_hasher, token_auth, "alice@x.com", "secret1")

        assert exc_info.value.status_code == 500


# ─────────────────────────────────────────────────────────────────
# profile / maintenance
# ─────────────────────────────────────────────────────────────────


class TestProfile:
    @pytest.mark.asyncio
    async def test_returns_public_identity(self, user_store, sample_user_doc, sample_user_id):
        user_store.find_by_id.return_value = sample_user_doc

        profile = await pipelines.profile_pipeline(user_store, sample_user_id)

        assert profile == {
            "id": sample_user_id,
            "username": "alice1",
            "email": "alice@x.com",
            "createdAt": "2026-01-02T03:04:05+00:00",
        }

    @pytest.mark.asyncio
    async def test_missing_identity(self, user_store, sample_user_id):
        user_store.find_by_id.return_value = None

        with pytest.raises(NotFoundException):
            await pipelines.profile_pipeline(user_store, sample_user_id)


class TestMaintenance:
    @pytest.mark.asyncio
    async def test_list_drops_email(self, user_store, sample_user_doc):
        user_store.list_all.return_value = [sample_user_doc]

        users = await pipelines.list_users_pipeline(user_store)

        assert users[0]["username"] == "alice1"
        assert "email" not in users[0]

    @pytest.mark.asyncio
    async def test_delete_normalizes_email(self, user_store, sample_user_doc):
        user_store.delete_by_email.return_value = sample_user_doc

        deleted = await pipelines.delete_user_pipeline(user_store, "ALICE@x.com")

        assert deleted == {"username": "alice1", "email": "alice@x.com"}
        user_store.delete_by_email.assert_called_once_with("alice@x.com")

    @pytest.mark.asyncio
    async def test_delete_missing(self, user_store):
        user_store.delete_by_email.return_value = None

        with pytest.raises(NotFoundException):
            await pipelines.delete_user_pipeline(user_store, "nobody@x.com")
