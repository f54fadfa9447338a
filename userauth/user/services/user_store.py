"""
User store backed by the MongoDB `users` collection.

Owns the identity document shape and the uniqueness guarantees on
username and email. Reads raise StoreUnavailableError when the database
cannot be reached; create() reports every outcome as a StoreResult so the
caller resolves conflicts, validation failures and outages explicitly.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import ConnectionFailure, DuplicateKeyError, WriteError

from common.utils.password import USERNAME_PATTERN
from userauth.auth.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

CREDENTIAL_FIELD = "password"
UNIQUE_FIELDS = ("username", "email")

# MongoDB error code for documents rejected by a collection validator
DOCUMENT_VALIDATION_FAILURE = 121

_BCRYPT_PREFIX = re.compile(r"^\$2[abxy]?\$")


# ─────────────────────────────────────────────────────────────────
# create() outcomes
# ─────────────────────────────────────────────────────────────────

@dataclass
class Created:
    """Identity persisted; credential already stripped."""
    user: dict


@dataclass
class Conflict:
    """A unique index rejected the insert."""
    field: str


@dataclass
class Unavailable:
    """Database could not be reached."""
    reason: str


@dataclass
class ValidationFailed:
    """Document violates the identity schema."""
    errors: List[str] = field(default_factory=list)


StoreResult = Union[Created, Conflict, Unavailable, ValidationFailed]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserStore:
    """
    CRUD over identity documents.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        is_available: Optional[Callable[[], Awaitable[bool]]] = None,
        on_connection_lost: Optional[Callable[[], None]] = None,
    ):
        """
        Initialize UserStore.

        Args:
            db: MongoDB database connection
            is_available: Async probe run before each operation
            on_connection_lost: Called when an operation hits a connection failure
        """
        self._db = db
        self._users_collection = db["users"]
        self._is_available = is_available
        self._on_connection_lost = on_connection_lost

    # ─────────────────────────────────────────────────────────────
    # Connectivity
    # ─────────────────────────────────────────────────────────────

    async def _available(self) -> bool:
        if self._is_available is None:
            return True
        return await self._is_available()

    async def _ensure_available(self) -> None:
        if not await self._available():
            logger.error("User store unavailable")
            raise StoreUnavailableError()

    def _connection_lost(self, error: Exception) -> None:
        logger.error(f"User store connection failure: {error}")
        if self._on_connection_lost:
            self._on_connection_lost()

    async def ensure_indexes(self) -> None:
        """Create the unique indexes that make the store the arbiter of uniqueness."""
        for name in UNIQUE_FIELDS:
            await self._users_collection.create_index(name, unique=True)
        logger.info("User indexes ensured")

    # ─────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────

    async def find_by_username_or_email(self, username: str, email: str) -> Optional[dict]:
        """
        Find an identity holding either the username or the email.

        When the two values belong to different identities the username
        holder is returned.
        """
        await self._ensure_available()
        try:
            cursor = self._users_collection.find(
                {"$or": [{"username": username}, {"email": email}]},
                {CREDENTIAL_FIELD: 0},
            )
            users = await cursor.to_list(length=2)
        except ConnectionFailure as e:
            self._connection_lost(e)
            raise StoreUnavailableError()

        for user in users:
            if user.get("username") == username:
                return user
        return users[0] if users else None

    async def find_by_email(
        self,
        email: str,
        include_credential: bool = False,
    ) -> Optional[dict]:
        """
        Load identity by email.

        Args:
            email: Normalized email address
            include_credential: Also return the stored credential hash

        Returns:
            User document or None if not found
        """
        await self._ensure_available()
        projection = None if include_credential else {CREDENTIAL_FIELD: 0}
        try:
            return await self._users_collection.find_one({"email": email}, projection)
        except ConnectionFailure as e:
            self._connection_lost(e)
            raise StoreUnavailableError()

    async def find_by_id(self, user_id: str) -> Optional[dict]:
        """
        Load identity by MongoDB ID, never including the credential.

        Returns:
            User document or None if not found or the ID is malformed
        """
        await self._ensure_available()
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            logger.debug(f"Malformed user id: {user_id!r}")
            return None

        try:
            return await self._users_collection.find_one(
                {"_id": object_id},
                {CREDENTIAL_FIELD: 0},
            )
        except ConnectionFailure as e:
            self._connection_lost(e)
            raise StoreUnavailableError()

    async def list_all(self) -> List[dict]:
        """List every identity without email or credential."""
        await self._ensure_available()
        try:
            cursor = self._users_collection.find({}, {CREDENTIAL_FIELD: 0, "email": 0})
            return await cursor.to_list(length=None)
        except ConnectionFailure as e:
            self._connection_lost(e)
            raise StoreUnavailableError()

    # ─────────────────────────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def _validate_document(username: str, email: str, credential_hash: str) -> List[str]:
        errors = []
        if not username:
            errors.append("Path `username` is required.")
        elif not 3 <= len(username) <= 50:
            errors.append("Path `username` must be between 3 and 50 characters.")
        elif not USERNAME_PATTERN.match(username):
            errors.append("Path `username` contains invalid characters.")
        if not email:
            errors.append("Path `email` is required.")
        if not credential_hash:
            errors.append("Path `password` is required.")
        return errors

    @staticmethod
    def _duplicate_field(error: DuplicateKeyError) -> str:
        details = error.details or {}
        for key in ("keyPattern", "keyValue"):
            fields = details.get(key) or {}
            for name in fields:
                if name in UNIQUE_FIELDS:
                    return name
        # Older servers only report the index name in the message
        message = str(error)
        for name in UNIQUE_FIELDS:
            if f"{name}_1" in message:
                return name
        return "email"

    async def create(self, username: str, email: str, credential_hash: str) -> StoreResult:
        """
        Insert a new identity.

        Args:
            username: Trimmed username
            email: Normalized email
            credential_hash: Hashed password

        Returns:
            Created, Conflict, Unavailable or ValidationFailed
        """
        errors = self._validate_document(username, email, credential_hash)
        if errors:
            return ValidationFailed(errors)

        if not await self._available():
            return Unavailable("Database not connected")

        user_doc = {
            "username": username,
            "email": email,
            CREDENTIAL_FIELD: credential_hash,
            "createdAt": _utcnow(),
        }

        try:
            result = await self._users_collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            conflict_field = self._duplicate_field(e)
            logger.info(f"Insert rejected by unique index on {conflict_field}")
            return Conflict(conflict_field)
        except WriteError as e:
            if e.code == DOCUMENT_VALIDATION_FAILURE:
                return ValidationFailed([(e.details or {}).get("errmsg", str(e))])
            raise
        except ConnectionFailure as e:
            self._connection_lost(e)
            return Unavailable(str(e))

        user_doc["_id"] = result.inserted_id
        user_doc.pop(CREDENTIAL_FIELD, None)
        logger.info(f"User created: {result.inserted_id}")
        return Created(user_doc)

    async def delete_by_email(self, email: str) -> Optional[dict]:
        """
        Delete identity by email.

        Returns:
            The deleted document (without credential) or None if absent
        """
        await self._ensure_available()
        try:
            deleted = await self._users_collection.find_one_and_delete(
                {"email": email},
                projection={CREDENTIAL_FIELD: 0},
            )
        except ConnectionFailure as e:
            self._connection_lost(e)
            raise StoreUnavailableError()

        if deleted:
            logger.info(f"User deleted: {deleted['_id']}")
        return deleted

    # ─────────────────────────────────────────────────────────────
    # Legacy credential migration
    # ─────────────────────────────────────────────────────────────

    async def list_legacy_credentials(self) -> List[dict]:
        """Identities whose stored credential does not look like a bcrypt hash."""
        await self._ensure_available()
        cursor = self._users_collection.find(
            {CREDENTIAL_FIELD: {"$type": "string", "$not": _BCRYPT_PREFIX}},
            {"_id": 1, "email": 1, CREDENTIAL_FIELD: 1},
        )
        return await cursor.to_list(length=None)

    async def replace_credential(
        self,
        user_id: ObjectId,
        expected: str,
        credential_hash: str,
    ) -> bool:
        """
        Swap a stored credential, only if it still holds the expected value.

        Returns:
            True if the document was updated
        """
        await self._ensure_available()
        updated = await self._users_collection.find_one_and_update(
            {"_id": user_id, CREDENTIAL_FIELD: expected},
            {"$set": {CREDENTIAL_FIELD: credential_hash}},
            projection={"_id": 1},
            return_document=ReturnDocument.AFTER,
        )
        return updated is not None
