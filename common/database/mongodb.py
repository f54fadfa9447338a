"""
Generic MongoDB connection manager using Motor.

This module provides async MongoDB connectivity that works with any database.
Collections are accessed as raw Motor collections; application code owns the
document shapes.

Example:
    from common.database import MongoDB

    db = MongoDB()
    await db.connect(
        uri="mongodb://localhost:27017",
        database_name="myapp",
    )
    users = db.get_collection("users")
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class MongoDB:
    """Generic MongoDB connection manager - works with any database."""

    def __init__(self):
        self._client: Optional[AsyncIOMotorClient] = None
        self._database_name: Optional[str] = None
        self._connected: bool = False

    async def connect(
        self,
        uri: str,
        database_name: str,
        timeout_ms: int = 5000,
    ) -> None:
        """
        Create the Motor client and verify the server is reachable.

        Motor connects lazily, so the client is always created. When the
        initial ping fails the manager stays usable in a disconnected state
        and later calls to is_available() retry the ping.

        Args:
            uri: MongoDB connection string
            database_name: Name of the database to use
            timeout_ms: Server selection timeout in milliseconds
        """
        # Mask the URI for logging (hide credentials)
        masked_uri = uri.split("@")[-1] if "@" in uri else uri
        logger.info(f"Connecting to MongoDB: {masked_uri}")
        logger.debug(f"Database name: {database_name}")

        self._client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=timeout_ms)
        self._database_name = database_name

        try:
            await self.ping()
            logger.info(f"Successfully connected to MongoDB database: {database_name}")
        except PyMongoError as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            logger.warning("Continuing without database connection")

    async def disconnect(self) -> None:
        """Close the MongoDB connection."""
        if self._client:
            logger.info(f"Disconnecting from MongoDB database: {self._database_name}")
            self._client.close()
            self._client = None
            self._database_name = None
            self._connected = False
            logger.debug("MongoDB connection closed")

    async def ping(self) -> None:
        """
        Round-trip a ping command and record the connection state.

        Raises:
            PyMongoError: If the server cannot be reached
        """
        try:
            await self.db.command("ping")
        except PyMongoError:
            self._connected = False
            raise
        self._connected = True

    async def is_available(self) -> bool:
        """
        Check whether the database can serve requests.

        Returns the cached state when connected; otherwise retries a ping so
        a server started after the application is picked up.
        """
        if self._connected:
            return True
        if not self._client:
            return False
        try:
            await self.ping()
        except PyMongoError as e:
            logger.debug(f"MongoDB still unreachable: {e}")
            return False
        logger.info("MongoDB connection restored")
        return True

    def mark_unavailable(self) -> None:
        """Record a connection failure observed during an operation."""
        if self._connected:
            logger.error("MongoDB connection lost")
        self._connected = False

    @property
    def is_connected(self) -> bool:
        """Check if the last known connection state is up."""
        return self._connected

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """Get the underlying Motor database instance."""
        if not self._client or not self._database_name:
            raise RuntimeError("Database not connected")
        return self._client[self._database_name]

    def get_collection(self, name: str):
        """
        Get a raw Motor collection for direct access.

        Args:
            name: Collection name

        Returns:
            AsyncIOMotorCollection instance
        """
        if not self._client or not self._database_name:
            logger.error("Attempted to get collection without database connection")
            raise RuntimeError("Database not connected")
        logger.debug(f"Getting collection: {name}")
        return self._client[self._database_name][name]

