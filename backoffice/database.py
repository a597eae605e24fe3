"""
MongoDB connection management.

One ``Database`` instance is owned by the application (``app.state.database``).
It connects lazily and memoizes the in-flight attempt, so concurrent callers
share a single connection attempt. Without a working ``MONGODB_URI`` a local
process falls back to a transient in-process store; a serverless process never
does and reports "no connection" instead.
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import OperationFailure, PyMongoError

from backoffice.config import Settings

logger = logging.getLogger(__name__)


class Collections:
    """MongoDB collection names."""
    SALARIES = "salaries"


class ConnectionState(str, Enum):
    UNSET = "unset"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


async def safe_create_index(collection, *args, **kwargs):
    """Create an index, skipping conflicts with an existing index of the same name."""
    try:
        return await collection.create_index(*args, **kwargs)
    except OperationFailure as e:
        if e.code == 86:  # IndexKeySpecsConflict
            logger.warning(f"Index already exists with different options, skipped: {args}")
            return None
        raise


async def ensure_indexes(db) -> None:
    """Indexes the salary store relies on."""
    salaries = db[Collections.SALARIES]
    await safe_create_index(salaries, "salaryId", unique=True)
    await safe_create_index(salaries, [("date", -1)])


class Database:
    """
    Process-wide MongoDB connection handle.

    Args:
        settings: Application settings (URI, database name, serverless flag)
        client_factory: Builds the driver client for a URI
        memory_client_factory: Builds the transient in-process client
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: Callable[..., Any] = AsyncIOMotorClient,
        memory_client_factory: Callable[[], Any] = AsyncMongoMockClient
    ):
        self.settings = settings
        self.client_factory = client_factory
        self.memory_client_factory = memory_client_factory

        self.state = ConnectionState.UNSET
        self.client = None
        self.db: Optional[AsyncIOMotorDatabase] = None
        self.in_memory = False
        self._attempt: Optional[asyncio.Future] = None

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    async def connect(self) -> Optional[AsyncIOMotorDatabase]:
        """
        Return the connected database, connecting on first use.

        Returns:
            The database handle, or None when no database is reachable
        """
        if self.state is ConnectionState.CONNECTED:
            return self.db

        if self._attempt is None:
            self.state = ConnectionState.CONNECTING
            self._attempt = asyncio.ensure_future(self._establish())

        # A cancelled caller must not cancel the attempt other callers await.
        return await asyncio.shield(self._attempt)

    def get_db(self) -> AsyncIOMotorDatabase:
        """Connected database handle; raises if connect() has not succeeded."""
        if self.db is None:
            raise RuntimeError("Database not connected. Await connect() first.")
        return self.db

    async def close(self) -> None:
        """Drop the connection and return to the unset state."""
        if self._attempt is not None and not self._attempt.done():
            self._attempt.cancel()
        if self.client is not None and not self.in_memory:
            self.client.close()
            logger.info("MongoDB connection closed")

        self.state = ConnectionState.UNSET
        self.client = None
        self.db = None
        self.in_memory = False
        self._attempt = None

    async def _establish(self) -> Optional[AsyncIOMotorDatabase]:
        uri = self.settings.MONGODB_URI
        serverless = self.settings.SERVERLESS

        if not uri and serverless:
            logger.warning("Running serverless without MONGODB_URI. Database features will be disabled.")
            return self._fail()

        if uri:
            client = None
            try:
                client = self.client_factory(
                    uri,
                    serverSelectionTimeoutMS=self.settings.DB_SERVER_SELECTION_TIMEOUT_MS
                )
                await client.admin.command("ping")
                db = await self._ready(client, in_memory=False)
            except PyMongoError as e:
                logger.error(f"MongoDB connection error: {e}")
                if client is not None:
                    client.close()
                if serverless:
                    logger.error("Fatal: could not connect to MongoDB in serverless mode.")
                    return self._fail()
            else:
                where = "cloud cluster" if uri.startswith("mongodb+srv") else "local instance"
                logger.info(f"MongoDB connected: {where}")
                return db

        logger.warning(
            "No working MONGODB_URI provided. Using temporary in-memory database. "
            "Data will be lost on restart."
        )
        try:
            client = self.memory_client_factory()
            db = await self._ready(client, in_memory=True)
        except Exception as e:
            logger.error(f"In-memory MongoDB connection error: {e}", exc_info=True)
            return self._fail()
        logger.info("MongoDB connected (temporary in-memory)")
        return db

    async def _ready(self, client, in_memory: bool) -> AsyncIOMotorDatabase:
        db = client[self.settings.DB_NAME]
        await ensure_indexes(db)

        self.client = client
        self.db = db
        self.in_memory = in_memory
        self.state = ConnectionState.CONNECTED
        return db

    def _fail(self) -> None:
        self.state = ConnectionState.FAILED
        return None
