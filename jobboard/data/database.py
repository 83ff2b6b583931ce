"""
Database connection manager for the job board.

Provides MongoDB connection management with a synchronous (PyMongo) client
for request handling and transactions, and an asynchronous (Motor) client
used for index management.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.client_session import ClientSession
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from jobboard.utils.config import get_settings
from jobboard.utils.constants import COLLECTIONS
from jobboard.utils.logger import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    """
    Manages MongoDB database connections.

    Implements singleton pattern for connection reuse.
    """

    _instance: Optional["DatabaseManager"] = None
    _sync_client: Optional[MongoClient] = None
    _async_client: Optional[AsyncIOMotorClient] = None

    def __new__(cls) -> "DatabaseManager":
        """Ensure singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize database manager with settings."""
        if hasattr(self, "_initialized") and self._initialized:
            return

        self._settings = get_settings()
        self._db_name = self._settings.database.name
        self._uri = self._build_uri()
        self._initialized = True

    def _build_uri(self) -> str:
        """
        Build MongoDB connection URI from settings.

        Credentials are URL-encoded.
        """
        from urllib.parse import quote_plus

        db_settings = self._settings.database

        host = db_settings.host.strip()
        if not host or any(c in host for c in [";", "&", "|", "$", "`"]):
            raise ValueError(f"Invalid database host: {host}")

        auth = ""
        if db_settings.username and db_settings.password:
            encoded_user = quote_plus(db_settings.username)
            encoded_pass = quote_plus(db_settings.password)
            auth = f"{encoded_user}:{encoded_pass}@"

        uri = f"mongodb://{auth}{host}:{db_settings.port}"
        if db_settings.replica_set:
            uri += f"/?replicaSet={quote_plus(db_settings.replica_set)}"
        return uri

    # -------------------------------------------------------------------------
    # Synchronous Client
    # -------------------------------------------------------------------------

    def get_sync_client(self) -> MongoClient:
        """Get or create synchronous MongoDB client."""
        if self._sync_client is None:
            logger.info("Creating synchronous MongoDB client")
            try:
                self._sync_client = MongoClient(
                    self._uri,
                    serverSelectionTimeoutMS=5000,
                    connectTimeoutMS=5000,
                    maxPoolSize=50,
                    minPoolSize=5,
                    tz_aware=True,
                )
            except Exception as e:
                self._sync_client = None
                logger.error(f"Failed to create sync client: {e}")
                raise
        return self._sync_client

    def get_sync_database(self) -> Database:
        """Get synchronous database instance."""
        return self.get_sync_client()[self._db_name]

    def get_sync_collection(self, collection_name: str) -> Any:
        """Get a synchronous collection by name."""
        return self.get_sync_database()[collection_name]

    @contextmanager
    def sync_session(self) -> Iterator[ClientSession]:
        """Context manager for synchronous database session."""
        client = self.get_sync_client()
        session = client.start_session()
        try:
            yield session
        finally:
            session.end_session()

    @contextmanager
    def transaction(self) -> Iterator[ClientSession]:
        """
        Run the enclosed writes as one multi-document transaction.

        Commits when the block exits normally and aborts when it raises.
        Requires MongoDB running as a replica set.
        """
        with self.sync_session() as session:
            with session.start_transaction():
                yield session

    def check_sync_connection(self) -> bool:
        """Check if synchronous connection is healthy."""
        try:
            self.get_sync_client().admin.command("ping")
            return True
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(f"Sync connection check failed: {e}")
            self._sync_client = None
            return False

    # -------------------------------------------------------------------------
    # Asynchronous Client
    # -------------------------------------------------------------------------

    def get_async_client(self) -> AsyncIOMotorClient:
        """Get or create asynchronous MongoDB client."""
        if self._async_client is None:
            logger.info("Creating asynchronous MongoDB client")
            self._async_client = AsyncIOMotorClient(
                self._uri,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
                tz_aware=True,
            )
        return self._async_client

    def get_async_database(self) -> AsyncIOMotorDatabase:
        """Get asynchronous database instance."""
        return self.get_async_client()[self._db_name]

    def get_async_collection(self, collection_name: str) -> Any:
        """Get an asynchronous collection by name."""
        return self.get_async_database()[collection_name]

    # -------------------------------------------------------------------------
    # Lifecycle Management
    # -------------------------------------------------------------------------

    def close_sync(self) -> None:
        """Close synchronous client connection."""
        if self._sync_client:
            logger.info("Closing synchronous MongoDB client")
            self._sync_client.close()
            self._sync_client = None

    def close_async(self) -> None:
        """Close asynchronous client connection."""
        if self._async_client:
            logger.info("Closing asynchronous MongoDB client")
            self._async_client.close()
            self._async_client = None

    def close_all(self) -> None:
        """Close all database connections."""
        self.close_sync()
        self.close_async()

    # -------------------------------------------------------------------------
    # Index Management
    # -------------------------------------------------------------------------

    async def ensure_indexes(self) -> None:
        """Create indexes for all collections."""
        logger.info("Ensuring database indexes")

        companies = self.get_async_collection(COLLECTIONS["companies"])
        await companies.create_index("admin_id")

        job_postings = self.get_async_collection(COLLECTIONS["job_postings"])
        await job_postings.create_index("company_id")
        await job_postings.create_index("created_at")

        users = self.get_async_collection(COLLECTIONS["users"])
        await users.create_index("email", unique=True)
        await users.create_index("last_education")
        await users.create_index("date_of_birth")

        applications = self.get_async_collection(COLLECTIONS["applications"])
        await applications.create_index(
            [("job_posting_id", ASCENDING), ("user_id", ASCENDING)], unique=True
        )
        await applications.create_index("status")
        await applications.create_index("expected_salary")
        await applications.create_index("created_at")

        interviews = self.get_async_collection(COLLECTIONS["interviews"])
        await interviews.create_index(
            [("job_application_id", ASCENDING), ("scheduled_at", DESCENDING)]
        )
        await interviews.create_index("candidate_id")

        notifications = self.get_async_collection(COLLECTIONS["notifications"])
        await notifications.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])

        logger.info("Database indexes created successfully")


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_database_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager

