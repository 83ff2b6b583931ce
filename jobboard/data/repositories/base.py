"""
Base repository class providing common CRUD operations.

All entity-specific repositories inherit from this base class. Every
operation accepts an optional ``session`` so it can take part in a
transaction opened by ``DatabaseManager.transaction()``.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from bson import ObjectId
from pymongo.client_session import ClientSession
from pymongo.collation import Collation
from pymongo.collection import Collection
from pymongo.results import InsertOneResult, UpdateResult

from jobboard.core.exceptions import NotFoundError
from jobboard.data.database import DatabaseManager, get_database_manager
from jobboard.data.models.base import BaseDocument, utcnow
from jobboard.utils.logger import get_logger

logger = get_logger(__name__)

# Type variable for document models
T = TypeVar("T", bound=BaseDocument)


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.

    Subclasses must define the collection name and model class.
    """

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Name of the MongoDB collection."""
        pass

    @property
    @abstractmethod
    def model_class(self) -> type[T]:
        """Pydantic model class for this repository."""
        pass

    def __init__(self, db_manager: Optional[DatabaseManager] = None) -> None:
        """Initialize repository with database connection."""
        self._db_manager = db_manager or get_database_manager()

    # -------------------------------------------------------------------------
    # Collection Access
    # -------------------------------------------------------------------------

    def _get_collection(self) -> Collection:
        """Get synchronous collection instance."""
        return self._db_manager.get_sync_collection(self.collection_name)

    # -------------------------------------------------------------------------
    # Document Conversion
    # -------------------------------------------------------------------------

    def _to_model(self, document: Optional[dict[str, Any]]) -> Optional[T]:
        """Convert MongoDB document to Pydantic model."""
        if document is None:
            return None
        return self.model_class.model_validate(document)

    def _to_document(self, model: T) -> dict[str, Any]:
        """Convert Pydantic model to MongoDB document."""
        return model.model_dump_mongo()

    @staticmethod
    def _to_object_id(id_value: str | ObjectId) -> ObjectId:
        """Convert string to ObjectId; malformed ids cannot exist in the store."""
        if isinstance(id_value, ObjectId):
            return id_value
        if not ObjectId.is_valid(id_value):
            raise NotFoundError(f"Invalid identifier: {id_value!r}")
        return ObjectId(id_value)

    # -------------------------------------------------------------------------
    # CRUD Operations
    # -------------------------------------------------------------------------

    def create(self, model: T, session: Optional[ClientSession] = None) -> T:
        """Create a new document."""
        collection = self._get_collection()
        now = utcnow()
        model.created_at = now
        model.updated_at = now
        document = self._to_document(model)

        result: InsertOneResult = collection.insert_one(document, session=session)
        model.id = result.inserted_id
        logger.debug(f"Created {self.collection_name} document: {result.inserted_id}")
        return model

    def get_by_id(
        self, id_value: str | ObjectId, session: Optional[ClientSession] = None
    ) -> Optional[T]:
        """Get a document by its ID."""
        collection = self._get_collection()
        document = collection.find_one(
            {"_id": self._to_object_id(id_value)}, session=session
        )
        return self._to_model(document)

    def find_one(
        self, query: dict[str, Any], session: Optional[ClientSession] = None
    ) -> Optional[T]:
        """Find a single document matching a query."""
        collection = self._get_collection()
        document = collection.find_one(query, session=session)
        return self._to_model(document)

    def update(
        self,
        id_value: str | ObjectId,
        update_data: dict[str, Any],
        session: Optional[ClientSession] = None,
    ) -> Optional[T]:
        """
        Update a document by ID.

        ``None`` values are unset rather than stored. Returns the updated
        document, or ``None`` when no document has that ID.
        """
        collection = self._get_collection()
        to_set = {k: v for k, v in update_data.items() if v is not None}
        to_unset = {k: "" for k, v in update_data.items() if v is None}
        to_set["updated_at"] = utcnow()

        operation: dict[str, Any] = {"$set": to_set}
        if to_unset:
            operation["$unset"] = to_unset

        result: UpdateResult = collection.update_one(
            {"_id": self._to_object_id(id_value)},
            operation,
            session=session,
        )

        if result.matched_count > 0:
            logger.debug(f"Updated {self.collection_name} document: {id_value}")
            return self.get_by_id(id_value, session=session)
        return None

    def aggregate(
        self, pipeline: list[dict[str, Any]], collation: Optional[Collation] = None
    ) -> list[dict[str, Any]]:
        """Run an aggregation pipeline and return the raw documents."""
        return list(self._get_collection().aggregate(pipeline, collation=collation))
