from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import UUID, uuid4

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pymongo.errors import PyMongoError

from notevault.errors import StoreUnavailableError

logger = structlog.get_logger(__name__)


class MongoModel(BaseModel):
    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid4)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for MongoDB
        return data


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Translate driver failures into StoreUnavailableError.

    Driver details are logged here and never attached to the raised message.
    """
    try:
        yield
    except PyMongoError as e:
        logger.exception("store_unavailable", operation=operation)
        raise StoreUnavailableError(f"Store operation failed: {operation}") from e
