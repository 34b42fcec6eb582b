from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from notevault.core.db import MongoModel
from notevault.utils import now


class User(MongoModel):
    """User domain model with credentials."""

    email: str
    username: str
    name: str
    password_hash: str  # bcrypt hash
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class UserView(BaseModel):
    """User account information (API representation, never carries the password hash)."""

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    username: str = Field(..., description="Username")
    name: str = Field(..., description="Display name")
    created_at: datetime = Field(..., serialization_alias="createdAt", description="Account creation time")
    updated_at: datetime = Field(..., serialization_alias="updatedAt", description="Last profile update time")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            name=user.name,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
