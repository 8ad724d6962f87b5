from datetime import UTC, datetime

from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel

# Columns owned by the primary store; never copied from client input.
MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at", "deleted_at"})


def utc_now() -> datetime:
    return datetime.now(UTC)


class Entity(BaseModel):
    """Base entity with a store-assigned numeric identifier.

    ``id`` stays ``None`` until the primary store persists the entity.
    """

    id: int | None = PydanticField(
        default=None,
        description="Identifier assigned by the primary store",
    )

    created_at: datetime | None = PydanticField(default=None)
    updated_at: datetime | None = PydanticField(default=None)
    deleted_at: datetime | None = PydanticField(
        default=None, description="Soft-delete marker"
    )

    def content_fields(self) -> dict:
        """Entity fields excluding the store-managed columns."""
        return self.model_dump(exclude=set(MANAGED_FIELDS))


class EntityTable(SQLModel, table=False):
    """Base table with an autoincrement key, timestamps and soft delete."""

    id: int | None = Field(default=None, primary_key=True)

    created_at: datetime = Field(default_factory=utc_now, nullable=False)
    updated_at: datetime = Field(
        default_factory=utc_now,
        nullable=False,
        sa_column_kwargs={"onupdate": utc_now},
    )
    deleted_at: datetime | None = Field(default=None, nullable=True, index=True)
