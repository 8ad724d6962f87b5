"""Member database table model."""

from sqlmodel import Field

from src.library.entities.core._base import EntityTable


class MemberTable(EntityTable, table=True):
    """Database persistence model for members."""

    __tablename__ = "members"

    name: str = Field(default="", max_length=255)
