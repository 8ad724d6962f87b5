"""Entity: Member."""

from typing import Any

from pydantic import Field

from src.library.entities.core._base import Entity


class Member(Entity):
    """Library member."""

    name: str = Field(default="", description="Full name", examples=["John Lennon"])

    def __eq__(self, other: Any) -> bool:
        """Compare members by business attributes, ignoring timestamps."""
        if not isinstance(other, Member):
            return False

        return self.id == other.id and self.name == other.name

    def __hash__(self) -> int:
        return hash((self.id, self.name))
