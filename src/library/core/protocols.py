"""Capability interfaces the entity services depend on."""

from typing import Protocol, TypeVar

from src.library.entities.core._base import Entity

EntityT = TypeVar("EntityT", bound=Entity)


class PrimaryStore(Protocol[EntityT]):
    """Authoritative, blocking store for one entity type.

    Implementations must be safe to call from several threads at once.
    """

    def get_all(self) -> list[EntityT]: ...

    def create(self, entity: EntityT) -> None: ...

    def update(self, entity: EntityT) -> None: ...


class SearchIndex(Protocol[EntityT]):
    """Derived, eventually consistent keyword index for one entity type."""

    async def index_document(self, entity: EntityT) -> None: ...

    async def search(self, keyword: str) -> list[EntityT]: ...
