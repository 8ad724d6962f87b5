"""Entity services: primary write first, search index mirrored in the background."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from loguru import logger

from src.library.core.errors import OperationTimeoutError, SearchUnavailableError
from src.library.core.protocols import PrimaryStore, SearchIndex
from src.library.core.services.tasks.background import BackgroundTaskPool
from src.library.entities.core._base import Entity
from src.library.entities.service.book.entity import Book
from src.library.entities.service.member.entity import Member

EntityT = TypeVar("EntityT", bound=Entity)
ResultT = TypeVar("ResultT")

DEFAULT_TIMEOUT_SECONDS = 5.0


class EntityService(Generic[EntityT]):
    """Orchestrates one entity type across the primary store and search index.

    Reads and writes go to the primary store, which is authoritative. After a
    successful create or update, a snapshot of the entity is handed to the
    background pool to be indexed; the caller does not wait for it and never
    sees its failures. Search goes to the index only.
    """

    entity_name = "entity"

    def __init__(
        self,
        store: PrimaryStore[EntityT],
        search_index: SearchIndex[EntityT] | None,
        task_pool: BackgroundTaskPool,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        index_timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self._store = store
        self._search_index = search_index
        self._task_pool = task_pool
        self._timeout = timeout
        self._index_timeout = index_timeout

    @property
    def search_enabled(self) -> bool:
        return self._search_index is not None

    async def get_all(self) -> list[EntityT]:
        return await self._call_store("get_all", self._store.get_all)

    async def create(self, entity: EntityT) -> None:
        """Persist ``entity`` and assign its id in place.

        Primary-store errors propagate and no indexing is attempted.
        """
        await self._call_store("create", self._store.create, entity)
        self._schedule_reindex("create", entity)

    async def update(self, entity: EntityT) -> None:
        """Apply the non-empty fields of ``entity`` and refresh it in place."""
        await self._call_store("update", self._store.update, entity)
        self._schedule_reindex("update", entity)

    async def search(self, keyword: str) -> list[EntityT]:
        if self._search_index is None:
            raise SearchUnavailableError(self.entity_name)

        keyword = keyword.strip()
        if not keyword:
            return []

        return await self._with_timeout(
            "search", self._search_index.search(keyword), self._timeout
        )

    async def _reindex(self, entity: EntityT) -> None:
        """Write ``entity`` to the search index.

        Runs detached from the request. Override to add retry behaviour.
        """
        if self._search_index is None:
            return
        await self._with_timeout(
            "index", self._search_index.index_document(entity), self._index_timeout
        )

    def _schedule_reindex(self, operation: str, entity: EntityT) -> None:
        if self._search_index is None:
            return

        snapshot = entity.model_copy(deep=True)
        self._task_pool.submit(
            f"{self.entity_name}.{operation}.index:{snapshot.id}",
            lambda: self._reindex(snapshot),
        )

    async def _call_store(
        self, operation: str, func: Callable[..., ResultT], *args
    ) -> ResultT:
        try:
            return await self._with_timeout(
                operation, asyncio.to_thread(func, *args), self._timeout
            )
        except OperationTimeoutError:
            raise
        except Exception as e:
            logger.bind(
                entity=self.entity_name,
                operation=operation,
                error_type=type(e).__name__,
            ).warning("Primary store {} failed: {}", operation, e)
            raise

    async def _with_timeout(
        self, operation: str, awaitable: Awaitable[ResultT], timeout: float
    ) -> ResultT:
        try:
            return await asyncio.wait_for(awaitable, timeout=timeout)
        except TimeoutError as e:
            raise OperationTimeoutError(
                f"{self.entity_name}.{operation}", timeout
            ) from e


class BookService(EntityService[Book]):
    entity_name = "book"


class MemberService(EntityService[Member]):
    entity_name = "member"
