"""Elasticsearch-backed secondary index shared by all entity search indexes."""

from typing import Any, ClassVar, Generic, TypeVar

from elasticsearch import AsyncElasticsearch, NotFoundError
from loguru import logger
from pydantic import ValidationError

from src.library.core.errors import SearchIndexError
from src.library.entities.core._base import Entity

EntityT = TypeVar("EntityT", bound=Entity)


class ElasticsearchEntityIndex(Generic[EntityT]):
    """Keeps a searchable copy of one entity type in an Elasticsearch index.

    Documents are keyed by the entity id, so indexing the same entity twice
    replaces the earlier document. The index is derived data: it may lag
    behind or diverge from the primary store.
    """

    entity_name: ClassVar[str]
    entity_type: ClassVar[type[Entity]]

    def __init__(self, client: AsyncElasticsearch, index: str) -> None:
        self._client = client
        self._index = index

    @property
    def index(self) -> str:
        return self._index

    async def index_document(self, entity: EntityT) -> None:
        if entity.id is None:
            raise SearchIndexError(f"cannot index {self.entity_name} without an id")

        await self._client.index(
            index=self._index,
            id=str(entity.id),
            document=entity.model_dump(mode="json"),
        )
        logger.debug("Indexed {} {} into {}", self.entity_name, entity.id, self._index)

    async def search(self, keyword: str) -> list[EntityT]:
        """Run a query-string search for ``keyword``.

        Returns an empty list when nothing matches or the index has not been
        created yet.
        """
        try:
            response = await self._client.search(index=self._index, q=keyword)
        except NotFoundError:
            logger.debug("Index {} does not exist yet; no results", self._index)
            return []

        return [self._decode_hit(hit) for hit in response["hits"]["hits"]]

    def _decode_hit(self, hit: dict[str, Any]) -> EntityT:
        try:
            return self.entity_type.model_validate(hit["_source"])
        except (KeyError, ValidationError) as e:
            raise SearchIndexError(
                f"cannot decode {self.entity_name} document {hit.get('_id')}: {e}"
            ) from e
