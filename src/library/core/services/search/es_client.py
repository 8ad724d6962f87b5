"""Elasticsearch connection service: client lifecycle and health checks."""

from typing import Any

from elasticsearch import AsyncElasticsearch
from loguru import logger

from src.library.runtime.config.config_data import SearchConfig


class SearchClientService:
    """Owns the shared Elasticsearch client.

    Follows the same pattern as DbSessionService: the client (and its
    connection pool) is created once at startup and closed on shutdown.
    """

    def __init__(self, search_config: SearchConfig, client: AsyncElasticsearch | None = None):
        self._enabled = search_config.enabled
        self._address = search_config.address
        self._client = client

        if client is not None:
            return

        if not self._enabled:
            logger.info("Search index is disabled, service will not connect")
            return

        basic_auth = None
        if search_config.is_auth:
            basic_auth = (search_config.username, search_config.password)

        logger.info("Initializing Elasticsearch client for {}", self._address)
        self._client = AsyncElasticsearch(
            hosts=[self._address],
            basic_auth=basic_auth,
            request_timeout=search_config.request_timeout,
        )

    def get_client(self) -> AsyncElasticsearch | None:
        """Return the client, or None when search is disabled."""
        if not self._enabled:
            return None
        return self._client

    async def health_check(self) -> bool:
        """Ping the cluster. Returns False when disabled or unreachable."""
        if not self._enabled or self._client is None:
            return False

        try:
            return bool(await self._client.ping())
        except Exception as e:
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Elasticsearch health check failed")
            return False

    async def get_info(self) -> dict[str, Any] | None:
        """Cluster name and version for the readiness endpoint."""
        if not self._enabled or self._client is None:
            return None

        try:
            info = await self._client.info()
        except Exception as e:
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Failed to get Elasticsearch info")
            return None

        return {
            "cluster_name": info.get("cluster_name"),
            "version": info.get("version", {}).get("number"),
        }

    async def close(self) -> None:
        if self._client is None:
            return
        try:
            logger.info("Closing Elasticsearch client")
            await self._client.close()
        finally:
            self._client = None

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def address(self) -> str:
        return self._address
