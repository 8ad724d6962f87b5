"""Schema management for the primary store."""

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import SQLModel


class DbManageService:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_all(self) -> list[str]:
        """Create all entity tables that do not exist yet.

        Returns the names of the tables known to the metadata.
        """
        # Register table models with the metadata
        from src.library.entities.service.book import BookTable  # noqa: F401
        from src.library.entities.service.member import MemberTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        tables = sorted(SQLModel.metadata.tables)
        logger.info("Database initialized with tables: {}", ", ".join(tables))
        return tables
