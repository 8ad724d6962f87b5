"""SQLModel-backed primary store shared by all entity repositories."""

from typing import ClassVar, Generic, TypeVar

from loguru import logger
from sqlmodel import col, select

from src.library.core.errors import EntityNotFoundError, MissingIdentifierError
from src.library.core.services.database.db_session import DbSessionService
from src.library.entities.core._base import Entity, EntityTable, utc_now

EntityT = TypeVar("EntityT", bound=Entity)
TableT = TypeVar("TableT", bound=EntityTable)


class SqlEntityRepository(Generic[EntityT, TableT]):
    """Data-access layer for one entity table.

    Every call runs in its own session, so a single repository instance can
    be shared by concurrent requests.
    """

    entity_name: ClassVar[str]
    entity_type: ClassVar[type[Entity]]
    table_type: ClassVar[type[EntityTable]]

    def __init__(self, database: DbSessionService) -> None:
        self._database = database

    def get_all(self) -> list[EntityT]:
        table = self.table_type
        statement = (
            select(table).where(col(table.deleted_at).is_(None)).order_by(col(table.id))
        )
        with self._database.session_scope() as session:
            rows = session.exec(statement).all()
            return [self._to_entity(row) for row in rows]

    def create(self, entity: EntityT) -> None:
        """Insert ``entity`` and copy the store-assigned columns back onto it."""
        row = self.table_type.model_validate(entity.content_fields())
        with self._database.session_scope() as session:
            session.add(row)
            session.flush()
            self._copy_row(row, entity)

        logger.debug("Created {} {}", self.entity_name, entity.id)

    def update(self, entity: EntityT) -> None:
        """Apply the non-empty fields of ``entity`` to its stored row.

        The entity is refreshed with the full stored row afterwards, so fields
        left empty in the request come back with their persisted values.
        """
        if entity.id is None:
            raise MissingIdentifierError(self.entity_name, "update")

        changes = {
            name: value for name, value in entity.content_fields().items() if value
        }

        with self._database.session_scope() as session:
            row = session.get(self.table_type, entity.id)
            if row is None or row.deleted_at is not None:
                raise EntityNotFoundError(self.entity_name, entity.id)

            for name, value in changes.items():
                setattr(row, name, value)
            row.updated_at = utc_now()
            session.add(row)
            session.flush()
            self._copy_row(row, entity)

        logger.debug(
            "Updated {} {} fields={}", self.entity_name, entity.id, sorted(changes)
        )

    def _to_entity(self, row: EntityTable) -> EntityT:
        return self.entity_type.model_validate(row, from_attributes=True)

    @staticmethod
    def _copy_row(row: EntityTable, entity: Entity) -> None:
        for name in type(entity).model_fields:
            setattr(entity, name, getattr(row, name))
