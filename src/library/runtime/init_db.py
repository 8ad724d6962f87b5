"""Database initialization script."""

from pathlib import Path

from src.library.core.services.database.db_manage import DbManageService
from src.library.core.services.database.db_session import DbSessionService
from src.library.runtime.config.config_template import load_config


def init_db(config_path: Path | None = None) -> list[str]:
    """Create all database tables and return their names."""
    config = load_config(config_path)
    database_service = DbSessionService(config.database, config.app.environment)
    try:
        return DbManageService(database_service.engine).create_all()
    finally:
        database_service.dispose()


if __name__ == "__main__":
    init_db()
