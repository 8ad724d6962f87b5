"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import Engine, StaticPool, text
from sqlmodel import Session, create_engine

from src.library.runtime.config.config_data import DatabaseConfig


class DbSessionService:
    def __init__(
        self,
        db_config: DatabaseConfig,
        environment: str = "development",
        engine: Engine | None = None,
    ):
        """Initialize the shared database engine and session factory.

        Args:
            db_config: Database section of the application config
            environment: Application environment, used for warnings only
            engine: Pre-built engine to use instead of creating one
        """
        self._config = db_config

        if engine is not None:
            self._engine = engine
            return

        logger.info("Configuring database engine for environment: {}", environment)
        engine_kwargs = {
            "echo": db_config.echo,
            "pool_pre_ping": True,  # Validate connections before use
            "connect_args": self._get_connect_args(db_config, environment),
        }

        if db_config.is_sqlite and self._is_memory_url(db_config.url):
            # One shared connection, otherwise every session sees an empty database
            engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                }
            )

        self._engine = create_engine(db_config.connection_string, **engine_kwargs)
        logger.bind(
            dialect=self._engine.dialect.name,
            pool=type(self._engine.pool).__name__,
        ).info("Database engine initialized")

    @staticmethod
    def _is_memory_url(url: str) -> bool:
        return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url

    def _get_connect_args(self, db_config: DatabaseConfig, environment: str) -> dict:
        """Get database-specific connection arguments."""
        connect_args = {}

        if db_config.url.startswith("mysql"):
            connect_args["connect_timeout"] = 10
            connect_args["charset"] = "utf8mb4"

        elif db_config.is_sqlite:
            connect_args.update(
                {
                    "check_same_thread": False,  # Sessions are used from worker threads
                    "timeout": 20,  # Lock timeout
                }
            )

            if environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider MySQL or PostgreSQL for better performance and reliability."
                )

        return connect_args

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Rows stay readable after the scope closes
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Transactional scope: commit on success, roll back and re-raise on error."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Database transaction failed")
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Database health check failed")
            return False

    def dispose(self) -> None:
        """Close all pooled connections."""
        logger.info("Disposing database engine")
        self._engine.dispose()
