"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field
from sqlalchemy.engine import make_url


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(default=["GET", "POST", "PUT", "OPTIONS"])
    allow_headers: list[str] = Field(default=["*"])


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default="logs/app.log", description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Primary store (relational database) configuration."""

    url: str = Field(
        default="sqlite:///./library.db",
        description="SQLAlchemy connection URL, e.g. mysql+pymysql://user@host:3306/library",
    )
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(
        default=1800, description="Maximum connection lifetime in seconds"
    )
    echo: bool = Field(default=False, description="Echo SQL statements")
    auto_migrate: bool = Field(
        default=True,
        description="Create missing tables at startup (ignored in production)",
    )
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def password(self) -> str | None:
        """Resolve the database password.

        A mounted secrets file wins over an environment variable, which wins
        over a password embedded in the URL.
        """
        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e

        if self.password_env_var:
            password = os.getenv(self.password_env_var)
            if password is None:
                raise ValueError(
                    f"Environment variable {self.password_env_var} not set"
                )
            return password

        return make_url(self.url).password

    @computed_field
    @property
    def connection_string(self) -> str:
        """Database URL with the resolved password applied."""
        base_url = make_url(self.url)
        password = self.password

        if password and base_url.password and password != base_url.password:
            logger.warning(
                "Database password from secrets does not match the one in the URL. "
                "Using password from secrets."
            )

        if password:
            base_url = base_url.set(password=password)

        return base_url.render_as_string(hide_password=False)


class SearchConfig(BaseModel):
    """Secondary index (Elasticsearch) configuration."""

    enabled: bool = Field(default=True, description="Enable the search index")
    address: str = Field(
        default="http://localhost:9200", description="Elasticsearch node address"
    )
    is_auth: bool = Field(default=False, description="Use basic authentication")
    username: str | None = Field(default=None, description="Basic auth username")
    password: str | None = Field(default=None, description="Basic auth password")
    request_timeout: float = Field(
        default=10.0, description="Transport request timeout in seconds"
    )
    book_index: str = Field(default="books", description="Index holding books")
    member_index: str = Field(default="members", description="Index holding members")


class ServiceConfig(BaseModel):
    """Entity service behaviour."""

    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout applied to store and index calls on the request path",
    )
    index_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout applied to the detached re-index after a write",
    )
    max_background_tasks: int = Field(
        default=50, gt=0, description="Concurrent detached index writes"
    )
    shutdown_grace_seconds: float = Field(
        default=10.0, description="Time allowed for pending index writes on shutdown"
    )


class AuthConfig(BaseModel):
    """Bearer token guard for write endpoints."""

    enabled: bool = Field(default=False, description="Require a bearer token on writes")
    jwt_secret: str | None = Field(
        default=None, description="HMAC secret used to verify bearer tokens"
    )
    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256", "HS384", "HS512"],
        description="JWT algorithms accepted for bearer tokens",
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    name: str = Field(default="Book Management API", description="Service name")
    version: str = Field(default="1.0.0", description="Service version")
    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    graceful_timeout: int = Field(
        default=15,
        description="Seconds to wait for open connections during shutdown",
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    search: SearchConfig = Field(
        default_factory=SearchConfig, description="Search index configuration"
    )
    service: ServiceConfig = Field(
        default_factory=ServiceConfig, description="Entity service configuration"
    )
    auth: AuthConfig = Field(
        default_factory=AuthConfig, description="Write endpoint authentication"
    )
