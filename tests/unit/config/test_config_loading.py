"""Tests for config.yaml loading and environment substitution."""

import os
from pathlib import Path

import pytest

from src.library.runtime.config.config_data import DatabaseConfig
from src.library.runtime.config.config_template import (
    CONFIG_PATH_ENV_VAR,
    apply_environment_overrides,
    load_config,
    load_templated_yaml,
    substitute_env_vars,
)

PROJECT_CONFIG = Path(__file__).resolve().parents[3] / "config.yaml"


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(body)
    return path


class TestSubstituteEnvVars:
    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("LIBRARY_TEST_VAR", raising=False)

        assert substitute_env_vars("x=${LIBRARY_TEST_VAR:-fallback}") == "x=fallback"

    def test_value_wins_over_default(self, monkeypatch):
        monkeypatch.setenv("LIBRARY_TEST_VAR", "set")

        assert substitute_env_vars("${LIBRARY_TEST_VAR:-fallback}") == "set"

    def test_required_variable_missing(self, monkeypatch):
        monkeypatch.delenv("LIBRARY_TEST_VAR", raising=False)

        with pytest.raises(ValueError, match="LIBRARY_TEST_VAR not set"):
            substitute_env_vars("${LIBRARY_TEST_VAR}")

    def test_required_variable_custom_message(self, monkeypatch):
        monkeypatch.delenv("LIBRARY_TEST_VAR", raising=False)

        with pytest.raises(ValueError, match="point me at elasticsearch"):
            substitute_env_vars("${LIBRARY_TEST_VAR:?point me at elasticsearch}")


class TestEnvironmentOverrides:
    def test_prefixed_variables_are_copied(self, monkeypatch):
        monkeypatch.setenv("PRODUCTION_LIBRARY_TEST_VAR", "prod-value")
        monkeypatch.delenv("LIBRARY_TEST_VAR", raising=False)

        applied = apply_environment_overrides("production")

        assert "LIBRARY_TEST_VAR" in applied
        assert os.environ["LIBRARY_TEST_VAR"] == "prod-value"
        monkeypatch.delenv("LIBRARY_TEST_VAR")


class TestLoadTemplatedYaml:
    def test_project_config_loads_with_defaults(self, monkeypatch):
        for var in ("DATABASE_URL", "SEARCH_ENABLED", "AUTH_ENABLED", "APP_ENVIRONMENT"):
            monkeypatch.delenv(var, raising=False)

        config = load_templated_yaml(PROJECT_CONFIG)

        assert config.app.environment == "development"
        assert config.database.url == "sqlite:///./library.db"
        assert config.search.enabled is True
        assert config.search.book_index == "books"
        assert config.search.member_index == "members"
        assert config.service.timeout_seconds == 5
        assert config.auth.enabled is False

    def test_values_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LIBRARY_ES", "http://search:9200")
        path = _write(
            tmp_path,
            "config:\n"
            "  search:\n"
            "    address: ${LIBRARY_ES}\n"
            "  service:\n"
            "    timeout_seconds: 1.5\n",
        )

        config = load_templated_yaml(path)

        assert config.search.address == "http://search:9200"
        assert config.service.timeout_seconds == 1.5

    def test_empty_file_is_rejected(self, tmp_path):
        with pytest.raises(ValueError, match="Failed to parse YAML"):
            load_templated_yaml(_write(tmp_path, ""))

    def test_invalid_values_are_rejected(self, tmp_path):
        path = _write(tmp_path, "config:\n  service:\n    timeout_seconds: 0\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_templated_yaml(path)

    def test_search_auth_requires_credentials(self, tmp_path):
        path = _write(tmp_path, "config:\n  search:\n    is_auth: true\n")

        with pytest.raises(ValueError, match="search.is_auth"):
            load_templated_yaml(path)

    def test_auth_requires_secret(self, tmp_path):
        path = _write(tmp_path, "config:\n  auth:\n    enabled: true\n")

        with pytest.raises(ValueError, match="jwt_secret"):
            load_templated_yaml(path)

    def test_load_config_uses_env_path(self, tmp_path, monkeypatch):
        path = _write(tmp_path, "config:\n  app:\n    name: From Env\n")
        monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(path))

        assert load_config().app.name == "From Env"


class TestDatabaseConfig:
    def test_password_from_url(self):
        config = DatabaseConfig(url="mysql+pymysql://app:s3cret@db:3306/library")

        assert config.password == "s3cret"
        assert config.connection_string == "mysql+pymysql://app:s3cret@db:3306/library"

    def test_password_file_wins(self, tmp_path):
        secret = tmp_path / "db_password"
        secret.write_text("from-file\n")

        config = DatabaseConfig(
            url="mysql+pymysql://app:old@db:3306/library",
            password_file=str(secret),
        )

        assert config.password == "from-file"
        assert config.connection_string == "mysql+pymysql://app:from-file@db:3306/library"

    def test_password_env_var(self, monkeypatch):
        monkeypatch.setenv("LIBRARY_DB_PASSWORD", "from-env")
        config = DatabaseConfig(
            url="mysql+pymysql://app@db:3306/library",
            password_env_var="LIBRARY_DB_PASSWORD",
        )

        assert config.connection_string == "mysql+pymysql://app:from-env@db:3306/library"

    def test_missing_password_env_var(self, monkeypatch):
        monkeypatch.delenv("LIBRARY_DB_PASSWORD", raising=False)
        config = DatabaseConfig(
            url="mysql+pymysql://app@db:3306/library",
            password_env_var="LIBRARY_DB_PASSWORD",
        )

        with pytest.raises(ValueError, match="LIBRARY_DB_PASSWORD"):
            _ = config.password

    def test_sqlite_detection(self):
        assert DatabaseConfig(url="sqlite://").is_sqlite
        assert not DatabaseConfig(url="mysql+pymysql://db/library").is_sqlite
