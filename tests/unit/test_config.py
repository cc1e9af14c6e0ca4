"""
Unit tests for environment-based settings.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from linknitt.core.config import Settings, get_settings

ENV_VARS = ("PORT", "GRAPH_BACKEND", "NEO4J_URI", "JWT_SECRET", "SEED_SECRET", "BCRYPT_ROUNDS")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.port == 5000
        assert settings.graph_backend == "neo4j"
        assert settings.neo4j_uri is None
        assert settings.jwt_secret == "change_this"
        assert settings.token_ttl_hours == 4
        assert settings.bcrypt_rounds == 10
        assert settings.seed_secret == "seed_secret_default"
        assert settings.list_limit == 200
        assert settings.recommend_limit == 6

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("NEO4J_URI", "neo4j+s://example.databases.neo4j.io")
        monkeypatch.setenv("JWT_SECRET", "s3cret")
        monkeypatch.setenv("GRAPH_BACKEND", "memory")

        settings = Settings(_env_file=None)

        assert settings.port == 8080
        assert settings.neo4j_uri == "neo4j+s://example.databases.neo4j.io"
        assert settings.jwt_secret == "s3cret"
        assert settings.graph_backend == "memory"

    def test_unknown_backend_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GRAPH_BACKEND", "sqlite")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_bcrypt_rounds_bounded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BCRYPT_ROUNDS", "2")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_get_settings_cached(self) -> None:
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
