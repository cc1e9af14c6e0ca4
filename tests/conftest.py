"""
Pytest configuration and fixtures for linknitt tests.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from linknitt.api.app import create_app
from linknitt.auth.passwords import PasswordHasher
from linknitt.auth.tokens import TokenService
from linknitt.core.config import Settings
from linknitt.domain.service import CampusService
from linknitt.graph.memory import InMemoryDomainStore

TEST_JWT_SECRET = "test-jwt-secret"
TEST_SEED_SECRET = "test-seed-secret"


@pytest.fixture
def settings() -> Settings:
    """Provide test settings on the in-memory backend with a cheap work factor."""
    return Settings(
        graph_backend="memory",
        neo4j_uri="bolt://localhost:7687",
        neo4j_user="neo4j",
        neo4j_password="testpassword",
        jwt_secret=TEST_JWT_SECRET,
        seed_secret=TEST_SEED_SECRET,
        bcrypt_rounds=4,
    )


@pytest.fixture
def store() -> InMemoryDomainStore:
    return InMemoryDomainStore()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(secret=TEST_JWT_SECRET)


@pytest.fixture
def service(
    store: InMemoryDomainStore, hasher: PasswordHasher, tokens: TokenService
) -> CampusService:
    return CampusService(store, hasher, tokens, seed_secret=TEST_SEED_SECRET)


@pytest.fixture
def app(settings: Settings, store: InMemoryDomainStore) -> FastAPI:
    return create_app(settings, store)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def login_as(client: TestClient) -> Callable[..., dict[str, str]]:
    """Register a user over HTTP, log in, and return the auth header."""

    def _login_as(
        name: str,
        email: str,
        role: str,
        dept: str | None = None,
        password: str = "pw",
    ) -> dict[str, str]:
        body: dict[str, Any] = {
            "name": name,
            "email": email,
            "password": password,
            "role": role,
            "dept": dept,
        }
        assert client.post("/register", json=body).status_code == 200
        response = client.post("/login", json={"email": email, "password": password})
        assert response.status_code == 200
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login_as
