"""
Configuration module for linknitt.

Uses pydantic-settings for environment-based configuration. Every value can be
supplied through the environment or a local .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The graph backend selects the store behind the domain operations:
    - neo4j: a live Neo4j database (NEO4J_URI is then required)
    - memory: an in-process store, useful for local development and tests
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===========================================
    # SERVICE CONFIGURATION
    # ===========================================
    port: int = Field(default=5000, description="Service port")
    frontend_dir: str | None = Field(
        default=None,
        description="Directory holding the static single-page frontend",
    )
    log_file_path: str | None = Field(
        default=None,
        description="Optional rotating JSON log file",
    )

    # ===========================================
    # GRAPH STORE CONFIGURATION
    # ===========================================
    graph_backend: Literal["neo4j", "memory"] = Field(
        default="neo4j",
        description="Store implementation behind the domain operations",
    )
    neo4j_uri: str | None = Field(
        default=None,
        description="Neo4j Bolt/neo4j protocol URI",
    )
    neo4j_user: str = Field(default="neo4j", description="Neo4j username")
    neo4j_password: str = Field(default="", description="Neo4j password")
    neo4j_database: str = Field(default="neo4j", description="Neo4j database name")

    # ===========================================
    # AUTH CONFIGURATION
    # ===========================================
    jwt_secret: str = Field(default="change_this", description="Token signing secret")
    jwt_algorithm: str = Field(default="HS256", description="Token signing algorithm")
    token_ttl_hours: int = Field(default=4, ge=1, description="Absolute token lifetime")
    bcrypt_rounds: int = Field(default=10, ge=4, le=31, description="bcrypt work factor")
    seed_secret: str = Field(
        default="seed_secret_default",
        description="Shared secret guarding the destructive /seed endpoint",
    )

    # ===========================================
    # RESULT LIMITS
    # ===========================================
    list_limit: int = Field(default=200, ge=1, description="Cap on list endpoints")
    recommend_limit: int = Field(default=6, ge=1, description="Cap per recommendation list")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
