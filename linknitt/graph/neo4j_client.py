"""
Neo4j client module.

Wraps a single async driver (the driver pools connections internally) and
opens a fresh, scoped session for every statement. The session is released on
every exit path, including query failure and task cancellation.

This module provides:
- Neo4jClientProtocol: the interface the domain store depends on
- Neo4jClient: real client for production use
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from neo4j import AsyncGraphDatabase
from neo4j.exceptions import ClientError, ServiceUnavailable

from linknitt.graph.exceptions import GraphConnectionError, GraphQueryError

if TYPE_CHECKING:
    from neo4j import AsyncDriver

logger = logging.getLogger(__name__)


@runtime_checkable
class Neo4jClientProtocol(Protocol):
    """Protocol defining the Neo4jClient interface."""

    @property
    def is_connected(self) -> bool:
        """Whether a driver is open."""
        ...

    async def connect(self) -> None:
        """Connect to Neo4j."""
        ...

    async def close(self) -> None:
        """Close connection."""
        ...

    async def query(
        self,
        cypher: str,
        parameters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute read query."""
        ...

    async def execute_write(
        self,
        cypher: str,
        parameters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute write query."""
        ...

    async def health_check(self) -> bool:
        """Check if the database is reachable."""
        ...


class Neo4jClient:
    """Neo4j client with one shared driver and per-statement sessions.

    Usage:
        async with Neo4jClient(settings=settings) as client:
            rows = await client.query("MATCH (u:User) RETURN u.name AS name")

        client = Neo4jClient(settings=settings)
        await client.connect()
        await client.execute_write("MERGE (i:Item {name: $name})", {"name": "Pen"})
        await client.close()
    """

    def __init__(self, settings: Any) -> None:
        """Initialize client with Settings object.

        Args:
            settings: Settings object with neo4j_uri, neo4j_user,
                      neo4j_password, neo4j_database attributes

        Note:
            Driver is NOT created here - uses lazy initialization.
            Call connect() or use as async context manager.
        """
        self._settings = settings
        self._uri = settings.neo4j_uri
        self._user = settings.neo4j_user
        self._password = settings.neo4j_password
        self._database = settings.neo4j_database
        self._driver: AsyncDriver | None = None

    @property
    def uri(self) -> str | None:
        """Get the connection URI."""
        return self._uri

    @property
    def database(self) -> str:
        """Get the database name."""
        return self._database

    @property
    def is_connected(self) -> bool:
        """Check if driver is initialized."""
        return self._driver is not None

    async def connect(self) -> None:
        """Create driver and verify connectivity.

        Raises:
            GraphConnectionError: If no URI is configured or the server
                cannot be reached.
        """
        if not self._uri:
            raise GraphConnectionError("NEO4J_URI is not set")

        try:
            self._driver = AsyncGraphDatabase.driver(
                self._uri,
                auth=(self._user, self._password),
            )
            await self._driver.verify_connectivity()
        except ServiceUnavailable as e:
            self._driver = None
            raise GraphConnectionError(
                f"Failed to connect to Neo4j at {self._uri}",
                cause=e,
            ) from e
        except Exception as e:
            self._driver = None
            raise GraphConnectionError(
                f"Unexpected error connecting to Neo4j: {e}",
                cause=e,
            ) from e
        logger.info("Connected to Neo4j at %s", self._uri)

    async def close(self) -> None:
        """Close the driver connection.

        Safe to call even if not connected (no-op).
        """
        if self._driver is not None:
            await self._driver.close()
            self._driver = None

    async def __aenter__(self) -> Neo4jClient:
        """Async context manager entry - connect to Neo4j."""
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit - close connection."""
        await self.close()

    def _ensure_connected(self) -> None:
        """Raise if not connected.

        Raises:
            GraphConnectionError: If driver is not initialized.
        """
        if self._driver is None:
            raise GraphConnectionError(
                "Not connected to Neo4j. Call connect() first or use async context manager."
            )

    async def query(
        self,
        cypher: str,
        parameters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute a read query and return results.

        Args:
            cypher: Cypher query string
            parameters: Optional query parameters

        Returns:
            List of records as dictionaries

        Raises:
            GraphConnectionError: If not connected
            GraphQueryError: If query execution fails
        """
        self._ensure_connected()
        assert self._driver is not None  # For type checker

        try:
            async with self._driver.session(database=self._database) as session:
                result = await session.run(cypher, parameters or {})
                return await result.data()
        except ClientError as e:
            raise GraphQueryError(f"Query failed: {e}", query=cypher, cause=e) from e
        except ServiceUnavailable as e:
            raise GraphConnectionError(f"Neo4j unavailable: {e}", cause=e) from e
        except Exception as e:
            raise GraphQueryError(
                f"Unexpected error executing query: {e}",
                query=cypher,
                cause=e,
            ) from e

    async def execute_write(
        self,
        cypher: str,
        parameters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute a write query in a managed transaction.

        Args:
            cypher: Cypher query string (CREATE, MERGE, DELETE, etc.)
            parameters: Optional query parameters

        Returns:
            List of records as dictionaries (if any)

        Raises:
            GraphConnectionError: If not connected
            GraphQueryError: If the transaction fails
        """
        self._ensure_connected()
        assert self._driver is not None  # For type checker

        async def _transaction_work(tx: Any) -> list[dict[str, Any]]:
            result = await tx.run(cypher, parameters or {})
            return await result.data()

        try:
            async with self._driver.session(database=self._database) as session:
                return await session.execute_write(_transaction_work)
        except ClientError as e:
            raise GraphQueryError(f"Transaction failed: {e}", query=cypher, cause=e) from e
        except ServiceUnavailable as e:
            raise GraphConnectionError(f"Neo4j unavailable: {e}", cause=e) from e
        except Exception as e:
            raise GraphQueryError(
                f"Unexpected error in transaction: {e}",
                query=cypher,
                cause=e,
            ) from e

    async def health_check(self) -> bool:
        """Return True when the driver exists and the server answers."""
        if self._driver is None:
            return False
        try:
            await self._driver.verify_connectivity()
        except Exception:
            logger.warning("Neo4j health check failed", exc_info=True)
            return False
        return True
