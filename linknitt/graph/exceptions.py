"""
Custom exceptions for the graph store layer.

Names avoid shadowing Python builtins (ConnectionError, TimeoutError).
"""

from __future__ import annotations


class GraphStoreError(Exception):
    """Base exception for all graph store failures."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """Initialize with message and optional cause.

        Args:
            message: Human-readable error description
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.cause = cause


class GraphConnectionError(GraphStoreError):
    """Raised when the graph database is unreachable or not connected."""


class GraphQueryError(GraphStoreError):
    """Raised when a Cypher statement fails.

    This includes syntax errors, constraint violations,
    and failed write transactions.
    """

    def __init__(
        self,
        message: str,
        query: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with message, failed query, and optional cause.

        Args:
            message: Human-readable error description
            query: The Cypher query that failed
            cause: Original exception that caused this error
        """
        super().__init__(message, cause=cause)
        self.query = query
