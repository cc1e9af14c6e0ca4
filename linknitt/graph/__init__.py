# Graph module for the campus graph
"""
Graph layer for linknitt including:
- Neo4jClient: async driver wrapper with per-statement sessions
- SchemaManager: constraints and indexes backing node identity
- DomainStore: one method per graph operation, with Neo4j and in-memory
  implementations
"""

from linknitt.graph.exceptions import (
    GraphConnectionError,
    GraphQueryError,
    GraphStoreError,
)
from linknitt.graph.memory import InMemoryDomainStore
from linknitt.graph.neo4j_client import Neo4jClient, Neo4jClientProtocol
from linknitt.graph.schema import NodeLabels, RelationshipLabels, Role, SchemaManager
from linknitt.graph.store import DomainStore, Neo4jDomainStore

__all__ = [
    # Exceptions
    "GraphStoreError",
    "GraphConnectionError",
    "GraphQueryError",
    # Client
    "Neo4jClient",
    "Neo4jClientProtocol",
    # Schema
    "NodeLabels",
    "RelationshipLabels",
    "Role",
    "SchemaManager",
    # Stores
    "DomainStore",
    "Neo4jDomainStore",
    "InMemoryDomainStore",
]
