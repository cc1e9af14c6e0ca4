"""
Graph schema for the campus graph.

Provides:
- Node label definitions (User, Item, Job, Mentorship)
- Relationship type definitions (SELLS, BOUGHT, POSTED, APPLIES, ...)
- User roles
- SchemaManager for the constraints and indexes backing node identity

Identity rules:
- User is identified by email, Item by name (both unique constraints)
- Job has no uniqueness; title is only indexed for lookups
- Mentorship has no identity of its own and is reached via its owner
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# =============================================================================
# Node Label Definitions
# =============================================================================


class NodeLabels:
    """Node label constants for the graph schema."""

    USER = "User"
    ITEM = "Item"
    JOB = "Job"
    MENTORSHIP = "Mentorship"


# =============================================================================
# Relationship Label Definitions
# =============================================================================


class RelationshipLabels:
    """Relationship type constants for the graph schema.

    - SELLS: User offers an Item (merged per pair)
    - BOUGHT: User purchased an Item (merged per pair)
    - POSTED: User created a Job
    - APPLIES: User applied to a Job (merged per pair, carries appliedAt)
    - MENTORS: User owns a Mentorship offer (created per offer)
    - REQUESTS_MENTORSHIP: User asks a faculty User (merged per pair + topic)
    - CONNECTED_WITH: acquaintance edge, matched in either direction
    """

    SELLS = "SELLS"
    BOUGHT = "BOUGHT"
    POSTED = "POSTED"
    APPLIES = "APPLIES"
    MENTORS = "MENTORS"
    REQUESTS_MENTORSHIP = "REQUESTS_MENTORSHIP"
    CONNECTED_WITH = "CONNECTED_WITH"


class Role(str, Enum):
    """Roles a User can hold."""

    FACULTY = "Faculty"
    STUDENT = "Student"
    ALUMNI = "Alumni"
    STAFF = "Staff"


# =============================================================================
# Schema Manager Class
# =============================================================================


EXPECTED_CONSTRAINTS = frozenset(
    {
        "constraint_user_email",
        "constraint_item_name",
    }
)


class SchemaManager:
    """Manages Neo4j schema operations.

    Usage:
        manager = SchemaManager(client=neo4j_client)
        await manager.init_schema()
    """

    def __init__(self, client: Any) -> None:
        """Initialize schema manager.

        Args:
            client: Neo4j client exposing query() and execute_write()
        """
        self._client = client

    async def create_user_constraints(self) -> None:
        """Create unique constraint on User.email."""
        cypher = """
        CREATE CONSTRAINT constraint_user_email IF NOT EXISTS
        FOR (u:User) REQUIRE u.email IS UNIQUE
        """
        await self._client.execute_write(cypher)

    async def create_item_constraints(self) -> None:
        """Create unique constraint on Item.name."""
        cypher = """
        CREATE CONSTRAINT constraint_item_name IF NOT EXISTS
        FOR (i:Item) REQUIRE i.name IS UNIQUE
        """
        await self._client.execute_write(cypher)

    async def create_job_indexes(self) -> None:
        """Create index on Job.title for apply lookups."""
        cypher = """
        CREATE INDEX index_job_title IF NOT EXISTS
        FOR (j:Job) ON (j.title)
        """
        await self._client.execute_write(cypher)

    async def init_schema(self) -> None:
        """Create all constraints and indexes.

        Safe to run multiple times (uses IF NOT EXISTS).
        """
        await self.create_user_constraints()
        await self.create_item_constraints()
        await self.create_job_indexes()

    async def get_existing_constraints(self) -> list[dict[str, Any]]:
        """Get list of existing constraints."""
        return await self._client.query("SHOW CONSTRAINTS")

    async def validate_schema(self) -> dict[str, Any]:
        """Validate the current schema.

        Returns:
            dict with validation status and any missing constraint names
        """
        constraints = await self.get_existing_constraints()
        existing = {c.get("name", "") for c in constraints}
        missing = sorted(EXPECTED_CONSTRAINTS - existing)
        return {
            "is_valid": not missing,
            "constraints": constraints,
            "missing_constraints": missing,
        }
