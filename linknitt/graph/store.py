"""
Domain store: one method per graph operation.

DomainStore is the seam between the domain service and persistence. The
Neo4j implementation issues exactly one parameterized statement per method
call (seed loading aside), through a client that scopes a session to that
statement.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from linknitt.graph import queries

if TYPE_CHECKING:
    from linknitt.domain.seed import SeedDataset
    from linknitt.graph.neo4j_client import Neo4jClientProtocol

logger = logging.getLogger(__name__)


@runtime_checkable
class DomainStore(Protocol):
    """Protocol for the campus graph store.

    Link methods (add_item, buy_item, apply_to_job, ...) return True when an
    edge was matched or written and False when an endpoint is missing; a
    missing endpoint is never an error.
    """

    async def upsert_user(
        self, *, name: str, email: str, password: str, role: str, dept: str | None
    ) -> None: ...

    async def get_user(self, email: str) -> dict[str, Any] | None: ...

    async def list_users(self, limit: int) -> list[dict[str, Any]]: ...

    async def add_item(self, email: str, item: str) -> bool: ...

    async def list_items(self, limit: int) -> list[dict[str, Any]]: ...

    async def buy_item(self, email: str, item: str) -> bool: ...

    async def post_job(self, email: str, title: str, desc: str) -> bool: ...

    async def list_jobs(self, limit: int) -> list[dict[str, Any]]: ...

    async def apply_to_job(self, email: str, title: str) -> bool: ...

    async def offer_mentorship(
        self, email: str, topic: str, note: str, capacity: int
    ) -> bool: ...

    async def request_mentorship(
        self, student_email: str, faculty_email: str, topic: str
    ) -> bool: ...

    async def list_mentors(self, limit: int) -> list[dict[str, Any]]: ...

    async def co_purchase_items(self, email: str, limit: int) -> list[str]: ...

    async def popular_items(self, limit: int) -> list[str]: ...

    async def department_mentors(self, email: str, limit: int) -> list[str]: ...

    async def related_jobs(self, email: str, limit: int) -> list[str]: ...

    async def reset(self) -> None: ...

    async def load_dataset(self, dataset: SeedDataset) -> None: ...

    async def health_check(self) -> bool: ...


def _linked(rows: list[dict[str, Any]]) -> bool:
    return bool(rows) and rows[0].get("linked", 0) > 0


class Neo4jDomainStore:
    """DomainStore backed by Neo4j through a Neo4jClient."""

    def __init__(self, client: Neo4jClientProtocol) -> None:
        self._client = client

    @property
    def client(self) -> Neo4jClientProtocol:
        return self._client

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def upsert_user(
        self, *, name: str, email: str, password: str, role: str, dept: str | None
    ) -> None:
        await self._client.execute_write(
            queries.UPSERT_USER,
            {"name": name, "email": email, "password": password, "role": role, "dept": dept},
        )

    async def get_user(self, email: str) -> dict[str, Any] | None:
        rows = await self._client.query(queries.GET_USER, {"email": email})
        return rows[0] if rows else None

    async def list_users(self, limit: int) -> list[dict[str, Any]]:
        return await self._client.query(queries.LIST_USERS, {"limit": limit})

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    async def add_item(self, email: str, item: str) -> bool:
        rows = await self._client.execute_write(queries.ADD_ITEM, {"email": email, "item": item})
        return _linked(rows)

    async def list_items(self, limit: int) -> list[dict[str, Any]]:
        return await self._client.query(queries.LIST_ITEMS, {"limit": limit})

    async def buy_item(self, email: str, item: str) -> bool:
        rows = await self._client.execute_write(queries.BUY_ITEM, {"email": email, "item": item})
        return _linked(rows)

    # -------------------------------------------------------------------------
    # Jobs
    # -------------------------------------------------------------------------

    async def post_job(self, email: str, title: str, desc: str) -> bool:
        rows = await self._client.execute_write(
            queries.POST_JOB, {"email": email, "title": title, "desc": desc}
        )
        return _linked(rows)

    async def list_jobs(self, limit: int) -> list[dict[str, Any]]:
        return await self._client.query(queries.LIST_JOBS, {"limit": limit})

    async def apply_to_job(self, email: str, title: str) -> bool:
        rows = await self._client.execute_write(
            queries.APPLY_TO_JOB, {"email": email, "title": title}
        )
        return _linked(rows)

    # -------------------------------------------------------------------------
    # Mentorship
    # -------------------------------------------------------------------------

    async def offer_mentorship(self, email: str, topic: str, note: str, capacity: int) -> bool:
        rows = await self._client.execute_write(
            queries.OFFER_MENTORSHIP,
            {"email": email, "topic": topic, "note": note, "capacity": capacity},
        )
        return _linked(rows)

    async def request_mentorship(self, student_email: str, faculty_email: str, topic: str) -> bool:
        rows = await self._client.execute_write(
            queries.REQUEST_MENTORSHIP,
            {"studentEmail": student_email, "facultyEmail": faculty_email, "topic": topic},
        )
        return _linked(rows)

    async def list_mentors(self, limit: int) -> list[dict[str, Any]]:
        rows = await self._client.query(queries.LIST_MENTORS, {"limit": limit})
        return [
            {
                "name": row.get("name"),
                "email": row.get("email"),
                "topics": row.get("topics") or [],
                "notes": row.get("notes") or [],
            }
            for row in rows
        ]

    # -------------------------------------------------------------------------
    # Recommendations
    # -------------------------------------------------------------------------

    async def co_purchase_items(self, email: str, limit: int) -> list[str]:
        rows = await self._client.query(
            queries.CO_PURCHASE_ITEMS, {"email": email, "limit": limit}
        )
        return [r["recommendation"] for r in rows if r.get("recommendation")]

    async def popular_items(self, limit: int) -> list[str]:
        rows = await self._client.query(queries.POPULAR_ITEMS, {"limit": limit})
        return [r["recommendation"] for r in rows if r.get("recommendation")]

    async def department_mentors(self, email: str, limit: int) -> list[str]:
        rows = await self._client.query(
            queries.DEPARTMENT_MENTORS, {"email": email, "limit": limit}
        )
        return [r["mentor"] for r in rows if r.get("mentor")]

    async def related_jobs(self, email: str, limit: int) -> list[str]:
        rows = await self._client.query(queries.RELATED_JOBS, {"email": email, "limit": limit})
        return [r["job"] for r in rows if r.get("job")]

    # -------------------------------------------------------------------------
    # Seed / reset
    # -------------------------------------------------------------------------

    async def reset(self) -> None:
        await self._client.execute_write(queries.DELETE_EVERYTHING)

    async def load_dataset(self, dataset: SeedDataset) -> None:
        """Write the dataset statement by statement.

        There is no enclosing transaction: a failure part-way leaves the
        statements already executed in place.
        """
        write = self._client.execute_write
        for user in dataset.users:
            await write(
                queries.SEED_USER,
                {
                    "name": user.name,
                    "email": user.email,
                    "role": user.role,
                    "dept": user.dept,
                    "password": user.password,
                },
            )
        for item in dataset.items:
            await write(queries.SEED_ITEM, {"name": item})
        for email, item in dataset.sells:
            await write(queries.SEED_SELLS, {"email": email, "item": item})
        for job in dataset.jobs:
            await write(
                queries.SEED_JOB, {"poster": job.poster, "title": job.title, "desc": job.desc}
            )
        for email, title in dataset.applications:
            await write(queries.APPLY_TO_JOB, {"email": email, "title": title})
        for offer in dataset.mentorships:
            await write(
                queries.OFFER_MENTORSHIP,
                {
                    "email": offer.email,
                    "topic": offer.topic,
                    "note": offer.note,
                    "capacity": offer.capacity,
                },
            )
        for request in dataset.mentorship_requests:
            await write(
                queries.REQUEST_MENTORSHIP,
                {
                    "studentEmail": request.student_email,
                    "facultyEmail": request.faculty_email,
                    "topic": request.topic,
                },
            )
        for email, other in dataset.connections:
            await write(queries.SEED_CONNECTED, {"email": email, "other": other})
        for purchase in dataset.purchases:
            await write(
                queries.SEED_BOUGHT,
                {"email": purchase.email, "item": purchase.item, "qty": purchase.qty},
            )
        logger.info(
            "Loaded seed dataset: %d users, %d items, %d jobs",
            len(dataset.users),
            len(dataset.items),
            len(dataset.jobs),
        )

    async def health_check(self) -> bool:
        return await self._client.health_check()
