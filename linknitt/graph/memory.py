"""
In-memory DomainStore.

Nodes are dicts keyed by their identity (User.email, Item.name) or by a
sequence number (Job, Mentorship). Relationships are dicts keyed by their
merge key, so merged edges collapse and created edges do not. Iteration
follows insertion order, which stands in for Neo4j's unordered results.

Used by the test suite and by GRAPH_BACKEND=memory for local development.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from linknitt.graph.schema import Role

if TYPE_CHECKING:
    from linknitt.domain.seed import SeedDataset


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDomainStore:
    """DomainStore holding the graph in process memory.

    Usage:
        store = InMemoryDomainStore()
        await store.upsert_user(name="Priya", email="priya@nitt.edu",
                                password=digest, role="Student", dept="ECE")
        await store.buy_item("priya@nitt.edu", "Algorithms Textbook")
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = asyncio.Lock()
        self._seq = itertools.count(1)
        self._clear()

    def _clear(self) -> None:
        self.users: dict[str, dict[str, Any]] = {}
        self.items: dict[str, dict[str, Any]] = {}
        self.jobs: dict[int, dict[str, Any]] = {}
        self.mentorships: dict[int, dict[str, Any]] = {}
        # Relationships, keyed by merge key
        self.sells: dict[tuple[str, str], dict[str, Any]] = {}
        self.bought: dict[tuple[str, str], dict[str, Any]] = {}
        self.posted: dict[int, str] = {}
        self.applies: dict[tuple[str, int], dict[str, Any]] = {}
        self.mentors: dict[int, str] = {}
        self.mentorship_requests: dict[tuple[str, str, str], dict[str, Any]] = {}
        self.connections: dict[tuple[str, str], dict[str, Any]] = {}

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def upsert_user(
        self, *, name: str, email: str, password: str, role: str, dept: str | None
    ) -> None:
        async with self._lock:
            user = self.users.setdefault(email, {"email": email})
            user.update(name=name, password=password, role=role, dept=dept)

    async def get_user(self, email: str) -> dict[str, Any] | None:
        user = self.users.get(email)
        if user is None:
            return None
        return {
            "name": user.get("name"),
            "email": user["email"],
            "password": user.get("password"),
            "role": user.get("role"),
            "dept": user.get("dept"),
        }

    async def list_users(self, limit: int) -> list[dict[str, Any]]:
        return [
            {
                "name": u.get("name"),
                "email": u["email"],
                "role": u.get("role"),
                "dept": u.get("dept"),
            }
            for u in itertools.islice(self.users.values(), limit)
        ]

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    async def add_item(self, email: str, item: str) -> bool:
        async with self._lock:
            if email not in self.users:
                return False
            self.items.setdefault(item, {"name": item})
            self.sells.setdefault((email, item), {})
            return True

    async def list_items(self, limit: int) -> list[dict[str, Any]]:
        seen: dict[tuple[Any, str], None] = {}
        for email, item in self.sells:
            seen.setdefault((self.users[email].get("name"), item), None)
        pairs = itertools.islice(seen, limit)
        return [{"seller": seller, "item": item} for seller, item in pairs]

    async def buy_item(self, email: str, item: str) -> bool:
        async with self._lock:
            if email not in self.users or item not in self.items:
                return False
            self.bought.setdefault((email, item), {})
            return True

    # -------------------------------------------------------------------------
    # Jobs
    # -------------------------------------------------------------------------

    async def post_job(self, email: str, title: str, desc: str) -> bool:
        async with self._lock:
            if email not in self.users:
                return False
            job_id = next(self._seq)
            self.jobs[job_id] = {"title": title, "desc": desc, "postedAt": self._clock()}
            self.posted[job_id] = email
            return True

    async def list_jobs(self, limit: int) -> list[dict[str, Any]]:
        ordered = sorted(
            self.posted.items(),
            key=lambda entry: (self.jobs[entry[0]]["postedAt"], entry[0]),
            reverse=True,
        )
        return [
            {
                "title": self.jobs[job_id]["title"],
                "desc": self.jobs[job_id]["desc"],
                "poster": self.users[email].get("name"),
                "postedAt": self.jobs[job_id]["postedAt"].isoformat(),
            }
            for job_id, email in ordered[:limit]
        ]

    def _earliest_job(self, title: str) -> int | None:
        matches = [job_id for job_id, job in self.jobs.items() if job["title"] == title]
        if not matches:
            return None
        return min(matches, key=lambda job_id: (self.jobs[job_id]["postedAt"], job_id))

    async def apply_to_job(self, email: str, title: str) -> bool:
        async with self._lock:
            job_id = self._earliest_job(title)
            if email not in self.users or job_id is None:
                return False
            self.applies.setdefault((email, job_id), {"appliedAt": self._clock()})
            return True

    # -------------------------------------------------------------------------
    # Mentorship
    # -------------------------------------------------------------------------

    async def offer_mentorship(self, email: str, topic: str, note: str, capacity: int) -> bool:
        async with self._lock:
            if email not in self.users:
                return False
            offer_id = next(self._seq)
            self.mentorships[offer_id] = {"topic": topic, "note": note, "capacity": capacity}
            self.mentors[offer_id] = email
            return True

    async def request_mentorship(self, student_email: str, faculty_email: str, topic: str) -> bool:
        async with self._lock:
            faculty = self.users.get(faculty_email)
            if student_email not in self.users or faculty is None:
                return False
            if faculty.get("role") != Role.FACULTY.value:
                return False
            self.mentorship_requests.setdefault(
                (student_email, faculty_email, topic),
                {"topic": topic, "when": self._clock()},
            )
            return True

    async def list_mentors(self, limit: int) -> list[dict[str, Any]]:
        faculty = [u for u in self.users.values() if u.get("role") == Role.FACULTY.value]
        mentors = []
        for user in faculty[:limit]:
            offers = [
                self.mentorships[offer_id]
                for offer_id, owner in self.mentors.items()
                if owner == user["email"]
            ]
            mentors.append(
                {
                    "name": user.get("name"),
                    "email": user["email"],
                    "topics": [o["topic"] for o in offers if o.get("topic") is not None],
                    "notes": [o["note"] for o in offers if o.get("note") is not None],
                }
            )
        return mentors

    # -------------------------------------------------------------------------
    # Recommendations
    # -------------------------------------------------------------------------

    def _purchases_of(self, email: str) -> list[str]:
        return [item for buyer, item in self.bought if buyer == email]

    async def co_purchase_items(self, email: str, limit: int) -> list[str]:
        mine = self._purchases_of(email)
        owned = set(mine)
        found: dict[str, None] = {}
        for shared in mine:
            others = [buyer for buyer, item in self.bought if item == shared and buyer != email]
            for other in others:
                for rec in self._purchases_of(other):
                    if rec not in owned:
                        found.setdefault(rec, None)
        return list(found)[:limit]

    async def popular_items(self, limit: int) -> list[str]:
        counts: dict[str, int] = {}
        for _, item in self.bought:
            counts[item] = counts.get(item, 0) + 1
        ranked = sorted(counts.items(), key=lambda entry: (-entry[1], entry[0]))
        return [item for item, _ in ranked[:limit]]

    async def department_mentors(self, email: str, limit: int) -> list[str]:
        user = self.users.get(email)
        if user is None or user.get("dept") is None:
            return []
        names: dict[str, None] = {}
        for other in self.users.values():
            if other.get("role") == Role.FACULTY.value and other.get("dept") == user["dept"]:
                if other.get("name"):
                    names.setdefault(other["name"], None)
        return list(names)[:limit]

    def _connected(self, a: str, b: str) -> bool:
        return (a, b) in self.connections or (b, a) in self.connections

    async def related_jobs(self, email: str, limit: int) -> list[str]:
        user = self.users.get(email)
        if user is None:
            return []
        titles: dict[str, None] = {}
        for job_id, poster_email in self.posted.items():
            poster = self.users[poster_email]
            same_dept = user.get("dept") is not None and poster.get("dept") == user.get("dept")
            if same_dept or self._connected(email, poster_email):
                titles.setdefault(self.jobs[job_id]["title"], None)
        return list(titles)[:limit]

    # -------------------------------------------------------------------------
    # Seed / reset
    # -------------------------------------------------------------------------

    async def reset(self) -> None:
        async with self._lock:
            self._clear()

    async def load_dataset(self, dataset: SeedDataset) -> None:
        for user in dataset.users:
            await self.upsert_user(
                name=user.name,
                email=user.email,
                password=user.password,
                role=user.role,
                dept=user.dept,
            )
        for item in dataset.items:
            self.items.setdefault(item, {"name": item})
        for email, item in dataset.sells:
            await self.add_item(email, item)
        for job in dataset.jobs:
            await self.post_job(job.poster, job.title, job.desc)
        for email, title in dataset.applications:
            await self.apply_to_job(email, title)
        for offer in dataset.mentorships:
            await self.offer_mentorship(offer.email, offer.topic, offer.note, offer.capacity)
        for request in dataset.mentorship_requests:
            await self.request_mentorship(
                request.student_email, request.faculty_email, request.topic
            )
        for email, other in dataset.connections:
            if email in self.users and other in self.users:
                self.connections.setdefault((email, other), {})
        for purchase in dataset.purchases:
            if await self.buy_item(purchase.email, purchase.item):
                self.bought[(purchase.email, purchase.item)].update(
                    when=self._clock(), qty=purchase.qty
                )

    async def health_check(self) -> bool:
        return True
