"""
Campus domain operations.

CampusService implements one method per use case. Each method follows the
same shape:

1. validate required inputs (InvalidInput)
2. check the caller's role where the operation is role-gated (Forbidden)
3. run the store operation
4. map store failures to Unavailable with the operation's message, logging
   the underlying error

Link operations (buy, apply, request mentorship) succeed even when the
referenced item, job or faculty member does not exist; nothing is written in
that case.
"""

from __future__ import annotations

import asyncio
import hmac
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from linknitt.auth.passwords import PasswordHasher
from linknitt.auth.tokens import Identity, TokenService
from linknitt.domain.errors import (
    Forbidden,
    InvalidCredentials,
    InvalidInput,
    NotFound,
    Unavailable,
)
from linknitt.domain.seed import build_demo_dataset
from linknitt.graph.exceptions import GraphStoreError
from linknitt.graph.schema import Role
from linknitt.graph.store import DomainStore

logger = logging.getLogger(__name__)

VALID_ROLES = frozenset(role.value for role in Role)


def _require(**fields: Any) -> None:
    """Raise InvalidInput when any field is None or blank."""
    for value in fields.values():
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidInput()


def _require_role(identity: Identity, role: Role, message: str) -> None:
    if identity.role != role.value:
        raise Forbidden(message)


def _coerce_capacity(capacity: Any) -> int:
    """Missing, empty or zero capacity means 1; anything else must be a positive int."""
    if capacity in (None, "", 0, "0"):
        return 1
    try:
        value = int(capacity)
    except (TypeError, ValueError) as e:
        raise InvalidInput("Capacity must be a number") from e
    if value < 1:
        raise InvalidInput("Capacity must be at least 1")
    return value


@asynccontextmanager
async def _store_errors(message: str) -> AsyncIterator[None]:
    try:
        yield
    except GraphStoreError as e:
        logger.exception("%s: %s", message, e)
        raise Unavailable(message) from e


class CampusService:
    """Marketplace, job board and mentorship operations over a DomainStore."""

    def __init__(
        self,
        store: DomainStore,
        hasher: PasswordHasher,
        tokens: TokenService,
        *,
        seed_secret: str,
        list_limit: int = 200,
        recommend_limit: int = 6,
    ) -> None:
        self._store = store
        self._hasher = hasher
        self._tokens = tokens
        self._seed_secret = seed_secret
        self._list_limit = list_limit
        self._recommend_limit = recommend_limit

    @property
    def store(self) -> DomainStore:
        return self._store

    async def _hash_password(self, password: str) -> str:
        """Hash off the event loop; bcrypt blocks for the whole work factor."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._hasher.hash, password)
        except ValueError as e:
            raise InvalidInput("Password contains unsupported characters") from e

    async def _verify_password(self, password: str, digest: str | None) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._hasher.verify, password, digest)

    # =========================================================================
    # Auth
    # =========================================================================

    async def register(
        self,
        *,
        name: str | None,
        email: str | None,
        password: str | None,
        role: str | None,
        dept: str | None = None,
    ) -> dict[str, str]:
        """Create or overwrite the user with this email.

        Re-registering an existing email replaces every field; there is no
        conflict error.
        """
        _require(name=name, email=email, password=password, role=role)
        if role not in VALID_ROLES:
            raise InvalidInput(f"Role must be one of {', '.join(sorted(VALID_ROLES))}")

        digest = await self._hash_password(password)
        async with _store_errors("Registration failed"):
            await self._store.upsert_user(
                name=name, email=email, password=digest, role=role, dept=dept or None
            )
        logger.info("Registered user %s as %s", email, role)
        return {"message": "User registered successfully"}

    async def login(self, *, email: str | None, password: str | None) -> dict[str, Any]:
        """Check credentials and issue a token."""
        _require(email=email, password=password)

        async with _store_errors("Login failed"):
            user = await self._store.get_user(email)
        if user is None:
            raise NotFound("User not found")
        if not await self._verify_password(password, user.get("password")):
            raise InvalidCredentials("Invalid password")

        identity = Identity(
            email=user["email"],
            role=user["role"],
            name=user.get("name"),
            dept=user.get("dept") or None,
        )
        token = self._tokens.issue(identity)
        return {"token": token, "user": identity.to_claims()}

    def authenticate(self, token: str | None) -> Identity:
        """Resolve a bearer token into an Identity."""
        return self._tokens.validate(token)

    # =========================================================================
    # Items
    # =========================================================================

    async def add_item(self, identity: Identity, item: str | None) -> dict[str, str]:
        _require(item=item)
        _require_role(identity, Role.FACULTY, "Only Faculty can add items")
        async with _store_errors("Add item failed"):
            await self._store.add_item(identity.email, item)
        return {"message": "Item added"}

    async def list_items(self) -> list[dict[str, Any]]:
        async with _store_errors("Get items failed"):
            return await self._store.list_items(self._list_limit)

    async def buy(self, identity: Identity, item: str | None) -> dict[str, str]:
        _require(item=item)
        _require_role(identity, Role.STUDENT, "Only Students can buy")
        async with _store_errors("Buy failed"):
            linked = await self._store.buy_item(identity.email, item)
        if not linked:
            logger.info("Buy by %s matched no item named %r", identity.email, item)
        return {"message": "Item bought"}

    # =========================================================================
    # Jobs
    # =========================================================================

    async def post_job(
        self, identity: Identity, title: str | None, desc: str | None
    ) -> dict[str, str]:
        _require(title=title)
        _require_role(identity, Role.FACULTY, "Only Faculty can post jobs")
        async with _store_errors("Post job failed"):
            await self._store.post_job(identity.email, title, desc or "")
        return {"message": "Job posted"}

    async def list_jobs(self) -> list[dict[str, Any]]:
        async with _store_errors("Get jobs failed"):
            return await self._store.list_jobs(self._list_limit)

    async def apply_to_job(self, identity: Identity, title: str | None) -> dict[str, str]:
        _require(title=title)
        _require_role(identity, Role.STUDENT, "Only Students can apply")
        async with _store_errors("Apply failed"):
            linked = await self._store.apply_to_job(identity.email, title)
        if not linked:
            logger.info("Application by %s matched no job titled %r", identity.email, title)
        return {"message": "Applied to job"}

    # =========================================================================
    # Mentorship
    # =========================================================================

    async def offer_mentorship(
        self,
        identity: Identity,
        topic: str | None,
        note: str | None,
        capacity: Any = None,
    ) -> dict[str, str]:
        _require(topic=topic)
        _require_role(identity, Role.FACULTY, "Only Faculty can offer mentorship")
        seats = _coerce_capacity(capacity)
        async with _store_errors("Offer failed"):
            await self._store.offer_mentorship(identity.email, topic, note or "", seats)
        return {"message": "Mentorship offered"}

    async def request_mentorship(
        self, identity: Identity, faculty_email: str | None, topic: str | None
    ) -> dict[str, str]:
        _require(facultyEmail=faculty_email, topic=topic)
        _require_role(identity, Role.STUDENT, "Only Students can request mentorship")
        async with _store_errors("Request failed"):
            linked = await self._store.request_mentorship(identity.email, faculty_email, topic)
        if not linked:
            logger.info(
                "Mentorship request by %s matched no faculty %s", identity.email, faculty_email
            )
        return {"message": "Mentorship requested"}

    async def list_mentors(self) -> list[dict[str, Any]]:
        async with _store_errors("Get mentors failed"):
            return await self._store.list_mentors(self._list_limit)

    # =========================================================================
    # Recommendations
    # =========================================================================

    async def recommend(self, identity: Identity) -> dict[str, list[str]]:
        """Items, mentors and jobs for the caller.

        Items come from co-purchases, falling back to the most bought items
        overall when there are none. Mentors are faculty in the caller's
        department. Jobs are posted by someone in the caller's department or
        connected to the caller.
        """
        limit = self._recommend_limit
        async with _store_errors("Recommend failed"):
            items = await self._store.co_purchase_items(identity.email, limit)
            if not items:
                items = await self._store.popular_items(limit)
            mentors = await self._store.department_mentors(identity.email, limit)
            jobs = await self._store.related_jobs(identity.email, limit)
        return {"items": items, "mentors": mentors, "jobs": jobs}

    # =========================================================================
    # Users and administration
    # =========================================================================

    async def list_users(self) -> list[dict[str, Any]]:
        async with _store_errors("Get users failed"):
            return await self._store.list_users(self._list_limit)

    async def seed(self, secret: str | None) -> dict[str, str]:
        """Wipe the store and load the demo dataset.

        Guarded only by the shared seed secret. The wipe and the load are
        separate statements; a failure part-way leaves a partial graph.
        """
        if not secret or not hmac.compare_digest(
            secret.encode("utf-8"), self._seed_secret.encode("utf-8")
        ):
            raise Forbidden("Forbidden")

        loop = asyncio.get_running_loop()
        dataset = await loop.run_in_executor(None, build_demo_dataset, self._hasher.hash)
        async with _store_errors("Seed failed"):
            await self._store.reset()
            await self._store.load_dataset(dataset)
        logger.warning("Store reset and reseeded with demo data")
        return {"message": "Seeded demo data"}
