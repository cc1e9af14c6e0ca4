"""
Unit tests for CampusService.

Exercises the use cases directly against the in-memory store: input
validation, role gating, credential checks, recommendation fallback,
seeding, and mapping of store failures to Unavailable.
"""

from __future__ import annotations

import asyncio
import time

import pytest

from linknitt.auth import Identity, PasswordHasher, TokenService
from linknitt.domain.errors import (
    Forbidden,
    InvalidCredentials,
    InvalidInput,
    NotFound,
    Unavailable,
)
from linknitt.domain.service import CampusService, _coerce_capacity
from linknitt.graph.memory import InMemoryDomainStore
from tests.conftest import TEST_SEED_SECRET
from tests.fakes import FailingStore

MEENA = Identity(email="meena@nitt.edu", role="Faculty", name="Dr. Meena", dept="CSE")
PRIYA = Identity(email="priya@nitt.edu", role="Student", name="Priya", dept="ECE")


async def _register(service: CampusService, identity: Identity, password: str = "pw") -> None:
    await service.register(
        name=identity.name,
        email=identity.email,
        password=password,
        role=identity.role,
        dept=identity.dept,
    )


# =============================================================================
# Test: Register / Login
# =============================================================================


class TestRegistration:
    @pytest.mark.asyncio
    async def test_register_hashes_password(
        self, service: CampusService, store: InMemoryDomainStore
    ) -> None:
        result = await service.register(
            name="Priya", email="priya@nitt.edu", password="pw", role="Student", dept="ECE"
        )

        assert result == {"message": "User registered successfully"}
        assert store.users["priya@nitt.edu"]["password"] != "pw"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "missing", ["name", "email", "password", "role"]
    )
    async def test_register_missing_field(self, service: CampusService, missing: str) -> None:
        fields = {
            "name": "Priya",
            "email": "priya@nitt.edu",
            "password": "pw",
            "role": "Student",
        }
        fields[missing] = ""

        with pytest.raises(InvalidInput) as exc_info:
            await service.register(**fields)

        assert exc_info.value.message == "Missing fields"

    @pytest.mark.asyncio
    async def test_register_unknown_role(self, service: CampusService) -> None:
        with pytest.raises(InvalidInput):
            await service.register(
                name="Eve", email="eve@nitt.edu", password="pw", role="Admin"
            )

    @pytest.mark.asyncio
    async def test_reregister_overwrites(
        self, service: CampusService, store: InMemoryDomainStore
    ) -> None:
        await _register(service, PRIYA)
        await service.register(
            name="Priya", email="priya@nitt.edu", password="new", role="Alumni", dept=""
        )

        user = store.users["priya@nitt.edu"]
        assert user["role"] == "Alumni"
        assert user["dept"] is None
        with pytest.raises(InvalidCredentials):
            await service.login(email="priya@nitt.edu", password="pw")


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_issues_token(
        self, service: CampusService, tokens: TokenService
    ) -> None:
        await _register(service, MEENA)

        result = await service.login(email="meena@nitt.edu", password="pw")

        assert result["user"] == MEENA.to_claims()
        assert tokens.validate(result["token"]) == MEENA
        assert service.authenticate(result["token"]) == MEENA

    @pytest.mark.asyncio
    async def test_unknown_user(self, service: CampusService) -> None:
        with pytest.raises(NotFound) as exc_info:
            await service.login(email="ghost@nitt.edu", password="pw")

        assert exc_info.value.message == "User not found"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_wrong_password(self, service: CampusService) -> None:
        await _register(service, MEENA)

        with pytest.raises(InvalidCredentials) as exc_info:
            await service.login(email="meena@nitt.edu", password="nope")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_missing_credentials(self, service: CampusService) -> None:
        with pytest.raises(InvalidInput):
            await service.login(email="meena@nitt.edu", password=None)


# =============================================================================
# Test: Role gating
# =============================================================================


class TestRoleGating:
    @pytest.mark.asyncio
    async def test_student_cannot_add_item(self, service: CampusService) -> None:
        with pytest.raises(Forbidden) as exc_info:
            await service.add_item(PRIYA, "Pen")

        assert exc_info.value.message == "Only Faculty can add items"

    @pytest.mark.asyncio
    async def test_faculty_cannot_buy(self, service: CampusService) -> None:
        with pytest.raises(Forbidden, match="Only Students can buy"):
            await service.buy(MEENA, "Pen")

    @pytest.mark.asyncio
    async def test_student_cannot_post_job(self, service: CampusService) -> None:
        with pytest.raises(Forbidden, match="Only Faculty can post jobs"):
            await service.post_job(PRIYA, "X", "")

    @pytest.mark.asyncio
    async def test_faculty_cannot_apply(self, service: CampusService) -> None:
        with pytest.raises(Forbidden, match="Only Students can apply"):
            await service.apply_to_job(MEENA, "X")

    @pytest.mark.asyncio
    async def test_student_cannot_offer_mentorship(self, service: CampusService) -> None:
        with pytest.raises(Forbidden, match="Only Faculty can offer mentorship"):
            await service.offer_mentorship(PRIYA, "Algorithms", "")

    @pytest.mark.asyncio
    async def test_faculty_cannot_request_mentorship(self, service: CampusService) -> None:
        with pytest.raises(Forbidden, match="Only Students can request mentorship"):
            await service.request_mentorship(MEENA, "kumar@nitt.edu", "Algorithms")

    @pytest.mark.asyncio
    async def test_missing_input_checked_before_role(self, service: CampusService) -> None:
        with pytest.raises(InvalidInput):
            await service.add_item(PRIYA, "")


# =============================================================================
# Test: Marketplace, jobs and mentorship
# =============================================================================


class TestOperations:
    @pytest.mark.asyncio
    async def test_add_and_list_items(self, service: CampusService) -> None:
        await _register(service, MEENA)

        assert await service.add_item(MEENA, "Algorithms Textbook") == {"message": "Item added"}
        assert await service.list_items() == [
            {"seller": "Dr. Meena", "item": "Algorithms Textbook"}
        ]

    @pytest.mark.asyncio
    async def test_buy_missing_item_still_succeeds(
        self, service: CampusService, store: InMemoryDomainStore
    ) -> None:
        await _register(service, PRIYA)

        assert await service.buy(PRIYA, "Nonexistent Widget") == {"message": "Item bought"}
        assert store.bought == {}

    @pytest.mark.asyncio
    async def test_post_job_defaults_desc(self, service: CampusService) -> None:
        await _register(service, MEENA)

        await service.post_job(MEENA, "Club Design Project", None)

        (job,) = await service.list_jobs()
        assert job["desc"] == ""
        assert job["poster"] == "Dr. Meena"

    @pytest.mark.asyncio
    async def test_apply_to_job(
        self, service: CampusService, store: InMemoryDomainStore
    ) -> None:
        await _register(service, MEENA)
        await _register(service, PRIYA)
        await service.post_job(MEENA, "Club Design Project", "")

        assert await service.apply_to_job(PRIYA, "Club Design Project") == {
            "message": "Applied to job"
        }
        assert len(store.applies) == 1

    @pytest.mark.asyncio
    async def test_offer_and_list_mentors(self, service: CampusService) -> None:
        await _register(service, MEENA)

        await service.offer_mentorship(MEENA, "Algorithms", None, "3")

        (mentor,) = await service.list_mentors()
        assert mentor["topics"] == ["Algorithms"]
        assert mentor["notes"] == [""]

    @pytest.mark.asyncio
    async def test_request_mentorship(
        self, service: CampusService, store: InMemoryDomainStore
    ) -> None:
        await _register(service, MEENA)
        await _register(service, PRIYA)

        result = await service.request_mentorship(PRIYA, "meena@nitt.edu", "Algorithms")

        assert result == {"message": "Mentorship requested"}
        assert ("priya@nitt.edu", "meena@nitt.edu", "Algorithms") in store.mentorship_requests

    @pytest.mark.asyncio
    async def test_request_mentorship_requires_faculty_email(
        self, service: CampusService
    ) -> None:
        with pytest.raises(InvalidInput):
            await service.request_mentorship(PRIYA, None, "Algorithms")

    @pytest.mark.asyncio
    async def test_list_users_hides_passwords(self, service: CampusService) -> None:
        await _register(service, PRIYA)

        (user,) = await service.list_users()
        assert "password" not in user


class TestCapacity:
    @pytest.mark.parametrize("raw", [None, "", 0, "0"])
    def test_defaults_to_one(self, raw: object) -> None:
        assert _coerce_capacity(raw) == 1

    @pytest.mark.parametrize("raw,expected", [(3, 3), ("5", 5)])
    def test_numeric(self, raw: object, expected: int) -> None:
        assert _coerce_capacity(raw) == expected

    @pytest.mark.parametrize("raw", ["many", -2, "-1"])
    def test_invalid(self, raw: object) -> None:
        with pytest.raises(InvalidInput):
            _coerce_capacity(raw)


# =============================================================================
# Test: Recommendations
# =============================================================================


class TestRecommend:
    @pytest.mark.asyncio
    async def test_recommend_after_seed(self, service: CampusService) -> None:
        await service.seed(TEST_SEED_SECRET)

        result = await service.recommend(PRIYA)

        assert result == {
            "items": ["Discrete Math Book", "Samosa Pack"],
            "mentors": ["Prof. Kumar"],
            "jobs": ["Admin Event Management"],
        }

    @pytest.mark.asyncio
    async def test_falls_back_to_popular_items(self, service: CampusService) -> None:
        await service.seed(TEST_SEED_SECRET)

        result = await service.recommend(MEENA)

        assert result["items"][0] == "Algorithms Textbook"
        assert result["mentors"] == ["Dr. Meena"]

    @pytest.mark.asyncio
    async def test_empty_graph(self, service: CampusService) -> None:
        assert await service.recommend(PRIYA) == {"items": [], "mentors": [], "jobs": []}

    @pytest.mark.asyncio
    async def test_recommend_limit(
        self, store: InMemoryDomainStore, hasher: PasswordHasher, tokens: TokenService
    ) -> None:
        service = CampusService(
            store, hasher, tokens, seed_secret=TEST_SEED_SECRET, recommend_limit=1
        )
        await service.seed(TEST_SEED_SECRET)

        result = await service.recommend(PRIYA)

        assert result["items"] == ["Discrete Math Book"]


# =============================================================================
# Test: Seed
# =============================================================================


class TestSeed:
    @pytest.mark.asyncio
    async def test_seed_loads_demo_accounts(self, service: CampusService) -> None:
        assert await service.seed(TEST_SEED_SECRET) == {"message": "Seeded demo data"}

        result = await service.login(email="priya@nitt.edu", password="x")
        assert result["user"]["role"] == "Student"

    @pytest.mark.asyncio
    async def test_seed_wipes_existing_data(
        self, service: CampusService, store: InMemoryDomainStore
    ) -> None:
        await service.register(
            name="Temp", email="temp@nitt.edu", password="pw", role="Staff"
        )

        await service.seed(TEST_SEED_SECRET)

        assert "temp@nitt.edu" not in store.users

    @pytest.mark.asyncio
    @pytest.mark.parametrize("secret", [None, "", "wrong"])
    async def test_seed_rejects_bad_secret(
        self, service: CampusService, store: InMemoryDomainStore, secret: str | None
    ) -> None:
        await _register(service, PRIYA)

        with pytest.raises(Forbidden):
            await service.seed(secret)

        assert "priya@nitt.edu" in store.users


# =============================================================================
# Test: Password hashing off the event loop
# =============================================================================


class SlowHasher(PasswordHasher):
    """Hasher that blocks its thread for a fixed time per call."""

    def __init__(self, delay: float) -> None:
        super().__init__(rounds=4)
        self._delay = delay

    def hash(self, password: str) -> str:
        time.sleep(self._delay)
        return super().hash(password)

    def verify(self, password: str, digest: str | None) -> bool:
        time.sleep(self._delay)
        return super().verify(password, digest)


async def _count_ticks(stop: asyncio.Event) -> int:
    ticks = 0
    while not stop.is_set():
        await asyncio.sleep(0.005)
        ticks += 1
    return ticks


class TestHashingOffLoop:
    @pytest.fixture
    def slow_service(self, store: InMemoryDomainStore, tokens: TokenService) -> CampusService:
        return CampusService(store, SlowHasher(delay=0.05), tokens, seed_secret=TEST_SEED_SECRET)

    @pytest.mark.asyncio
    async def test_event_loop_keeps_running_during_seed(
        self, slow_service: CampusService
    ) -> None:
        stop = asyncio.Event()
        ticker = asyncio.create_task(_count_ticks(stop))

        await slow_service.seed(TEST_SEED_SECRET)
        stop.set()
        ticks = await ticker

        # Seven demo passwords at 50ms each; a blocked loop would barely tick
        assert ticks >= 10

    @pytest.mark.asyncio
    async def test_event_loop_keeps_running_during_login(
        self, slow_service: CampusService
    ) -> None:
        await _register(slow_service, PRIYA)
        stop = asyncio.Event()
        ticker = asyncio.create_task(_count_ticks(stop))

        await slow_service.login(email="priya@nitt.edu", password="pw")
        stop.set()
        ticks = await ticker

        assert ticks >= 2

    @pytest.mark.asyncio
    async def test_unhashable_password_is_invalid_input(self, service: CampusService) -> None:
        with pytest.raises(InvalidInput) as exc_info:
            await service.register(
                name="Priya", email="priya@nitt.edu", password="a\x00b", role="Student"
            )

        assert exc_info.value.status_code == 400


# =============================================================================
# Test: Store failures
# =============================================================================


class TestStoreFailures:
    @pytest.fixture
    def failing(self) -> FailingStore:
        return FailingStore()

    @pytest.fixture
    def failing_service(
        self, failing: FailingStore, hasher: PasswordHasher, tokens: TokenService
    ) -> CampusService:
        return CampusService(failing, hasher, tokens, seed_secret=TEST_SEED_SECRET)

    @pytest.mark.asyncio
    async def test_login_failure(
        self, failing: FailingStore, failing_service: CampusService
    ) -> None:
        failing.fail()

        with pytest.raises(Unavailable) as exc_info:
            await failing_service.login(email="priya@nitt.edu", password="pw")

        assert exc_info.value.message == "Login failed"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_add_item_failure(
        self, failing: FailingStore, failing_service: CampusService
    ) -> None:
        failing.fail()

        with pytest.raises(Unavailable, match="Add item failed"):
            await failing_service.add_item(MEENA, "Pen")

    @pytest.mark.asyncio
    async def test_list_items_failure(
        self, failing: FailingStore, failing_service: CampusService
    ) -> None:
        failing.fail()

        with pytest.raises(Unavailable, match="Get items failed"):
            await failing_service.list_items()

    @pytest.mark.asyncio
    async def test_recommend_failure(
        self, failing: FailingStore, failing_service: CampusService
    ) -> None:
        failing.fail()

        with pytest.raises(Unavailable, match="Recommend failed"):
            await failing_service.recommend(PRIYA)

    @pytest.mark.asyncio
    async def test_seed_failure(
        self, failing: FailingStore, failing_service: CampusService
    ) -> None:
        failing.fail()

        with pytest.raises(Unavailable, match="Seed failed"):
            await failing_service.seed(TEST_SEED_SECRET)
