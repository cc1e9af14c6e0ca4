"""
API routes for linknitt.

Thin handlers: each one delegates to CampusService and returns its result.
Domain errors are turned into {"error": ...} bodies by the handlers installed
in create_app().
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from linknitt import __version__
from linknitt.api.dependencies import ServiceContainer, get_identity, get_service, get_services
from linknitt.api.models import (
    ApplyRequest,
    ErrorResponse,
    HealthResponse,
    ItemListing,
    ItemRequest,
    JobListing,
    JobRequest,
    LoginRequest,
    LoginResponse,
    MentorListing,
    MentorshipOfferRequest,
    MentorshipRequest,
    MessageResponse,
    RecommendationResponse,
    RegisterRequest,
    UserInfo,
)
from linknitt.auth.tokens import Identity
from linknitt.domain.service import CampusService

logger = logging.getLogger(__name__)

router = APIRouter()

AUTH_ERRORS: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Missing fields"},
    401: {"model": ErrorResponse, "description": "Invalid or expired token"},
    403: {"model": ErrorResponse, "description": "No token or wrong role"},
    500: {"model": ErrorResponse, "description": "Store failure"},
}


# ==============================================================================
# Auth
# ==============================================================================


@router.post(
    "/register",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing fields"},
        500: {"model": ErrorResponse, "description": "Registration failed"},
    },
    tags=["auth"],
)
async def register(
    request: RegisterRequest,
    service: CampusService = Depends(get_service),  # noqa: B008
) -> dict[str, str]:
    """Register a user, overwriting any existing user with the same email."""
    return await service.register(
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role,
        dept=request.dept,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing fields"},
        401: {"model": ErrorResponse, "description": "Invalid password"},
        404: {"model": ErrorResponse, "description": "User not found"},
        500: {"model": ErrorResponse, "description": "Login failed"},
    },
    tags=["auth"],
)
async def login(
    request: LoginRequest,
    service: CampusService = Depends(get_service),  # noqa: B008
) -> dict[str, Any]:
    """Exchange credentials for a bearer token valid for four hours."""
    return await service.login(email=request.email, password=request.password)


# ==============================================================================
# Items
# ==============================================================================


@router.post("/items", response_model=MessageResponse, responses=AUTH_ERRORS, tags=["items"])
async def add_item(
    request: ItemRequest,
    identity: Identity = Depends(get_identity),  # noqa: B008
    service: CampusService = Depends(get_service),  # noqa: B008
) -> dict[str, str]:
    """Offer an item for sale (Faculty only)."""
    return await service.add_item(identity, request.item)


@router.get("/items", response_model=list[ItemListing], tags=["items"])
async def list_items(
    service: CampusService = Depends(get_service),  # noqa: B008
) -> list[dict[str, Any]]:
    return await service.list_items()


@router.post("/buy", response_model=MessageResponse, responses=AUTH_ERRORS, tags=["items"])
async def buy(
    request: ItemRequest,
    identity: Identity = Depends(get_identity),  # noqa: B008
    service: CampusService = Depends(get_service),  # noqa: B008
) -> dict[str, str]:
    """Buy an item (Student only). Unknown items are accepted and ignored."""
    return await service.buy(identity, request.item)


# ==============================================================================
# Jobs
# ==============================================================================


@router.post("/jobs", response_model=MessageResponse, responses=AUTH_ERRORS, tags=["jobs"])
async def post_job(
    request: JobRequest,
    identity: Identity = Depends(get_identity),  # noqa: B008
    service: CampusService = Depends(get_service),  # noqa: B008
) -> dict[str, str]:
    """Post a job (Faculty only). Every call creates a new job."""
    return await service.post_job(identity, request.title, request.desc)


@router.get("/jobs", response_model=list[JobListing], tags=["jobs"])
async def list_jobs(
    service: CampusService = Depends(get_service),  # noqa: B008
) -> list[dict[str, Any]]:
    """List jobs, newest first."""
    return await service.list_jobs()


@router.post(
    "/jobs/apply", response_model=MessageResponse, responses=AUTH_ERRORS, tags=["jobs"]
)
async def apply_to_job(
    request: ApplyRequest,
    identity: Identity = Depends(get_identity),  # noqa: B008
    service: CampusService = Depends(get_service),  # noqa: B008
) -> dict[str, str]:
    """Apply to a job by title (Student only)."""
    return await service.apply_to_job(identity, request.title)


# ==============================================================================
# Mentorship
# ==============================================================================


@router.post(
    "/mentors/offer", response_model=MessageResponse, responses=AUTH_ERRORS, tags=["mentors"]
)
async def offer_mentorship(
    request: MentorshipOfferRequest,
    identity: Identity = Depends(get_identity),  # noqa: B008
    service: CampusService = Depends(get_service),  # noqa: B008
) -> dict[str, str]:
    return await service.offer_mentorship(
        identity, request.topic, request.note, request.capacity
    )


@router.post(
    "/mentors/request", response_model=MessageResponse, responses=AUTH_ERRORS, tags=["mentors"]
)
async def request_mentorship(
    request: MentorshipRequest,
    identity: Identity = Depends(get_identity),  # noqa: B008
    service: CampusService = Depends(get_service),  # noqa: B008
) -> dict[str, str]:
    return await service.request_mentorship(identity, request.faculty_email, request.topic)


@router.get("/mentors", response_model=list[MentorListing], tags=["mentors"])
async def list_mentors(
    service: CampusService = Depends(get_service),  # noqa: B008
) -> list[dict[str, Any]]:
    """List every faculty member with the topics and notes they offer."""
    return await service.list_mentors()


# ==============================================================================
# Recommendations and users
# ==============================================================================


@router.get(
    "/recommend",
    response_model=RecommendationResponse,
    responses=AUTH_ERRORS,
    tags=["recommend"],
)
async def recommend(
    identity: Identity = Depends(get_identity),  # noqa: B008
    service: CampusService = Depends(get_service),  # noqa: B008
) -> dict[str, list[str]]:
    return await service.recommend(identity)


@router.get("/users", response_model=list[UserInfo], tags=["users"])
async def list_users(
    service: CampusService = Depends(get_service),  # noqa: B008
) -> list[dict[str, Any]]:
    return await service.list_users()


# ==============================================================================
# Administration
# ==============================================================================


@router.get(
    "/seed",
    response_model=MessageResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Wrong or missing secret"},
        500: {"model": ErrorResponse, "description": "Seed failed"},
    },
    tags=["admin"],
)
async def seed(
    secret: str | None = Query(default=None),
    service: CampusService = Depends(get_service),  # noqa: B008
) -> dict[str, str]:
    """Delete every node and relationship, then load the demo dataset."""
    return await service.seed(secret)


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(
    services: ServiceContainer = Depends(get_services),  # noqa: B008
) -> HealthResponse:
    """Report whether the graph store is reachable."""
    try:
        healthy = await services.store.health_check()
    except Exception:
        logger.warning("Store health check raised", exc_info=True)
        healthy = False

    return HealthResponse(
        status="healthy" if healthy else "degraded",
        backend=services.settings.graph_backend,
        store="healthy" if healthy else "unhealthy",
        version=__version__,
    )
