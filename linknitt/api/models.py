"""
Pydantic models for API request/response validation.

Request models declare the JSON field names the frontend sends (camelCase
where it uses it, e.g. facultyEmail). Required-field checks happen in the
domain service so that missing fields produce a 400 rather than a 422.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Requests
# =============================================================================


class RegisterRequest(BaseModel):
    """Request body for POST /register."""

    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None
    dept: str | None = None


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    email: str | None = None
    password: str | None = None


class ItemRequest(BaseModel):
    """Request body for POST /items and POST /buy."""

    item: str | None = None


class JobRequest(BaseModel):
    """Request body for POST /jobs."""

    title: str | None = None
    desc: str | None = None


class ApplyRequest(BaseModel):
    """Request body for POST /jobs/apply."""

    title: str | None = None


class MentorshipOfferRequest(BaseModel):
    """Request body for POST /mentors/offer.

    capacity accepts numbers or numeric strings; it defaults to 1.
    """

    topic: str | None = None
    note: str | None = None
    capacity: int | str | None = None


class MentorshipRequest(BaseModel):
    """Request body for POST /mentors/request."""

    model_config = ConfigDict(populate_by_name=True)

    faculty_email: str | None = Field(default=None, alias="facultyEmail")
    topic: str | None = None


# =============================================================================
# Responses
# =============================================================================


class MessageResponse(BaseModel):
    """Generic acknowledgement."""

    message: str


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    error: str = Field(description="Human-readable error message")


class UserInfo(BaseModel):
    """Public user fields (never the password digest)."""

    name: str | None = None
    email: str
    role: str | None = None
    dept: str | None = None


class LoginResponse(BaseModel):
    """Token plus the claims it carries."""

    token: str
    user: UserInfo


class ItemListing(BaseModel):
    seller: str | None = None
    item: str


class JobListing(BaseModel):
    title: str | None = None
    desc: str | None = None
    poster: str | None = None
    postedAt: str | None = None  # noqa: N815 - wire name


class MentorListing(BaseModel):
    name: str | None = None
    email: str
    topics: list[str] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)


class RecommendationResponse(BaseModel):
    """Recommendation lists, each capped and ordered by the underlying query."""

    items: list[str] = Field(default_factory=list)
    mentors: list[str] = Field(default_factory=list)
    jobs: list[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Overall status: healthy or degraded")
    backend: str = Field(description="Configured graph backend")
    store: str = Field(description="Store status")
    version: str
