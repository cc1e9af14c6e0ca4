"""
Dependency injection for API routes.

The service container is stored on app.state and exposed through
get_services(), which create_app() overrides. Bearer tokens are resolved to an
Identity once per request by get_identity().
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from linknitt.auth.tokens import Identity
from linknitt.core.config import Settings
from linknitt.domain.errors import MissingToken, Unauthenticated
from linknitt.domain.service import CampusService
from linknitt.graph.store import DomainStore

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class ServiceContainer:
    """Container for all service dependencies."""

    settings: Settings
    store: DomainStore
    service: CampusService


def get_services() -> ServiceContainer:
    """Get service container - injected at runtime."""
    # Overridden by create_app
    msg = "Services not configured"
    raise RuntimeError(msg)


def get_service(services: ServiceContainer = Depends(get_services)) -> CampusService:  # noqa: B008
    return services.service


def get_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
    service: CampusService = Depends(get_service),  # noqa: B008
) -> Identity:
    """Resolve the Authorization header into an Identity.

    A missing header is rejected with 403. A header that is present but not
    a usable bearer token (wrong scheme, no token, bad signature, expired)
    is rejected with 401.
    """
    if credentials is None:
        if request.headers.get("Authorization"):
            raise Unauthenticated()
        raise MissingToken()
    return service.authenticate(credentials.credentials)
