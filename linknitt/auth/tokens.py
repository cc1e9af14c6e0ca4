"""
Bearer tokens carrying identity and role claims.

Tokens are HS256 JWTs with an absolute expiry; there is no refresh. Any decode
failure (malformed, expired, bad signature, missing claims) surfaces as the
same Unauthenticated error.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from linknitt.domain.errors import Unauthenticated


@dataclass(frozen=True)
class Identity:
    """Caller identity resolved from a valid token."""

    email: str
    role: str
    name: str | None = None
    dept: str | None = None

    def to_claims(self) -> dict[str, Any]:
        return asdict(self)


class TokenService:
    """Issues and validates signed bearer tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_hours: int = 4) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(hours=ttl_hours)

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, identity: Identity, now: datetime | None = None) -> str:
        """Create a token expiring ttl after issuance."""
        issued_at = now or datetime.now(timezone.utc)
        claims = identity.to_claims()
        claims.update({"iat": issued_at, "exp": issued_at + self._ttl})
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def validate(self, token: str | None) -> Identity:
        """Decode a token and return its identity.

        Raises:
            Unauthenticated: On any signature, expiry or format problem.
        """
        if not token:
            raise Unauthenticated()
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            raise Unauthenticated() from e

        email = payload.get("email")
        role = payload.get("role")
        if not email or not role:
            raise Unauthenticated()
        return Identity(
            email=email,
            role=role,
            name=payload.get("name"),
            dept=payload.get("dept"),
        )
