"""Password hashing with bcrypt."""

from passlib.context import CryptContext


class PasswordHasher:
    """bcrypt hashing with a fixed work factor."""

    def __init__(self, rounds: int = 10) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash password with bcrypt."""
        return self._context.hash(password)

    def verify(self, password: str, digest: str | None) -> bool:
        """Verify password against digest.

        Digests that are not bcrypt hashes (or absent) never verify.
        """
        if not digest:
            return False
        try:
            return self._context.verify(password, digest)
        except ValueError:
            return False
