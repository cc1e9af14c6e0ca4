"""
Authentication utilities.

Provides:
- Password hashing with bcrypt (passlib)
- Signed, time-limited bearer tokens (python-jose)
- Identity, the typed claim set passed into domain operations
"""

from linknitt.auth.passwords import PasswordHasher
from linknitt.auth.tokens import Identity, TokenService

__all__ = ["Identity", "PasswordHasher", "TokenService"]
