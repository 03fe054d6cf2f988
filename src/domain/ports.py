"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the authentication
workflows require from infrastructure. Adapters implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol


@dataclass(frozen=True)
class User:
    """
    Stored user identity.

    The password hash and internal identifier are never part of the
    payload returned by registration or login; see public_data().
    """

    id: int
    name: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime

    def public_data(self) -> dict[str, str]:
        """Fields returned in the `data` member of workflow responses."""
        return {"name": self.name, "email": self.email}

    def to_profile(self) -> dict[str, Any]:
        """Full record returned to the authenticated user (no password hash)."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class UserRepository(Protocol):
    """Port interface for user persistence."""

    def find_by_email(self, email: str) -> User | None:
        """
        Look up a user by normalized email.

        Args:
            email: Normalized email address (lowercase, stripped)

        Returns:
            The stored User, or None if no user has this email
        """
        ...

    def find_by_id(self, user_id: int) -> User | None:
        """Look up a user by internal identifier."""
        ...

    def create(self, name: str, email: str, password_hash: str) -> User:
        """
        Insert a new user.

        Uniqueness on email is enforced by the store itself, so two
        concurrent inserts for the same email yield exactly one row.

        Args:
            name: Display name
            email: Normalized email address
            password_hash: Digest produced by a PasswordHasher

        Returns:
            The created User

        Raises:
            EmailAlreadyRegistered: If the email is already stored
            PersistenceError: If the store is unavailable
        """
        ...


class PasswordHasher(Protocol):
    """Port interface for one-way password hashing."""

    def hash(self, password: str) -> str:
        """Hash a plaintext password."""
        ...

    def verify(self, password: str, password_hash: str | None) -> bool:
        """
        Check a plaintext password against a stored digest.

        A None digest (unknown user) must cost the same work as a real
        comparison and always return False.
        """
        ...


class RateLimiter(Protocol):
    """
    Port interface for keyed attempt counters with a decay window.

    A counter is created lazily by hit(); its window starts at that first
    hit and lasts decay_seconds, after which the count reads as zero.
    Implementations own the atomicity of every operation on a key.
    """

    def too_many_attempts(self, key: str, max_attempts: int) -> bool:
        """Return True if the live counter for key has reached max_attempts."""
        ...

    def hit(self, key: str, decay_seconds: int) -> int:
        """Increment the counter for key and return the new attempt count."""
        ...

    def clear(self, key: str) -> None:
        """Delete the counter for key."""
        ...

    def available_in(self, key: str) -> int:
        """Seconds until the counter for key resets (0 if there is none)."""
        ...


class TokenIssuer(Protocol):
    """Port interface for opaque bearer token issuance."""

    def issue(self, user_id: int) -> str:
        """Mint a new bearer token bound to user_id."""
        ...

    def resolve(self, token: str) -> int | None:
        """
        Map a presented bearer token back to a user id.

        Returns:
            The owning user id, or None if the token is unknown or malformed
        """
        ...
