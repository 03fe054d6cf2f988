"""
Workflow outcome - The (status code, JSON body) pair handed to the HTTP layer.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Outcome:
    """Result of one pass through a registration or login workflow."""

    status_code: int
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def success(
        cls, status_code: int, message: str, data: dict[str, Any], token: str
    ) -> "Outcome":
        """Build a successful outcome carrying public user data and a token."""
        return cls(
            status_code=status_code,
            body={"status": True, "message": message, "data": data, "token": token},
        )

    @classmethod
    def failure(
        cls, status_code: int, message: str, headers: dict[str, str] | None = None
    ) -> "Outcome":
        """Build a failed outcome with a single human-readable message."""
        return cls(
            status_code=status_code,
            body={"status": False, "message": message},
            headers=headers or {},
        )

    @classmethod
    def rate_limited(cls, message: str, retry_after: int) -> "Outcome":
        """Build a 429 outcome advertising when the window resets."""
        return cls.failure(429, message, headers={"Retry-After": str(retry_after)})
