"""
Domain exceptions - Semantic error types for authentication.

This module defines domain-specific exceptions that communicate
storage and business rule violations without leaking infrastructure details.
"""


class AuthError(Exception):
    """Base class for authentication domain errors."""

    pass


class EmailAlreadyRegistered(AuthError):
    """Unique email constraint rejected a new user record."""

    pass


class PersistenceError(AuthError):
    """Credential, token or counter storage failed."""

    pass
