"""
Domain layer - Pure business logic with zero framework imports.

This package contains the registration and login workflows and the
port interfaces they consume (credential store, password hasher, rate
limiter, token issuer). Adapters live outside the domain.
"""

from .exceptions import AuthError, EmailAlreadyRegistered, PersistenceError
from .login import LoginService
from .outcome import Outcome
from .ports import PasswordHasher, RateLimiter, TokenIssuer, User, UserRepository
from .registration import RegistrationService, normalize_email

__all__ = [
    "AuthError",
    "EmailAlreadyRegistered",
    "LoginService",
    "Outcome",
    "PasswordHasher",
    "PersistenceError",
    "RateLimiter",
    "RegistrationService",
    "TokenIssuer",
    "User",
    "UserRepository",
    "normalize_email",
]
