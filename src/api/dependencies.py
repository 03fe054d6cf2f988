"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Adapters are built once during app lifespan and stored in app.state.
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.api.errors import Unauthenticated
from src.config.settings import Settings
from src.domain.login import LoginService
from src.domain.ports import PasswordHasher, RateLimiter, TokenIssuer, User, UserRepository
from src.domain.registration import RegistrationService


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_user_repository(request: Request) -> UserRepository:
    return request.app.state.user_repository


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_client_ip(request: Request) -> str:
    """Client address used as the registration throttle discriminator."""
    return request.client.host if request.client else "unknown"


def get_registration_service(
    settings: Settings = Depends(get_app_settings),
    repository: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the four collaborators and the configured throttle.
    """
    return RegistrationService(
        repository=repository,
        hasher=hasher,
        rate_limiter=rate_limiter,
        token_issuer=token_issuer,
        max_attempts=settings.registration_max_attempts,
        decay_seconds=settings.registration_decay_seconds,
    )


def get_login_service(
    settings: Settings = Depends(get_app_settings),
    repository: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> LoginService:
    """Create login service with injected dependencies."""
    return LoginService(
        repository=repository,
        hasher=hasher,
        rate_limiter=rate_limiter,
        token_issuer=token_issuer,
        max_attempts=settings.login_max_attempts,
        decay_seconds=settings.login_decay_seconds,
    )


# Bearer security scheme for OpenAPI documentation.
# auto_error=False so missing credentials get our own 401 body.
http_bearer = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    repository: UserRepository = Depends(get_user_repository),
) -> User:
    """
    Resolve the bearer token in the Authorization header to a User.

    Raises:
        Unauthenticated: If the header is missing or the token does not
            map to an existing user
    """
    if credentials is None:
        raise Unauthenticated()

    user_id = token_issuer.resolve(credentials.credentials)
    if user_id is None:
        raise Unauthenticated()

    user = repository.find_by_id(user_id)
    if user is None:
        raise Unauthenticated()
    return user
