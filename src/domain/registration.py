"""
Registration domain service - Rate-limited user registration workflow.

Each call is a single pass through a short pipeline:

    RateChecking -> (blocked) -> Responding[429]
    RateChecking -> Executing -> Recording -> Responding[201 | 500]

Rate limiting is keyed by client IP. Both successful and failed
registrations count against the IP budget; a blocked request is a pure
read and records nothing. Field validation (required fields, email
syntax, password length and confirmation, duplicate email) has already
run in the HTTP layer by the time register() is called.
"""

import logging
from dataclasses import dataclass

from .outcome import Outcome
from .ports import PasswordHasher, RateLimiter, TokenIssuer, UserRepository

logger = logging.getLogger(__name__)

REGISTRATION_MAX_ATTEMPTS = 5
REGISTRATION_DECAY_SECONDS = 3600

MSG_REGISTERED = "Registration completed successfully."
MSG_REGISTRATION_THROTTLED = (
    "Too many registration attempts from this IP. Please try again later"
)
MSG_REGISTRATION_FAILED = "Registration failed. Please try again later."


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage, lookup and rate limiting.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates the registration flow: IP throttling, email
    normalization, password hashing, user creation and token issuance.
    """

    repository: UserRepository
    hasher: PasswordHasher
    rate_limiter: RateLimiter
    token_issuer: TokenIssuer
    max_attempts: int = REGISTRATION_MAX_ATTEMPTS
    decay_seconds: int = REGISTRATION_DECAY_SECONDS

    def register(
        self,
        name: str,
        email: str,
        password: str,
        password_confirmation: str,
        client_ip: str,
    ) -> Outcome:
        """
        Register a new user and issue a bearer token.

        Args:
            name: Display name
            email: User's email address (will be normalized)
            password: User's password (will be hashed)
            password_confirmation: Already checked equal to password by validation
            client_ip: Address the request came from, used as the throttle key

        Returns:
            Outcome with status 201, 429 or 500
        """
        ip_key = self._throttle_key(client_ip)
        normalized_email = normalize_email(email)

        try:
            if self.rate_limiter.too_many_attempts(ip_key, self.max_attempts):
                logger.warning("Registration throttled: key=%s", ip_key)
                return Outcome.rate_limited(
                    MSG_REGISTRATION_THROTTLED, self.rate_limiter.available_in(ip_key)
                )

            try:
                user = self.repository.create(
                    name, normalized_email, self.hasher.hash(password)
                )
            finally:
                # Successful and failed attempts both count against the IP
                self.rate_limiter.hit(ip_key, self.decay_seconds)

            token = self.token_issuer.issue(user.id)
        except Exception as e:
            return self._failed(normalized_email, client_ip, e)

        logger.info("User registered: email=%s", user.email)
        return Outcome.success(201, MSG_REGISTERED, user.public_data(), token)

    def _throttle_key(self, client_ip: str) -> str:
        return f"registration:ip:{client_ip}"

    def _failed(self, email: str, client_ip: str, error: Exception) -> Outcome:
        logger.error(
            "Registration failed: email=%s ip=%s error=%s",
            email,
            client_ip,
            error,
            exc_info=error,
        )
        return Outcome.failure(500, MSG_REGISTRATION_FAILED)
