"""
Login domain service - Rate-limited credential verification workflow.

Rate limiting is keyed by normalized email. Only credential mismatches
count against the budget; a successful login clears the counter entirely.
Unknown email and wrong password are indistinguishable to the caller:
same status, same body, and the same bcrypt work.
"""

import logging
from dataclasses import dataclass

from .outcome import Outcome
from .ports import PasswordHasher, RateLimiter, TokenIssuer, UserRepository
from .registration import normalize_email

logger = logging.getLogger(__name__)

LOGIN_MAX_ATTEMPTS = 5
LOGIN_DECAY_SECONDS = 60

MSG_LOGGED_IN = "Login successful."
MSG_LOGIN_THROTTLED = "Too many login attempts. Please try again later."
MSG_INVALID_CREDENTIALS = "Invalid credentials."
MSG_LOGIN_FAILED = "An error occurred during login. Please try again later."


@dataclass
class LoginService:
    """Domain service authenticating an email/password pair."""

    repository: UserRepository
    hasher: PasswordHasher
    rate_limiter: RateLimiter
    token_issuer: TokenIssuer
    max_attempts: int = LOGIN_MAX_ATTEMPTS
    decay_seconds: int = LOGIN_DECAY_SECONDS

    def login(self, email: str, password: str, client_ip: str) -> Outcome:
        """
        Verify credentials and issue a bearer token.

        Args:
            email: User's email (will be normalized)
            password: User's plaintext password
            client_ip: Address the request came from (logged on failure)

        Returns:
            Outcome with status 200, 401, 429 or 500
        """
        normalized_email = normalize_email(email)
        key = f"login:{normalized_email}"

        try:
            if self.rate_limiter.too_many_attempts(key, self.max_attempts):
                logger.warning("Login throttled: key=%s", key)
                return Outcome.rate_limited(
                    MSG_LOGIN_THROTTLED, self.rate_limiter.available_in(key)
                )

            user = self.repository.find_by_email(normalized_email)
            # Always run bcrypt, even for unknown emails
            password_valid = self.hasher.verify(
                password, user.password_hash if user is not None else None
            )

            if user is None or not password_valid:
                self.rate_limiter.hit(key, self.decay_seconds)
                return Outcome.failure(401, MSG_INVALID_CREDENTIALS)

            self.rate_limiter.clear(key)
            token = self.token_issuer.issue(user.id)
        except Exception as e:
            return self._failed(normalized_email, client_ip, e)

        logger.info("User logged in: email=%s", user.email)
        return Outcome.success(200, MSG_LOGGED_IN, user.public_data(), token)

    def _failed(self, email: str, client_ip: str, error: Exception) -> Outcome:
        logger.error(
            "Login failed: email=%s ip=%s error=%s",
            email,
            client_ip,
            error,
            exc_info=error,
        )
        return Outcome.failure(500, MSG_LOGIN_FAILED)
