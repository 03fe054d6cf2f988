"""
Unit tests for LoginService domain logic.

Tests domain logic with mocked ports to verify:
- Per-email throttling keyed on the normalized address
- Identical handling of unknown email and wrong password
- Counter clearing on success
- Unexpected failures leave the limiter untouched
"""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from src.domain.exceptions import PersistenceError
from src.domain.login import LoginService
from src.domain.ports import User


def make_user() -> User:
    now = datetime.now(timezone.utc)
    return User(
        id=7,
        name="Test User",
        email="test@example.com",
        password_hash="$2b$10$storedhash",
        created_at=now,
        updated_at=now,
    )


def make_service(
    *, user: User | None = None, password_ok: bool = True, throttled: bool = False
) -> tuple[LoginService, Mock, Mock, Mock, Mock]:
    repo = Mock()
    repo.find_by_email.return_value = user

    hasher = Mock()
    hasher.verify.return_value = password_ok

    limiter = Mock()
    limiter.too_many_attempts.return_value = throttled
    limiter.available_in.return_value = 42

    issuer = Mock()
    issuer.issue.return_value = "3|logintoken"

    service = LoginService(
        repository=repo, hasher=hasher, rate_limiter=limiter, token_issuer=issuer
    )
    return service, repo, hasher, limiter, issuer


class TestThrottling:
    """Tests for the per-email login budget."""

    def test_key_uses_normalized_email(self) -> None:
        service, _, _, limiter, _ = make_service(user=make_user())

        service.login("  TEST@Example.com ", "password123", "10.0.0.1")

        limiter.too_many_attempts.assert_called_once_with("login:test@example.com", 5)

    def test_throttled_returns_429_without_hit(self) -> None:
        """A blocked attempt returns 429 and is a pure read, even with the right password."""
        service, repo, hasher, limiter, issuer = make_service(
            user=make_user(), password_ok=True, throttled=True
        )

        outcome = service.login("test@example.com", "password123", "10.0.0.1")

        assert outcome.status_code == 429
        assert outcome.body == {
            "status": False,
            "message": "Too many login attempts. Please try again later.",
        }
        assert outcome.headers == {"Retry-After": "42"}
        limiter.hit.assert_not_called()
        limiter.clear.assert_not_called()
        repo.find_by_email.assert_not_called()
        hasher.verify.assert_not_called()
        issuer.issue.assert_not_called()


class TestSuccessfulLogin:
    """Tests for the 200 path."""

    def test_returns_200_with_data_and_token(self) -> None:
        service, _, _, _, _ = make_service(user=make_user())

        outcome = service.login("test@example.com", "password123", "10.0.0.1")

        assert outcome.status_code == 200
        assert outcome.body == {
            "status": True,
            "message": "Login successful.",
            "data": {"name": "Test User", "email": "test@example.com"},
            "token": "3|logintoken",
        }

    def test_success_clears_counter(self) -> None:
        service, _, _, limiter, _ = make_service(user=make_user())

        service.login("test@example.com", "password123", "10.0.0.1")

        limiter.clear.assert_called_once_with("login:test@example.com")
        limiter.hit.assert_not_called()

    def test_verifies_against_stored_hash(self) -> None:
        service, repo, hasher, _, issuer = make_service(user=make_user())

        service.login("TEST@EXAMPLE.COM", "password123", "10.0.0.1")

        repo.find_by_email.assert_called_once_with("test@example.com")
        hasher.verify.assert_called_once_with("password123", "$2b$10$storedhash")
        issuer.issue.assert_called_once_with(7)


class TestInvalidCredentials:
    """Tests for the 401 path."""

    def test_wrong_password_returns_401_and_hits(self) -> None:
        service, _, _, limiter, issuer = make_service(user=make_user(), password_ok=False)

        outcome = service.login("test@example.com", "wrong-password", "10.0.0.1")

        assert outcome.status_code == 401
        assert outcome.body == {"status": False, "message": "Invalid credentials."}
        limiter.hit.assert_called_once_with("login:test@example.com", 60)
        limiter.clear.assert_not_called()
        issuer.issue.assert_not_called()

    def test_unknown_email_returns_identical_401(self) -> None:
        unknown, _, _, _, _ = make_service(user=None, password_ok=False)
        wrong, _, _, _, _ = make_service(user=make_user(), password_ok=False)

        unknown_outcome = unknown.login("nobody@example.com", "password123", "10.0.0.1")
        wrong_outcome = wrong.login("test@example.com", "wrong-password", "10.0.0.1")

        assert unknown_outcome == wrong_outcome

    def test_unknown_email_still_runs_password_verification(self) -> None:
        """Unknown emails pay the same hashing cost as wrong passwords."""
        service, _, hasher, limiter, _ = make_service(user=None, password_ok=False)

        service.login("nobody@example.com", "password123", "10.0.0.1")

        hasher.verify.assert_called_once_with("password123", None)
        limiter.hit.assert_called_once_with("login:nobody@example.com", 60)


class TestUnexpectedFailure:
    """Tests for the 500 path."""

    def test_store_failure_returns_500(self) -> None:
        service, repo, _, _, _ = make_service()
        repo.find_by_email.side_effect = PersistenceError("unreachable")

        outcome = service.login("test@example.com", "password123", "10.0.0.1")

        assert outcome.status_code == 500
        assert outcome.body == {
            "status": False,
            "message": "An error occurred during login. Please try again later.",
        }

    def test_store_failure_does_not_touch_limiter(self) -> None:
        service, repo, _, limiter, issuer = make_service()
        repo.find_by_email.side_effect = PersistenceError("unreachable")

        service.login("test@example.com", "password123", "10.0.0.1")

        limiter.hit.assert_not_called()
        limiter.clear.assert_not_called()
        issuer.issue.assert_not_called()

    def test_hasher_failure_returns_500(self) -> None:
        service, _, hasher, limiter, _ = make_service(user=make_user())
        hasher.verify.side_effect = RuntimeError("boom")

        outcome = service.login("test@example.com", "password123", "10.0.0.1")

        assert outcome.status_code == 500
        limiter.hit.assert_not_called()

    def test_failure_is_logged_with_context(self, caplog: pytest.LogCaptureFixture) -> None:
        service, repo, _, _, _ = make_service()
        repo.find_by_email.side_effect = PersistenceError("unreachable")

        with caplog.at_level("ERROR"):
            service.login("Test@Example.com", "password123", "192.0.2.1")

        assert "test@example.com" in caplog.text
        assert "192.0.2.1" in caplog.text
        assert "password123" not in caplog.text


class TestCounterStoreFailure:
    """A failing rate limiter yields the 500 Outcome instead of raising."""

    MSG_500 = {
        "status": False,
        "message": "An error occurred during login. Please try again later.",
    }

    @pytest.mark.parametrize("method", ["too_many_attempts", "hit"])
    def test_unknown_user_with_broken_limiter(self, method: str) -> None:
        service, _, _, limiter, issuer = make_service(user=None)
        getattr(limiter, method).side_effect = RuntimeError("counter store down")

        outcome = service.login("nobody@example.com", "password123", "10.0.0.1")

        assert outcome.status_code == 500
        assert outcome.body == self.MSG_500
        issuer.issue.assert_not_called()

    def test_clear_failure_returns_500_without_token(self) -> None:
        service, _, _, limiter, issuer = make_service(user=make_user())
        limiter.clear.side_effect = RuntimeError("counter store down")

        outcome = service.login("test@example.com", "password123", "10.0.0.1")

        assert outcome.status_code == 500
        issuer.issue.assert_not_called()

    def test_limiter_failure_is_logged_with_context(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        service, _, _, limiter, _ = make_service(user=None)
        limiter.hit.side_effect = RuntimeError("counter store down")

        with caplog.at_level("ERROR"):
            service.login("Nobody@Example.com", "password123", "192.0.2.1")

        assert "nobody@example.com" in caplog.text
        assert "192.0.2.1" in caplog.text
        assert "counter store down" in caplog.text
