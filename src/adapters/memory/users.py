"""In-memory credential store - Implements UserRepository protocol."""

import itertools
import threading
from datetime import datetime, timezone

from src.domain.exceptions import EmailAlreadyRegistered
from src.domain.ports import User


class InMemoryUserRepository:
    """
    Dict-backed user store.

    The email uniqueness check and the insert happen under one lock, so
    concurrent creates for the same email leave exactly one record.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._by_id: dict[int, User] = {}
        self._id_by_email: dict[str, int] = {}

    def find_by_email(self, email: str) -> User | None:
        with self._lock:
            user_id = self._id_by_email.get(email)
            return self._by_id.get(user_id) if user_id is not None else None

    def find_by_id(self, user_id: int) -> User | None:
        with self._lock:
            return self._by_id.get(user_id)

    def create(self, name: str, email: str, password_hash: str) -> User:
        now = datetime.now(timezone.utc)
        with self._lock:
            if email in self._id_by_email:
                raise EmailAlreadyRegistered(email)
            user = User(
                id=next(self._ids),
                name=name,
                email=email,
                password_hash=password_hash,
                created_at=now,
                updated_at=now,
            )
            self._by_id[user.id] = user
            self._id_by_email[email] = user.id
            return user

    def count(self) -> int:
        with self._lock:
            return len(self._by_id)
