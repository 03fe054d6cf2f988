"""In-memory token issuer - Implements TokenIssuer protocol."""

import itertools
import threading
from dataclasses import dataclass

from src.adapters.tokens.plain_text import (
    digest,
    digest_matches,
    format_token,
    generate_secret,
    parse_token,
)


@dataclass(frozen=True)
class _TokenRecord:
    user_id: int
    name: str
    token_hash: str


class InMemoryTokenIssuer:
    """Keeps token digests in a dict keyed by record id."""

    def __init__(self, name: str = "auth_token") -> None:
        self._name = name
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._records: dict[int, _TokenRecord] = {}

    def issue(self, user_id: int) -> str:
        secret = generate_secret()
        with self._lock:
            record_id = next(self._ids)
            self._records[record_id] = _TokenRecord(user_id, self._name, digest(secret))
        return format_token(record_id, secret)

    def resolve(self, token: str) -> int | None:
        parsed = parse_token(token)
        if parsed is None:
            return None
        record_id, secret = parsed

        with self._lock:
            record = self._records.get(record_id)
        if record is None or not digest_matches(secret, record.token_hash):
            return None
        return record.user_id
