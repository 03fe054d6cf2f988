"""
bcrypt password hasher - Implements PasswordHasher protocol.

Security Design - Timing Oracle Prevention:
------------------------------------------
bcrypt.checkpw() is constant-time and, at cost factor >= 10, slow enough
to dominate login response time. When the login workflow finds no user
it still calls verify() with a None digest; we then compare against a
pre-computed dummy hash so unknown emails and wrong passwords cost the
same work.
"""

import bcrypt

MIN_ROUNDS = 10

# bcrypt only reads the first 72 bytes of its input and bcrypt>=5 rejects more
MAX_PASSWORD_BYTES = 72

# Hash of "dummy_password_for_timing_safety" with cost factor 10.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(
    b"dummy_password_for_timing_safety", bcrypt.gensalt(MIN_ROUNDS)
)


class BcryptPasswordHasher:
    """
    Implements PasswordHasher protocol via bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, rounds: int = 12) -> None:
        """
        Initialize hasher with a bcrypt work factor.

        Args:
            rounds: bcrypt cost factor, must be >= 10

        Raises:
            ValueError: If rounds is below the minimum
        """
        if rounds < MIN_ROUNDS:
            raise ValueError(f"bcrypt rounds must be >= {MIN_ROUNDS}")
        self._rounds = rounds
        self._dummy_hash = (
            _DUMMY_BCRYPT_HASH
            if rounds == MIN_ROUNDS
            else bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(rounds))
        )

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        Raises:
            ValueError: If the password is longer than MAX_PASSWORD_BYTES
        """
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._rounds)).decode()

    def verify(self, password: str, password_hash: str | None) -> bool:
        """
        Compare a plaintext password with a stored bcrypt digest.

        Always runs bcrypt.checkpw(), against the dummy hash when
        password_hash is None.
        """
        candidate = password.encode()
        if password_hash is None or len(candidate) > MAX_PASSWORD_BYTES:
            # Over-long passwords were never hashable, so they never match
            bcrypt.checkpw(candidate[:MAX_PASSWORD_BYTES], self._dummy_hash)
            return False
        try:
            return bcrypt.checkpw(candidate, password_hash.encode())
        except ValueError:
            # Stored digest is not a bcrypt hash
            return False
