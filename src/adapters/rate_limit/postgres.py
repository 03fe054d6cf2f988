"""
PostgreSQL rate limiter - Implements RateLimiter protocol.

Counters live in the `rate_limits` table so every worker sharing the
database enforces the same budget. hit() is a single
INSERT ... ON CONFLICT DO UPDATE statement, which makes increment and
window reset atomic per key without explicit locking. Window expiry is
evaluated against database time (NOW()). Each hit also purges a bounded
batch of expired rows, skipping rows another transaction holds.
"""

from psycopg_pool import ConnectionPool

PURGE_BATCH_SIZE = 1000

_PURGE_SQL = """
    DELETE FROM rate_limits
    WHERE key IN (
        SELECT key FROM rate_limits
        WHERE expires_at <= NOW()
        ORDER BY expires_at
        LIMIT %s
        FOR UPDATE SKIP LOCKED
    )
"""


class PostgresRateLimiter:
    """
    Implements RateLimiter protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def too_many_attempts(self, key: str, max_attempts: int) -> bool:
        sql = """
            SELECT attempts FROM rate_limits
            WHERE key = %s AND expires_at > NOW()
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (key,))
            row = cursor.fetchone()
        return row is not None and row[0] >= max_attempts

    def purge_expired(self, limit: int = PURGE_BATCH_SIZE) -> int:
        """
        Delete up to limit rows whose window has passed.

        Returns:
            Number of rows deleted
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(_PURGE_SQL, (limit,))
            deleted = cursor.rowcount
            conn.commit()
        return deleted

    def hit(self, key: str, decay_seconds: int) -> int:
        """
        Increment the counter for key, opening a new window if expired.

        Returns:
            Attempt count after this hit
        """
        sql = """
            INSERT INTO rate_limits (key, attempts, expires_at)
            VALUES (%s, 1, NOW() + %s * INTERVAL '1 second')
            ON CONFLICT (key) DO UPDATE
            SET attempts = CASE
                    WHEN rate_limits.expires_at <= NOW() THEN 1
                    ELSE rate_limits.attempts + 1
                END,
                expires_at = CASE
                    WHEN rate_limits.expires_at <= NOW() THEN EXCLUDED.expires_at
                    ELSE rate_limits.expires_at
                END
            RETURNING attempts
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(_PURGE_SQL, (PURGE_BATCH_SIZE,))
            cursor.execute(sql, (key, decay_seconds))
            row = cursor.fetchone()
            conn.commit()
        return row[0]

    def clear(self, key: str) -> None:
        with self._pool.connection() as conn:
            conn.execute("DELETE FROM rate_limits WHERE key = %s", (key,))
            conn.commit()

    def available_in(self, key: str) -> int:
        sql = """
            SELECT GREATEST(0, CEIL(EXTRACT(EPOCH FROM expires_at - NOW())))::int
            FROM rate_limits
            WHERE key = %s AND expires_at > NOW()
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (key,))
            row = cursor.fetchone()
        return row[0] if row is not None else 0
