"""
PostgreSQL token issuer - Implements TokenIssuer protocol.

Tokens are stored in `personal_access_tokens` as (id, user_id, name,
token_hash). See plain_text for the token format.
"""

from psycopg_pool import ConnectionPool

from .plain_text import digest, digest_matches, format_token, generate_secret, parse_token


class PostgresTokenIssuer:
    """
    Implements TokenIssuer protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool, name: str = "auth_token") -> None:
        """
        Initialize token issuer with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            name: Label stored with every issued token
        """
        self._pool = pool
        self._name = name

    def issue(self, user_id: int) -> str:
        secret = generate_secret()
        sql = """
            INSERT INTO personal_access_tokens (user_id, name, token_hash, created_at)
            VALUES (%s, %s, %s, NOW())
            RETURNING id
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (user_id, self._name, digest(secret)))
            record_id = cursor.fetchone()[0]
            conn.commit()
        return format_token(record_id, secret)

    def resolve(self, token: str) -> int | None:
        """
        Map a presented token to its owning user id.

        Touches last_used_at on success.
        """
        parsed = parse_token(token)
        if parsed is None:
            return None
        record_id, secret = parsed

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                "SELECT user_id, token_hash FROM personal_access_tokens WHERE id = %s",
                (record_id,),
            )
            row = cursor.fetchone()
            if row is None or not digest_matches(secret, row[1]):
                conn.commit()
                return None

            cursor.execute(
                "UPDATE personal_access_tokens SET last_used_at = NOW() WHERE id = %s",
                (record_id,),
            )
            conn.commit()
            return row[0]
