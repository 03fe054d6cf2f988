"""
PostgreSQL repository adapter - Implements UserRepository protocol.

This module provides the PostgreSQL implementation of the domain's
credential store port using psycopg3 with raw SQL.

Race Safety:
-----------
Email uniqueness is enforced by the UNIQUE constraint on users.email,
not by a read-then-insert check. When two registrations for the same
email race, PostgreSQL lets exactly one INSERT through and the other
fails with UniqueViolation, which we surface as EmailAlreadyRegistered.
"""

import logging
from pathlib import Path

import psycopg
from psycopg import errors
from psycopg_pool import ConnectionPool

from src.domain.exceptions import EmailAlreadyRegistered, PersistenceError
from src.domain.ports import User

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, name, email, password_hash, created_at, updated_at"


def _row_to_user(row: tuple) -> User:
    return User(
        id=row[0],
        name=row[1],
        email=row[2],
        password_hash=row[3],
        created_at=row[4],
        updated_at=row[5],
    )


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_email(self, email: str) -> User | None:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s"
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()
        return _row_to_user(row) if row is not None else None

    def find_by_id(self, user_id: int) -> User | None:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s"
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (user_id,))
            row = cursor.fetchone()
        return _row_to_user(row) if row is not None else None

    def create(self, name: str, email: str, password_hash: str) -> User:
        """
        Insert a new user row.

        Args:
            name: Display name
            email: Normalized email address (lowercase, stripped)
            password_hash: bcrypt-hashed password from the hasher adapter

        Returns:
            The created User with database-assigned id and timestamps

        Raises:
            EmailAlreadyRegistered: If the UNIQUE constraint on email fires
            PersistenceError: For any other database failure
        """
        sql = f"""
            INSERT INTO users (name, email, password_hash, created_at, updated_at)
            VALUES (%s, %s, %s, NOW(), NOW())
            RETURNING {_USER_COLUMNS}
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (name, email, password_hash))
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation as e:
            raise EmailAlreadyRegistered(email) from e
        except psycopg.Error as e:
            raise PersistenceError(f"Could not create user: {e}") from e

        return _row_to_user(row)


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
