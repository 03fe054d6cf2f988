"""
Rate limiting adapters.

InMemoryRateLimiter suits a single process; PostgresRateLimiter shares
counters between every worker connected to the same database.
"""

from .in_memory import InMemoryRateLimiter
from .postgres import PostgresRateLimiter

__all__ = ["InMemoryRateLimiter", "PostgresRateLimiter"]
