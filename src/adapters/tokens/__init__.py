"""Bearer token adapters."""

from .postgres import PostgresTokenIssuer

__all__ = ["PostgresTokenIssuer"]
