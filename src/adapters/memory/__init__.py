"""
In-memory adapters for single-process deployments and tests.

State lives in the process and is lost on restart.
"""

from .tokens import InMemoryTokenIssuer
from .users import InMemoryUserRepository

__all__ = ["InMemoryTokenIssuer", "InMemoryUserRepository"]
