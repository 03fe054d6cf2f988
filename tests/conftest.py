"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Settings wired to the in-memory backends
- A FastAPI application and TestClient with lifespan started
"""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.config.settings import Settings


@pytest.fixture
def settings() -> Settings:
    """Settings using in-memory backends and the cheapest allowed bcrypt cost."""
    return Settings(
        _env_file=None,
        storage_backend="memory",
        rate_limit_backend="memory",
        bcrypt_cost=10,
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """Create test FastAPI application."""
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create test client; entering the context runs the lifespan."""
    with TestClient(app) as test_client:
        yield test_client
