"""
HTTP error rendering - Exception handlers and response helpers.

Error shapes:
- 422: {"message": str, "errors": {field: [messages]}}
- 401 on /user: {"message": "Unauthenticated."}
- Workflow failures (401/429/500 on /register and /login) are Outcomes,
  rendered by outcome_response().
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.validation import Invalid
from src.domain.outcome import Outcome

logger = logging.getLogger(__name__)

MSG_UNAUTHENTICATED = "Unauthenticated."


class Unauthenticated(Exception):
    """Bearer token missing, malformed, unknown or bound to a deleted user."""

    pass


def outcome_response(outcome: Outcome) -> JSONResponse:
    """Render a workflow Outcome as a JSON response."""
    return JSONResponse(
        status_code=outcome.status_code,
        content=outcome.body,
        headers=outcome.headers or None,
    )


def validation_error_response(result: Invalid) -> JSONResponse:
    """Render validation failures as a 422 response."""
    return JSONResponse(
        status_code=422,
        content={"message": result.message, "errors": result.errors},
    )


async def unauthenticated_handler(request: Request, exc: Unauthenticated) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"message": MSG_UNAUTHENTICATED},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Render FastAPI's own body validation failures in the API's 422 shape.

    This fires when the body is not valid JSON or not a JSON object,
    before any field-level validator runs.
    """
    logger.info("Rejected malformed request body: path=%s", request.url.path)
    return validation_error_response(
        Invalid({"body": ["The request body must be a JSON object."]})
    )
