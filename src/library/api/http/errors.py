"""Mapping of service failures onto HTTP errors."""

from fastapi import HTTPException, status
from loguru import logger

from src.library.core.errors import EntityNotFoundError, SearchUnavailableError

INVALID_PAYLOAD_MESSAGE = "Invalid request payload"


def service_failure(action: str, exc: Exception) -> HTTPException:
    """Build the HTTP error for a failed service call.

    ``action`` reads like "create book" or "get members"; the response detail
    is ``"Failed <action>: <error>"``.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    if isinstance(exc, EntityNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, SearchUnavailableError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    log = logger.bind(
        action=action,
        status_code=status_code,
        error_type=type(exc).__name__,
    )
    if status_code >= 500:
        log.opt(exception=exc).error("service.failed")
    else:
        log.info("service.rejected")

    return HTTPException(status_code=status_code, detail=f"Failed {action}: {exc}")
