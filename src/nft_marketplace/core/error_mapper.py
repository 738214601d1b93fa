"""Mapping from controller exceptions to envelope status codes."""
import logging
from dataclasses import dataclass

import httpx
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from nft_marketplace.core.exceptions import (ConflictError, NotFoundError,
                                             StoreUnavailableError,
                                             ValidationFailedError)
from nft_marketplace.core.respond import respond
from nft_marketplace.schemas import ApiResponse

logger = logging.getLogger(__name__)

# Exceptions converted to an error envelope; anything else propagates.
HANDLED_EXCEPTIONS: tuple[type[Exception], ...] = (
    StoreUnavailableError,
    NotFoundError,
    ConflictError,
    ValidationFailedError,
    InvalidId,
    PyMongoError,
    httpx.HTTPError,
    OSError,
)


@dataclass(frozen=True)
class ErrorMapper:
    """Maps controller/store exceptions to (status_code, message).

    Status table: validation 400, conflict 409, not found 422, store
    unavailable and downstream failures 500.
    """

    resource_name: str = "Resource"

    def to_status(self, exc: Exception) -> tuple[int, str]:
        """Map an exception to (status_code, message) for the response envelope."""
        if isinstance(exc, (ValidationFailedError, InvalidId)):
            return (400, str(exc) or f"{self.resource_name} input is invalid")
        if isinstance(exc, ConflictError):
            return (409, str(exc) or f"{self.resource_name} already exists")
        if isinstance(exc, NotFoundError):
            return (422, str(exc) or f"{self.resource_name} not found")
        if isinstance(exc, StoreUnavailableError):
            return (500, str(exc))
        if isinstance(exc, httpx.HTTPStatusError):
            return (500, f"Upload failed with status {exc.response.status_code}")
        return (500, str(exc) or "Internal server error")

    def to_response(self, exc: Exception, operation: str = "") -> ApiResponse:
        """Log the failure and return it as an error envelope."""
        status_code, message = self.to_status(exc)
        if status_code >= 500:
            logger.exception("%s::%s failed", self.resource_name, operation)
        else:
            logger.info("%s::%s rejected (%s): %s", self.resource_name, operation, status_code, message)
        return respond(message, is_error=True, status_code=status_code)
