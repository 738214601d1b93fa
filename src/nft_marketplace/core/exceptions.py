"""Typed errors raised inside controllers and mapped to envelope status codes."""


class MarketplaceError(Exception):
    """Base class for expected, user-facing controller failures."""


class StoreUnavailableError(MarketplaceError):
    """The document-store handle is not set."""

    def __init__(self, message: str = "Could not connect to the database.") -> None:
        super().__init__(message)


class NotFoundError(MarketplaceError):
    """A referenced collection, NFT or owner does not exist."""


class ConflictError(MarketplaceError):
    """The record being created already exists (duplicate wallet or name)."""


class ValidationFailedError(MarketplaceError):
    """A required input is missing, empty or malformed."""
