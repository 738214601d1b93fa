"""Pydantic schemas for API and runtime use. Documents themselves stay plain dicts."""
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

FilterOperator = Literal["eq", "ne", "gt", "gte", "lt", "lte", "in", "nin", "regex"]


def _has_operator_key(value: Any) -> bool:
    if isinstance(value, dict):
        return any(str(k).startswith("$") or _has_operator_key(v) for k, v in value.items())
    if isinstance(value, list):
        return any(_has_operator_key(v) for v in value)
    return False


class ApiResponse(BaseModel):
    """Uniform envelope returned by every controller operation."""

    success: bool
    status: int = 200
    data: Any = None
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return not self.success


class FieldFilter(BaseModel):
    """One predicate of a filter specification, e.g. price >= 1."""

    model_config = ConfigDict(populate_by_name=True)

    field_name: str = Field(alias="fieldName", min_length=1)
    operator: FilterOperator = "eq"
    query: Any = None

    @field_validator("field_name")
    @classmethod
    def reject_operator_field(cls, value: str) -> str:
        if value.startswith("$"):
            raise ValueError("fieldName must not start with '$'")
        return value

    @field_validator("query")
    @classmethod
    def reject_operator_document(cls, value: Any) -> Any:
        # Operators come from `operator`, never from the query value.
        if _has_operator_key(value):
            raise ValueError("query must not contain '$' keys")
        return value


class QueryFilters(BaseModel):
    """Caller-supplied filter specification: ordered predicates, sort, pagination."""

    model_config = ConfigDict(populate_by_name=True)

    filters: list[FieldFilter] = Field(default_factory=list)
    order_by: str | None = Field(default=None, alias="orderBy")
    direction: Literal["asc", "desc"] = "asc"
    start_index: int | None = Field(default=None, alias="startIndex", ge=0)
    limit: int | None = Field(default=None, ge=1)


class OwnerCreate(BaseModel):
    """Request body for creating an owner profile."""

    model_config = ConfigDict(populate_by_name=True)

    wallet: str = Field(min_length=1)
    photo_url: str = Field(default="", alias="photoUrl")
    bio: str = ""
    username: str = ""
    social: str = ""


class PhotoUpdate(BaseModel):
    """Base64-encoded profile image."""

    image: str = Field(min_length=1)


class CollectionCreate(BaseModel):
    """Input for NFT collection creation.

    Required fields are validated by the controller so that failures come back
    through the response envelope instead of as request validation errors.
    """

    model_config = ConfigDict(populate_by_name=True)

    logo_file: bytes | None = None
    featured_img_file: bytes | None = None
    banner_img_file: bytes | None = None
    name: str = ""
    description: str = ""
    category: str = ""
    site_url: str = Field(default="", alias="siteUrl")
    discord_url: str = Field(default="", alias="discordUrl")
    instagram_url: str = Field(default="", alias="instagramUrl")
    medium_url: str = Field(default="", alias="mediumUrl")
    telegram_url: str = Field(default="", alias="telegramUrl")
    creator_earning: float = Field(default=0, alias="creatorEarning")
    blockchain: str = ""
    is_explicit: bool = Field(default=False, alias="isExplicit")
    creator_id: str = Field(default="", alias="creatorId")

    @property
    def links(self) -> list[str]:
        return [
            self.site_url,
            self.discord_url,
            self.instagram_url,
            self.medium_url,
            self.telegram_url,
        ]


__all__ = [
    "ApiResponse",
    "CollectionCreate",
    "FieldFilter",
    "FilterOperator",
    "OwnerCreate",
    "PhotoUpdate",
    "QueryFilters",
]
