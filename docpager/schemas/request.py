"""
Request models and configuration for the pagination strategies.

Page numbers and sizes are strict positive integers: bools, floats and
numeric strings are rejected rather than coerced. Both snake_case and
camelCase keys are accepted on input.
"""

from enum import Enum
from typing import Any, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from typing_extensions import Annotated

from docpager.exceptions import InvalidArgument
from docpager.settings import app_settings

ModelT = TypeVar("ModelT", bound=BaseModel)

PositiveInt = Annotated[int, Field(ge=1, strict=True)]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def _missing_(cls, value: object) -> "SortDirection | None":
        # Numeric and long-form spellings: 1 / -1, "ascending" / "descending"
        if isinstance(value, str):
            value = value.lower()
        if value in (1, "asc", "ascending"):
            return cls.ASC
        if value in (-1, "desc", "descending"):
            return cls.DESC
        return None


class OffsetPageRequest(BaseModel):
    """Page-number request. ``skip`` is derived, never supplied."""

    model_config = ConfigDict(frozen=True)

    page: PositiveInt = 1
    per_page: PositiveInt = Field(
        default=10, validation_alias=AliasChoices("per_page", "perPage")
    )
    sort_field: str | None = Field(
        default=None, validation_alias=AliasChoices("sort_field", "sortField")
    )
    sort_direction: SortDirection = Field(
        default=SortDirection.ASC,
        validation_alias=AliasChoices("sort_direction", "sortDirection"),
    )

    @field_validator("sort_direction", mode="before")
    @classmethod
    def coerce_sort_direction(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("sort_direction must not be a boolean")
        try:
            return SortDirection(v)
        except ValueError:
            return v

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.per_page


class CursorPageRequest(BaseModel):
    """Continuation request; an absent or empty cursor means first page."""

    model_config = ConfigDict(frozen=True)

    cursor: str | None = None
    page_size: PositiveInt = Field(
        default=10, validation_alias=AliasChoices("page_size", "pageSize")
    )

    @field_validator("cursor", mode="before")
    @classmethod
    def empty_cursor_is_absent(cls, v: Any) -> Any:
        if v == "":
            return None
        return v


class PaginationConfig(BaseModel):
    """
    Pagination configuration, validated once at construction.

    Attributes:
        allow_cache: When False the cache gateway reports every lookup as a
            miss and drops every write.
        cache_ttl_seconds: TTL applied to every cache write.
        default_per_page: per_page used by offset pagination when the
            caller does not supply one.
        default_page_size: page_size used by cursor pagination when the
            caller does not supply one.
    """

    model_config = ConfigDict(frozen=True)

    allow_cache: bool = True
    cache_ttl_seconds: PositiveInt = 60
    default_per_page: PositiveInt = 10
    default_page_size: PositiveInt = 10

    @classmethod
    def from_settings(cls) -> "PaginationConfig":
        return cls(
            allow_cache=app_settings.ALLOW_CACHE,
            cache_ttl_seconds=app_settings.CACHE_TTL_SECONDS,
            default_per_page=app_settings.DEFAULT_PER_PAGE,
            default_page_size=app_settings.DEFAULT_CURSOR_PAGE_SIZE,
        )


def validate_request(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """
    Validate request data, converting pydantic errors to InvalidArgument.

    Args:
        model: Request model class.
        data: Raw request fields (snake_case or camelCase keys).

    Returns:
        Validated request instance.

    Raises:
        InvalidArgument: If any field fails validation.
    """
    try:
        return model.model_validate(data)
    except ValidationError as ex:
        raise InvalidArgument(
            f"Invalid {model.__name__}: {ex.errors(include_url=False)}"
        ) from ex
