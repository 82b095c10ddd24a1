"""Page result models, serialized with camelCase aliases."""

from typing import Any, Generic, TypeVar

from pydantic import (
    AliasGenerator,
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
)
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

T = TypeVar("T")

_camel_dump = ConfigDict(
    alias_generator=AliasGenerator(serialization_alias=to_camel)
)


class PageLink(BaseModel):
    page: int | None
    size: Annotated[int, Field(ge=1)]


class PaginationLinks(BaseModel):
    """``next`` is always present; ``prev`` is dropped from dumps on page 1."""

    next: PageLink
    prev: PageLink | None = None

    @model_serializer(mode="wrap")
    def _omit_missing_prev(
        self, handler: SerializerFunctionWrapHandler
    ) -> dict[str, Any]:
        data = handler(self)
        if self.prev is None:
            data.pop("prev", None)
        return data


class OffsetPageResult(BaseModel, Generic[T]):
    model_config = _camel_dump

    results: list[T]
    page: Annotated[int, Field(ge=1)]
    per_page: Annotated[int, Field(ge=1)]
    total: Annotated[int, Field(ge=0)]
    total_pages: Annotated[int, Field(ge=0)]
    pagination: PaginationLinks


class CursorPageResult(BaseModel, Generic[T]):
    model_config = _camel_dump

    results: list[T]
    next: str | None = None
    previous: str | None = None
    has_next: bool = False
