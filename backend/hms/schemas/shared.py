# hms/schemas/shared.py
from math import ceil
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hms.config.constants import PHONE_PATTERN


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class CamelModel(BaseModel):
    """Serialized with camelCase keys; accepts camelCase or snake_case on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


NonBlankStr = Annotated[str, AfterValidator(_not_blank)]
Name = Annotated[NonBlankStr, Field(max_length=50)]
Phone = Annotated[str, Field(pattern=PHONE_PATTERN, max_length=20)]
OptionalPhone = Optional[Phone]


T = TypeVar("T")

class Page(CamelModel, Generic[T]):
    content: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool

    @classmethod
    def build(cls, content: List[T], page: int, size: int, total: int) -> "Page[T]":
        total_pages = ceil(total / size) if size else 0
        return cls(
            content=content,
            page=page,
            size=size,
            total_elements=total,
            total_pages=total_pages,
            first=page == 0,
            last=page >= total_pages - 1,
        )


class PageRequest(BaseModel):
    """Offset pagination plus ordering, as parsed from the query string."""
    page: int = 0
    size: int = 10
    sort_by: str = "id"
    descending: bool = False

    @property
    def offset(self) -> int:
        return self.page * self.size
