from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

QueryType = Literal["title", "author", "isbn", "general"]


class SourceName(str, Enum):
    google_books = "google_books"
    openlibrary = "openlibrary"
    isbndb = "isbndb"


class BaseBookModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class BookCandidate(BaseBookModel):
    """A not yet persisted search result from a single provider."""

    source_id: str = ""
    title: str
    author: str = "Unknown Author"
    publisher: str | None = None
    publication_year: str | None = None
    isbn: str | None = None
    cover_image_url: str | None = None
    description: str | None = None
    language: str = "Unknown"
    source_name: SourceName
    external_url: str | None = None


def parse_for_sale(value: Any) -> bool | None:
    """
    Read the tri-state for sale flag.

    Only the literal "FALSE" (or a real False) means not for sale. A missing
    value stays None, which callers treat as for sale.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip()
    if not text:
        return None
    return text.upper() != "FALSE"


class LibraryRecord(BaseBookModel):
    """A book in the library. `id` is the only stable external handle."""

    id: str = ""
    isbn: str = ""
    title: str = ""
    author: str = ""
    type: str = ""
    publisher: str = ""
    year: str = ""
    edition: str = ""
    cover_url: str = ""
    notes: str = ""
    price: str = ""
    url: str = ""
    language: str = ""
    selling_price: str = ""
    for_sale: bool | None = None

    @field_validator("for_sale", mode="before")
    @classmethod
    def _coerce_for_sale(cls, value: Any) -> bool | None:
        return parse_for_sale(value)

    @property
    def is_for_sale(self) -> bool:
        return self.for_sale is not False


class SearchResponse(BaseBookModel):
    results: list[BookCandidate] = Field(default_factory=list)
    count: int = 0
