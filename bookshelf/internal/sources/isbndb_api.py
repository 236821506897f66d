"""
ISBNdb integration. Requires an API key; without one the client is disabled.
"""

from typing_extensions import override
from urllib.parse import quote

from aiohttp import ClientSession
from pydantic import BaseModel

from bookshelf.internal.models import BookCandidate, QueryType, SourceName
from bookshelf.internal.sources.abstract import CatalogClient
from bookshelf.internal.sources.isbn_utils import normalize_isbn
from bookshelf.internal.sources.metadata import (
    build_external_url,
    extract_year,
    join_authors,
    normalize_language,
)


class IsbnDbBook(BaseModel):
    title: str | None = None
    title_long: str | None = None
    authors: list[str] = []
    publisher: str | None = None
    date_published: str | int | None = None
    isbn: str | None = None
    isbn13: str | None = None
    image: str | None = None
    synopsis: str | None = None
    language: str | None = None


class _IsbnDbBookResponse(BaseModel):
    book: IsbnDbBook | None = None


class _IsbnDbBooksResponse(BaseModel):
    total: int = 0
    books: list[IsbnDbBook] = []


class IsbnDbClient(CatalogClient):
    name = SourceName.isbndb
    page_size: int = 10

    @override
    def is_enabled(self) -> bool:
        return bool(self.settings.isbndb_api_key)

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": self.settings.isbndb_api_key}

    @override
    async def fetch(
        self,
        client_session: ClientSession,
        query: str,
        query_type: QueryType,
    ) -> list[BookCandidate]:
        base_url = self.settings.isbndb_base_url.rstrip("/")

        if query_type == "isbn":
            data = await self._get_json(
                client_session,
                f"{base_url}/book/{quote(normalize_isbn(query))}",
                headers=self._headers,
            )
            if not data:
                return []
            book = _IsbnDbBookResponse.model_validate(data).book
            books = [book] if book else []
        else:
            params: dict[str, str | int] = {"page": 1, "pageSize": self.page_size}
            if query_type in ("title", "author"):
                params["column"] = query_type
            data = await self._get_json(
                client_session,
                f"{base_url}/books/{quote(query)}",
                params=params,
                headers=self._headers,
            )
            if not data:
                return []
            books = _IsbnDbBooksResponse.model_validate(data).books

        results: list[BookCandidate] = []
        for book in books:
            candidate = self.to_candidate(book)
            if candidate:
                results.append(candidate)
        return results

    def to_candidate(self, book: IsbnDbBook) -> BookCandidate | None:
        title = book.title or book.title_long
        if not title:
            return None

        isbn = normalize_isbn(book.isbn13 or book.isbn or "") or None

        return BookCandidate(
            source_id=isbn or "",
            title=title,
            author=join_authors(book.authors),
            publisher=book.publisher,
            publication_year=extract_year(book.date_published),
            isbn=isbn,
            cover_image_url=book.image,
            description=book.synopsis,
            language=normalize_language(book.language),
            source_name=self.name,
            external_url=build_external_url(isbn, None, self.settings),
        )
