"""
OpenLibrary API integration for book search and metadata enrichment.
"""

from typing_extensions import override

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

OPENLIBRARY_SEARCH_API = "https://openlibrary.org/search.json"
OPENLIBRARY_COVERS = "https://covers.openlibrary.org/b"


class OpenLibraryDoc(BaseModel):
    """Simplified OpenLibrary search result document."""

    key: str = ""
    title: str | None = None
    author_name: list[str] = []
    first_publish_year: int | None = None
    isbn: list[str] = []
    cover_i: int | None = None
    publisher: list[str] = []
    language: list[str] = []


class _OpenLibraryResponse(BaseModel):
    numFound: int = 0
    docs: list[OpenLibraryDoc] = []


def openlibrary_cover_url(
    isbn: str | None = None,
    cover_id: int | None = None,
    size: str = "M",
) -> str | None:
    """Cover CDN URL by ISBN, falling back to the numeric cover id."""
    if isbn:
        return f"{OPENLIBRARY_COVERS}/isbn/{isbn}-{size}.jpg"
    if cover_id:
        return f"{OPENLIBRARY_COVERS}/id/{cover_id}-{size}.jpg"
    return None


def openlibrary_params(query: str, query_type: QueryType) -> dict[str, str | int]:
    match query_type:
        case "title":
            params: dict[str, str | int] = {"title": query}
        case "author":
            params = {"author": query}
        case "isbn":
            params = {"isbn": normalize_isbn(query)}
        case _:
            params = {"q": query}
    return params


class OpenLibraryClient(CatalogClient):
    name = SourceName.openlibrary
    max_results: int = 5

    @override
    async def fetch(
        self,
        client_session: ClientSession,
        query: str,
        query_type: QueryType,
    ) -> list[BookCandidate]:
        params = openlibrary_params(query, query_type)
        params["limit"] = self.max_results

        data = await self._get_json(
            client_session, OPENLIBRARY_SEARCH_API, params=params
        )
        if not data:
            return []
        response = _OpenLibraryResponse.model_validate(data)

        results: list[BookCandidate] = []
        for doc in response.docs:
            candidate = self.to_candidate(doc)
            if candidate:
                results.append(candidate)
        return results

    def to_candidate(self, doc: OpenLibraryDoc) -> BookCandidate | None:
        # Skip if missing critical fields
        if not doc.title:
            return None

        isbns = [normalize_isbn(isbn) for isbn in doc.isbn]
        isbn = next((i for i in isbns if i), None)
        permalink = f"https://openlibrary.org{doc.key}" if doc.key else None

        return BookCandidate(
            source_id=doc.key,
            title=doc.title,
            author=join_authors(doc.author_name),
            publisher=doc.publisher[0] if doc.publisher else None,
            publication_year=extract_year(doc.first_publish_year),
            isbn=isbn,
            cover_image_url=openlibrary_cover_url(isbn, doc.cover_i),
            language=normalize_language(doc.language),
            source_name=self.name,
            external_url=build_external_url(isbn, permalink, self.settings),
        )
