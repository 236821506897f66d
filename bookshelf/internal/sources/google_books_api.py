"""
Google Books API integration for book search and metadata enrichment.
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

GOOGLE_BOOKS_API = "https://www.googleapis.com/books/v1/volumes"


class _IndustryIdentifier(BaseModel):
    type: str
    identifier: str


class _ImageLinks(BaseModel):
    thumbnail: str | None = None
    smallThumbnail: str | None = None


class _VolumeInfo(BaseModel):
    title: str | None = None
    authors: list[str] = []
    publisher: str | None = None
    publishedDate: str | None = None
    description: str | None = None
    industryIdentifiers: list[_IndustryIdentifier] = []
    imageLinks: _ImageLinks | None = None
    language: str | None = None
    infoLink: str | None = None
    canonicalVolumeLink: str | None = None


class _Price(BaseModel):
    amount: float
    currencyCode: str


class _SaleInfo(BaseModel):
    listPrice: _Price | None = None
    retailPrice: _Price | None = None


class GoogleBooksVolume(BaseModel):
    id: str = ""
    volumeInfo: _VolumeInfo = _VolumeInfo()
    saleInfo: _SaleInfo | None = None


class _GoogleBooksResponse(BaseModel):
    totalItems: int = 0
    items: list[GoogleBooksVolume] = []


def google_query(query: str, query_type: QueryType) -> str:
    match query_type:
        case "title":
            return f"intitle:{query}"
        case "author":
            return f"inauthor:{query}"
        case "isbn":
            return f"isbn:{normalize_isbn(query)}"
        case _:
            return query


def _extract_isbn(identifiers: list[_IndustryIdentifier]) -> str | None:
    """First ISBN-13 or ISBN-10, in the order the volume lists them."""
    for identifier in identifiers:
        if identifier.type in ("ISBN_13", "ISBN_10"):
            return normalize_isbn(identifier.identifier) or None
    return None


def _extract_cover_url(image_links: _ImageLinks | None) -> str | None:
    if not image_links:
        return None
    cover_url = image_links.thumbnail or image_links.smallThumbnail
    if cover_url and cover_url.startswith("http://"):
        cover_url = cover_url.replace("http://", "https://", 1)
    return cover_url


async def search_google_volumes(
    client_session: ClientSession,
    query: str,
    max_results: int = 10,
    api_key: str = "",
) -> list[GoogleBooksVolume]:
    """Raw volume search, shared by the catalog client and price estimation."""
    params: dict[str, str | int] = {
        "q": query,
        "maxResults": min(max_results, 40),  # Google Books API limit
        "printType": "books",
    }
    if api_key:
        params["key"] = api_key

    async with client_session.get(GOOGLE_BOOKS_API, params=params) as response:
        response.raise_for_status()
        data = _GoogleBooksResponse.model_validate(
            await response.json(content_type=None)
        )
    return data.items


class GoogleBooksClient(CatalogClient):
    name = SourceName.google_books
    max_results: int = 10

    @override
    async def fetch(
        self,
        client_session: ClientSession,
        query: str,
        query_type: QueryType,
    ) -> list[BookCandidate]:
        params: dict[str, str | int] = {
            "q": google_query(query, query_type),
            "maxResults": self.max_results,
            "printType": "books",
        }
        if self.settings.google_books_api_key:
            params["key"] = self.settings.google_books_api_key

        data = await self._get_json(client_session, GOOGLE_BOOKS_API, params=params)
        if not data:
            return []
        response = _GoogleBooksResponse.model_validate(data)

        results: list[BookCandidate] = []
        for item in response.items:
            candidate = self.to_candidate(item)
            if candidate:
                results.append(candidate)
        return results

    def to_candidate(self, item: GoogleBooksVolume) -> BookCandidate | None:
        volume_info = item.volumeInfo

        # Skip if missing critical fields
        if not volume_info.title:
            return None

        isbn = _extract_isbn(volume_info.industryIdentifiers)
        permalink = volume_info.infoLink or volume_info.canonicalVolumeLink

        return BookCandidate(
            source_id=item.id,
            title=volume_info.title,
            author=join_authors(volume_info.authors),
            publisher=volume_info.publisher,
            publication_year=extract_year(volume_info.publishedDate),
            isbn=isbn,
            cover_image_url=_extract_cover_url(volume_info.imageLinks),
            description=volume_info.description,
            language=normalize_language(volume_info.language),
            source_name=self.name,
            external_url=build_external_url(isbn, permalink, self.settings),
        )
