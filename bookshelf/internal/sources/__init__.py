"""
Multi-source book discovery and search integration.
Supports Google Books, OpenLibrary and ISBNdb.
"""

from bookshelf.internal.env_settings import SourceSettings
from bookshelf.internal.sources.abstract import CatalogClient
from bookshelf.internal.sources.google_books_api import GoogleBooksClient
from bookshelf.internal.sources.isbn_utils import (
    is_isbn,
    isbn10_to_isbn13,
    isbn13_to_isbn10,
    normalize_isbn,
    validate_isbn10,
    validate_isbn13,
)
from bookshelf.internal.sources.isbndb_api import IsbnDbClient
from bookshelf.internal.sources.openlibrary_api import OpenLibraryClient
from bookshelf.internal.sources.unified_search import (
    UnifiedSearch,
    deduplicate_candidates,
)


def default_clients(settings: SourceSettings) -> list[CatalogClient]:
    """Catalog clients in priority order: primary, secondary, keyed."""
    return [
        GoogleBooksClient(settings),
        OpenLibraryClient(settings),
        IsbnDbClient(settings),
    ]


__all__ = [
    # ISBN utilities
    "validate_isbn10",
    "validate_isbn13",
    "isbn10_to_isbn13",
    "isbn13_to_isbn10",
    "normalize_isbn",
    "is_isbn",
    # Catalog clients
    "CatalogClient",
    "GoogleBooksClient",
    "OpenLibraryClient",
    "IsbnDbClient",
    "default_clients",
    # Unified search
    "UnifiedSearch",
    "deduplicate_candidates",
]
