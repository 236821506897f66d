"""Unit tests for the external catalog clients."""

import asyncio

from bookshelf.internal.env_settings import SourceSettings
from bookshelf.internal.models import SourceName
from bookshelf.internal.sources.google_books_api import (
    GOOGLE_BOOKS_API,
    GoogleBooksClient,
    google_query,
)
from bookshelf.internal.sources.isbndb_api import IsbnDbClient
from bookshelf.internal.sources.openlibrary_api import (
    OPENLIBRARY_SEARCH_API,
    OpenLibraryClient,
    openlibrary_params,
)
from tests.fakes import FakeResponse, FakeSession

GOOGLE_ODYSSEY = {
    "totalItems": 1,
    "items": [
        {
            "id": "vol1",
            "volumeInfo": {
                "title": "The Odyssey",
                "authors": ["Homer", "Robert Fagles"],
                "publisher": "Penguin Classics",
                "publishedDate": "1999-11-01",
                "industryIdentifiers": [
                    {"type": "ISBN_10", "identifier": "0140268863"},
                    {"type": "ISBN_13", "identifier": "9780140268867"},
                ],
                "imageLinks": {"thumbnail": "http://books.google.com/thumb.jpg"},
                "language": "en",
                "infoLink": "https://books.google.com/books?id=vol1",
            },
        },
        {"id": "vol2", "volumeInfo": {"authors": ["Nobody"]}},
    ],
}

OPENLIBRARY_ODYSSEY = {
    "numFound": 2,
    "docs": [
        {
            "key": "/works/OL61960W",
            "title": "The Odyssey",
            "author_name": ["Homer"],
            "first_publish_year": 1614,
            "isbn": ["9780140449266", "0140449264"],
            "publisher": ["Penguin"],
            "language": ["eng"],
        },
        {"key": "/works/OL2W", "title": "Odyssey Notes", "cover_i": 12345},
    ],
}


class TestGoogleBooksClient:
    """Tests for the Google Books client."""

    def test_query_translation(self):
        assert google_query("Dune", "title") == "intitle:Dune"
        assert google_query("Herbert", "author") == "inauthor:Herbert"
        assert google_query("978-0-14-044926-6", "isbn") == "isbn:9780140449266"
        assert google_query("greek epic", "general") == "greek epic"

    async def test_maps_volumes(self, fake_session: FakeSession):
        fake_session.add("GET", GOOGLE_BOOKS_API, FakeResponse(json_data=GOOGLE_ODYSSEY))
        client = GoogleBooksClient(SourceSettings())

        results = await client.search(fake_session, "The Odyssey", "title")

        assert len(results) == 1
        book = results[0]
        assert book.title == "The Odyssey"
        assert book.author == "Homer, Robert Fagles"
        assert book.isbn == "0140268863"
        assert book.publication_year == "1999"
        assert book.cover_image_url == "https://books.google.com/thumb.jpg"
        assert book.language == "English"
        assert book.source_name == SourceName.google_books
        assert book.external_url == "https://www.bol.com/nl/nl/s/?searchtext=0140268863"

        _, _, kwargs = fake_session.calls[0]
        assert kwargs["params"]["q"] == "intitle:The Odyssey"
        assert "key" not in kwargs["params"]

    async def test_sends_api_key(self, fake_session: FakeSession):
        fake_session.add("GET", GOOGLE_BOOKS_API, FakeResponse(json_data={"items": []}))
        client = GoogleBooksClient(SourceSettings(google_books_api_key="secret"))

        assert await client.search(fake_session, "Dune") == []
        _, _, kwargs = fake_session.calls[0]
        assert kwargs["params"]["key"] == "secret"

    async def test_failure_returns_empty(self, fake_session: FakeSession):
        fake_session.add("GET", GOOGLE_BOOKS_API, FakeResponse(status=503))
        client = GoogleBooksClient(SourceSettings())

        assert await client.search(fake_session, "Dune") == []

    async def test_timeout_returns_empty(self, fake_session: FakeSession):
        fake_session.add("GET", GOOGLE_BOOKS_API, asyncio.TimeoutError())
        client = GoogleBooksClient(SourceSettings())

        assert await client.search(fake_session, "Dune") == []


class TestOpenLibraryClient:
    """Tests for the Open Library client."""

    def test_params(self):
        assert openlibrary_params("Dune", "title") == {"title": "Dune"}
        assert openlibrary_params("Herbert", "author") == {"author": "Herbert"}
        assert openlibrary_params("0-14-044926-4", "isbn") == {"isbn": "0140449264"}
        assert openlibrary_params("dune herbert", "general") == {"q": "dune herbert"}

    async def test_maps_docs(self, fake_session: FakeSession):
        fake_session.add(
            "GET", OPENLIBRARY_SEARCH_API, FakeResponse(json_data=OPENLIBRARY_ODYSSEY)
        )
        client = OpenLibraryClient(SourceSettings())

        results = await client.search(fake_session, "odyssey")

        assert [r.title for r in results] == ["The Odyssey", "Odyssey Notes"]
        odyssey, notes = results
        assert odyssey.isbn == "9780140449266"
        assert odyssey.cover_image_url == (
            "https://covers.openlibrary.org/b/isbn/9780140449266-M.jpg"
        )
        assert odyssey.language == "English"
        assert odyssey.publisher == "Penguin"

        assert notes.author == "Unknown Author"
        assert notes.isbn is None
        assert notes.cover_image_url == "https://covers.openlibrary.org/b/id/12345-M.jpg"
        assert notes.external_url == "https://openlibrary.org/works/OL2W"

        _, _, kwargs = fake_session.calls[0]
        assert kwargs["params"] == {"q": "odyssey", "limit": 5}


class TestIsbnDbClient:
    """Tests for the ISBNdb client."""

    async def test_disabled_without_key(self, fake_session: FakeSession):
        client = IsbnDbClient(SourceSettings())

        assert await client.search(fake_session, "Dune") == []
        assert fake_session.calls == []

    async def test_isbn_lookup(self, fake_session: FakeSession):
        fake_session.add(
            "GET",
            "https://api2.isbndb.com/book/9780441172719",
            FakeResponse(
                json_data={
                    "book": {
                        "title": "Dune",
                        "authors": ["Frank Herbert"],
                        "isbn13": "9780441172719",
                        "date_published": "1990-09-01",
                        "image": "https://images.isbndb.com/covers/dune.jpg",
                        "language": "en_US",
                    }
                }
            ),
        )
        client = IsbnDbClient(SourceSettings(isbndb_api_key="k3y"))

        results = await client.search(fake_session, "978-0441172719", "isbn")

        assert len(results) == 1
        assert results[0].title == "Dune"
        assert results[0].publication_year == "1990"
        assert results[0].cover_image_url == "https://images.isbndb.com/covers/dune.jpg"
        assert results[0].source_name == SourceName.isbndb
        _, _, kwargs = fake_session.calls[0]
        assert kwargs["headers"] == {"Authorization": "k3y"}

    async def test_title_search(self, fake_session: FakeSession):
        fake_session.add(
            "GET",
            "https://api2.isbndb.com/books/",
            FakeResponse(json_data={"total": 1, "books": [{"title_long": "Dune Messiah"}]}),
        )
        client = IsbnDbClient(SourceSettings(isbndb_api_key="k3y"))

        results = await client.search(fake_session, "Dune", "title")

        assert [r.title for r in results] == ["Dune Messiah"]
        _, url, kwargs = fake_session.calls[0]
        assert url == "https://api2.isbndb.com/books/Dune"
        assert kwargs["params"]["column"] == "title"

    async def test_not_found(self, fake_session: FakeSession):
        client = IsbnDbClient(SourceSettings(isbndb_api_key="k3y"))

        assert await client.search(fake_session, "9780000000000", "isbn") == []
