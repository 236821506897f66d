"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from bookshelf.internal.covers import CoverResolver
from bookshelf.internal.env_settings import SourceSettings
from bookshelf.internal.models import SourceName
from bookshelf.internal.rehost import ImageRehoster
from bookshelf.internal.repositories import LibraryRepository
from bookshelf.internal.sources import UnifiedSearch
from bookshelf.main import app
from bookshelf.util.connection import get_connection
from bookshelf.util.dependencies import (
    get_cover_resolver,
    get_rehoster,
    get_repository,
    get_unified_search,
)
from tests.fakes import (
    FakeSession,
    InMemoryStorage,
    InMemoryTable,
    StubClient,
    make_candidate,
)


@pytest.fixture
def source_settings() -> SourceSettings:
    return SourceSettings()


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def table() -> InMemoryTable:
    return InMemoryTable()


@pytest.fixture
def repository(table: InMemoryTable) -> LibraryRepository:
    return LibraryRepository(table)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def rehoster(storage: InMemoryStorage) -> ImageRehoster:
    return ImageRehoster(storage)


@pytest.fixture
def mock_resolver():
    """Cover resolver that never finds anything unless told otherwise."""
    resolver = MagicMock(spec=CoverResolver)
    resolver.resolve = AsyncMock(return_value=None)
    return resolver


@pytest.fixture
def stub_clients() -> list[StubClient]:
    return [
        StubClient(
            SourceName.google_books,
            [
                make_candidate(
                    "The Odyssey",
                    isbn="9780140449266",
                    cover="https://books.google.com/odyssey.jpg",
                )
            ],
        ),
        StubClient(
            SourceName.openlibrary,
            [
                make_candidate(
                    "The Odyssey", isbn="9780140449266", source=SourceName.openlibrary
                ),
                make_candidate("The Iliad", source=SourceName.openlibrary),
            ],
        ),
    ]


@pytest.fixture
def unified_search(stub_clients, mock_resolver) -> UnifiedSearch:
    return UnifiedSearch(stub_clients, mock_resolver)


@pytest.fixture
async def client(
    fake_session: FakeSession,
    repository: LibraryRepository,
    unified_search: UnifiedSearch,
    mock_resolver,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""

    async def _override_connection():
        yield fake_session

    app.dependency_overrides[get_connection] = _override_connection
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_unified_search] = lambda: unified_search
    app.dependency_overrides[get_cover_resolver] = lambda: mock_resolver
    app.dependency_overrides[get_rehoster] = lambda: None

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
