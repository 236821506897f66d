from typing import Annotated

from aiohttp import ClientSession
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from bookshelf.internal.env_settings import Settings
from bookshelf.internal.exceptions import BadRequest
from bookshelf.internal.models import QueryType, SearchResponse
from bookshelf.internal.pricing import estimate_price
from bookshelf.internal.sources import UnifiedSearch
from bookshelf.util.connection import get_connection
from bookshelf.util.dependencies import get_unified_search

router = APIRouter(prefix="/books", tags=["Search"])


class PriceResponse(BaseModel):
    price: str | None = None


def _split_sources(sources: list[str] | None) -> list[str] | None:
    """Accepts both ?sources=a&sources=b and ?sources=a,b"""
    if not sources:
        return None
    names = [name.strip() for value in sources for name in value.split(",")]
    return [name for name in names if name] or None


@router.get("/search", response_model=SearchResponse)
async def search_books(
    client_session: Annotated[ClientSession, Depends(get_connection)],
    unified_search: Annotated[UnifiedSearch, Depends(get_unified_search)],
    query: Annotated[str | None, Query(alias="q")] = None,
    query_type: Annotated[QueryType, Query(alias="type")] = "general",
    sources: Annotated[list[str] | None, Query()] = None,
):
    results = await unified_search.search(
        client_session,
        query,
        query_type=query_type,
        sources=_split_sources(sources),
    )
    return SearchResponse(results=results, count=len(results))


@router.get("/price", response_model=PriceResponse)
async def book_price(
    client_session: Annotated[ClientSession, Depends(get_connection)],
    isbn: str | None = None,
    title: str | None = None,
):
    if not (isbn and isbn.strip()) and not (title and title.strip()):
        raise BadRequest("ISBN or title is required")

    price = await estimate_price(
        client_session,
        isbn=isbn,
        title=title,
        api_key=Settings().sources.google_books_api_key,
    )
    return PriceResponse(price=price)
