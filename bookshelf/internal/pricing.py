from aiohttp import ClientSession

from bookshelf.internal.sources.google_books_api import (
    GoogleBooksVolume,
    search_google_volumes,
)
from bookshelf.internal.sources.isbn_utils import normalize_isbn
from bookshelf.util.log import logger

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
}


def format_price(amount: float, currency_code: str) -> str:
    symbol = CURRENCY_SYMBOLS.get(currency_code.upper())
    if symbol:
        return f"{symbol}{amount:.2f}"
    return f"{amount:.2f} {currency_code}"


def price_from_volume(volume: GoogleBooksVolume) -> str | None:
    """Retail price if Google sells it, otherwise the list price."""
    if not volume.saleInfo:
        return None
    price = volume.saleInfo.retailPrice or volume.saleInfo.listPrice
    if not price:
        return None
    return format_price(price.amount, price.currencyCode)


async def _lookup(client_session: ClientSession, query: str, api_key: str) -> str | None:
    try:
        volumes = await search_google_volumes(
            client_session, query, max_results=5, api_key=api_key
        )
    except Exception as e:
        logger.warning("Price lookup failed", query=query, error=str(e))
        return None

    for volume in volumes:
        price = price_from_volume(volume)
        if price:
            return price
    return None


async def estimate_price(
    client_session: ClientSession,
    isbn: str | None = None,
    title: str | None = None,
    api_key: str = "",
) -> str | None:
    """Best guess at what the book sells for, or None when nothing is listed."""
    queries: list[str] = []
    clean_isbn = normalize_isbn(isbn) if isbn else ""
    if clean_isbn:
        queries.append(f"isbn:{clean_isbn}")
    if title and title.strip():
        queries.append(title.strip())

    for query in queries:
        price = await _lookup(client_session, query, api_key)
        if price:
            logger.debug("Estimated price", query=query, price=price)
            return price
    return None
