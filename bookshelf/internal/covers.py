"""
Cover image discovery.

Candidate URLs are enumerated from the identifiers we have, highest quality
first, and probed one by one until a reachable image turns up.
"""

from urllib.parse import urlencode

from aiohttp import ClientSession
from pydantic import BaseModel

from bookshelf.internal.sources.isbn_utils import isbn13_to_isbn10, normalize_isbn
from bookshelf.util.log import logger

OPENLIBRARY_ISBN_COVER = "https://covers.openlibrary.org/b/isbn/{isbn}-{size}.jpg?default=false"
AMAZON_ISBN10_COVER = "https://images-na.ssl-images-amazon.com/images/P/{isbn10}.01.{size}ZZZZZZZ.jpg"
GOOGLE_BOOKS_ISBN_COVER = "https://books.google.com/books/content?vid=ISBN{isbn}&printsec=frontcover&img=1&zoom=1"
BOOKCOVER_LOOKUP_API = "https://bookcover.longitood.com/bookcover"


class _BookcoverResponse(BaseModel):
    url: str | None = None


class CoverResolver:
    def enumerate_candidate_urls(
        self,
        isbn: str | None = None,
        title: str | None = None,
        author: str | None = None,
        known_cover_url: str | None = None,
    ) -> list[str]:
        urls: list[str] = []

        if known_cover_url and known_cover_url.strip():
            urls.append(known_cover_url.strip())

        clean_isbn = normalize_isbn(isbn) if isbn else ""
        if clean_isbn:
            for size in ("L", "M"):
                urls.append(OPENLIBRARY_ISBN_COVER.format(isbn=clean_isbn, size=size))

            isbn10 = isbn13_to_isbn10(clean_isbn)
            if isbn10:
                for size in ("L", "M"):
                    urls.append(AMAZON_ISBN10_COVER.format(isbn10=isbn10, size=size))

            urls.append(GOOGLE_BOOKS_ISBN_COVER.format(isbn=clean_isbn))

        title = title.strip() if title else ""
        author = author.strip() if author else ""
        if title and author:
            query = urlencode({"book_title": title, "author_name": author})
            urls.append(f"{BOOKCOVER_LOOKUP_API}?{query}")

        # keep first occurrence only
        return list(dict.fromkeys(urls))

    async def pick_first_valid(
        self,
        client_session: ClientSession,
        urls: list[str],
    ) -> str | None:
        for url in urls:
            if url.startswith(BOOKCOVER_LOOKUP_API):
                resolved = await self._dereference_lookup(client_session, url)
                if resolved and await self.probe(client_session, resolved):
                    return resolved
                continue
            if await self.probe(client_session, url):
                return url

        logger.debug("No valid cover image found", candidates=len(urls))
        return None

    async def resolve(
        self,
        client_session: ClientSession,
        isbn: str | None = None,
        title: str | None = None,
        author: str | None = None,
        known_cover_url: str | None = None,
    ) -> str | None:
        urls = self.enumerate_candidate_urls(isbn, title, author, known_cover_url)
        return await self.pick_first_valid(client_session, urls)

    async def probe(self, client_session: ClientSession, url: str) -> bool:
        """Metadata-only check that the URL serves an image."""
        try:
            async with client_session.head(url, allow_redirects=True) as response:
                if response.ok and response.content_type.startswith("image/"):
                    return True
                logger.debug(
                    "Cover candidate rejected",
                    url=url,
                    status=response.status,
                    content_type=response.content_type,
                )
        except Exception as e:
            logger.debug("Cover candidate unreachable", url=url, error=str(e))
        return False

    async def _dereference_lookup(
        self, client_session: ClientSession, url: str
    ) -> str | None:
        try:
            async with client_session.get(url) as response:
                if not response.ok:
                    return None
                data = _BookcoverResponse.model_validate(
                    await response.json(content_type=None)
                )
        except Exception as e:
            logger.debug("Cover lookup failed", url=url, error=str(e))
            return None
        return data.url
