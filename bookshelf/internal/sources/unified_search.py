"""
Unified multi-source book search coordinator.
Searches Google Books, OpenLibrary and ISBNdb in parallel, deduplicates the
results by ISBN or title/author and fills in missing covers.
"""

import asyncio
from typing import TYPE_CHECKING, Sequence

from aiohttp import ClientSession

from bookshelf.internal.exceptions import BadRequest
from bookshelf.internal.models import BookCandidate, QueryType, SourceName
from bookshelf.internal.rehost import ImageHint, ImageRehoster
from bookshelf.internal.sources.abstract import CatalogClient
from bookshelf.util.log import logger

if TYPE_CHECKING:
    from bookshelf.internal.covers import CoverResolver

MAX_RESULTS = 10


def deduplicate_candidates(candidates: Sequence[BookCandidate]) -> list[BookCandidate]:
    """
    Keep the first candidate for each non-empty ISBN and each exact
    (title, author) pair. Comparison is case-sensitive on the normalized
    strings the clients produce.
    """
    seen_isbns: set[str] = set()
    seen_pairs: set[tuple[str, str]] = set()
    unique: list[BookCandidate] = []

    for candidate in candidates:
        pair = (candidate.title, candidate.author)
        if candidate.isbn and candidate.isbn in seen_isbns:
            continue
        if pair in seen_pairs:
            continue
        if candidate.isbn:
            seen_isbns.add(candidate.isbn)
        seen_pairs.add(pair)
        unique.append(candidate)

    return unique


class UnifiedSearch:
    def __init__(
        self,
        clients: Sequence[CatalogClient],
        resolver: "CoverResolver",
        rehoster: ImageRehoster | None = None,
        default_sources: Sequence[str] | None = None,
        max_results: int = MAX_RESULTS,
    ):
        self.clients = {client.name: client for client in clients}
        self.resolver = resolver
        self.rehoster = rehoster
        self.default_sources = list(default_sources or [c.name.value for c in clients])
        self.max_results = max_results

    def _select_clients(self, sources: Sequence[str] | None) -> list[CatalogClient]:
        names = list(sources) if sources else self.default_sources
        selected: list[CatalogClient] = []
        for name in names:
            try:
                source = SourceName(name)
            except ValueError:
                raise BadRequest(f"Unknown source: {name}") from None
            client = self.clients.get(source)
            if client is None:
                raise BadRequest(f"Source not available: {name}")
            if client not in selected:
                selected.append(client)
        return selected

    async def search(
        self,
        client_session: ClientSession,
        query: str | None,
        query_type: QueryType = "general",
        sources: Sequence[str] | None = None,
    ) -> list[BookCandidate]:
        if not query or not query.strip():
            raise BadRequest('Query parameter "q" is required')
        query = query.strip()
        clients = self._select_clients(sources)

        logger.info(
            "Starting unified search",
            query=query,
            query_type=query_type,
            sources=[c.name.value for c in clients],
        )

        # each client handles its own failures and returns [] instead
        per_source = await asyncio.gather(
            *(client.search(client_session, query, query_type) for client in clients)
        )
        candidates = [candidate for results in per_source for candidate in results]

        unique = deduplicate_candidates(candidates)[: self.max_results]
        enriched = await asyncio.gather(
            *(self._enrich(client_session, candidate) for candidate in unique)
        )

        logger.info(
            "Unified search complete",
            query=query,
            total_candidates=len(candidates),
            total_results=len(enriched),
            **{f"{c.name.value}_count": len(r) for c, r in zip(clients, per_source)},
        )
        return list(enriched)

    async def _enrich(
        self, client_session: ClientSession, candidate: BookCandidate
    ) -> BookCandidate:
        cover_url = candidate.cover_image_url
        try:
            if not cover_url:
                cover_url = await self.resolver.resolve(
                    client_session,
                    isbn=candidate.isbn,
                    title=candidate.title,
                    author=candidate.author,
                )
            if cover_url and self.rehoster and not self.rehoster.storage.is_hosted(cover_url):
                rehosted = await self.rehoster.rehost_best_image(
                    client_session,
                    [cover_url],
                    ImageHint(
                        isbn=candidate.isbn,
                        title=candidate.title,
                        author=candidate.author,
                    ),
                )
                cover_url = rehosted or cover_url
        except Exception as e:
            logger.warning(
                "Cover enrichment failed",
                title=candidate.title,
                source=candidate.source_name,
                error=str(e),
            )

        if cover_url == candidate.cover_image_url:
            return candidate
        return candidate.model_copy(update={"cover_image_url": cover_url})
