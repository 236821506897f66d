from abc import ABC, abstractmethod
from typing import Any, Mapping

from aiohttp import ClientSession

from bookshelf.internal.env_settings import SourceSettings
from bookshelf.internal.exceptions import SourceUnavailable
from bookshelf.internal.models import BookCandidate, QueryType, SourceName
from bookshelf.util.log import logger


class CatalogClient(ABC):
    """
    Adapter to one external bibliographic provider.

    Subclasses implement `fetch`, translating the provider's native response
    into `BookCandidate`s. `search` wraps it so that a failing provider never
    aborts an aggregate search.
    """

    name: SourceName

    def __init__(self, settings: SourceSettings):
        self.settings = settings

    def is_enabled(self) -> bool:
        return True

    @abstractmethod
    async def fetch(
        self,
        client_session: ClientSession,
        query: str,
        query_type: QueryType,
    ) -> list[BookCandidate]: ...

    async def search(
        self,
        client_session: ClientSession,
        query: str,
        query_type: QueryType = "general",
    ) -> list[BookCandidate]:
        if not self.is_enabled():
            logger.debug("Catalog client not configured, skipping", source=self.name)
            return []

        try:
            results = await self.fetch(client_session, query, query_type)
        except SourceUnavailable as e:
            logger.warning(
                "Catalog source unavailable",
                source=self.name,
                query=query,
                query_type=query_type,
                error=e.detail,
            )
            return []
        except Exception as e:
            logger.error(
                "Error searching catalog source",
                source=self.name,
                query=query,
                query_type=query_type,
                error=str(e),
            )
            return []

        logger.info(
            "Catalog search complete",
            source=self.name,
            query=query,
            results_found=len(results),
        )
        return results

    async def _get_json(
        self,
        client_session: ClientSession,
        url: str,
        params: Mapping[str, str | int] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        async with client_session.get(url, params=params, headers=headers) as response:
            if response.status == 404:
                return None
            if not response.ok:
                raise SourceUnavailable(self.name.value, f"HTTP {response.status}")
            return await response.json(content_type=None)
