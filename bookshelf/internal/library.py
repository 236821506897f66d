from aiohttp import ClientSession

from bookshelf.internal.models import LibraryRecord
from bookshelf.internal.rehost import ImageHint, ImageRehoster
from bookshelf.internal.repositories import LibraryRepository
from bookshelf.util.log import logger


async def add_library_record(
    client_session: ClientSession,
    repository: LibraryRepository,
    record: LibraryRecord,
    rehoster: ImageRehoster | None = None,
) -> LibraryRecord:
    """
    Persist a record, moving its cover into our storage first when it still
    points at a third-party host. If rehosting fails the original URL is kept.
    """
    cover_url = record.cover_url.strip()
    if cover_url and rehoster and not rehoster.storage.is_hosted(cover_url):
        rehosted = await rehoster.rehost_best_image(
            client_session,
            [cover_url],
            ImageHint(
                isbn=record.isbn or None,
                title=record.title or None,
                author=record.author or None,
            ),
        )
        if rehosted:
            record = record.model_copy(update={"cover_url": rehosted})
        else:
            logger.info("Keeping original cover url", url=cover_url)

    return await repository.add_record(record)
